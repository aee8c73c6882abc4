"""Unit tests for ObservationContext and the structlog probe base."""

from unittest.mock import MagicMock

from iam.application.observability.base import StructlogProbe
from shared_kernel.observability_context import ObservationContext
from tickets.application.observability.base import StructlogProbe as TicketStructlogProbe


class TestObservationContext:
    def test_as_dict_skips_unset_fields(self):
        context = ObservationContext(request_id="req-1")

        assert context.as_dict() == {"request_id": "req-1"}

    def test_as_dict_merges_extra(self):
        context = ObservationContext(
            request_id="req-1",
            user_id="alice",
            workspace_id="01WS",
            extra={"route": "tickets"},
        )

        assert context.as_dict() == {
            "request_id": "req-1",
            "user_id": "alice",
            "workspace_id": "01WS",
            "route": "tickets",
        }


class TestStructlogProbe:
    def test_emit_merges_context(self):
        logger = MagicMock()
        probe = StructlogProbe(logger=logger).with_context(
            ObservationContext(request_id="req-1", user_id="alice")
        )

        probe._emit("info", "role_created", role_id="01R")

        logger.info.assert_called_once_with(
            "role_created", role_id="01R", request_id="req-1", user_id="alice"
        )

    def test_explicit_fields_win_over_context(self):
        logger = MagicMock()
        probe = TicketStructlogProbe(
            logger=logger, context=ObservationContext(user_id="alice")
        )

        probe._emit("warning", "comment_edit_denied", user_id="bob")

        logger.warning.assert_called_once_with("comment_edit_denied", user_id="bob")

    def test_with_context_keeps_type_and_logger(self):
        logger = MagicMock()
        probe = StructlogProbe(logger=logger)

        bound = probe.with_context(ObservationContext())

        assert type(bound) is StructlogProbe
        assert bound._logger is logger
