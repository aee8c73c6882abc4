"""Protocol for history writer observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from tickets.application.observability.base import StructlogProbe

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class HistoryProbe(Protocol):
    """Domain probe for the audit trail."""

    def history_recorded(
        self, ticket_id: str, action: str, fields: list[str], changed_by: str
    ) -> None:
        """Record that history rows were written for a ticket."""
        ...

    def with_context(self, context: ObservationContext) -> HistoryProbe:
        ...


class DefaultHistoryProbe(StructlogProbe):
    """Default implementation of HistoryProbe using structlog."""

    def history_recorded(
        self, ticket_id: str, action: str, fields: list[str], changed_by: str
    ) -> None:
        self._emit(
            "info",
            "history_recorded",
            ticket_id=ticket_id,
            action=action,
            fields=fields,
            changed_by=changed_by,
        )
