"""Domain probes for ticket, history and comment persistence."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TicketRepositoryProbe(Protocol):
    """Domain probe for ticket persistence."""

    def ticket_saved(self, ticket_id: str, workspace_id: str, created: bool) -> None:
        ...

    def ticket_deleted(self, ticket_id: str) -> None:
        ...

    def subtickets_deleted(self, parent_id: str, count: int) -> None:
        ...

    def with_context(self, context: ObservationContext) -> TicketRepositoryProbe:
        ...


class HistoryRepositoryProbe(Protocol):
    """Domain probe for the history table."""

    def history_appended(self, ticket_id: str, count: int) -> None:
        ...

    def with_context(self, context: ObservationContext) -> HistoryRepositoryProbe:
        ...


class CommentRepositoryProbe(Protocol):
    """Domain probe for comment persistence."""

    def comment_saved(self, comment_id: str, ticket_id: str) -> None:
        ...

    def comments_deleted(self, ticket_id: str | None, count: int) -> None:
        ...

    def with_context(self, context: ObservationContext) -> CommentRepositoryProbe:
        ...


class _StructlogProbe:
    """Shared structlog plumbing for the default repository probes."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self, *explicit: str) -> dict[str, Any]:
        if self._context is None:
            return {}
        return {k: v for k, v in self._context.as_dict().items() if k not in explicit}

    def with_context(self, context: ObservationContext):
        """Create a new probe of the same type with observation context bound."""
        return type(self)(logger=self._logger, context=context)


class DefaultTicketRepositoryProbe(_StructlogProbe):
    def ticket_saved(self, ticket_id: str, workspace_id: str, created: bool) -> None:
        self._logger.debug(
            "ticket_saved",
            ticket_id=ticket_id,
            workspace_id=workspace_id,
            created=created,
            **self._get_context_kwargs("workspace_id"),
        )

    def ticket_deleted(self, ticket_id: str) -> None:
        self._logger.debug(
            "ticket_row_deleted",
            ticket_id=ticket_id,
            **self._get_context_kwargs(),
        )

    def subtickets_deleted(self, parent_id: str, count: int) -> None:
        self._logger.debug(
            "subtickets_deleted",
            parent_id=parent_id,
            count=count,
            **self._get_context_kwargs(),
        )


class DefaultHistoryRepositoryProbe(_StructlogProbe):
    def history_appended(self, ticket_id: str, count: int) -> None:
        self._logger.debug(
            "history_appended",
            ticket_id=ticket_id,
            count=count,
            **self._get_context_kwargs(),
        )


class DefaultCommentRepositoryProbe(_StructlogProbe):
    def comment_saved(self, comment_id: str, ticket_id: str) -> None:
        self._logger.debug(
            "comment_saved",
            comment_id=comment_id,
            ticket_id=ticket_id,
            **self._get_context_kwargs(),
        )

    def comments_deleted(self, ticket_id: str | None, count: int) -> None:
        self._logger.debug(
            "comments_deleted",
            ticket_id=ticket_id,
            count=count,
            **self._get_context_kwargs(),
        )
