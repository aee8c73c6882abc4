"""Protocol for ticket application service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from tickets.application.observability.base import StructlogProbe

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TicketServiceProbe(Protocol):
    """Domain probe for ticket lifecycle operations."""

    def ticket_created(
        self, ticket_id: str, workspace_id: str, created_by: str, history_rows: int
    ) -> None:
        ...

    def ticket_updated(
        self, ticket_id: str, workspace_id: str, changed_fields: list[str]
    ) -> None:
        ...

    def ticket_update_noop(self, ticket_id: str, workspace_id: str) -> None:
        ...

    def ticket_deleted(
        self, ticket_id: str, workspace_id: str, subtickets_deleted: int
    ) -> None:
        ...

    def tickets_listed(self, workspace_id: str, total: int, returned: int) -> None:
        ...

    def with_context(self, context: ObservationContext) -> TicketServiceProbe:
        ...


class DefaultTicketServiceProbe(StructlogProbe):
    """Default implementation of TicketServiceProbe using structlog."""

    def ticket_created(
        self, ticket_id: str, workspace_id: str, created_by: str, history_rows: int
    ) -> None:
        self._emit(
            "info",
            "ticket_created",
            ticket_id=ticket_id,
            workspace_id=workspace_id,
            created_by=created_by,
            history_rows=history_rows,
        )

    def ticket_updated(
        self, ticket_id: str, workspace_id: str, changed_fields: list[str]
    ) -> None:
        self._emit(
            "info",
            "ticket_updated",
            ticket_id=ticket_id,
            workspace_id=workspace_id,
            changed_fields=changed_fields,
        )

    def ticket_update_noop(self, ticket_id: str, workspace_id: str) -> None:
        self._emit(
            "debug",
            "ticket_update_noop",
            ticket_id=ticket_id,
            workspace_id=workspace_id,
        )

    def ticket_deleted(
        self, ticket_id: str, workspace_id: str, subtickets_deleted: int
    ) -> None:
        self._emit(
            "info",
            "ticket_deleted",
            ticket_id=ticket_id,
            workspace_id=workspace_id,
            subtickets_deleted=subtickets_deleted,
        )

    def tickets_listed(self, workspace_id: str, total: int, returned: int) -> None:
        self._emit(
            "debug",
            "tickets_listed",
            workspace_id=workspace_id,
            total=total,
            returned=returned,
        )
