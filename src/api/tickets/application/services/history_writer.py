"""History writer: turns field changes into audit rows.

Rows are written in the caller's transaction so that a ticket mutation
and its history commit or roll back together.
"""

from __future__ import annotations

from datetime import UTC, datetime

from tickets.application.observability import DefaultHistoryProbe, HistoryProbe
from tickets.domain.aggregates import HistoryEntry
from tickets.domain.diff import FieldChange
from tickets.domain.value_objects import HistoryAction, TicketId, UserId, WorkspaceId
from tickets.ports.repositories import IHistoryRepository


class HistoryWriter:
    """Appends one history row per field change."""

    def __init__(
        self,
        history_repository: IHistoryRepository,
        probe: HistoryProbe | None = None,
    ):
        self._history_repository = history_repository
        self._probe = probe or DefaultHistoryProbe()

    async def record(
        self,
        workspace_id: WorkspaceId,
        ticket_id: TicketId,
        actor: UserId,
        changes: list[FieldChange],
        action: HistoryAction,
    ) -> list[HistoryEntry]:
        """Write the rows for ``changes``; nothing is written for an empty list."""
        if not changes:
            return []

        changed_at = datetime.now(UTC)
        entries = [
            HistoryEntry(
                workspace_id=workspace_id,
                ticket_id=ticket_id,
                field=change.field,
                old_value=change.old_value,
                new_value=change.new_value,
                action=action,
                changed_by=actor,
                changed_at=changed_at,
            )
            for change in changes
        ]
        await self._history_repository.add_many(entries)

        self._probe.history_recorded(
            ticket_id=ticket_id.value,
            action=action.value,
            fields=[change.field for change in changes],
            changed_by=actor.value,
        )
        return entries

    async def list_for_ticket(
        self, workspace_id: WorkspaceId, ticket_id: TicketId
    ) -> list[HistoryEntry]:
        return await self._history_repository.list_for_ticket(workspace_id, ticket_id)
