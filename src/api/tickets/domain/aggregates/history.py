"""History entries: the append-only audit trail of ticket changes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from tickets.domain.value_objects import HistoryAction, TicketId, UserId, WorkspaceId


@dataclass(frozen=True)
class HistoryEntry:
    """One field transition on a ticket.

    ``id`` is assigned by storage and orders entries by insertion. Entries
    are never updated or deleted, and outlive the ticket they describe.
    """

    workspace_id: WorkspaceId
    ticket_id: TicketId
    field: str
    old_value: str | None
    new_value: str | None
    action: HistoryAction
    changed_by: UserId
    changed_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    id: int | None = None
