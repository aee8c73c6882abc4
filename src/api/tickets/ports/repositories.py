"""Repository interfaces (ports) for the Tickets bounded context.

All methods run inside the caller's transaction; none of them commits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol, runtime_checkable

from tickets.domain.aggregates import Comment, HistoryEntry, Ticket
from tickets.domain.value_objects import (
    CommentId,
    TicketId,
    TicketPriority,
    TicketStatus,
    UserId,
    WorkspaceId,
)


@dataclass(frozen=True)
class TicketFilters:
    """Optional filters for listing tickets; ``None`` means no filter."""

    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    assignee: UserId | None = None
    q: str | None = None


@runtime_checkable
class ITicketRepository(Protocol):
    """Repository for Ticket aggregate persistence."""

    async def save(self, ticket: Ticket) -> None:
        """Insert or update a ticket."""
        ...

    async def get(
        self,
        workspace_id: WorkspaceId,
        ticket_id: TicketId,
        for_update: bool = False,
    ) -> Ticket | None:
        """Retrieve a ticket within a workspace.

        With ``for_update`` the row stays locked until the transaction ends.
        """
        ...

    async def search(
        self,
        workspace_id: WorkspaceId,
        filters: TicketFilters,
        offset: int,
        limit: int,
    ) -> tuple[int, list[Ticket]]:
        """Return the total match count and one page, newest first."""
        ...

    async def list_children(
        self, workspace_id: WorkspaceId, parent_id: TicketId
    ) -> list[Ticket]:
        """List direct sub-tickets, oldest first."""
        ...

    async def delete_children(self, parent_id: TicketId) -> int:
        """Delete direct sub-tickets; deeper descendants cascade."""
        ...

    async def delete(self, ticket_id: TicketId) -> bool:
        """Delete a ticket. Returns False if it did not exist."""
        ...


@runtime_checkable
class IHistoryRepository(Protocol):
    """Append-only store for ticket history. No update or delete exists."""

    async def add_many(self, entries: Iterable[HistoryEntry]) -> None:
        ...

    async def list_for_ticket(
        self, workspace_id: WorkspaceId, ticket_id: TicketId
    ) -> list[HistoryEntry]:
        """Entries for a ticket in insertion order, including after deletion."""
        ...


@runtime_checkable
class ICommentRepository(Protocol):
    """Repository for comments."""

    async def save(self, comment: Comment) -> None:
        ...

    async def get(
        self, workspace_id: WorkspaceId, comment_id: CommentId
    ) -> Comment | None:
        ...

    async def list_for_ticket(self, ticket_id: TicketId) -> list[Comment]:
        """All comments on a ticket, oldest first."""
        ...

    async def delete(self, comment_id: CommentId) -> bool:
        """Delete a comment; its replies cascade."""
        ...

    async def delete_for_ticket(self, ticket_id: TicketId) -> int:
        ...
