"""Request and response models for ticket API endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from tickets.application.value_objects import TicketPage
from tickets.domain.aggregates import HistoryEntry, Ticket


class CreateTicketRequest(BaseModel):
    """Request to create a ticket.

    Enum values are matched case-insensitively. The assignee defaults to the
    caller.
    """

    title: str = Field(..., min_length=1, max_length=255, examples=["Login page 500s"])
    description: str = Field(..., min_length=1)
    priority: str = Field(..., examples=["HIGH"])
    ticket_type: str = Field(..., examples=["BUG"])
    status: str | None = Field(default=None, examples=["OPEN"])
    assigned_to: str | None = None
    due_date: str | None = Field(default=None, examples=["2026-11-01T00:00:00Z"])
    parent_id: str | None = None


class UpdateTicketRequest(BaseModel):
    """Partial update of tracked fields.

    Only fields present in the body are applied; ``null`` clears an optional
    field. Unknown fields are passed through so that the service can reject
    them by name.
    """

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    ticket_type: str | None = None
    assigned_to: str | None = None
    due_date: str | None = None
    parent_id: str | None = None


class TicketResponse(BaseModel):
    """Response containing ticket details."""

    id: str
    workspace_id: str
    title: str
    description: str
    status: str
    priority: str
    ticket_type: str
    assigned_to: str | None
    due_date: datetime | None
    parent_id: str | None
    created_by: str
    updated_by: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, ticket: Ticket) -> TicketResponse:
        """Convert domain Ticket aggregate to API response."""
        return cls(
            id=ticket.id.value,
            workspace_id=ticket.workspace_id.value,
            title=ticket.title,
            description=ticket.description,
            status=ticket.status.value,
            priority=ticket.priority.value,
            ticket_type=ticket.ticket_type.value,
            assigned_to=ticket.assigned_to.value if ticket.assigned_to else None,
            due_date=ticket.due_date,
            parent_id=ticket.parent_id.value if ticket.parent_id else None,
            created_by=ticket.created_by.value,
            updated_by=ticket.updated_by.value if ticket.updated_by else None,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
        )


class TicketListResponse(BaseModel):
    """One page of tickets, newest first."""

    items: list[TicketResponse]
    total: int
    page: int
    page_size: int

    @classmethod
    def from_page(cls, page: TicketPage) -> TicketListResponse:
        return cls(
            items=[TicketResponse.from_domain(t) for t in page.items],
            total=page.total,
            page=page.page,
            page_size=page.page_size,
        )


class HistoryEntryResponse(BaseModel):
    """A single audit row."""

    id: int | None
    ticket_id: str
    field: str
    old_value: str | None
    new_value: str | None
    action: str
    changed_by: str
    changed_at: datetime

    @classmethod
    def from_domain(cls, entry: HistoryEntry) -> HistoryEntryResponse:
        return cls(
            id=entry.id,
            ticket_id=entry.ticket_id.value,
            field=entry.field,
            old_value=entry.old_value,
            new_value=entry.new_value,
            action=entry.action.value,
            changed_by=entry.changed_by.value,
            changed_at=entry.changed_at,
        )


class HistoryListResponse(BaseModel):
    entries: list[HistoryEntryResponse]
    count: int
