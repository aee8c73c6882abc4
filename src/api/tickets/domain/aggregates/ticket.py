"""Ticket aggregate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Mapping

from shared_kernel.exceptions import ValidationError
from tickets.domain.diff import TRACKED_FIELDS
from tickets.domain.value_objects import (
    TicketId,
    TicketPriority,
    TicketStatus,
    TicketType,
    UserId,
    WorkspaceId,
)

REQUIRED_FIELDS = frozenset({"title", "description", "status", "priority", "ticket_type"})


@dataclass
class Ticket:
    """Ticket aggregate: a unit of work inside one workspace.

    Business rules:
    - workspace_id never changes after creation
    - title is 1-255 characters, description is non-empty
    - a ticket is never its own parent
    """

    id: TicketId
    workspace_id: WorkspaceId
    title: str
    description: str
    status: TicketStatus
    priority: TicketPriority
    ticket_type: TicketType
    created_by: UserId
    created_at: datetime
    updated_at: datetime
    assigned_to: UserId | None = None
    due_date: datetime | None = None
    parent_id: TicketId | None = None
    updated_by: UserId | None = None

    def __post_init__(self) -> None:
        self.title = self.validate_title(self.title)
        self.description = self.validate_description(self.description)
        if self.parent_id is not None and self.parent_id == self.id:
            raise ValidationError("A ticket cannot be its own parent")

    @staticmethod
    def validate_title(title: str | None) -> str:
        trimmed = (title or "").strip()
        if not trimmed or len(trimmed) > 255:
            raise ValidationError("Title must be between 1 and 255 characters")
        return trimmed

    @staticmethod
    def validate_description(description: str | None) -> str:
        if not description or not description.strip():
            raise ValidationError("Description is required")
        return description

    @classmethod
    def create(
        cls,
        workspace_id: WorkspaceId,
        created_by: UserId,
        title: str,
        description: str,
        priority: TicketPriority,
        ticket_type: TicketType,
        status: TicketStatus = TicketStatus.OPEN,
        assigned_to: UserId | None = None,
        due_date: datetime | None = None,
        parent_id: TicketId | None = None,
    ) -> Ticket:
        """Factory for a new ticket; the creator is the default assignee."""
        now = datetime.now(UTC)
        return cls(
            id=TicketId.generate(),
            workspace_id=workspace_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            ticket_type=ticket_type,
            created_by=created_by,
            created_at=now,
            updated_at=now,
            assigned_to=assigned_to or created_by,
            due_date=due_date,
            parent_id=parent_id,
        )

    def tracked_values(self) -> dict[str, Any]:
        """Current values of every tracked field, keyed by field name."""
        return {field: getattr(self, field) for field in TRACKED_FIELDS}

    def apply(self, patch: Mapping[str, Any], actor: UserId) -> None:
        """Write already-typed tracked values and stamp the editor.

        Raises:
            ValidationError: If the patch clears a required field or names
                an untracked one
        """
        unknown = set(patch) - set(TRACKED_FIELDS)
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}"
            )

        for field in REQUIRED_FIELDS & set(patch):
            if patch[field] is None:
                raise ValidationError(f"{field} cannot be cleared")

        if "parent_id" in patch and patch["parent_id"] == self.id:
            raise ValidationError("A ticket cannot be its own parent")

        for field, value in patch.items():
            if field == "title":
                value = self.validate_title(value)
            elif field == "description":
                value = self.validate_description(value)
            setattr(self, field, value)

        self.updated_by = actor
        self.updated_at = datetime.now(UTC)
