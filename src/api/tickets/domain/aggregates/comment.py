"""Comment aggregate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from shared_kernel.exceptions import ValidationError
from tickets.domain.value_objects import CommentId, TicketId, UserId, WorkspaceId


def _validate_message(message: str | None) -> str:
    if not message or not message.strip():
        raise ValidationError("Message is required")
    return message


@dataclass
class Comment:
    """A message on a ticket.

    Comments nest one level deep: a reply's parent is always a top-level
    comment on the same ticket (enforced by the comment service).
    """

    id: CommentId
    ticket_id: TicketId
    workspace_id: WorkspaceId
    user_id: UserId
    message: str
    created_at: datetime
    updated_at: datetime
    parent_id: CommentId | None = None

    def __post_init__(self) -> None:
        self.message = _validate_message(self.message)

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    @classmethod
    def create(
        cls,
        ticket_id: TicketId,
        workspace_id: WorkspaceId,
        user_id: UserId,
        message: str,
        parent_id: CommentId | None = None,
    ) -> Comment:
        now = datetime.now(UTC)
        return cls(
            id=CommentId.generate(),
            ticket_id=ticket_id,
            workspace_id=workspace_id,
            user_id=user_id,
            message=message,
            created_at=now,
            updated_at=now,
            parent_id=parent_id,
        )

    def edit(self, message: str) -> None:
        self.message = _validate_message(message)
        self.updated_at = datetime.now(UTC)

    def is_authored_by(self, user_id: UserId) -> bool:
        return self.user_id == user_id
