"""Request and response models for comment API endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from tickets.application.value_objects import CommentThread
from tickets.domain.aggregates import Comment


class CreateCommentRequest(BaseModel):
    """A new comment; set ``parent_id`` to reply to a top-level comment."""

    message: str = Field(..., min_length=1)
    parent_id: str | None = None


class UpdateCommentRequest(BaseModel):
    message: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    id: str
    ticket_id: str
    workspace_id: str
    user_id: str
    message: str
    parent_id: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, comment: Comment) -> CommentResponse:
        return cls(
            id=comment.id.value,
            ticket_id=comment.ticket_id.value,
            workspace_id=comment.workspace_id.value,
            user_id=comment.user_id.value,
            message=comment.message,
            parent_id=comment.parent_id.value if comment.parent_id else None,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class CommentThreadResponse(CommentResponse):
    """A top-level comment with its replies nested under it."""

    replies: list[CommentResponse] = Field(default_factory=list)

    @classmethod
    def from_thread(cls, thread: CommentThread) -> CommentThreadResponse:
        base = CommentResponse.from_domain(thread.comment)
        return cls(
            **base.model_dump(),
            replies=[CommentResponse.from_domain(r) for r in thread.replies],
        )


class CommentListResponse(BaseModel):
    comments: list[CommentThreadResponse]
    count: int = Field(..., description="Number of top-level comments")
