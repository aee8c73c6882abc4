"""Protocol for comment application service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from tickets.application.observability.base import StructlogProbe

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class CommentServiceProbe(Protocol):
    """Domain probe for comment operations."""

    def comment_created(
        self, comment_id: str, ticket_id: str, user_id: str, is_reply: bool
    ) -> None:
        ...

    def comment_updated(self, comment_id: str, user_id: str) -> None:
        ...

    def comment_deleted(self, comment_id: str, user_id: str) -> None:
        ...

    def comment_edit_denied(self, comment_id: str, user_id: str, operation: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> CommentServiceProbe:
        ...


class DefaultCommentServiceProbe(StructlogProbe):
    """Default implementation of CommentServiceProbe using structlog."""

    def comment_created(
        self, comment_id: str, ticket_id: str, user_id: str, is_reply: bool
    ) -> None:
        self._emit(
            "info",
            "comment_created",
            comment_id=comment_id,
            ticket_id=ticket_id,
            user_id=user_id,
            is_reply=is_reply,
        )

    def comment_updated(self, comment_id: str, user_id: str) -> None:
        self._emit("info", "comment_updated", comment_id=comment_id, user_id=user_id)

    def comment_deleted(self, comment_id: str, user_id: str) -> None:
        self._emit("info", "comment_deleted", comment_id=comment_id, user_id=user_id)

    def comment_edit_denied(self, comment_id: str, user_id: str, operation: str) -> None:
        self._emit(
            "warning",
            "comment_edit_denied",
            comment_id=comment_id,
            user_id=user_id,
            operation=operation,
        )
