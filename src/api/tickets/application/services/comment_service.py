"""Comment application service."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import CurrentUser, EntityType, Operation
from tickets.application.observability import (
    CommentServiceProbe,
    DefaultCommentServiceProbe,
)
from tickets.application.value_objects import CommentThread
from tickets.domain.aggregates import Comment
from tickets.domain.value_objects import CommentId, TicketId, WorkspaceId
from tickets.ports.exceptions import (
    CommentNotFoundError,
    InvalidCommentParentError,
    NotCommentAuthorError,
    TicketNotFoundError,
)
from tickets.ports.repositories import ICommentRepository, ITicketRepository


class CommentService:
    """Application service for ticket comments.

    Besides the COMMENT permission, editing and deleting a comment is
    limited to its author; super admins may moderate any comment.
    """

    def __init__(
        self,
        session: AsyncSession,
        comment_repository: ICommentRepository,
        ticket_repository: ITicketRepository,
        authz: AuthorizationProvider,
        probe: CommentServiceProbe | None = None,
    ):
        self._session = session
        self._comment_repository = comment_repository
        self._ticket_repository = ticket_repository
        self._authz = authz
        self._probe = probe or DefaultCommentServiceProbe()

    async def add_comment(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        ticket_id: TicketId,
        message: str,
        parent_id: CommentId | None = None,
    ) -> Comment:
        """Add a comment, or a reply to a top-level comment, on a ticket.

        Raises:
            AuthorizationError: If the caller lacks COMMENT:CREATE
            TicketNotFoundError: If the ticket is not in the workspace
            InvalidCommentParentError: If the parent is unknown, on another
                ticket, or itself a reply
            ValidationError: If the message is empty
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.COMMENT, Operation.CREATE
        )

        async with self._session.begin():
            await self._require_ticket(workspace_id, ticket_id)

            if parent_id is not None:
                parent = await self._comment_repository.get(workspace_id, parent_id)
                if parent is None or parent.ticket_id != ticket_id:
                    raise InvalidCommentParentError(
                        f"Comment {parent_id.value} is not on this ticket"
                    )
                if parent.is_reply:
                    raise InvalidCommentParentError(
                        "Replies can only be made to top-level comments"
                    )

            comment = Comment.create(
                ticket_id=ticket_id,
                workspace_id=workspace_id,
                user_id=current_user.user_id,
                message=message,
                parent_id=parent_id,
            )
            await self._comment_repository.save(comment)

        self._probe.comment_created(
            comment_id=comment.id.value,
            ticket_id=ticket_id.value,
            user_id=current_user.user_id.value,
            is_reply=comment.is_reply,
        )
        return comment

    async def list_comments(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        ticket_id: TicketId,
    ) -> list[CommentThread]:
        """Return a ticket's comments grouped into threads, oldest first."""
        await self._authz.require(
            current_user, workspace_id, EntityType.COMMENT, Operation.READ
        )

        async with self._session.begin():
            await self._require_ticket(workspace_id, ticket_id)
            comments = await self._comment_repository.list_for_ticket(ticket_id)

        return CommentThread.build_all(comments)

    async def update_comment(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        comment_id: CommentId,
        message: str,
    ) -> Comment:
        """Edit a comment's message.

        Raises:
            AuthorizationError: If the caller lacks COMMENT:UPDATE
            CommentNotFoundError: If the comment is not in the workspace
            NotCommentAuthorError: If the caller is not the author
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.COMMENT, Operation.UPDATE
        )

        async with self._session.begin():
            comment = await self._get_comment(workspace_id, comment_id)
            self._require_author(current_user, comment, "update")
            comment.edit(message)
            await self._comment_repository.save(comment)

        self._probe.comment_updated(comment.id.value, current_user.user_id.value)
        return comment

    async def delete_comment(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        comment_id: CommentId,
    ) -> None:
        """Delete a comment together with its replies.

        Raises:
            AuthorizationError: If the caller lacks COMMENT:DELETE
            CommentNotFoundError: If the comment is not in the workspace
            NotCommentAuthorError: If the caller is not the author
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.COMMENT, Operation.DELETE
        )

        async with self._session.begin():
            comment = await self._get_comment(workspace_id, comment_id)
            self._require_author(current_user, comment, "delete")
            await self._comment_repository.delete(comment.id)

        self._probe.comment_deleted(comment_id.value, current_user.user_id.value)

    async def _require_ticket(
        self, workspace_id: WorkspaceId, ticket_id: TicketId
    ) -> None:
        if await self._ticket_repository.get(workspace_id, ticket_id) is None:
            raise TicketNotFoundError(
                f"Ticket {ticket_id.value} not found in workspace {workspace_id.value}"
            )

    async def _get_comment(
        self, workspace_id: WorkspaceId, comment_id: CommentId
    ) -> Comment:
        comment = await self._comment_repository.get(workspace_id, comment_id)
        if comment is None:
            raise CommentNotFoundError(
                f"Comment {comment_id.value} not found in workspace {workspace_id.value}"
            )
        return comment

    def _require_author(
        self, current_user: CurrentUser, comment: Comment, operation: str
    ) -> None:
        if current_user.is_super_admin or comment.is_authored_by(current_user.user_id):
            return
        self._probe.comment_edit_denied(
            comment.id.value, current_user.user_id.value, operation
        )
        raise NotCommentAuthorError(
            f"Only the author may {operation} this comment",
            comment_id=comment.id.value,
        )
