"""PostgreSQL implementation of ICommentRepository."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tickets.domain.aggregates import Comment
from tickets.domain.value_objects import CommentId, TicketId, UserId, WorkspaceId
from tickets.infrastructure.models import CommentModel
from tickets.infrastructure.observability import (
    CommentRepositoryProbe,
    DefaultCommentRepositoryProbe,
)
from tickets.ports.repositories import ICommentRepository


class CommentRepository(ICommentRepository):
    """PostgreSQL-backed repository for comments."""

    def __init__(
        self,
        session: AsyncSession,
        probe: CommentRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultCommentRepositoryProbe()

    async def save(self, comment: Comment) -> None:
        model = await self._session.get(CommentModel, comment.id.value)
        if model is None:
            model = CommentModel(
                id=comment.id.value,
                ticket_id=comment.ticket_id.value,
                workspace_id=comment.workspace_id.value,
                user_id=comment.user_id.value,
                parent_id=comment.parent_id.value if comment.parent_id else None,
                created_at=comment.created_at,
            )
            self._session.add(model)

        model.message = comment.message
        model.updated_at = comment.updated_at

        await self._session.flush()
        self._probe.comment_saved(comment.id.value, comment.ticket_id.value)

    async def get(
        self, workspace_id: WorkspaceId, comment_id: CommentId
    ) -> Comment | None:
        stmt = select(CommentModel).where(
            CommentModel.id == comment_id.value,
            CommentModel.workspace_id == workspace_id.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def list_for_ticket(self, ticket_id: TicketId) -> list[Comment]:
        stmt = (
            select(CommentModel)
            .where(CommentModel.ticket_id == ticket_id.value)
            .order_by(CommentModel.created_at, CommentModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def delete(self, comment_id: CommentId) -> bool:
        stmt = delete(CommentModel).where(CommentModel.id == comment_id.value)
        result = await self._session.execute(stmt)
        self._probe.comments_deleted(None, result.rowcount)
        return result.rowcount > 0

    async def delete_for_ticket(self, ticket_id: TicketId) -> int:
        stmt = delete(CommentModel).where(CommentModel.ticket_id == ticket_id.value)
        result = await self._session.execute(stmt)
        self._probe.comments_deleted(ticket_id.value, result.rowcount)
        return result.rowcount

    @staticmethod
    def _to_domain(model: CommentModel) -> Comment:
        return Comment(
            id=CommentId(value=model.id),
            ticket_id=TicketId(value=model.ticket_id),
            workspace_id=WorkspaceId(value=model.workspace_id),
            user_id=UserId(value=model.user_id),
            message=model.message,
            created_at=model.created_at,
            updated_at=model.updated_at,
            parent_id=CommentId(value=model.parent_id) if model.parent_id else None,
        )
