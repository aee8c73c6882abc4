"""PostgreSQL implementation of IAssignmentRepository."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Assignment
from iam.domain.value_objects import RoleId, UserId, WorkspaceId
from iam.infrastructure.models import UserRoleModel
from iam.infrastructure.observability import (
    AssignmentRepositoryProbe,
    DefaultAssignmentRepositoryProbe,
)
from iam.ports.repositories import IAssignmentRepository


class AssignmentRepository(IAssignmentRepository):
    """User-role assignments stored in the user_roles table.

    The (user_id, workspace_id) unique constraint backs the
    one-role-per-workspace rule; services replace roles by deleting then
    inserting inside one transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: AssignmentRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultAssignmentRepositoryProbe()

    async def get_for_user(
        self, user_id: UserId, workspace_id: WorkspaceId
    ) -> Assignment | None:
        stmt = select(UserRoleModel).where(
            UserRoleModel.user_id == user_id.value,
            UserRoleModel.workspace_id == workspace_id.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def list_by_workspace(self, workspace_id: WorkspaceId) -> list[Assignment]:
        stmt = (
            select(UserRoleModel)
            .where(UserRoleModel.workspace_id == workspace_id.value)
            .order_by(UserRoleModel.created_at, UserRoleModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def add_many(self, assignments: Iterable[Assignment]) -> None:
        models = [
            UserRoleModel(
                user_id=a.user_id.value,
                workspace_id=a.workspace_id.value,
                role_id=a.role_id.value,
                created_at=a.created_at,
            )
            for a in assignments
        ]
        if not models:
            return

        self._session.add_all(models)
        await self._session.flush()
        self._probe.assignments_added(models[0].workspace_id, len(models))

    async def delete_for_users(
        self, workspace_id: WorkspaceId, user_ids: Iterable[UserId]
    ) -> int:
        ids = list({user_id.value for user_id in user_ids})
        if not ids:
            return 0

        stmt = delete(UserRoleModel).where(
            UserRoleModel.workspace_id == workspace_id.value,
            UserRoleModel.user_id.in_(ids),
        )
        result = await self._session.execute(stmt)
        self._probe.assignments_deleted(workspace_id.value, result.rowcount)
        return result.rowcount

    async def delete(
        self,
        workspace_id: WorkspaceId,
        user_id: UserId,
        role_id: RoleId | None = None,
    ) -> int:
        stmt = delete(UserRoleModel).where(
            UserRoleModel.workspace_id == workspace_id.value,
            UserRoleModel.user_id == user_id.value,
        )
        if role_id is not None:
            stmt = stmt.where(UserRoleModel.role_id == role_id.value)

        result = await self._session.execute(stmt)
        self._probe.assignments_deleted(workspace_id.value, result.rowcount)
        return result.rowcount

    async def exists_for_role(self, role_id: RoleId) -> bool:
        stmt = select(exists().where(UserRoleModel.role_id == role_id.value))
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    @staticmethod
    def _to_domain(model: UserRoleModel) -> Assignment:
        return Assignment(
            user_id=UserId(value=model.user_id),
            workspace_id=WorkspaceId(value=model.workspace_id),
            role_id=RoleId(value=model.role_id),
            created_at=model.created_at,
        )
