"""PostgreSQL implementation of IWorkspaceRepository."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Workspace
from iam.domain.value_objects import UserId, WorkspaceId
from iam.infrastructure.models import UserRoleModel, WorkspaceModel
from iam.infrastructure.observability import (
    DefaultWorkspaceRepositoryProbe,
    WorkspaceRepositoryProbe,
)
from iam.ports.repositories import IWorkspaceRepository


class WorkspaceRepository(IWorkspaceRepository):
    """Repository storing Workspace aggregates in PostgreSQL.

    Membership is not part of the aggregate: it is derived from the
    user_roles table when listing a member's workspaces.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: WorkspaceRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultWorkspaceRepositoryProbe()

    async def save(self, workspace: Workspace) -> None:
        """Persist workspace metadata to PostgreSQL.

        Flushes so that a case-insensitive name clash surfaces as an
        IntegrityError inside the caller's transaction.

        Args:
            workspace: The Workspace aggregate to persist
        """
        stmt = select(WorkspaceModel).where(WorkspaceModel.id == workspace.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model:
            model.name = workspace.name
            model.admin_id = workspace.admin_id.value
            model.updated_at = workspace.updated_at
        else:
            model = WorkspaceModel(
                id=workspace.id.value,
                name=workspace.name,
                created_by=workspace.created_by.value,
                admin_id=workspace.admin_id.value,
                created_at=workspace.created_at,
                updated_at=workspace.updated_at,
            )
            self._session.add(model)

        await self._session.flush()
        self._probe.workspace_saved(workspace.id.value, workspace.name)

    async def get_by_id(self, workspace_id: WorkspaceId) -> Workspace | None:
        """Fetch a workspace by id.

        Args:
            workspace_id: The unique identifier of the workspace

        Returns:
            The Workspace aggregate, or None if not found
        """
        stmt = select(WorkspaceModel).where(WorkspaceModel.id == workspace_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.workspace_not_found(workspace_id.value)
            return None

        return self._to_domain(model)

    async def get_by_name(self, name: str) -> Workspace | None:
        """Fetch a workspace by name, ignoring case."""
        stmt = select(WorkspaceModel).where(
            func.lower(WorkspaceModel.name) == name.strip().lower()
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._to_domain(model) if model else None

    async def list_all(self) -> list[Workspace]:
        """List every workspace, newest first."""
        stmt = select(WorkspaceModel).order_by(WorkspaceModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_for_member(self, user_id: UserId) -> list[Workspace]:
        """List workspaces where the user holds an assignment, newest first."""
        stmt = (
            select(WorkspaceModel)
            .join(UserRoleModel, UserRoleModel.workspace_id == WorkspaceModel.id)
            .where(UserRoleModel.user_id == user_id.value)
            .order_by(WorkspaceModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().unique().all()]

    @staticmethod
    def _to_domain(model: WorkspaceModel) -> Workspace:
        return Workspace(
            id=WorkspaceId(value=model.id),
            name=model.name,
            created_by=UserId(value=model.created_by),
            admin_id=UserId(value=model.admin_id),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
