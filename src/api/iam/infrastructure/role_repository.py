"""PostgreSQL implementation of IRoleRepository.

Roles are stored in the roles table and their grants in role_permissions.
Returned aggregates are hydrated with the permission keys currently linked.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Role
from iam.domain.value_objects import PermissionId, RoleId, WorkspaceId
from iam.infrastructure.models import (
    PermissionModel,
    RoleModel,
    RolePermissionModel,
)
from iam.infrastructure.observability import (
    DefaultRoleRepositoryProbe,
    RoleRepositoryProbe,
)
from iam.ports.repositories import IRoleRepository
from shared_kernel.authorization.types import EntityType, Operation, PermissionKey


class RoleRepository(IRoleRepository):
    """PostgreSQL-backed repository for Role aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: RoleRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession shared with the calling service
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultRoleRepositoryProbe()

    async def save(self, role: Role) -> None:
        """Insert or update the role row.

        Args:
            role: The Role aggregate to persist
        """
        stmt = select(RoleModel).where(RoleModel.id == role.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model:
            model.name = role.name
            model.description = role.description
            model.updated_at = role.updated_at
        else:
            model = RoleModel(
                id=role.id.value,
                workspace_id=role.workspace_id.value,
                name=role.name,
                description=role.description,
                created_at=role.created_at,
                updated_at=role.updated_at,
            )
            self._session.add(model)

        # Flush so a duplicate name fails here, inside the caller's transaction
        await self._session.flush()
        self._probe.role_saved(role.id.value, role.workspace_id.value, role.name)

    async def get_by_id(self, workspace_id: WorkspaceId, role_id: RoleId) -> Role | None:
        stmt = select(RoleModel).where(
            RoleModel.id == role_id.value,
            RoleModel.workspace_id == workspace_id.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None

        return self._to_domain(model, await self.get_permission_keys(role_id))

    async def get_by_name(self, workspace_id: WorkspaceId, name: str) -> Role | None:
        stmt = select(RoleModel).where(
            RoleModel.workspace_id == workspace_id.value,
            RoleModel.name == name.strip(),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None

        return self._to_domain(
            model, await self.get_permission_keys(RoleId(value=model.id))
        )

    async def list_by_workspace(self, workspace_id: WorkspaceId) -> list[Role]:
        stmt = (
            select(RoleModel)
            .where(RoleModel.workspace_id == workspace_id.value)
            .order_by(RoleModel.name)
        )
        result = await self._session.execute(stmt)
        return await self._hydrate(list(result.scalars().all()))

    async def list_by_ids(
        self, workspace_id: WorkspaceId, role_ids: Iterable[RoleId]
    ) -> list[Role]:
        ids = list({role_id.value for role_id in role_ids})
        if not ids:
            return []

        stmt = (
            select(RoleModel)
            .where(
                RoleModel.workspace_id == workspace_id.value,
                RoleModel.id.in_(ids),
            )
            .order_by(RoleModel.name)
        )
        result = await self._session.execute(stmt)
        return await self._hydrate(list(result.scalars().all()))

    async def get_permission_keys(self, role_id: RoleId) -> frozenset[PermissionKey]:
        stmt = (
            select(PermissionModel.entity, PermissionModel.operation)
            .join(
                RolePermissionModel,
                RolePermissionModel.permission_id == PermissionModel.id,
            )
            .where(RolePermissionModel.role_id == role_id.value)
        )
        result = await self._session.execute(stmt)
        return frozenset(
            PermissionKey(EntityType(entity), Operation(operation))
            for entity, operation in result.all()
        )

    async def link_permissions(
        self, role_id: RoleId, permission_ids: Iterable[PermissionId]
    ) -> None:
        ids = list(dict.fromkeys(p.value for p in permission_ids))
        if not ids:
            return

        stmt = (
            insert(RolePermissionModel)
            .values([{"role_id": role_id.value, "permission_id": pid} for pid in ids])
            .on_conflict_do_nothing()
        )
        await self._session.execute(stmt)
        self._probe.permissions_linked(role_id.value, len(ids))

    async def unlink_permissions(
        self, role_id: RoleId, permission_ids: Iterable[PermissionId]
    ) -> int:
        ids = [p.value for p in permission_ids]
        if not ids:
            return 0

        stmt = delete(RolePermissionModel).where(
            RolePermissionModel.role_id == role_id.value,
            RolePermissionModel.permission_id.in_(ids),
        )
        result = await self._session.execute(stmt)
        self._probe.permissions_unlinked(role_id.value, result.rowcount)
        return result.rowcount

    async def clear_permissions(self, role_id: RoleId) -> int:
        stmt = delete(RolePermissionModel).where(
            RolePermissionModel.role_id == role_id.value
        )
        result = await self._session.execute(stmt)
        self._probe.permissions_unlinked(role_id.value, result.rowcount)
        return result.rowcount

    async def delete(self, role_id: RoleId) -> bool:
        await self.clear_permissions(role_id)
        result = await self._session.execute(
            delete(RoleModel).where(RoleModel.id == role_id.value)
        )
        deleted = result.rowcount > 0
        if deleted:
            self._probe.role_deleted(role_id.value)
        return deleted

    async def _hydrate(self, models: list[RoleModel]) -> list[Role]:
        """Load permission keys for many roles in a single query."""
        if not models:
            return []

        stmt = (
            select(
                RolePermissionModel.role_id,
                PermissionModel.entity,
                PermissionModel.operation,
            )
            .join(
                PermissionModel,
                PermissionModel.id == RolePermissionModel.permission_id,
            )
            .where(RolePermissionModel.role_id.in_([m.id for m in models]))
        )
        result = await self._session.execute(stmt)

        keys_by_role: dict[str, set[PermissionKey]] = defaultdict(set)
        for role_id, entity, operation in result.all():
            keys_by_role[role_id].add(
                PermissionKey(EntityType(entity), Operation(operation))
            )

        return [
            self._to_domain(model, frozenset(keys_by_role.get(model.id, ())))
            for model in models
        ]

    @staticmethod
    def _to_domain(model: RoleModel, keys: frozenset[PermissionKey]) -> Role:
        return Role(
            id=RoleId(value=model.id),
            workspace_id=WorkspaceId(value=model.workspace_id),
            name=model.name,
            description=model.description,
            permissions=keys,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
