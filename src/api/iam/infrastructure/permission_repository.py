"""PostgreSQL implementation of IPermissionRepository.

``ensure`` relies on the unique (entity, operation) constraint:
``INSERT ... ON CONFLICT DO NOTHING`` followed by a select returns the same
row to every concurrent caller.
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import and_, or_, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Permission
from iam.domain.value_objects import PermissionId
from iam.infrastructure.models import PERMISSION_KEY_CONSTRAINT, PermissionModel
from iam.infrastructure.observability import (
    DefaultPermissionRepositoryProbe,
    PermissionRepositoryProbe,
)
from iam.ports.repositories import IPermissionRepository
from shared_kernel.authorization.types import EntityType, Operation, PermissionKey


class PermissionRepository(IPermissionRepository):
    """Registry of permissions stored in the permissions table."""

    def __init__(
        self,
        session: AsyncSession,
        probe: PermissionRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultPermissionRepositoryProbe()

    async def ensure(self, key: PermissionKey) -> Permission:
        """Return the permission for a key, inserting it if missing."""
        [permission] = await self.ensure_many([key])
        return permission

    async def ensure_many(self, keys: Iterable[PermissionKey]) -> list[Permission]:
        """Ensure every key exists and return them in first-seen order."""
        ordered = list(dict.fromkeys(keys))
        if not ordered:
            return []

        stmt = (
            insert(PermissionModel)
            .values(
                [
                    {
                        "id": PermissionId.generate().value,
                        "entity": key.entity.value,
                        "operation": key.operation.value,
                    }
                    for key in ordered
                ]
            )
            .on_conflict_do_nothing(constraint=PERMISSION_KEY_CONSTRAINT)
            .returning(PermissionModel.entity, PermissionModel.operation)
        )
        result = await self._session.execute(stmt)
        for entity, operation in result.all():
            self._probe.permission_registered(entity=entity, operation=operation)

        found = {p.key: p for p in await self.find_by_keys(ordered)}
        return [found[key] for key in ordered]

    async def find_by_keys(self, keys: Iterable[PermissionKey]) -> list[Permission]:
        """Return registered permissions among the keys."""
        wanted = list(dict.fromkeys(keys))
        if not wanted:
            return []

        stmt = select(PermissionModel).where(
            or_(
                *(
                    and_(
                        PermissionModel.entity == key.entity.value,
                        PermissionModel.operation == key.operation.value,
                    )
                    for key in wanted
                )
            )
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: PermissionModel) -> Permission:
        return Permission(
            id=PermissionId(value=model.id),
            key=PermissionKey(
                entity=EntityType(model.entity),
                operation=Operation(model.operation),
            ),
        )
