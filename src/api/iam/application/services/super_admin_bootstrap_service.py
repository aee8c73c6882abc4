"""Super admin bootstrap service for IAM bounded context.

Ensures the configured super admin account exists at application startup,
so a fresh deployment has someone who can create workspaces. It has minimal
dependencies: no authorization provider and no request context.
"""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import User
from iam.domain.value_objects import UserId, UserType
from iam.ports.repositories import IUserRepository
from infrastructure.observability.startup_probe import (
    DefaultStartupProbe,
    StartupProbe,
)


class SuperAdminBootstrapService:
    """Bootstrap service for the initial super admin."""

    def __init__(
        self,
        user_repository: IUserRepository,
        session: AsyncSession,
        probe: StartupProbe | None = None,
    ):
        self._user_repository = user_repository
        self._session = session
        self._probe = probe or DefaultStartupProbe()

    async def ensure_super_admin(
        self, user_id: str | None, username: str
    ) -> User | None:
        """Ensure ``user_id`` exists and is a super admin.

        Idempotent; concurrent startups of several instances converge on
        a single row. An existing ordinary user with that id is promoted.

        Returns:
            The super admin, or None when no id is configured
        """
        if not user_id:
            self._probe.super_admin_bootstrap_skipped()
            return None

        admin_id = UserId.from_string(user_id)

        try:
            async with self._session.begin():
                return await self._ensure(admin_id, username)
        except IntegrityError:
            # Another instance inserted the row first
            async with self._session.begin():
                existing = await self._user_repository.get_by_id(admin_id)
            if existing is None:
                raise
            self._probe.super_admin_already_exists(user_id=admin_id.value)
            return existing

    async def _ensure(self, admin_id: UserId, username: str) -> User:
        existing = await self._user_repository.get_by_id(admin_id)

        if existing is None:
            user = User(id=admin_id, username=username, user_type=UserType.SUPER_ADMIN)
            await self._user_repository.save(user)
            self._probe.super_admin_bootstrapped(
                user_id=user.id.value, username=user.username
            )
            return user

        if not existing.is_super_admin:
            promoted = replace(existing, user_type=UserType.SUPER_ADMIN)
            await self._user_repository.save(promoted)
            self._probe.super_admin_bootstrapped(
                user_id=promoted.id.value, username=promoted.username
            )
            return promoted

        self._probe.super_admin_already_exists(user_id=existing.id.value)
        return existing
