"""PostgreSQL implementation of IUserRepository."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import User
from iam.domain.value_objects import UserId, UserType
from iam.infrastructure.models import UserModel
from iam.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from iam.ports.repositories import IUserRepository


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates."""

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def save(self, user: User) -> None:
        """Persist a user aggregate.

        Creates a new user or updates an existing one. Runs inside the
        caller's transaction.

        Args:
            user: The User aggregate to persist
        """
        stmt = select(UserModel).where(UserModel.id == user.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model:
            model.username = user.username
            model.user_type = user.user_type.value
            model.is_active = user.is_active
        else:
            model = UserModel(
                id=user.id.value,
                username=user.username,
                user_type=user.user_type.value,
                is_active=user.is_active,
            )
            self._session.add(model)

        await self._session.flush()
        self._probe.user_saved(user.id.value, user.username)

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their ID.

        Args:
            user_id: The unique identifier of the user

        Returns:
            The User aggregate, or None if not found
        """
        stmt = select(UserModel).where(UserModel.id == user_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(user_id.value)
            return None

        self._probe.user_retrieved(user_id.value)
        return self._to_domain(model)

    async def get_by_username(self, username: str) -> User | None:
        """Retrieve a user by their username."""
        stmt = select(UserModel).where(UserModel.username == username)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._to_domain(model) if model else None

    async def list_by_ids(self, user_ids: Iterable[UserId]) -> list[User]:
        """Return the users among ``user_ids`` that exist."""
        ids = list({user_id.value for user_id in user_ids})
        if not ids:
            return []

        stmt = select(UserModel).where(UserModel.id.in_(ids))
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_users(self, include_super_admins: bool = False) -> list[User]:
        """List users ordered by username."""
        stmt = select(UserModel).order_by(UserModel.username)
        if not include_super_admins:
            stmt = stmt.where(UserModel.user_type != UserType.SUPER_ADMIN.value)

        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=UserId(value=model.id),
            username=model.username,
            user_type=UserType(model.user_type),
            is_active=model.is_active,
        )
