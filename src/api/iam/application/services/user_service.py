"""User application service for IAM bounded context.

Users are authenticated upstream; this service only keeps the local user
records that assignments and authorization refer to.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultUserServiceProbe, UserServiceProbe
from iam.domain.aggregates import User
from iam.domain.value_objects import UserId, UserType
from iam.ports.exceptions import DuplicateUserError, SuperAdminRequiredError
from iam.ports.repositories import IUserRepository
from shared_kernel.authorization.types import CurrentUser


class UserService:
    """Application service for user management."""

    def __init__(
        self,
        user_repository: IUserRepository,
        session: AsyncSession,
        probe: UserServiceProbe | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            user_repository: Repository for user persistence
            session: Database session for transaction management
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._probe = probe or DefaultUserServiceProbe()
        self._session = session

    async def list_users(self, current_user: CurrentUser) -> list[User]:
        """List every user who is not a super admin.

        Raises:
            SuperAdminRequiredError: If the caller is not a super admin
        """
        if not current_user.is_super_admin:
            raise SuperAdminRequiredError("Only super admins can list users")

        async with self._session.begin():
            users = await self._user_repository.list_users(include_super_admins=False)

        self._probe.users_listed(count=len(users))
        return users

    async def create_user(
        self,
        current_user: CurrentUser,
        user_id: UserId,
        username: str,
        user_type: UserType = UserType.OTHER,
    ) -> User:
        """Register a user known to the identity provider.

        Raises:
            SuperAdminRequiredError: If the caller is not a super admin
            ValidationError: If the username is invalid
            DuplicateUserError: If the id or username is already taken
        """
        if not current_user.is_super_admin:
            raise SuperAdminRequiredError("Only super admins can create users")

        user = User(id=user_id, username=username, user_type=user_type)

        try:
            async with self._session.begin():
                if await self._user_repository.get_by_id(user_id):
                    raise DuplicateUserError(f"User {user_id.value} already exists")
                if await self._user_repository.get_by_username(username):
                    raise DuplicateUserError(f"Username '{username}' is already taken")
                await self._user_repository.save(user)
        except IntegrityError as e:
            self._probe.user_provision_failed(
                user_id=user_id.value, username=username, error=str(e)
            )
            raise DuplicateUserError(
                f"User {user_id.value} or username '{username}' already exists"
            ) from e

        self._probe.user_created(
            user_id=user.id.value,
            username=user.username,
            user_type=user.user_type.value,
        )
        return user
