"""Unit tests for UserService and SuperAdminBootstrapService."""

from unittest.mock import AsyncMock, create_autospec

import pytest
from sqlalchemy.exc import IntegrityError

from iam.application.observability import UserServiceProbe
from iam.application.services import SuperAdminBootstrapService, UserService
from iam.domain.aggregates import User
from iam.domain.value_objects import UserId, UserType
from iam.ports.exceptions import DuplicateUserError, SuperAdminRequiredError
from iam.ports.repositories import IUserRepository
from infrastructure.observability.startup_probe import StartupProbe


@pytest.fixture
def mock_user_repository():
    repo = create_autospec(IUserRepository, instance=True)
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_by_username = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def user_service(mock_session, mock_user_repository):
    return UserService(
        user_repository=mock_user_repository,
        session=mock_session,
        probe=create_autospec(UserServiceProbe, instance=True),
    )


@pytest.fixture
def mock_startup_probe():
    return create_autospec(StartupProbe, instance=True)


@pytest.fixture
def bootstrap(mock_session, mock_user_repository, mock_startup_probe):
    return SuperAdminBootstrapService(
        user_repository=mock_user_repository,
        session=mock_session,
        probe=mock_startup_probe,
    )


class TestUserService:
    @pytest.mark.asyncio
    async def test_create_user(self, user_service, mock_user_repository, super_admin):
        user = await user_service.create_user(super_admin, UserId(value="bob"), "bob")

        mock_user_repository.save.assert_awaited_once_with(user)
        assert user.user_type == UserType.OTHER

    @pytest.mark.asyncio
    async def test_create_requires_super_admin(self, user_service, current_user):
        with pytest.raises(SuperAdminRequiredError):
            await user_service.create_user(current_user, UserId(value="bob"), "bob")

    @pytest.mark.asyncio
    async def test_taken_username(self, user_service, mock_user_repository, super_admin):
        mock_user_repository.get_by_username = AsyncMock(
            return_value=User(UserId(value="other"), "bob")
        )

        with pytest.raises(DuplicateUserError):
            await user_service.create_user(super_admin, UserId(value="bob"), "bob")

        mock_user_repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_excludes_super_admins(
        self, user_service, mock_user_repository, super_admin
    ):
        mock_user_repository.list_users = AsyncMock(return_value=[])

        await user_service.list_users(super_admin)

        mock_user_repository.list_users.assert_awaited_once_with(include_super_admins=False)

    @pytest.mark.asyncio
    async def test_list_requires_super_admin(self, user_service, current_user):
        with pytest.raises(SuperAdminRequiredError):
            await user_service.list_users(current_user)


class TestSuperAdminBootstrap:
    @pytest.mark.asyncio
    async def test_skipped_without_configured_id(
        self, bootstrap, mock_user_repository, mock_startup_probe
    ):
        assert await bootstrap.ensure_super_admin(None, "admin") is None

        mock_startup_probe.super_admin_bootstrap_skipped.assert_called_once()
        mock_user_repository.get_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_creates_missing_admin(self, bootstrap, mock_user_repository):
        user = await bootstrap.ensure_super_admin("root", "admin")

        assert user.is_super_admin
        mock_user_repository.save.assert_awaited_once_with(user)

    @pytest.mark.asyncio
    async def test_promotes_existing_user(self, bootstrap, mock_user_repository):
        mock_user_repository.get_by_id = AsyncMock(
            return_value=User(UserId(value="root"), "root")
        )

        user = await bootstrap.ensure_super_admin("root", "admin")

        assert user.is_super_admin
        assert user.username == "root"

    @pytest.mark.asyncio
    async def test_existing_admin_is_unchanged(
        self, bootstrap, mock_user_repository, mock_startup_probe
    ):
        mock_user_repository.get_by_id = AsyncMock(
            return_value=User(UserId(value="root"), "root", UserType.SUPER_ADMIN)
        )

        await bootstrap.ensure_super_admin("root", "admin")

        mock_user_repository.save.assert_not_awaited()
        mock_startup_probe.super_admin_already_exists.assert_called_once_with(
            user_id="root"
        )

    @pytest.mark.asyncio
    async def test_concurrent_insert_converges(self, bootstrap, mock_user_repository):
        existing = User(UserId(value="root"), "admin", UserType.SUPER_ADMIN)
        mock_user_repository.get_by_id = AsyncMock(side_effect=[None, existing])
        mock_user_repository.save = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, Exception("pk_users"))
        )

        user = await bootstrap.ensure_super_admin("root", "admin")

        assert user is existing
