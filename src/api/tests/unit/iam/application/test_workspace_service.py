"""Unit tests for WorkspaceService."""

from unittest.mock import AsyncMock, create_autospec

import pytest
from sqlalchemy.exc import IntegrityError

from iam.application.observability import WorkspaceServiceProbe
from iam.application.services import WorkspaceService
from iam.domain.aggregates import Permission, User, Workspace
from iam.domain.default_roles import DEFAULT_ROLE_TEMPLATES, template_permission_keys
from iam.domain.value_objects import PermissionId, UserId, WorkspaceId
from iam.ports.exceptions import (
    DuplicateWorkspaceNameError,
    SuperAdminRequiredError,
    UserNotFoundError,
    WorkspaceNotFoundError,
)
from iam.ports.repositories import (
    IAssignmentRepository,
    IPermissionRepository,
    IRoleRepository,
    IUserRepository,
    IWorkspaceRepository,
)
from shared_kernel.exceptions import AuthorizationError

ALICE = UserId(value="alice")


@pytest.fixture
def mock_workspace_repository():
    repo = create_autospec(IWorkspaceRepository, instance=True)
    repo.get_by_name = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_user_repository():
    repo = create_autospec(IUserRepository, instance=True)
    repo.get_by_id = AsyncMock(return_value=User(id=ALICE, username="alice"))
    return repo


@pytest.fixture
def mock_role_repository():
    return create_autospec(IRoleRepository, instance=True)


@pytest.fixture
def mock_permission_repository():
    repo = create_autospec(IPermissionRepository, instance=True)
    repo.ensure_many = AsyncMock(
        side_effect=lambda keys: [
            Permission(id=PermissionId.generate(), key=key) for key in keys
        ]
    )
    return repo


@pytest.fixture
def mock_assignment_repository():
    return create_autospec(IAssignmentRepository, instance=True)


@pytest.fixture
def mock_probe():
    return create_autospec(WorkspaceServiceProbe, instance=True)


@pytest.fixture
def workspace_service(
    mock_session,
    mock_workspace_repository,
    mock_user_repository,
    mock_role_repository,
    mock_permission_repository,
    mock_assignment_repository,
    mock_authz,
    mock_probe,
):
    return WorkspaceService(
        session=mock_session,
        workspace_repository=mock_workspace_repository,
        user_repository=mock_user_repository,
        role_repository=mock_role_repository,
        permission_repository=mock_permission_repository,
        assignment_repository=mock_assignment_repository,
        authz=mock_authz,
        probe=mock_probe,
    )


class TestCreateWorkspace:
    @pytest.mark.asyncio
    async def test_provisions_default_roles_and_admin(
        self,
        workspace_service,
        mock_workspace_repository,
        mock_role_repository,
        mock_permission_repository,
        mock_assignment_repository,
        mock_probe,
        super_admin,
    ):
        workspace = await workspace_service.create_workspace(super_admin, "Support", ALICE)

        mock_workspace_repository.save.assert_awaited_once_with(workspace)
        mock_permission_repository.ensure_many.assert_awaited_once_with(
            template_permission_keys()
        )
        saved_roles = [c.args[0] for c in mock_role_repository.save.await_args_list]
        assert [r.name for r in saved_roles] == [t.name for t in DEFAULT_ROLE_TEMPLATES]
        assert all(r.workspace_id == workspace.id for r in saved_roles)

        (assignment,) = mock_assignment_repository.add_many.await_args.args[0]
        admin_role = next(r for r in saved_roles if r.is_admin)
        assert assignment.user_id == ALICE
        assert assignment.role_id == admin_role.id
        mock_probe.workspace_provisioned.assert_called_once()

    @pytest.mark.asyncio
    async def test_requires_super_admin(
        self, workspace_service, mock_workspace_repository, current_user
    ):
        with pytest.raises(SuperAdminRequiredError):
            await workspace_service.create_workspace(current_user, "Support", ALICE)

        mock_workspace_repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_name(
        self, workspace_service, mock_workspace_repository, super_admin
    ):
        mock_workspace_repository.get_by_name = AsyncMock(
            return_value=Workspace.create("support", UserId(value="root"), ALICE)
        )

        with pytest.raises(DuplicateWorkspaceNameError):
            await workspace_service.create_workspace(super_admin, "Support", ALICE)

    @pytest.mark.asyncio
    async def test_unique_index_race_is_duplicate(
        self, workspace_service, mock_workspace_repository, mock_probe, super_admin
    ):
        mock_workspace_repository.save = AsyncMock(
            side_effect=IntegrityError(
                "INSERT", {}, Exception("violates ux_workspaces_lower_name")
            )
        )

        with pytest.raises(DuplicateWorkspaceNameError):
            await workspace_service.create_workspace(super_admin, "Support", ALICE)

        mock_probe.workspace_provisioning_failed.assert_called_once()

    @pytest.mark.asyncio
    async def test_unknown_admin(
        self, workspace_service, mock_user_repository, mock_workspace_repository, super_admin
    ):
        mock_user_repository.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(UserNotFoundError):
            await workspace_service.create_workspace(super_admin, "Support", ALICE)

        mock_workspace_repository.save.assert_not_awaited()


class TestReadWorkspaces:
    @pytest.mark.asyncio
    async def test_non_member_is_denied(
        self, workspace_service, mock_authz, mock_workspace_repository, current_user
    ):
        mock_authz.is_member = AsyncMock(return_value=False)

        with pytest.raises(AuthorizationError):
            await workspace_service.get_workspace(current_user, WorkspaceId.generate())

        mock_workspace_repository.get_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_super_admin_skips_membership(
        self, workspace_service, mock_authz, mock_workspace_repository, super_admin
    ):
        workspace = Workspace.create("Support", UserId(value="root"), ALICE)
        mock_workspace_repository.get_by_id = AsyncMock(return_value=workspace)

        result = await workspace_service.get_workspace(super_admin, workspace.id)

        assert result is workspace
        mock_authz.is_member.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_workspace(
        self, workspace_service, mock_workspace_repository, current_user
    ):
        mock_workspace_repository.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(WorkspaceNotFoundError):
            await workspace_service.get_workspace(current_user, WorkspaceId.generate())

    @pytest.mark.asyncio
    async def test_list_for_member(
        self, workspace_service, mock_workspace_repository, current_user
    ):
        mock_workspace_repository.list_for_member = AsyncMock(return_value=[])

        await workspace_service.list_workspaces(current_user)

        mock_workspace_repository.list_for_member.assert_awaited_once_with(
            current_user.user_id
        )
        mock_workspace_repository.list_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_all_for_super_admin(
        self, workspace_service, mock_workspace_repository, super_admin
    ):
        mock_workspace_repository.list_all = AsyncMock(return_value=[])

        await workspace_service.list_workspaces(super_admin)

        mock_workspace_repository.list_for_member.assert_not_awaited()
