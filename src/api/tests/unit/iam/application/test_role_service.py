"""Unit tests for RoleService."""

from unittest.mock import AsyncMock, create_autospec

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError

from iam.application.observability import RoleServiceProbe
from iam.application.services import RoleService
from iam.domain.aggregates import Permission, Role
from iam.domain.value_objects import PermissionId, RoleId
from iam.ports.exceptions import (
    ConcurrentModificationError,
    DuplicateRoleNameError,
    PermissionNotFoundError,
    RoleInUseError,
    RoleNotFoundError,
    SuperAdminRequiredError,
)
from iam.ports.repositories import (
    IAssignmentRepository,
    IPermissionRepository,
    IRoleRepository,
)
from shared_kernel.authorization.types import EntityType, Operation, PermissionKey
from shared_kernel.exceptions import ValidationError

TICKET_READ = PermissionKey(EntityType.TICKET, Operation.READ)
TICKET_UPDATE = PermissionKey(EntityType.TICKET, Operation.UPDATE)


class _PgError(Exception):
    def __init__(self, sqlstate: str | None = None, constraint_name: str | None = None):
        super().__init__("pg error")
        self.sqlstate = sqlstate
        self.constraint_name = constraint_name


def _registered(keys) -> list[Permission]:
    return [Permission(id=PermissionId.generate(), key=key) for key in sorted(keys)]


@pytest.fixture
def mock_role_repository():
    repo = create_autospec(IRoleRepository, instance=True)
    repo.get_by_name = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_permission_repository():
    repo = create_autospec(IPermissionRepository, instance=True)
    repo.ensure_many = AsyncMock(side_effect=lambda keys: _registered(keys))
    repo.find_by_keys = AsyncMock(side_effect=lambda keys: _registered(keys))
    return repo


@pytest.fixture
def mock_assignment_repository():
    repo = create_autospec(IAssignmentRepository, instance=True)
    repo.exists_for_role = AsyncMock(return_value=False)
    return repo


@pytest.fixture
def mock_probe():
    return create_autospec(RoleServiceProbe, instance=True)


@pytest.fixture
def role_service(
    mock_session,
    mock_role_repository,
    mock_permission_repository,
    mock_assignment_repository,
    mock_authz,
    mock_probe,
):
    return RoleService(
        session=mock_session,
        role_repository=mock_role_repository,
        permission_repository=mock_permission_repository,
        assignment_repository=mock_assignment_repository,
        authz=mock_authz,
        probe=mock_probe,
    )


@pytest.fixture
def triage_role(workspace_id) -> Role:
    return Role.create(workspace_id, "Triage", "", {TICKET_READ})


@pytest.fixture
def admin_role(workspace_id) -> Role:
    return Role.create(workspace_id, "Admin", "", {TICKET_READ})


class TestCreateRole:
    @pytest.mark.asyncio
    async def test_saves_role_and_links_permissions(
        self,
        role_service,
        mock_role_repository,
        mock_authz,
        current_user,
        workspace_id,
    ):
        role = await role_service.create_role(
            current_user, workspace_id, "Triage", "Sorts tickets", [TICKET_READ, TICKET_UPDATE]
        )

        mock_authz.require.assert_awaited_once_with(
            current_user, workspace_id, EntityType.ROLE, Operation.CREATE
        )
        mock_role_repository.save.assert_awaited_once_with(role)
        linked = mock_role_repository.link_permissions.await_args.args
        assert linked[0] == role.id
        assert len(linked[1]) == 2

    @pytest.mark.asyncio
    async def test_duplicate_name(
        self, role_service, mock_role_repository, triage_role, current_user, workspace_id
    ):
        mock_role_repository.get_by_name = AsyncMock(return_value=triage_role)

        with pytest.raises(DuplicateRoleNameError):
            await role_service.create_role(
                current_user, workspace_id, "Triage", "", [TICKET_READ]
            )

        mock_role_repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unique_violation_race_is_duplicate(
        self, role_service, mock_role_repository, current_user, workspace_id
    ):
        mock_role_repository.save = AsyncMock(
            side_effect=IntegrityError(
                "INSERT", {}, _PgError(constraint_name="uq_roles_workspace_id_name")
            )
        )

        with pytest.raises(DuplicateRoleNameError):
            await role_service.create_role(
                current_user, workspace_id, "Triage", "", [TICKET_READ]
            )

    @pytest.mark.asyncio
    async def test_empty_permissions(self, role_service, current_user, workspace_id):
        with pytest.raises(ValidationError):
            await role_service.create_role(current_user, workspace_id, "Triage", "", [])

    @pytest.mark.asyncio
    async def test_only_super_admin_creates_admin(
        self, role_service, mock_role_repository, current_user, super_admin, workspace_id
    ):
        with pytest.raises(SuperAdminRequiredError):
            await role_service.create_role(
                current_user, workspace_id, "Admin", "", [TICKET_READ]
            )

        role = await role_service.create_role(
            super_admin, workspace_id, "Admin", "", [TICKET_READ]
        )
        assert role.is_admin


class TestUpdateRole:
    @pytest.mark.asyncio
    async def test_replaces_permissions_at_serializable(
        self,
        role_service,
        mock_session,
        mock_role_repository,
        triage_role,
        current_user,
        workspace_id,
    ):
        mock_role_repository.get_by_id = AsyncMock(return_value=triage_role)

        role = await role_service.update_role(
            current_user, workspace_id, triage_role.id, permissions=[TICKET_UPDATE]
        )

        mock_session.connection.assert_awaited_once_with(
            execution_options={"isolation_level": "SERIALIZABLE"}
        )
        mock_role_repository.clear_permissions.assert_awaited_once_with(triage_role.id)
        assert role.permissions == frozenset({TICKET_UPDATE})

    @pytest.mark.asyncio
    async def test_details_only_keeps_default_isolation(
        self,
        role_service,
        mock_session,
        mock_role_repository,
        triage_role,
        current_user,
        workspace_id,
    ):
        mock_role_repository.get_by_id = AsyncMock(return_value=triage_role)

        role = await role_service.update_role(
            current_user, workspace_id, triage_role.id, description="Routes tickets"
        )

        mock_session.connection.assert_not_awaited()
        mock_role_repository.clear_permissions.assert_not_awaited()
        assert role.description == "Routes tickets"

    @pytest.mark.asyncio
    async def test_renaming_admin_requires_super_admin(
        self, role_service, mock_role_repository, admin_role, current_user, workspace_id
    ):
        mock_role_repository.get_by_id = AsyncMock(return_value=admin_role)

        with pytest.raises(SuperAdminRequiredError):
            await role_service.update_role(
                current_user, workspace_id, admin_role.id, name="Owners"
            )

    @pytest.mark.asyncio
    async def test_serialization_failure_is_concurrent_modification(
        self,
        role_service,
        mock_role_repository,
        mock_probe,
        triage_role,
        current_user,
        workspace_id,
    ):
        mock_role_repository.get_by_id = AsyncMock(return_value=triage_role)
        mock_role_repository.clear_permissions = AsyncMock(
            side_effect=DBAPIError("DELETE", {}, _PgError(sqlstate="40001"))
        )

        with pytest.raises(ConcurrentModificationError):
            await role_service.update_role(
                current_user, workspace_id, triage_role.id, permissions=[TICKET_UPDATE]
            )

        mock_probe.concurrent_modification.assert_called_once_with(
            "update_role", workspace_id.value
        )

    @pytest.mark.asyncio
    async def test_missing_role(
        self, role_service, mock_role_repository, current_user, workspace_id
    ):
        mock_role_repository.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(RoleNotFoundError):
            await role_service.update_role(
                current_user, workspace_id, RoleId.generate(), description="x"
            )


class TestDeleteRole:
    @pytest.mark.asyncio
    async def test_deletes_unused_role(
        self, role_service, mock_role_repository, triage_role, current_user, workspace_id
    ):
        mock_role_repository.get_by_id = AsyncMock(return_value=triage_role)

        await role_service.delete_role(current_user, workspace_id, triage_role.id)

        mock_role_repository.delete.assert_awaited_once_with(triage_role.id)

    @pytest.mark.asyncio
    async def test_role_in_use(
        self,
        role_service,
        mock_role_repository,
        mock_assignment_repository,
        triage_role,
        current_user,
        workspace_id,
    ):
        mock_role_repository.get_by_id = AsyncMock(return_value=triage_role)
        mock_assignment_repository.exists_for_role = AsyncMock(return_value=True)

        with pytest.raises(RoleInUseError):
            await role_service.delete_role(current_user, workspace_id, triage_role.id)

        mock_role_repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_assignment_is_role_in_use(
        self, role_service, mock_role_repository, triage_role, current_user, workspace_id
    ):
        mock_role_repository.get_by_id = AsyncMock(return_value=triage_role)
        mock_role_repository.delete = AsyncMock(
            side_effect=IntegrityError(
                "DELETE", {}, _PgError(constraint_name="fk_user_roles_role_id_roles")
            )
        )

        with pytest.raises(RoleInUseError):
            await role_service.delete_role(current_user, workspace_id, triage_role.id)

    @pytest.mark.asyncio
    async def test_admin_role_requires_super_admin(
        self, role_service, mock_role_repository, admin_role, current_user, workspace_id
    ):
        mock_role_repository.get_by_id = AsyncMock(return_value=admin_role)

        with pytest.raises(SuperAdminRequiredError):
            await role_service.delete_role(current_user, workspace_id, admin_role.id)


class TestGrantAndRevoke:
    @pytest.mark.asyncio
    async def test_grant_links_only_new_permissions(
        self,
        role_service,
        mock_role_repository,
        mock_permission_repository,
        triage_role,
        current_user,
        workspace_id,
    ):
        mock_role_repository.get_by_id = AsyncMock(return_value=triage_role)

        role = await role_service.grant_permissions(
            current_user, workspace_id, triage_role.id, [TICKET_READ, TICKET_UPDATE]
        )

        mock_permission_repository.ensure_many.assert_awaited_once_with([TICKET_UPDATE])
        assert role.permissions == frozenset({TICKET_READ, TICKET_UPDATE})

    @pytest.mark.asyncio
    async def test_regrant_writes_nothing(
        self, role_service, mock_role_repository, triage_role, current_user, workspace_id
    ):
        mock_role_repository.get_by_id = AsyncMock(return_value=triage_role)

        await role_service.grant_permissions(
            current_user, workspace_id, triage_role.id, [TICKET_READ]
        )

        mock_role_repository.link_permissions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_revoke_unlinks_held_permissions(
        self, role_service, mock_role_repository, triage_role, current_user, workspace_id
    ):
        mock_role_repository.get_by_id = AsyncMock(return_value=triage_role)

        role = await role_service.revoke_permissions(
            current_user, workspace_id, triage_role.id, [TICKET_READ, TICKET_UPDATE]
        )

        assert role.permissions == frozenset()
        unlinked = mock_role_repository.unlink_permissions.await_args.args[1]
        assert len(unlinked) == 1

    @pytest.mark.asyncio
    async def test_revoke_unregistered_permissions(
        self,
        role_service,
        mock_role_repository,
        mock_permission_repository,
        triage_role,
        current_user,
        workspace_id,
    ):
        mock_role_repository.get_by_id = AsyncMock(return_value=triage_role)
        mock_permission_repository.find_by_keys = AsyncMock(return_value=[])

        with pytest.raises(PermissionNotFoundError):
            await role_service.revoke_permissions(
                current_user, workspace_id, triage_role.id, [TICKET_UPDATE]
            )
