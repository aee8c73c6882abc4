"""Unit tests for AssignmentService."""

from unittest.mock import AsyncMock, create_autospec

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError

from iam.application.observability import AssignmentServiceProbe
from iam.application.services import AssignmentService
from iam.domain.aggregates import Assignment, Role, User, Workspace
from iam.domain.value_objects import RoleId, UserId
from iam.ports.exceptions import (
    ConcurrentModificationError,
    InvalidRoleAssignmentError,
    RoleNotFoundError,
    SuperAdminRequiredError,
    UserNotFoundError,
    WorkspaceNotFoundError,
)
from iam.ports.repositories import (
    IAssignmentRepository,
    IRoleRepository,
    IUserRepository,
    IWorkspaceRepository,
)
from shared_kernel.authorization.types import EntityType, Operation, PermissionKey
from shared_kernel.exceptions import ValidationError

TICKET_READ = PermissionKey(EntityType.TICKET, Operation.READ)

ALICE = UserId(value="alice")
BOB = UserId(value="bob")


class _PgError(Exception):
    def __init__(self, sqlstate: str | None = None, constraint_name: str | None = None):
        super().__init__("pg error")
        self.sqlstate = sqlstate
        self.constraint_name = constraint_name


@pytest.fixture
def member_role(workspace_id) -> Role:
    return Role.create(workspace_id, "Member", "", {TICKET_READ})


@pytest.fixture
def viewer_role(workspace_id) -> Role:
    return Role.create(workspace_id, "Viewer", "", {TICKET_READ})


@pytest.fixture
def admin_role(workspace_id) -> Role:
    return Role.create(workspace_id, "Admin", "", {TICKET_READ})


@pytest.fixture
def mock_role_repository(member_role, viewer_role, admin_role):
    roles = {r.id: r for r in (member_role, viewer_role, admin_role)}
    repo = create_autospec(IRoleRepository, instance=True)
    repo.list_by_ids = AsyncMock(
        side_effect=lambda ws, ids: [roles[i] for i in ids if i in roles]
    )
    repo.get_by_id = AsyncMock(side_effect=lambda ws, role_id: roles.get(role_id))
    repo.list_by_workspace = AsyncMock(return_value=list(roles.values()))
    return repo


@pytest.fixture
def mock_user_repository():
    users = {u: User(id=u, username=u.value) for u in (ALICE, BOB)}
    repo = create_autospec(IUserRepository, instance=True)
    repo.list_by_ids = AsyncMock(
        side_effect=lambda ids: [users[i] for i in ids if i in users]
    )
    repo.get_by_id = AsyncMock(side_effect=lambda user_id: users.get(user_id))
    return repo


@pytest.fixture
def mock_workspace_repository(workspace_id):
    repo = create_autospec(IWorkspaceRepository, instance=True)
    workspace = Workspace.create("Support", UserId(value="root"), ALICE)
    repo.get_by_id = AsyncMock(return_value=workspace)
    return repo


@pytest.fixture
def mock_assignment_repository():
    repo = create_autospec(IAssignmentRepository, instance=True)
    repo.get_for_user = AsyncMock(return_value=None)
    repo.delete_for_users = AsyncMock(return_value=0)
    repo.delete = AsyncMock(return_value=1)
    return repo


@pytest.fixture
def mock_probe():
    return create_autospec(AssignmentServiceProbe, instance=True)


@pytest.fixture
def assignment_service(
    mock_session,
    mock_assignment_repository,
    mock_role_repository,
    mock_user_repository,
    mock_workspace_repository,
    mock_authz,
    mock_probe,
):
    return AssignmentService(
        session=mock_session,
        assignment_repository=mock_assignment_repository,
        role_repository=mock_role_repository,
        user_repository=mock_user_repository,
        workspace_repository=mock_workspace_repository,
        authz=mock_authz,
        probe=mock_probe,
    )


class TestAssignRoles:
    @pytest.mark.asyncio
    async def test_replaces_assignments_in_one_serializable_transaction(
        self,
        assignment_service,
        mock_session,
        mock_assignment_repository,
        mock_authz,
        member_role,
        viewer_role,
        current_user,
        workspace_id,
    ):
        views = await assignment_service.assign_roles(
            current_user, workspace_id, [ALICE, BOB], [member_role.id, viewer_role.id]
        )

        mock_authz.require.assert_awaited_once_with(
            current_user, workspace_id, EntityType.USER_ROLE, Operation.CREATE
        )
        mock_session.connection.assert_awaited_once_with(
            execution_options={"isolation_level": "SERIALIZABLE"}
        )
        mock_assignment_repository.delete_for_users.assert_awaited_once_with(
            workspace_id, [ALICE, BOB]
        )
        added = mock_assignment_repository.add_many.await_args.args[0]
        assert [(a.user_id, a.role_id) for a in added] == [
            (ALICE, member_role.id),
            (BOB, viewer_role.id),
        ]
        assert [(v.username, v.role_name) for v in views] == [
            ("alice", "Member"),
            ("bob", "Viewer"),
        ]

    @pytest.mark.asyncio
    async def test_repeated_user_keeps_last_role(
        self,
        assignment_service,
        mock_assignment_repository,
        member_role,
        viewer_role,
        current_user,
        workspace_id,
    ):
        views = await assignment_service.assign_roles(
            current_user, workspace_id, [ALICE, ALICE], [member_role.id, viewer_role.id]
        )

        added = mock_assignment_repository.add_many.await_args.args[0]
        assert [(a.user_id, a.role_id) for a in added] == [(ALICE, viewer_role.id)]
        assert len(views) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_count,role_count", [(0, 0), (2, 1)])
    async def test_list_shape_is_validated(
        self,
        assignment_service,
        mock_session,
        member_role,
        current_user,
        workspace_id,
        user_count,
        role_count,
    ):
        with pytest.raises(ValidationError):
            await assignment_service.assign_roles(
                current_user,
                workspace_id,
                [ALICE, BOB][:user_count],
                [member_role.id] * role_count,
            )

        mock_session.begin.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_workspace(
        self,
        assignment_service,
        mock_workspace_repository,
        member_role,
        current_user,
        workspace_id,
    ):
        mock_workspace_repository.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(WorkspaceNotFoundError):
            await assignment_service.assign_roles(
                current_user, workspace_id, [ALICE], [member_role.id]
            )

    @pytest.mark.asyncio
    async def test_foreign_role_is_rejected(
        self,
        assignment_service,
        mock_assignment_repository,
        current_user,
        workspace_id,
    ):
        foreign = RoleId.generate()

        with pytest.raises(InvalidRoleAssignmentError) as exc_info:
            await assignment_service.assign_roles(
                current_user, workspace_id, [ALICE], [foreign]
            )

        assert exc_info.value.details["invalid_role_ids"] == [foreign.value]
        mock_assignment_repository.add_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_user_is_rejected(
        self, assignment_service, member_role, current_user, workspace_id
    ):
        with pytest.raises(UserNotFoundError) as exc_info:
            await assignment_service.assign_roles(
                current_user, workspace_id, [UserId(value="ghost")], [member_role.id]
            )

        assert exc_info.value.details["missing_user_ids"] == ["ghost"]

    @pytest.mark.asyncio
    async def test_granting_admin_requires_super_admin(
        self,
        assignment_service,
        mock_assignment_repository,
        mock_probe,
        admin_role,
        current_user,
        workspace_id,
    ):
        with pytest.raises(SuperAdminRequiredError):
            await assignment_service.assign_roles(
                current_user, workspace_id, [BOB], [admin_role.id]
            )

        mock_assignment_repository.delete_for_users.assert_not_awaited()
        mock_probe.admin_guard_denied.assert_called_once()

    @pytest.mark.asyncio
    async def test_replacing_current_admin_requires_super_admin(
        self,
        assignment_service,
        mock_assignment_repository,
        admin_role,
        member_role,
        current_user,
        workspace_id,
    ):
        mock_assignment_repository.get_for_user = AsyncMock(
            return_value=Assignment(ALICE, workspace_id, admin_role.id)
        )

        with pytest.raises(SuperAdminRequiredError):
            await assignment_service.assign_roles(
                current_user, workspace_id, [ALICE], [member_role.id]
            )

    @pytest.mark.asyncio
    async def test_super_admin_may_grant_admin(
        self,
        assignment_service,
        mock_assignment_repository,
        admin_role,
        super_admin,
        workspace_id,
    ):
        await assignment_service.assign_roles(
            super_admin, workspace_id, [BOB], [admin_role.id]
        )

        mock_assignment_repository.get_for_user.assert_not_awaited()
        mock_assignment_repository.add_many.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_serialization_failure_is_concurrent_modification(
        self,
        assignment_service,
        mock_assignment_repository,
        mock_probe,
        member_role,
        current_user,
        workspace_id,
    ):
        mock_assignment_repository.add_many = AsyncMock(
            side_effect=DBAPIError("INSERT", {}, _PgError(sqlstate="40001"))
        )

        with pytest.raises(ConcurrentModificationError):
            await assignment_service.assign_roles(
                current_user, workspace_id, [ALICE], [member_role.id]
            )

        mock_probe.concurrent_modification.assert_called_once_with(
            "assign_roles", workspace_id.value
        )

    @pytest.mark.asyncio
    async def test_one_role_per_workspace_race_is_concurrent_modification(
        self,
        assignment_service,
        mock_assignment_repository,
        member_role,
        current_user,
        workspace_id,
    ):
        mock_assignment_repository.add_many = AsyncMock(
            side_effect=IntegrityError(
                "INSERT",
                {},
                _PgError(constraint_name="uq_user_roles_user_id_workspace_id"),
            )
        )

        with pytest.raises(ConcurrentModificationError):
            await assignment_service.assign_roles(
                current_user, workspace_id, [ALICE], [member_role.id]
            )

    @pytest.mark.asyncio
    async def test_other_database_errors_propagate(
        self,
        assignment_service,
        mock_assignment_repository,
        member_role,
        current_user,
        workspace_id,
    ):
        mock_assignment_repository.add_many = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, _PgError(constraint_name="other"))
        )

        with pytest.raises(IntegrityError):
            await assignment_service.assign_roles(
                current_user, workspace_id, [ALICE], [member_role.id]
            )


class TestSingleUserOperations:
    @pytest.mark.asyncio
    async def test_set_user_role(
        self,
        assignment_service,
        mock_assignment_repository,
        mock_authz,
        viewer_role,
        current_user,
        workspace_id,
    ):
        view = await assignment_service.set_user_role(
            current_user, workspace_id, BOB, viewer_role.id
        )

        mock_authz.require.assert_awaited_once_with(
            current_user, workspace_id, EntityType.USER_ROLE, Operation.UPDATE
        )
        mock_assignment_repository.delete_for_users.assert_awaited_once_with(
            workspace_id, [BOB]
        )
        assert view.role_name == "Viewer"

    @pytest.mark.asyncio
    async def test_remove_returns_count(
        self, assignment_service, mock_assignment_repository, current_user, workspace_id
    ):
        removed = await assignment_service.remove_user_role(current_user, workspace_id, BOB)

        assert removed == 1
        mock_assignment_repository.delete.assert_awaited_once_with(workspace_id, BOB, None)

    @pytest.mark.asyncio
    async def test_remove_for_unknown_user(
        self, assignment_service, mock_assignment_repository, current_user, workspace_id
    ):
        with pytest.raises(UserNotFoundError):
            await assignment_service.remove_user_role(
                current_user, workspace_id, UserId(value="ghost")
            )

        mock_assignment_repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_remove_with_role_outside_workspace(
        self, assignment_service, mock_assignment_repository, current_user, workspace_id
    ):
        with pytest.raises(RoleNotFoundError):
            await assignment_service.remove_user_role(
                current_user, workspace_id, BOB, RoleId.generate()
            )

        mock_assignment_repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_removing_admin_requires_super_admin(
        self,
        assignment_service,
        mock_assignment_repository,
        admin_role,
        current_user,
        workspace_id,
    ):
        mock_assignment_repository.get_for_user = AsyncMock(
            return_value=Assignment(ALICE, workspace_id, admin_role.id)
        )

        with pytest.raises(SuperAdminRequiredError):
            await assignment_service.remove_user_role(current_user, workspace_id, ALICE)

        mock_assignment_repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_assignments_joins_names(
        self,
        assignment_service,
        mock_assignment_repository,
        member_role,
        current_user,
        workspace_id,
    ):
        mock_assignment_repository.list_by_workspace = AsyncMock(
            return_value=[Assignment(BOB, workspace_id, member_role.id)]
        )

        views = await assignment_service.list_assignments(current_user, workspace_id)

        assert [(v.username, v.role_name) for v in views] == [("bob", "Member")]
