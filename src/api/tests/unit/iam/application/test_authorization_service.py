"""Unit tests for AuthorizationService."""

from unittest.mock import AsyncMock, create_autospec

import pytest

from iam.application.observability import AuthorizationProbe
from iam.application.services import AuthorizationService
from iam.domain.aggregates import Assignment
from iam.domain.value_objects import RoleId
from iam.ports.repositories import IAssignmentRepository, IRoleRepository
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import EntityType, Operation, PermissionKey
from shared_kernel.exceptions import AuthorizationError

TICKET_READ = PermissionKey(EntityType.TICKET, Operation.READ)


@pytest.fixture
def mock_assignment_repository():
    repo = create_autospec(IAssignmentRepository, instance=True)
    repo.get_for_user = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_role_repository():
    repo = create_autospec(IRoleRepository, instance=True)
    repo.get_permission_keys = AsyncMock(return_value=frozenset({TICKET_READ}))
    return repo


@pytest.fixture
def mock_probe():
    return create_autospec(AuthorizationProbe, instance=True)


@pytest.fixture
def authz(mock_session, mock_assignment_repository, mock_role_repository, mock_probe):
    return AuthorizationService(
        session=mock_session,
        assignment_repository=mock_assignment_repository,
        role_repository=mock_role_repository,
        probe=mock_probe,
    )


@pytest.fixture
def assigned(mock_assignment_repository, current_user, workspace_id):
    mock_assignment_repository.get_for_user = AsyncMock(
        return_value=Assignment(current_user.user_id, workspace_id, RoleId.generate())
    )


def test_implements_provider_protocol(authz):
    assert isinstance(authz, AuthorizationProvider)


@pytest.mark.asyncio
async def test_super_admin_is_always_allowed(
    authz, mock_assignment_repository, super_admin, workspace_id
):
    assert await authz.authorize(
        super_admin, workspace_id, EntityType.ROLE, Operation.DELETE
    )
    mock_assignment_repository.get_for_user.assert_not_awaited()


@pytest.mark.asyncio
async def test_no_assignment_is_denied(authz, mock_probe, current_user, workspace_id):
    allowed = await authz.authorize(
        current_user, workspace_id, EntityType.TICKET, Operation.READ
    )

    assert not allowed
    assert mock_probe.authorization_denied.call_args.kwargs["reason"] == "no_assignment"


@pytest.mark.asyncio
@pytest.mark.usefixtures("assigned")
async def test_exact_grant_is_allowed(authz, current_user, workspace_id):
    assert await authz.authorize(
        current_user, workspace_id, EntityType.TICKET, Operation.READ
    )


@pytest.mark.asyncio
@pytest.mark.usefixtures("assigned")
async def test_missing_grant_is_denied(authz, mock_probe, current_user, workspace_id):
    allowed = await authz.authorize(
        current_user, workspace_id, EntityType.TICKET, Operation.UPDATE
    )

    assert not allowed
    assert (
        mock_probe.authorization_denied.call_args.kwargs["reason"]
        == "permission_not_granted"
    )


@pytest.mark.asyncio
@pytest.mark.usefixtures("assigned")
async def test_require_raises_with_permission_detail(authz, current_user, workspace_id):
    with pytest.raises(AuthorizationError) as exc_info:
        await authz.require(current_user, workspace_id, EntityType.TICKET, Operation.DELETE)

    assert exc_info.value.details == {"permission": "TICKET:DELETE"}


@pytest.mark.asyncio
async def test_revoked_grant_applies_on_next_check(
    authz, mock_role_repository, assigned, current_user, workspace_id
):
    assert await authz.authorize(current_user, workspace_id, EntityType.TICKET, Operation.READ)

    mock_role_repository.get_permission_keys = AsyncMock(return_value=frozenset())

    assert not await authz.authorize(
        current_user, workspace_id, EntityType.TICKET, Operation.READ
    )


@pytest.mark.asyncio
async def test_membership(authz, assigned, current_user, workspace_id):
    assert await authz.is_member(current_user.user_id, workspace_id)


@pytest.mark.asyncio
async def test_effective_permissions_without_assignment(
    authz, current_user, workspace_id
):
    assert await authz.effective_permissions(current_user.user_id, workspace_id) == frozenset()
