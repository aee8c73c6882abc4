"""FastAPI dependency injection for the role service."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultRoleServiceProbe, RoleServiceProbe
from iam.application.services import RoleService
from iam.dependencies.authorization import get_authorization_provider
from iam.dependencies.user import get_observation_context
from iam.dependencies.workspace import (
    get_assignment_repository,
    get_permission_repository,
    get_role_repository,
)
from iam.infrastructure.assignment_repository import AssignmentRepository
from iam.infrastructure.permission_repository import PermissionRepository
from iam.infrastructure.role_repository import RoleRepository
from infrastructure.database.dependencies import get_write_session
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.observability_context import ObservationContext


def get_role_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> RoleServiceProbe:
    """Get RoleServiceProbe bound to the request context."""
    return DefaultRoleServiceProbe().with_context(context)


def get_role_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    role_repo: Annotated[RoleRepository, Depends(get_role_repository)],
    permission_repo: Annotated[
        PermissionRepository, Depends(get_permission_repository)
    ],
    assignment_repo: Annotated[
        AssignmentRepository, Depends(get_assignment_repository)
    ],
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
    probe: Annotated[RoleServiceProbe, Depends(get_role_service_probe)],
) -> RoleService:
    """Get RoleService instance."""
    return RoleService(
        session=session,
        role_repository=role_repo,
        permission_repository=permission_repo,
        assignment_repository=assignment_repo,
        authz=authz,
        probe=probe,
    )
