"""FastAPI dependency injection for workspace repository and service.

Provides workspace repository and service instances for route handlers
using FastAPI's dependency injection system.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultWorkspaceServiceProbe,
    WorkspaceServiceProbe,
)
from iam.application.services import WorkspaceService
from iam.dependencies.authorization import get_authorization_provider
from iam.dependencies.user import get_observation_context, get_user_repository
from iam.infrastructure.assignment_repository import AssignmentRepository
from iam.infrastructure.permission_repository import PermissionRepository
from iam.infrastructure.role_repository import RoleRepository
from iam.infrastructure.user_repository import UserRepository
from iam.infrastructure.workspace_repository import WorkspaceRepository
from infrastructure.database.dependencies import get_write_session
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.observability_context import ObservationContext


def get_workspace_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> WorkspaceServiceProbe:
    """Get WorkspaceServiceProbe bound to the request context."""
    return DefaultWorkspaceServiceProbe().with_context(context)


def get_workspace_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> WorkspaceRepository:
    """Get WorkspaceRepository instance."""
    return WorkspaceRepository(session=session)


def get_role_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> RoleRepository:
    """Get RoleRepository instance on the write session."""
    return RoleRepository(session=session)


def get_permission_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> PermissionRepository:
    """Get PermissionRepository instance."""
    return PermissionRepository(session=session)


def get_assignment_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> AssignmentRepository:
    """Get AssignmentRepository instance on the write session."""
    return AssignmentRepository(session=session)


def get_workspace_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    workspace_repo: Annotated[WorkspaceRepository, Depends(get_workspace_repository)],
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    role_repo: Annotated[RoleRepository, Depends(get_role_repository)],
    permission_repo: Annotated[
        PermissionRepository, Depends(get_permission_repository)
    ],
    assignment_repo: Annotated[
        AssignmentRepository, Depends(get_assignment_repository)
    ],
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
    probe: Annotated[WorkspaceServiceProbe, Depends(get_workspace_service_probe)],
) -> WorkspaceService:
    """Get WorkspaceService instance.

    All repositories share the write session via FastAPI dependency caching,
    so provisioning runs in a single transaction.
    """
    return WorkspaceService(
        session=session,
        workspace_repository=workspace_repo,
        user_repository=user_repo,
        role_repository=role_repo,
        permission_repository=permission_repo,
        assignment_repository=assignment_repo,
        authz=authz,
        probe=probe,
    )
