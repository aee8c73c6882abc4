"""FastAPI dependency injection for the assignment service."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    AssignmentServiceProbe,
    DefaultAssignmentServiceProbe,
)
from iam.application.services import AssignmentService
from iam.dependencies.authorization import get_authorization_provider
from iam.dependencies.user import get_observation_context, get_user_repository
from iam.dependencies.workspace import (
    get_assignment_repository,
    get_role_repository,
    get_workspace_repository,
)
from iam.infrastructure.assignment_repository import AssignmentRepository
from iam.infrastructure.role_repository import RoleRepository
from iam.infrastructure.user_repository import UserRepository
from iam.infrastructure.workspace_repository import WorkspaceRepository
from infrastructure.database.dependencies import get_write_session
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.observability_context import ObservationContext


def get_assignment_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> AssignmentServiceProbe:
    """Get AssignmentServiceProbe bound to the request context."""
    return DefaultAssignmentServiceProbe().with_context(context)


def get_assignment_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    assignment_repo: Annotated[
        AssignmentRepository, Depends(get_assignment_repository)
    ],
    role_repo: Annotated[RoleRepository, Depends(get_role_repository)],
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    workspace_repo: Annotated[WorkspaceRepository, Depends(get_workspace_repository)],
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
    probe: Annotated[AssignmentServiceProbe, Depends(get_assignment_service_probe)],
) -> AssignmentService:
    """Get AssignmentService instance.

    Repositories share the write session so the delete-then-insert
    replacement runs in one transaction.
    """
    return AssignmentService(
        session=session,
        assignment_repository=assignment_repo,
        role_repository=role_repo,
        user_repository=user_repo,
        workspace_repository=workspace_repo,
        authz=authz,
        probe=probe,
    )
