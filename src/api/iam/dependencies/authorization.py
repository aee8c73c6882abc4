"""FastAPI dependency injection for the authorization resolver.

The resolver runs on the read session so that permission checks never
share a transaction with the write a handler is about to perform. Other
bounded contexts depend on ``get_authorization_provider`` and see only the
shared-kernel protocol.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    AuthorizationProbe,
    DefaultAuthorizationProbe,
)
from iam.application.services import AuthorizationService
from iam.dependencies.user import get_observation_context
from iam.infrastructure.assignment_repository import AssignmentRepository
from iam.infrastructure.role_repository import RoleRepository
from infrastructure.database.dependencies import get_read_session
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.observability_context import ObservationContext


def get_authorization_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> AuthorizationProbe:
    """Get AuthorizationProbe bound to the request context."""
    return DefaultAuthorizationProbe().with_context(context)


def get_authorization_service(
    session: Annotated[AsyncSession, Depends(get_read_session)],
    probe: Annotated[AuthorizationProbe, Depends(get_authorization_probe)],
) -> AuthorizationService:
    """Get AuthorizationService instance.

    Args:
        session: Read session; each check opens its own short transaction
        probe: Authorization probe for observability

    Returns:
        AuthorizationService instance
    """
    return AuthorizationService(
        session=session,
        assignment_repository=AssignmentRepository(session=session),
        role_repository=RoleRepository(session=session),
        probe=probe,
    )


def get_authorization_provider(
    service: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> AuthorizationProvider:
    """Expose the resolver through the shared-kernel protocol."""
    return service
