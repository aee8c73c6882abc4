"""Identity dependencies for the HTTP surface.

Users are authenticated by an upstream identity provider that forwards the
user id in a trusted header. This module resolves that header to a stored
user and exposes it as a ``CurrentUser``.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultUserServiceProbe, UserServiceProbe
from iam.application.services import UserService
from iam.domain.value_objects import UserId
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_read_session, get_write_session
from infrastructure.settings import get_auth_settings
from shared_kernel.authorization.types import CurrentUser
from shared_kernel.observability_context import ObservationContext


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"kind": "authentication", "message": detail},
    )


async def get_current_user(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> CurrentUser:
    """Resolve the caller from the trusted user header.

    Raises:
        HTTPException 401: If the header is missing, or the user is unknown
            or inactive
    """
    header = get_auth_settings().user_header
    raw_user_id = request.headers.get(header)
    if not raw_user_id:
        raise _unauthorized(f"Missing {header} header")

    try:
        user_id = UserId.from_string(raw_user_id)
    except ValueError as e:
        raise _unauthorized(f"Invalid {header} header") from e

    async with session.begin():
        user = await UserRepository(session=session).get_by_id(user_id)

    if user is None or not user.is_active:
        raise _unauthorized("Unknown or inactive user")

    return CurrentUser(
        user_id=user.id,
        username=user.username,
        is_super_admin=user.is_super_admin,
    )


def get_observation_context(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ObservationContext:
    """Build the observation context bound to request-scoped probes."""
    workspace_id = request.path_params.get("workspace_id")
    return ObservationContext(
        request_id=getattr(request.state, "request_id", None),
        user_id=current_user.user_id.value,
        workspace_id=workspace_id,
    )


def get_user_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> UserServiceProbe:
    """Get UserServiceProbe bound to the request context."""
    return DefaultUserServiceProbe().with_context(context)


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> UserRepository:
    """Get UserRepository instance."""
    return UserRepository(session=session)


def get_user_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserService:
    """Get UserService instance.

    Args:
        user_repo: User repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        probe: User service probe for observability

    Returns:
        UserService instance
    """
    return UserService(user_repository=user_repo, session=session, probe=probe)
