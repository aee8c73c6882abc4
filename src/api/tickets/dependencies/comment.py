"""FastAPI dependency injection for the comment service."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.dependencies.authorization import get_authorization_provider
from iam.dependencies.user import get_observation_context
from infrastructure.database.dependencies import get_write_session
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.observability_context import ObservationContext
from tickets.application.observability import (
    CommentServiceProbe,
    DefaultCommentServiceProbe,
)
from tickets.application.services import CommentService
from tickets.dependencies.ticket import get_comment_repository, get_ticket_repository
from tickets.infrastructure.comment_repository import CommentRepository
from tickets.infrastructure.ticket_repository import TicketRepository


def get_comment_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> CommentServiceProbe:
    """Get CommentServiceProbe bound to the request context."""
    return DefaultCommentServiceProbe().with_context(context)


def get_comment_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    comment_repo: Annotated[CommentRepository, Depends(get_comment_repository)],
    ticket_repo: Annotated[TicketRepository, Depends(get_ticket_repository)],
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
    probe: Annotated[CommentServiceProbe, Depends(get_comment_service_probe)],
) -> CommentService:
    """Get CommentService instance."""
    return CommentService(
        session=session,
        comment_repository=comment_repo,
        ticket_repository=ticket_repo,
        authz=authz,
        probe=probe,
    )
