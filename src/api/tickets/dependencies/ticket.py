"""FastAPI dependency injection for ticket repositories and service."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.dependencies.authorization import get_authorization_provider
from iam.dependencies.user import get_observation_context
from infrastructure.database.dependencies import get_write_session
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.observability_context import ObservationContext
from tickets.application.observability import (
    DefaultHistoryProbe,
    DefaultTicketServiceProbe,
    HistoryProbe,
    TicketServiceProbe,
)
from tickets.application.services import HistoryWriter, TicketService
from tickets.infrastructure.comment_repository import CommentRepository
from tickets.infrastructure.history_repository import HistoryRepository
from tickets.infrastructure.observability import (
    DefaultCommentRepositoryProbe,
    DefaultHistoryRepositoryProbe,
    DefaultTicketRepositoryProbe,
)
from tickets.infrastructure.ticket_repository import TicketRepository


def get_ticket_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> TicketServiceProbe:
    """Get TicketServiceProbe bound to the request context."""
    return DefaultTicketServiceProbe().with_context(context)


def get_history_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> HistoryProbe:
    return DefaultHistoryProbe().with_context(context)


def get_ticket_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> TicketRepository:
    """Get TicketRepository instance on the write session."""
    return TicketRepository(
        session=session,
        probe=DefaultTicketRepositoryProbe().with_context(context),
    )


def get_comment_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> CommentRepository:
    """Get CommentRepository instance on the write session."""
    return CommentRepository(
        session=session,
        probe=DefaultCommentRepositoryProbe().with_context(context),
    )


def get_history_writer(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
    probe: Annotated[HistoryProbe, Depends(get_history_probe)],
) -> HistoryWriter:
    """Get HistoryWriter writing through the shared write session."""
    repository = HistoryRepository(
        session=session,
        probe=DefaultHistoryRepositoryProbe().with_context(context),
    )
    return HistoryWriter(history_repository=repository, probe=probe)


def get_ticket_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    ticket_repo: Annotated[TicketRepository, Depends(get_ticket_repository)],
    comment_repo: Annotated[CommentRepository, Depends(get_comment_repository)],
    history_writer: Annotated[HistoryWriter, Depends(get_history_writer)],
    authz: Annotated[AuthorizationProvider, Depends(get_authorization_provider)],
    probe: Annotated[TicketServiceProbe, Depends(get_ticket_service_probe)],
) -> TicketService:
    """Get TicketService instance.

    The repositories and the history writer share the write session via
    FastAPI dependency caching, so a ticket change and its history rows
    commit together.
    """
    return TicketService(
        session=session,
        ticket_repository=ticket_repo,
        comment_repository=comment_repo,
        history_writer=history_writer,
        authz=authz,
        probe=probe,
    )
