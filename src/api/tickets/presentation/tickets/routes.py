"""Ticket routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from shared_kernel.authorization.types import CurrentUser
from shared_kernel.exceptions import DeskflowError
from shared_kernel.http_errors import (
    bad_request,
    internal_error,
    parse_workspace_path,
    to_http_exception,
)
from tickets.application.services import TicketService
from tickets.application.services.ticket_service import DEFAULT_PAGE_SIZE
from tickets.dependencies.ticket import get_ticket_service
from tickets.dependencies.user import get_current_user
from tickets.domain.value_objects import TicketId, WorkspaceId
from tickets.presentation.tickets.models import (
    CreateTicketRequest,
    HistoryEntryResponse,
    HistoryListResponse,
    TicketListResponse,
    TicketResponse,
    UpdateTicketRequest,
)

router = APIRouter(
    prefix="/workspaces/{workspace_id}/tickets",
    tags=["tickets"],
)


def _parse_ids(
    workspace_id: str, current_user: CurrentUser, ticket_id: str | None = None
) -> tuple[WorkspaceId, TicketId | None]:
    workspace = parse_workspace_path(workspace_id, current_user)
    try:
        ticket = TicketId.from_string(ticket_id) if ticket_id is not None else None
    except ValueError as e:
        raise bad_request("Invalid ticket ID format") from e
    return workspace, ticket


@router.post(
    "",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a ticket",
    description="""
Create a ticket in the workspace. Status defaults to OPEN and the assignee
to the caller. A CREATE history row is written for every non-empty field.
Requires TICKET:CREATE.
""",
    responses={
        400: {"description": "Invalid fields, parent or assignee"},
        403: {"description": "Missing TICKET:CREATE"},
    },
)
async def create_ticket(
    workspace_id: str,
    request: CreateTicketRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TicketService, Depends(get_ticket_service)],
) -> TicketResponse:
    workspace, _ = _parse_ids(workspace_id, current_user)

    try:
        ticket = await service.create_ticket(
            current_user,
            workspace,
            title=request.title,
            description=request.description,
            priority=request.priority,
            ticket_type=request.ticket_type,
            status=request.status,
            assigned_to=request.assigned_to,
            due_date=request.due_date,
            parent_id=request.parent_id,
        )
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to create ticket") from e

    return TicketResponse.from_domain(ticket)


@router.get(
    "",
    response_model=TicketListResponse,
    summary="List tickets",
    description="List tickets newest first. Requires TICKET:READ.",
)
async def list_tickets(
    workspace_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TicketService, Depends(get_ticket_service)],
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    priority: Annotated[str | None, Query()] = None,
    assignee: Annotated[str | None, Query()] = None,
    q: Annotated[str | None, Query(description="Matches title or description")] = None,
    page: Annotated[int, Query()] = 1,
    page_size: Annotated[int, Query()] = DEFAULT_PAGE_SIZE,
) -> TicketListResponse:
    workspace, _ = _parse_ids(workspace_id, current_user)

    try:
        result = await service.list_tickets(
            current_user,
            workspace,
            status=status_filter,
            priority=priority,
            assignee=assignee,
            q=q,
            page=page,
            page_size=page_size,
        )
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to list tickets") from e

    return TicketListResponse.from_page(result)


@router.get(
    "/{ticket_id}",
    response_model=TicketResponse,
    summary="Get a ticket",
)
async def get_ticket(
    workspace_id: str,
    ticket_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TicketService, Depends(get_ticket_service)],
) -> TicketResponse:
    workspace, ticket_ref = _parse_ids(workspace_id, current_user, ticket_id)

    try:
        ticket = await service.get_ticket(current_user, workspace, ticket_ref)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to get ticket") from e

    return TicketResponse.from_domain(ticket)


@router.patch(
    "/{ticket_id}",
    response_model=TicketResponse,
    summary="Update a ticket",
    description="""
Apply a partial update. One UPDATE history row is written per field whose
value actually changes; a body that changes nothing writes nothing.
Requires TICKET:UPDATE.
""",
    responses={
        400: {"description": "Untracked field, invalid value, parent or assignee"},
        404: {"description": "Ticket not found in the workspace"},
    },
)
async def update_ticket(
    workspace_id: str,
    ticket_id: str,
    request: UpdateTicketRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TicketService, Depends(get_ticket_service)],
) -> TicketResponse:
    workspace, ticket_ref = _parse_ids(workspace_id, current_user, ticket_id)

    try:
        ticket = await service.update_ticket(
            current_user,
            workspace,
            ticket_ref,
            request.model_dump(exclude_unset=True),
        )
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to update ticket") from e

    return TicketResponse.from_domain(ticket)


@router.delete(
    "/{ticket_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a ticket",
    description="""
Delete a ticket with its comments and sub-tickets. The ticket's history is
kept and gains a DELETE row. Requires TICKET:DELETE.
""",
)
async def delete_ticket(
    workspace_id: str,
    ticket_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TicketService, Depends(get_ticket_service)],
) -> None:
    workspace, ticket_ref = _parse_ids(workspace_id, current_user, ticket_id)

    try:
        await service.delete_ticket(current_user, workspace, ticket_ref)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to delete ticket") from e


@router.get(
    "/{ticket_id}/subtickets",
    response_model=list[TicketResponse],
    summary="List direct sub-tickets",
)
async def list_subtickets(
    workspace_id: str,
    ticket_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TicketService, Depends(get_ticket_service)],
) -> list[TicketResponse]:
    workspace, ticket_ref = _parse_ids(workspace_id, current_user, ticket_id)

    try:
        children = await service.list_subtickets(current_user, workspace, ticket_ref)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to list sub-tickets") from e

    return [TicketResponse.from_domain(t) for t in children]


@router.get(
    "/{ticket_id}/history",
    response_model=HistoryListResponse,
    summary="Get ticket history",
    description="History rows in insertion order. Requires HISTORY:READ.",
)
async def get_ticket_history(
    workspace_id: str,
    ticket_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[TicketService, Depends(get_ticket_service)],
) -> HistoryListResponse:
    workspace, ticket_ref = _parse_ids(workspace_id, current_user, ticket_id)

    try:
        entries = await service.get_history(current_user, workspace, ticket_ref)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to get ticket history") from e

    return HistoryListResponse(
        entries=[HistoryEntryResponse.from_domain(e) for e in entries],
        count=len(entries),
    )
