"""Comment routes.

Comments are created and listed under their ticket, and edited or deleted
by id within the workspace.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from shared_kernel.authorization.types import CurrentUser
from shared_kernel.exceptions import DeskflowError
from shared_kernel.http_errors import (
    bad_request,
    internal_error,
    parse_workspace_path,
    to_http_exception,
)
from tickets.application.services import CommentService
from tickets.dependencies.comment import get_comment_service
from tickets.dependencies.user import get_current_user
from tickets.domain.value_objects import CommentId, TicketId
from tickets.presentation.comments.models import (
    CommentListResponse,
    CommentResponse,
    CommentThreadResponse,
    CreateCommentRequest,
    UpdateCommentRequest,
)

router = APIRouter(
    prefix="/workspaces/{workspace_id}",
    tags=["comments"],
)


def _parse_ticket_id(ticket_id: str) -> TicketId:
    try:
        return TicketId.from_string(ticket_id)
    except ValueError as e:
        raise bad_request("Invalid ticket ID format") from e


def _parse_comment_id(comment_id: str) -> CommentId:
    try:
        return CommentId.from_string(comment_id)
    except ValueError as e:
        raise bad_request("Invalid comment ID format") from e


@router.post(
    "/tickets/{ticket_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a ticket",
    description="Requires COMMENT:CREATE. Replies nest one level deep.",
)
async def create_comment(
    workspace_id: str,
    ticket_id: str,
    request: CreateCommentRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CommentService, Depends(get_comment_service)],
) -> CommentResponse:
    workspace = parse_workspace_path(workspace_id, current_user)
    ticket = _parse_ticket_id(ticket_id)
    parent = _parse_comment_id(request.parent_id) if request.parent_id else None

    try:
        comment = await service.add_comment(
            current_user, workspace, ticket, request.message, parent_id=parent
        )
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to create comment") from e

    return CommentResponse.from_domain(comment)


@router.get(
    "/tickets/{ticket_id}/comments",
    response_model=CommentListResponse,
    summary="List a ticket's comments",
    description="Top-level comments with their replies, oldest first. Requires COMMENT:READ.",
)
async def list_comments(
    workspace_id: str,
    ticket_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CommentService, Depends(get_comment_service)],
) -> CommentListResponse:
    workspace = parse_workspace_path(workspace_id, current_user)
    ticket = _parse_ticket_id(ticket_id)

    try:
        threads = await service.list_comments(current_user, workspace, ticket)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to list comments") from e

    return CommentListResponse(
        comments=[CommentThreadResponse.from_thread(t) for t in threads],
        count=len(threads),
    )


@router.patch(
    "/comments/{comment_id}",
    response_model=CommentResponse,
    summary="Edit a comment",
    description="Requires COMMENT:UPDATE and authorship (or super admin).",
)
async def update_comment(
    workspace_id: str,
    comment_id: str,
    request: UpdateCommentRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CommentService, Depends(get_comment_service)],
) -> CommentResponse:
    workspace = parse_workspace_path(workspace_id, current_user)
    comment_ref = _parse_comment_id(comment_id)

    try:
        comment = await service.update_comment(
            current_user, workspace, comment_ref, request.message
        )
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to update comment") from e

    return CommentResponse.from_domain(comment)


@router.delete(
    "/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
    description="Deletes the comment and its replies. Requires COMMENT:DELETE and authorship (or super admin).",
)
async def delete_comment(
    workspace_id: str,
    comment_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[CommentService, Depends(get_comment_service)],
) -> None:
    workspace = parse_workspace_path(workspace_id, current_user)
    comment_ref = _parse_comment_id(comment_id)

    try:
        await service.delete_comment(current_user, workspace, comment_ref)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to delete comment") from e
