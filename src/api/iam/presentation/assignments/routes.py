"""User-role assignment routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from iam.application.services import AssignmentService
from iam.dependencies.assignment import get_assignment_service
from iam.dependencies.user import get_current_user
from iam.domain.value_objects import RoleId, UserId
from iam.presentation.assignments.models import (
    AssignmentListResponse,
    AssignmentResponse,
    AssignRolesRequest,
    RemoveAssignmentResponse,
    SetUserRoleRequest,
)
from shared_kernel.authorization.types import CurrentUser
from shared_kernel.exceptions import DeskflowError
from shared_kernel.http_errors import (
    bad_request,
    internal_error,
    parse_workspace_path,
    to_http_exception,
)

router = APIRouter(
    prefix="/workspaces/{workspace_id}/assignments",
    tags=["assignments"],
)


def _parse_user_id(user_id: str) -> UserId:
    try:
        return UserId.from_string(user_id)
    except ValueError as e:
        raise bad_request(f"Invalid user ID: {user_id!r}") from e


def _parse_role_id(role_id: str) -> RoleId:
    try:
        return RoleId.from_string(role_id)
    except ValueError as e:
        raise bad_request(f"Invalid role ID: {role_id!r}") from e


@router.get(
    "",
    response_model=AssignmentListResponse,
    summary="List assignments",
    description="List who holds which role. Requires USER_ROLE:READ.",
)
async def list_assignments(
    workspace_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[AssignmentService, Depends(get_assignment_service)],
) -> AssignmentListResponse:
    workspace = parse_workspace_path(workspace_id, current_user)

    try:
        views = await service.list_assignments(current_user, workspace)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to list assignments") from e

    return AssignmentListResponse(
        assignments=[AssignmentResponse.from_view(v) for v in views],
        count=len(views),
    )


@router.post(
    "",
    response_model=AssignmentListResponse,
    summary="Bulk-assign roles",
    description="""
Pair `user_ids[i]` with `role_ids[i]`. A repeated user keeps the last role
listed. Each listed user's previous role in the workspace is replaced.
Requires USER_ROLE:CREATE; granting or replacing the Admin role requires a
super admin.
""",
    responses={
        400: {"description": "Empty or mismatched lists"},
        403: {"description": "Missing permission or Admin role guard"},
        404: {"description": "Unknown workspace, users or roles"},
        409: {"description": "Concurrent modification; retry"},
    },
)
async def assign_roles(
    workspace_id: str,
    request: AssignRolesRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[AssignmentService, Depends(get_assignment_service)],
) -> AssignmentListResponse:
    workspace = parse_workspace_path(workspace_id, current_user)
    user_ids = [_parse_user_id(u) for u in request.user_ids]
    role_ids = [_parse_role_id(r) for r in request.role_ids]

    try:
        views = await service.assign_roles(current_user, workspace, user_ids, role_ids)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to assign roles") from e

    return AssignmentListResponse(
        assignments=[AssignmentResponse.from_view(v) for v in views],
        count=len(views),
    )


@router.put(
    "/{user_id}",
    response_model=AssignmentResponse,
    summary="Replace a user's role",
    description="Requires USER_ROLE:UPDATE.",
)
async def set_user_role(
    workspace_id: str,
    user_id: str,
    request: SetUserRoleRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[AssignmentService, Depends(get_assignment_service)],
) -> AssignmentResponse:
    workspace = parse_workspace_path(workspace_id, current_user)

    try:
        view = await service.set_user_role(
            current_user,
            workspace,
            _parse_user_id(user_id),
            _parse_role_id(request.role_id),
        )
        return AssignmentResponse.from_view(view)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to set user role") from e


@router.delete(
    "/{user_id}",
    response_model=RemoveAssignmentResponse,
    summary="Remove a user's role",
    description="""
Without `role_id` removes the user's assignment in the workspace; with it,
only an assignment for that role. Requires USER_ROLE:DELETE.
""",
)
async def remove_user_role(
    workspace_id: str,
    user_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[AssignmentService, Depends(get_assignment_service)],
    role_id: Annotated[str | None, Query()] = None,
) -> RemoveAssignmentResponse:
    workspace = parse_workspace_path(workspace_id, current_user)
    user = _parse_user_id(user_id)
    role = _parse_role_id(role_id) if role_id is not None else None

    try:
        removed = await service.remove_user_role(current_user, workspace, user, role)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to remove user role") from e

    return RemoveAssignmentResponse(removed=removed)
