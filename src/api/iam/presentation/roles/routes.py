"""Workspace role routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from iam.application.services import RoleService
from iam.dependencies.role import get_role_service
from iam.dependencies.user import get_current_user
from iam.domain.value_objects import RoleId, WorkspaceId
from iam.presentation.roles.models import (
    CreateRoleRequest,
    RoleListResponse,
    RolePermissionsRequest,
    RoleResponse,
    UpdateRoleRequest,
    to_keys,
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
    prefix="/workspaces/{workspace_id}/roles",
    tags=["roles"],
)


def _parse_ids(
    workspace_id: str, current_user: CurrentUser, role_id: str | None = None
) -> tuple[WorkspaceId, RoleId | None]:
    workspace = parse_workspace_path(workspace_id, current_user)
    try:
        role = RoleId.from_string(role_id) if role_id is not None else None
    except ValueError as e:
        raise bad_request("Invalid role ID format") from e
    return workspace, role


@router.get(
    "",
    response_model=RoleListResponse,
    summary="List roles",
    description="List the workspace's roles ordered by name. Requires ROLE:READ.",
)
async def list_roles(
    workspace_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[RoleService, Depends(get_role_service)],
) -> RoleListResponse:
    workspace, _ = _parse_ids(workspace_id, current_user)

    try:
        roles = await service.list_roles(current_user, workspace)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to list roles") from e

    return RoleListResponse(
        roles=[RoleResponse.from_domain(role) for role in roles],
        count=len(roles),
    )


@router.post(
    "",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a role",
    responses={
        400: {"description": "Invalid name or permission tag"},
        403: {"description": "Missing ROLE:CREATE"},
        409: {"description": "Role name already exists in workspace"},
    },
)
async def create_role(
    workspace_id: str,
    request: CreateRoleRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[RoleService, Depends(get_role_service)],
) -> RoleResponse:
    workspace, _ = _parse_ids(workspace_id, current_user)

    try:
        role = await service.create_role(
            current_user,
            workspace,
            name=request.name,
            description=request.description,
            permissions=to_keys(request.permissions),
        )
        return RoleResponse.from_domain(role)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to create role") from e


@router.put(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Update a role",
    description="""
Update the role's name and description. When `permissions` is given the
role's whole grant set is replaced atomically. Requires ROLE:UPDATE.
""",
    responses={
        404: {"description": "Role not found in workspace"},
        409: {"description": "Name taken, or concurrent modification"},
    },
)
async def update_role(
    workspace_id: str,
    role_id: str,
    request: UpdateRoleRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[RoleService, Depends(get_role_service)],
) -> RoleResponse:
    workspace, role_id_obj = _parse_ids(workspace_id, current_user, role_id)

    try:
        role = await service.update_role(
            current_user,
            workspace,
            role_id_obj,
            name=request.name,
            description=request.description,
            permissions=(
                to_keys(request.permissions)
                if request.permissions is not None
                else None
            ),
        )
        return RoleResponse.from_domain(role)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to update role") from e


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a role",
    responses={
        404: {"description": "Role not found in workspace"},
        409: {"description": "Role is still assigned to users"},
    },
)
async def delete_role(
    workspace_id: str,
    role_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[RoleService, Depends(get_role_service)],
) -> None:
    workspace, role_id_obj = _parse_ids(workspace_id, current_user, role_id)

    try:
        await service.delete_role(current_user, workspace, role_id_obj)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to delete role") from e


@router.post(
    "/{role_id}/permissions",
    response_model=RoleResponse,
    summary="Grant permissions to a role",
    description="Add permissions, keeping existing grants. Requires ROLE:UPDATE.",
)
async def grant_permissions(
    workspace_id: str,
    role_id: str,
    request: RolePermissionsRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[RoleService, Depends(get_role_service)],
) -> RoleResponse:
    workspace, role_id_obj = _parse_ids(workspace_id, current_user, role_id)

    try:
        role = await service.grant_permissions(
            current_user, workspace, role_id_obj, to_keys(request.permissions)
        )
        return RoleResponse.from_domain(role)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to grant permissions") from e


@router.delete(
    "/{role_id}/permissions",
    response_model=RoleResponse,
    summary="Revoke permissions from a role",
    responses={404: {"description": "None of the permissions exist"}},
)
async def revoke_permissions(
    workspace_id: str,
    role_id: str,
    request: RolePermissionsRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[RoleService, Depends(get_role_service)],
) -> RoleResponse:
    workspace, role_id_obj = _parse_ids(workspace_id, current_user, role_id)

    try:
        role = await service.revoke_permissions(
            current_user, workspace, role_id_obj, to_keys(request.permissions)
        )
        return RoleResponse.from_domain(role)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to revoke permissions") from e
