"""Workspace provisioning and permission introspection routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from iam.application.services import AuthorizationService, WorkspaceService
from iam.dependencies.authorization import get_authorization_service
from iam.dependencies.user import get_current_user
from iam.dependencies.workspace import get_workspace_service
from iam.domain.value_objects import UserId
from iam.presentation.workspaces.models import (
    CreateWorkspaceRequest,
    EffectivePermissionsResponse,
    PermissionCheckResponse,
    WorkspaceListResponse,
    WorkspaceResponse,
)
from shared_kernel.authorization.types import (
    CurrentUser,
    EntityType,
    Operation,
    PermissionKey,
)
from shared_kernel.exceptions import DeskflowError
from shared_kernel.http_errors import (
    bad_request,
    internal_error,
    parse_workspace_path,
    to_http_exception,
)

router = APIRouter(
    prefix="/workspaces",
    tags=["workspaces"],
)


@router.post(
    "",
    response_model=WorkspaceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Provision a workspace",
    description="""
Create a workspace together with its default roles (Admin, Member, Viewer)
and assign the given user to Admin. Restricted to super admins.

Names are unique case-insensitively.
""",
    responses={
        201: {"description": "Workspace provisioned"},
        400: {"description": "Invalid name"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not a super admin"},
        404: {"description": "Admin user does not exist"},
        409: {"description": "Workspace name already exists"},
        500: {"description": "Internal server error"},
    },
)
async def create_workspace(
    request: CreateWorkspaceRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[WorkspaceService, Depends(get_workspace_service)],
) -> WorkspaceResponse:
    """Provision a new workspace."""
    try:
        admin_id = UserId.from_string(request.admin_id)
    except ValueError as e:
        raise bad_request("Invalid admin user ID") from e

    try:
        workspace = await service.create_workspace(
            current_user=current_user,
            name=request.name,
            admin_id=admin_id,
        )
        return WorkspaceResponse.from_domain(workspace)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to create workspace") from e


@router.get(
    "",
    response_model=WorkspaceListResponse,
    summary="List workspaces",
    description="""
Super admins see every workspace. Other users see the workspaces in which
they hold a role.
""",
)
async def list_workspaces(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[WorkspaceService, Depends(get_workspace_service)],
) -> WorkspaceListResponse:
    """List workspaces visible to the caller."""
    try:
        workspaces = await service.list_workspaces(current_user)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to list workspaces") from e

    return WorkspaceListResponse(
        workspaces=[WorkspaceResponse.from_domain(w) for w in workspaces],
        count=len(workspaces),
    )


@router.get(
    "/{workspace_id}",
    response_model=WorkspaceResponse,
    summary="Get workspace by ID",
    responses={
        403: {"description": "Caller is not a member of the workspace"},
        404: {"description": "Workspace not found"},
    },
)
async def get_workspace(
    workspace_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[WorkspaceService, Depends(get_workspace_service)],
) -> WorkspaceResponse:
    """Get workspace by ID."""
    workspace_id_obj = parse_workspace_path(workspace_id, current_user)

    try:
        workspace = await service.get_workspace(current_user, workspace_id_obj)
        return WorkspaceResponse.from_domain(workspace)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to retrieve workspace") from e


@router.get(
    "/{workspace_id}/permissions",
    response_model=EffectivePermissionsResponse,
    summary="List the caller's permissions in a workspace",
)
async def get_effective_permissions(
    workspace_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> EffectivePermissionsResponse:
    """Return the permission keys granted by the caller's role."""
    workspace_id_obj = parse_workspace_path(workspace_id, current_user)

    try:
        keys = await authz.effective_permissions(current_user.user_id, workspace_id_obj)
    except Exception as e:
        raise internal_error("Failed to resolve permissions") from e

    return EffectivePermissionsResponse.from_keys(
        workspace_id=workspace_id_obj.value,
        is_super_admin=current_user.is_super_admin,
        keys=keys,
    )


@router.get(
    "/{workspace_id}/permissions/check",
    response_model=PermissionCheckResponse,
    summary="Check a single permission for the caller",
)
async def check_permission(
    workspace_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    entity: Annotated[str, Query(description="Entity type, e.g. TICKET")],
    operation: Annotated[str, Query(description="Operation, e.g. UPDATE")],
) -> PermissionCheckResponse:
    """Answer whether the caller may perform ``operation`` on ``entity``."""
    workspace_id_obj = parse_workspace_path(workspace_id, current_user)

    try:
        key = PermissionKey(EntityType.parse(entity), Operation.parse(operation))
        allowed = await authz.authorize(
            current_user, workspace_id_obj, key.entity, key.operation
        )
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to check permission") from e

    return PermissionCheckResponse(
        workspace_id=workspace_id_obj.value,
        permission=str(key),
        allowed=allowed,
    )
