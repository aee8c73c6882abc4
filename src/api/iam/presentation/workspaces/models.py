"""Request and response models for workspace API endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from iam.domain.aggregates import Workspace
from shared_kernel.authorization.types import PermissionKey


class CreateWorkspaceRequest(BaseModel):
    """Request to provision a workspace.

    Attributes:
        name: Workspace name (1-255 characters, unique case-insensitively)
        admin_id: User who is assigned the Admin role
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Workspace name",
        examples=["Support", "Platform Team"],
    )
    admin_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="ID of the user who becomes the workspace Admin",
    )


class WorkspaceResponse(BaseModel):
    """Response containing workspace details."""

    id: str = Field(..., description="Workspace ID (ULID format)")
    name: str = Field(..., description="Workspace name")
    created_by: str = Field(..., description="Super admin who created the workspace")
    admin_id: str = Field(..., description="User assigned the Admin role at creation")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_domain(cls, workspace: Workspace) -> WorkspaceResponse:
        """Convert domain Workspace aggregate to API response."""
        return cls(
            id=workspace.id.value,
            name=workspace.name,
            created_by=workspace.created_by.value,
            admin_id=workspace.admin_id.value,
            created_at=workspace.created_at,
            updated_at=workspace.updated_at,
        )


class WorkspaceListResponse(BaseModel):
    """Response containing list of workspaces.

    Attributes:
        workspaces: List of workspace details
        count: Number of workspaces returned
    """

    workspaces: list[WorkspaceResponse] = Field(
        ..., description="List of workspace details"
    )
    count: int = Field(..., description="Number of workspaces returned")


class PermissionCheckResponse(BaseModel):
    """Result of checking one permission for the caller."""

    workspace_id: str
    permission: str = Field(..., examples=["TICKET:UPDATE"])
    allowed: bool


class EffectivePermissionsResponse(BaseModel):
    """The caller's permission keys in a workspace."""

    workspace_id: str
    is_super_admin: bool
    permissions: list[str] = Field(
        ..., description="Granted keys in ENTITY:OPERATION form, sorted"
    )

    @classmethod
    def from_keys(
        cls, workspace_id: str, is_super_admin: bool, keys: frozenset[PermissionKey]
    ) -> EffectivePermissionsResponse:
        return cls(
            workspace_id=workspace_id,
            is_super_admin=is_super_admin,
            permissions=[str(key) for key in sorted(keys)],
        )
