"""Request and response models for role API endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from iam.domain.aggregates import Role
from shared_kernel.authorization.types import PermissionKey


class PermissionSpec(BaseModel):
    """An (entity, operation) pair as sent by clients.

    Both halves are matched case-insensitively.
    """

    entity: str = Field(..., min_length=1, examples=["TICKET"])
    operation: str = Field(..., min_length=1, examples=["UPDATE"])

    def to_key(self) -> PermissionKey:
        """Convert to a domain key.

        Raises:
            ValidationError: If either half is not a known tag
        """
        return PermissionKey.of(self.entity, self.operation)


def to_keys(specs: list[PermissionSpec]) -> list[PermissionKey]:
    return [spec.to_key() for spec in specs]


class CreateRoleRequest(BaseModel):
    """Request to create a role in a workspace."""

    name: str = Field(..., min_length=2, max_length=255, examples=["Triager"])
    description: str = Field(default="", max_length=2000)
    permissions: list[PermissionSpec] = Field(..., min_length=1)


class UpdateRoleRequest(BaseModel):
    """Request to update a role.

    Omitted fields are left unchanged. When ``permissions`` is present the
    role's whole grant set is replaced.
    """

    name: str | None = Field(default=None, min_length=2, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    permissions: list[PermissionSpec] | None = Field(default=None, min_length=1)


class RolePermissionsRequest(BaseModel):
    """Permissions to grant to or revoke from a role."""

    permissions: list[PermissionSpec] = Field(..., min_length=1)


class RoleResponse(BaseModel):
    """Response containing role details."""

    id: str
    workspace_id: str
    name: str
    description: str
    permissions: list[str] = Field(
        ..., description="Granted keys in ENTITY:OPERATION form, sorted"
    )
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, role: Role) -> RoleResponse:
        """Convert domain Role aggregate to API response."""
        return cls(
            id=role.id.value,
            workspace_id=role.workspace_id.value,
            name=role.name,
            description=role.description,
            permissions=[str(key) for key in sorted(role.permissions)],
            created_at=role.created_at,
            updated_at=role.updated_at,
        )


class RoleListResponse(BaseModel):
    """Response containing the roles of a workspace."""

    roles: list[RoleResponse]
    count: int
