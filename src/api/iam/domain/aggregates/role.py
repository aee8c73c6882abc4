"""Role aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from iam.domain.value_objects import ADMIN_ROLE_NAME, RoleId, WorkspaceId
from shared_kernel.authorization.types import PermissionKey
from shared_kernel.exceptions import ValidationError


@dataclass
class Role:
    """A named, workspace-scoped set of permissions.

    Business rules:
    - Role names must be 2-255 characters after trimming
    - Names are unique within a workspace (enforced by repository constraint)
    - A new role must carry at least one permission
    - Grants are a set: granting an existing permission is a no-op
    """

    id: RoleId
    workspace_id: WorkspaceId
    name: str
    description: str = ""
    permissions: frozenset[PermissionKey] = field(default_factory=frozenset)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        self.name = self._validate_name(self.name)
        self.description = self.description or ""
        self.permissions = frozenset(self.permissions)

    @staticmethod
    def _validate_name(name: str) -> str:
        trimmed = (name or "").strip()
        if len(trimmed) < 2 or len(trimmed) > 255:
            raise ValidationError("Role name must be between 2 and 255 characters")
        return trimmed

    @classmethod
    def create(
        cls,
        workspace_id: WorkspaceId,
        name: str,
        description: str,
        permissions: frozenset[PermissionKey] | set[PermissionKey],
    ) -> Role:
        """Factory method for creating a new role.

        Raises:
            ValidationError: If the name is invalid or no permissions are given
        """
        if not permissions:
            raise ValidationError("A role needs at least one permission")
        now = datetime.now(UTC)
        return cls(
            id=RoleId.generate(),
            workspace_id=workspace_id,
            name=name,
            description=description,
            permissions=frozenset(permissions),
            created_at=now,
            updated_at=now,
        )

    @property
    def is_admin(self) -> bool:
        """Whether this is the workspace's administrative role."""
        return self.name == ADMIN_ROLE_NAME

    def allows(self, key: PermissionKey) -> bool:
        """Flat membership test; no wildcard or hierarchy."""
        return key in self.permissions

    def update_details(self, name: str | None = None, description: str | None = None) -> None:
        """Change name and/or description; omitted values are kept."""
        if name is not None:
            self.name = self._validate_name(name)
        if description is not None:
            self.description = description
        self._touch()

    def replace_permissions(self, permissions: frozenset[PermissionKey] | set[PermissionKey]) -> None:
        """Replace the whole grant set."""
        self.permissions = frozenset(permissions)
        self._touch()

    def grant(self, permissions: frozenset[PermissionKey] | set[PermissionKey]) -> frozenset[PermissionKey]:
        """Add permissions and return the ones that were not already granted."""
        added = frozenset(permissions) - self.permissions
        self.permissions = self.permissions | added
        if added:
            self._touch()
        return added

    def revoke(self, permissions: frozenset[PermissionKey] | set[PermissionKey]) -> frozenset[PermissionKey]:
        """Remove permissions and return the ones that were actually granted."""
        removed = self.permissions & frozenset(permissions)
        self.permissions = self.permissions - removed
        if removed:
            self._touch()
        return removed

    def _touch(self) -> None:
        self.updated_at = datetime.now(UTC)
