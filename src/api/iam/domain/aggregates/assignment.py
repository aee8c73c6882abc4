"""Role assignment and permission records for IAM context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from iam.domain.value_objects import PermissionId, RoleId, UserId, WorkspaceId
from shared_kernel.authorization.types import PermissionKey


@dataclass(frozen=True)
class Assignment:
    """Binding of a user to exactly one role within a workspace.

    At most one assignment exists per (user, workspace); replacing a role
    always deletes the old binding before inserting the new one.
    """

    user_id: UserId
    workspace_id: WorkspaceId
    role_id: RoleId
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class Permission:
    """A registered (entity, operation) pair.

    Permissions are global and immutable; the key is the natural identity.
    """

    id: PermissionId
    key: PermissionKey
