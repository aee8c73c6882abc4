"""SQLAlchemy ORM models for IAM bounded context.

These models map to database tables and are used by repository implementations.
"""

from iam.infrastructure.models.assignment import (
    ASSIGNMENT_UNIQUE_CONSTRAINT,
    UserRoleModel,
)
from iam.infrastructure.models.permission import (
    PERMISSION_KEY_CONSTRAINT,
    PermissionModel,
)
from iam.infrastructure.models.role import (
    ROLE_NAME_CONSTRAINT,
    RoleModel,
    RolePermissionModel,
)
from iam.infrastructure.models.user import UserModel
from iam.infrastructure.models.workspace import WORKSPACE_NAME_INDEX, WorkspaceModel

__all__ = [
    "ASSIGNMENT_UNIQUE_CONSTRAINT",
    "PERMISSION_KEY_CONSTRAINT",
    "ROLE_NAME_CONSTRAINT",
    "WORKSPACE_NAME_INDEX",
    "PermissionModel",
    "RoleModel",
    "RolePermissionModel",
    "UserModel",
    "UserRoleModel",
    "WorkspaceModel",
]
