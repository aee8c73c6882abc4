"""Domain-Oriented Observability for IAM infrastructure layer."""

from iam.infrastructure.observability.repository_probe import (
    AssignmentRepositoryProbe,
    DefaultAssignmentRepositoryProbe,
    DefaultPermissionRepositoryProbe,
    DefaultRoleRepositoryProbe,
    DefaultUserRepositoryProbe,
    DefaultWorkspaceRepositoryProbe,
    PermissionRepositoryProbe,
    RoleRepositoryProbe,
    UserRepositoryProbe,
    WorkspaceRepositoryProbe,
)

__all__ = [
    "AssignmentRepositoryProbe",
    "DefaultAssignmentRepositoryProbe",
    "DefaultPermissionRepositoryProbe",
    "DefaultRoleRepositoryProbe",
    "DefaultUserRepositoryProbe",
    "DefaultWorkspaceRepositoryProbe",
    "PermissionRepositoryProbe",
    "RoleRepositoryProbe",
    "UserRepositoryProbe",
    "WorkspaceRepositoryProbe",
]
