"""Domain-Oriented Observability for IAM application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from iam.application.observability.assignment_service_probe import (
    AssignmentServiceProbe,
    DefaultAssignmentServiceProbe,
)
from iam.application.observability.authorization_probe import (
    AuthorizationProbe,
    DefaultAuthorizationProbe,
)
from iam.application.observability.role_service_probe import (
    DefaultRoleServiceProbe,
    RoleServiceProbe,
)
from iam.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from iam.application.observability.workspace_service_probe import (
    DefaultWorkspaceServiceProbe,
    WorkspaceServiceProbe,
)

__all__ = [
    "AssignmentServiceProbe",
    "DefaultAssignmentServiceProbe",
    "AuthorizationProbe",
    "DefaultAuthorizationProbe",
    "RoleServiceProbe",
    "DefaultRoleServiceProbe",
    "UserServiceProbe",
    "DefaultUserServiceProbe",
    "WorkspaceServiceProbe",
    "DefaultWorkspaceServiceProbe",
]
