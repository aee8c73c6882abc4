"""Application services for IAM bounded context.

Application services orchestrate domain aggregates, repositories, and
other infrastructure to fulfill use cases. They are the "front door" to
the IAM context.
"""

from iam.application.services.assignment_service import AssignmentService
from iam.application.services.authorization_service import AuthorizationService
from iam.application.services.role_service import RoleService
from iam.application.services.super_admin_bootstrap_service import (
    SuperAdminBootstrapService,
)
from iam.application.services.user_service import UserService
from iam.application.services.workspace_service import WorkspaceService

__all__ = [
    "AssignmentService",
    "AuthorizationService",
    "RoleService",
    "SuperAdminBootstrapService",
    "UserService",
    "WorkspaceService",
]
