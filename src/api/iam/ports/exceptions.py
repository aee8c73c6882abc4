"""Domain exceptions for IAM bounded context.

These exceptions represent domain-level errors raised by IAM services.
Each derives from the shared error taxonomy so the presentation layer
can map it to a status code without knowing the concrete class.
"""

from __future__ import annotations

from shared_kernel.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    UnexpectedError,
)


class DuplicateWorkspaceNameError(ConflictError):
    """Raised when a workspace name is already taken (case-insensitively)."""

    pass


class DuplicateRoleNameError(ConflictError):
    """Raised when a role name already exists in the workspace."""

    pass


class RoleInUseError(ConflictError):
    """Raised when deleting a role that is still assigned to users."""

    pass


class ConcurrentModificationError(ConflictError):
    """Raised when a concurrent transaction forced this one to abort.

    The caller may retry the whole request.
    """

    pass


class WorkspaceNotFoundError(NotFoundError):
    """Raised when a workspace does not exist."""

    pass


class RoleNotFoundError(NotFoundError):
    """Raised when a role does not exist in the workspace."""

    pass


class UserNotFoundError(NotFoundError):
    """Raised when one or more referenced users do not exist.

    ``details["missing_user_ids"]`` lists them for bulk operations.
    """

    pass


class InvalidRoleAssignmentError(NotFoundError):
    """Raised when bulk assignment references roles outside the workspace.

    ``details["invalid_role_ids"]`` lists them.
    """

    pass


class PermissionNotFoundError(NotFoundError):
    """Raised when none of the permissions to revoke exist in the registry."""

    pass


class SuperAdminRequiredError(AuthorizationError):
    """Raised when an operation is reserved for super admins.

    Creating workspaces and granting, replacing or removing the Admin role
    cannot be authorized by a workspace-level grant.
    """

    pass


class WorkspaceProvisioningError(UnexpectedError):
    """Raised when workspace provisioning fails for a non-domain reason."""

    pass


class DuplicateUserError(ConflictError):
    """Raised when creating a user whose id or username is already taken."""

    pass
