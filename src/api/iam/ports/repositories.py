"""Repository protocols (ports) for IAM bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates. Implementations never open transactions themselves; the
calling service owns the transaction boundary.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from iam.domain.aggregates import Assignment, Permission, Role, User, Workspace
from iam.domain.value_objects import PermissionId, RoleId, UserId, WorkspaceId
from shared_kernel.authorization.types import PermissionKey


@runtime_checkable
class IPermissionRepository(Protocol):
    """Registry of (entity, operation) permissions.

    Permissions are global and append-only; there is no delete operation.
    """

    async def ensure(self, key: PermissionKey) -> Permission:
        """Return the permission for a key, creating it if absent.

        Idempotent and safe under concurrent calls for the same key.

        Args:
            key: The (entity, operation) pair

        Returns:
            The registered Permission
        """
        ...

    async def ensure_many(self, keys: Iterable[PermissionKey]) -> list[Permission]:
        """Ensure every key exists; duplicates are collapsed.

        Returns:
            Permissions in first-seen key order
        """
        ...

    async def find_by_keys(self, keys: Iterable[PermissionKey]) -> list[Permission]:
        """Return the registered permissions among the given keys.

        Unregistered keys are silently absent from the result.
        """
        ...


@runtime_checkable
class IRoleRepository(Protocol):
    """Repository for Role aggregate persistence.

    Roles are returned hydrated with their permission keys.
    """

    async def save(self, role: Role) -> None:
        """Insert or update the role row (name, description, timestamps).

        Permission links are managed separately through ``link_permissions``,
        ``unlink_permissions`` and ``clear_permissions``.

        Raises:
            IntegrityError: If the name already exists in the workspace
        """
        ...

    async def get_by_id(self, workspace_id: WorkspaceId, role_id: RoleId) -> Role | None:
        """Retrieve a role scoped to a workspace.

        Returns:
            The Role, or None if it does not exist in that workspace
        """
        ...

    async def get_by_name(self, workspace_id: WorkspaceId, name: str) -> Role | None:
        """Retrieve a role by exact name within a workspace."""
        ...

    async def list_by_workspace(self, workspace_id: WorkspaceId) -> list[Role]:
        """List all roles in a workspace ordered by name."""
        ...

    async def list_by_ids(
        self, workspace_id: WorkspaceId, role_ids: Iterable[RoleId]
    ) -> list[Role]:
        """Return the roles among ``role_ids`` that belong to the workspace."""
        ...

    async def get_permission_keys(self, role_id: RoleId) -> frozenset[PermissionKey]:
        """Return the permission keys currently linked to a role."""
        ...

    async def link_permissions(
        self, role_id: RoleId, permission_ids: Iterable[PermissionId]
    ) -> None:
        """Link permissions to a role; existing links are left untouched."""
        ...

    async def unlink_permissions(
        self, role_id: RoleId, permission_ids: Iterable[PermissionId]
    ) -> int:
        """Remove the given links and return how many were removed."""
        ...

    async def clear_permissions(self, role_id: RoleId) -> int:
        """Remove every permission link of a role and return the count."""
        ...

    async def delete(self, role_id: RoleId) -> bool:
        """Delete a role together with its permission links.

        Returns:
            True if a role was deleted, False if it did not exist
        """
        ...


@runtime_checkable
class IAssignmentRepository(Protocol):
    """Repository for user-role assignments.

    The storage enforces at most one assignment per (user, workspace).
    """

    async def get_for_user(
        self, user_id: UserId, workspace_id: WorkspaceId
    ) -> Assignment | None:
        """Return the live assignment of a user in a workspace, if any."""
        ...

    async def list_by_workspace(self, workspace_id: WorkspaceId) -> list[Assignment]:
        """List assignments in a workspace, oldest first."""
        ...

    async def add_many(self, assignments: Iterable[Assignment]) -> None:
        """Insert assignments.

        Raises:
            IntegrityError: If a user already holds a role in the workspace
        """
        ...

    async def delete_for_users(
        self, workspace_id: WorkspaceId, user_ids: Iterable[UserId]
    ) -> int:
        """Delete every assignment of the given users in a workspace."""
        ...

    async def delete(
        self,
        workspace_id: WorkspaceId,
        user_id: UserId,
        role_id: RoleId | None = None,
    ) -> int:
        """Delete a user's assignment, optionally only if it is for ``role_id``.

        Returns:
            Number of assignments removed
        """
        ...

    async def exists_for_role(self, role_id: RoleId) -> bool:
        """Check whether any user is assigned the role."""
        ...


@runtime_checkable
class IWorkspaceRepository(Protocol):
    """Repository for Workspace aggregate persistence."""

    async def save(self, workspace: Workspace) -> None:
        """Insert or update a workspace.

        Raises:
            IntegrityError: If the name clashes case-insensitively
        """
        ...

    async def get_by_id(self, workspace_id: WorkspaceId) -> Workspace | None:
        """Retrieve a workspace by id."""
        ...

    async def get_by_name(self, name: str) -> Workspace | None:
        """Retrieve a workspace by name, compared case-insensitively."""
        ...

    async def list_all(self) -> list[Workspace]:
        """List every workspace, newest first."""
        ...

    async def list_for_member(self, user_id: UserId) -> list[Workspace]:
        """List workspaces in which the user holds an assignment, newest first."""
        ...


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence."""

    async def save(self, user: User) -> None:
        """Insert or update a user."""
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by id."""
        ...

    async def get_by_username(self, username: str) -> User | None:
        """Retrieve a user by username."""
        ...

    async def list_by_ids(self, user_ids: Iterable[UserId]) -> list[User]:
        """Return the users among ``user_ids`` that exist."""
        ...

    async def list_users(self, include_super_admins: bool = False) -> list[User]:
        """List users ordered by username."""
        ...
