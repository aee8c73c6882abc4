"""Domain probes for IAM repository operations.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events related to user, workspace, role, permission and
assignment persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations."""

    def user_saved(self, user_id: str, username: str) -> None:
        """Record that a user was successfully saved."""
        ...

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        ...

    def user_not_found(self, user_id: str) -> None:
        """Record that a user was not found."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class WorkspaceRepositoryProbe(Protocol):
    """Domain probe for workspace repository operations."""

    def workspace_saved(self, workspace_id: str, name: str) -> None:
        """Record that a workspace was saved."""
        ...

    def workspace_not_found(self, workspace_id: str) -> None:
        """Record that a workspace was not found."""
        ...

    def with_context(self, context: ObservationContext) -> WorkspaceRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class RoleRepositoryProbe(Protocol):
    """Domain probe for role and permission-link persistence."""

    def role_saved(self, role_id: str, workspace_id: str, name: str) -> None:
        """Record that a role row was saved."""
        ...

    def role_deleted(self, role_id: str) -> None:
        """Record that a role was deleted."""
        ...

    def permissions_linked(self, role_id: str, count: int) -> None:
        """Record that permissions were linked to a role."""
        ...

    def permissions_unlinked(self, role_id: str, count: int) -> None:
        """Record that permission links were removed from a role."""
        ...

    def with_context(self, context: ObservationContext) -> RoleRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class PermissionRepositoryProbe(Protocol):
    """Domain probe for the permission registry."""

    def permission_registered(self, entity: str, operation: str) -> None:
        """Record that a permission was added to the registry."""
        ...

    def with_context(self, context: ObservationContext) -> PermissionRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class AssignmentRepositoryProbe(Protocol):
    """Domain probe for user-role assignment persistence."""

    def assignments_added(self, workspace_id: str, count: int) -> None:
        """Record that assignments were inserted."""
        ...

    def assignments_deleted(self, workspace_id: str, count: int) -> None:
        """Record that assignments were deleted."""
        ...

    def with_context(self, context: ObservationContext) -> AssignmentRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class _StructlogProbe:
    """Shared structlog plumbing for the default repository probes."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext):
        """Create a new probe of the same type with observation context bound."""
        return type(self)(logger=self._logger, context=context)


class DefaultUserRepositoryProbe(_StructlogProbe):
    """Default implementation of UserRepositoryProbe using structlog."""

    def user_saved(self, user_id: str, username: str) -> None:
        self._logger.info(
            "user_saved",
            user_id=user_id,
            username=username,
            **self._get_context_kwargs(),
        )

    def user_retrieved(self, user_id: str) -> None:
        self._logger.debug(
            "user_retrieved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: str) -> None:
        self._logger.debug(
            "user_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )


class DefaultWorkspaceRepositoryProbe(_StructlogProbe):
    """Default implementation of WorkspaceRepositoryProbe using structlog."""

    def workspace_saved(self, workspace_id: str, name: str) -> None:
        self._logger.info(
            "workspace_saved",
            workspace_id=workspace_id,
            name=name,
            **self._get_context_kwargs(),
        )

    def workspace_not_found(self, workspace_id: str) -> None:
        self._logger.debug(
            "workspace_not_found",
            workspace_id=workspace_id,
            **self._get_context_kwargs(),
        )


class DefaultRoleRepositoryProbe(_StructlogProbe):
    """Default implementation of RoleRepositoryProbe using structlog."""

    def role_saved(self, role_id: str, workspace_id: str, name: str) -> None:
        self._logger.info(
            "role_saved",
            role_id=role_id,
            workspace_id=workspace_id,
            name=name,
            **self._get_context_kwargs(),
        )

    def role_deleted(self, role_id: str) -> None:
        self._logger.info(
            "role_deleted",
            role_id=role_id,
            **self._get_context_kwargs(),
        )

    def permissions_linked(self, role_id: str, count: int) -> None:
        self._logger.debug(
            "role_permissions_linked",
            role_id=role_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def permissions_unlinked(self, role_id: str, count: int) -> None:
        self._logger.debug(
            "role_permissions_unlinked",
            role_id=role_id,
            count=count,
            **self._get_context_kwargs(),
        )


class DefaultPermissionRepositoryProbe(_StructlogProbe):
    """Default implementation of PermissionRepositoryProbe using structlog."""

    def permission_registered(self, entity: str, operation: str) -> None:
        self._logger.info(
            "permission_registered",
            entity=entity,
            operation=operation,
            **self._get_context_kwargs(),
        )


class DefaultAssignmentRepositoryProbe(_StructlogProbe):
    """Default implementation of AssignmentRepositoryProbe using structlog."""

    def assignments_added(self, workspace_id: str, count: int) -> None:
        self._logger.debug(
            "assignments_added",
            workspace_id=workspace_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def assignments_deleted(self, workspace_id: str, count: int) -> None:
        self._logger.debug(
            "assignments_deleted",
            workspace_id=workspace_id,
            count=count,
            **self._get_context_kwargs(),
        )
