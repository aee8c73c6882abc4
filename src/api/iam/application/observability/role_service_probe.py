"""Protocol for role application service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from iam.application.observability.base import StructlogProbe

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RoleServiceProbe(Protocol):
    """Domain probe for role management operations."""

    def role_created(
        self, role_id: str, workspace_id: str, name: str, permission_count: int
    ) -> None:
        """Record role creation."""
        ...

    def role_updated(
        self,
        role_id: str,
        workspace_id: str,
        permissions_replaced: bool,
        permission_count: int,
    ) -> None:
        """Record role update."""
        ...

    def role_deleted(self, role_id: str, workspace_id: str) -> None:
        """Record role deletion."""
        ...

    def permissions_granted(
        self, role_id: str, workspace_id: str, added: list[str]
    ) -> None:
        """Record incremental grant."""
        ...

    def permissions_revoked(
        self, role_id: str, workspace_id: str, removed: list[str]
    ) -> None:
        """Record revocation."""
        ...

    def roles_listed(self, workspace_id: str, count: int) -> None:
        """Record roles listed."""
        ...

    def concurrent_modification(self, operation: str, workspace_id: str) -> None:
        """Record a serialization failure that aborted a role write."""
        ...

    def with_context(self, context: ObservationContext) -> RoleServiceProbe:
        """Return a new probe with additional context."""
        ...


class DefaultRoleServiceProbe(StructlogProbe):
    """Default implementation of RoleServiceProbe using structlog."""

    def role_created(
        self, role_id: str, workspace_id: str, name: str, permission_count: int
    ) -> None:
        self._emit(
            "info",
            "role_created",
            role_id=role_id,
            workspace_id=workspace_id,
            name=name,
            permission_count=permission_count,
        )

    def role_updated(
        self,
        role_id: str,
        workspace_id: str,
        permissions_replaced: bool,
        permission_count: int,
    ) -> None:
        self._emit(
            "info",
            "role_updated",
            role_id=role_id,
            workspace_id=workspace_id,
            permissions_replaced=permissions_replaced,
            permission_count=permission_count,
        )

    def role_deleted(self, role_id: str, workspace_id: str) -> None:
        self._emit("info", "role_deleted", role_id=role_id, workspace_id=workspace_id)

    def permissions_granted(
        self, role_id: str, workspace_id: str, added: list[str]
    ) -> None:
        self._emit(
            "info",
            "role_permissions_granted",
            role_id=role_id,
            workspace_id=workspace_id,
            added=added,
        )

    def permissions_revoked(
        self, role_id: str, workspace_id: str, removed: list[str]
    ) -> None:
        self._emit(
            "info",
            "role_permissions_revoked",
            role_id=role_id,
            workspace_id=workspace_id,
            removed=removed,
        )

    def roles_listed(self, workspace_id: str, count: int) -> None:
        self._emit("debug", "roles_listed", workspace_id=workspace_id, count=count)

    def concurrent_modification(self, operation: str, workspace_id: str) -> None:
        self._emit(
            "warning",
            "role_concurrent_modification",
            operation=operation,
            workspace_id=workspace_id,
        )
