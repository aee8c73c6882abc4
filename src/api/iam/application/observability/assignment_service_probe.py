"""Protocol for assignment application service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from iam.application.observability.base import StructlogProbe

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AssignmentServiceProbe(Protocol):
    """Domain probe for user-role assignment operations."""

    def roles_assigned(
        self,
        workspace_id: str,
        acting_user_id: str,
        user_count: int,
        replaced_count: int,
    ) -> None:
        """Record a bulk assignment."""
        ...

    def user_role_set(
        self, workspace_id: str, user_id: str, role_id: str, acting_user_id: str
    ) -> None:
        """Record a single role replacement."""
        ...

    def user_role_removed(
        self,
        workspace_id: str,
        user_id: str,
        role_id: str | None,
        removed_count: int,
        acting_user_id: str,
    ) -> None:
        """Record an assignment removal."""
        ...

    def admin_guard_denied(
        self, workspace_id: str, acting_user_id: str, operation: str
    ) -> None:
        """Record a non-super-admin attempt to touch the Admin role."""
        ...

    def concurrent_modification(self, operation: str, workspace_id: str) -> None:
        """Record a serialization failure that aborted an assignment write."""
        ...

    def with_context(self, context: ObservationContext) -> AssignmentServiceProbe:
        """Return a new probe with additional context."""
        ...


class DefaultAssignmentServiceProbe(StructlogProbe):
    """Default implementation of AssignmentServiceProbe using structlog."""

    def roles_assigned(
        self,
        workspace_id: str,
        acting_user_id: str,
        user_count: int,
        replaced_count: int,
    ) -> None:
        self._emit(
            "info",
            "roles_assigned",
            workspace_id=workspace_id,
            acting_user_id=acting_user_id,
            user_count=user_count,
            replaced_count=replaced_count,
        )

    def user_role_set(
        self, workspace_id: str, user_id: str, role_id: str, acting_user_id: str
    ) -> None:
        self._emit(
            "info",
            "user_role_set",
            workspace_id=workspace_id,
            user_id=user_id,
            role_id=role_id,
            acting_user_id=acting_user_id,
        )

    def user_role_removed(
        self,
        workspace_id: str,
        user_id: str,
        role_id: str | None,
        removed_count: int,
        acting_user_id: str,
    ) -> None:
        self._emit(
            "info",
            "user_role_removed",
            workspace_id=workspace_id,
            user_id=user_id,
            role_id=role_id,
            removed_count=removed_count,
            acting_user_id=acting_user_id,
        )

    def admin_guard_denied(
        self, workspace_id: str, acting_user_id: str, operation: str
    ) -> None:
        self._emit(
            "warning",
            "admin_role_guard_denied",
            workspace_id=workspace_id,
            acting_user_id=acting_user_id,
            operation=operation,
        )

    def concurrent_modification(self, operation: str, workspace_id: str) -> None:
        self._emit(
            "warning",
            "assignment_concurrent_modification",
            operation=operation,
            workspace_id=workspace_id,
        )
