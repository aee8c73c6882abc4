"""Protocol for workspace application service observability.

Defines the interface for domain probes that capture application-level
domain events for workspace provisioning and listing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from iam.application.observability.base import StructlogProbe

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class WorkspaceServiceProbe(Protocol):
    """Domain probe for workspace application service operations.

    Records domain-significant events related to workspace operations.
    """

    def workspace_provisioned(
        self,
        workspace_id: str,
        name: str,
        admin_id: str,
        creator_id: str,
        role_count: int,
        permission_count: int,
    ) -> None:
        """Record that a workspace and its default roles were created."""
        ...

    def workspace_provisioning_failed(
        self,
        name: str,
        error: str,
    ) -> None:
        """Record failed workspace provisioning."""
        ...

    def workspace_retrieved(
        self,
        workspace_id: str,
        user_id: str,
    ) -> None:
        """Record workspace retrieval."""
        ...

    def workspaces_listed(
        self,
        user_id: str,
        count: int,
    ) -> None:
        """Record workspaces listed."""
        ...

    def with_context(self, context: ObservationContext) -> WorkspaceServiceProbe:
        """Return a new probe with additional context."""
        ...


class DefaultWorkspaceServiceProbe(StructlogProbe):
    """Default implementation of WorkspaceServiceProbe using structlog."""

    def workspace_provisioned(
        self,
        workspace_id: str,
        name: str,
        admin_id: str,
        creator_id: str,
        role_count: int,
        permission_count: int,
    ) -> None:
        """Record that a workspace and its default roles were created."""
        self._emit(
            "info",
            "workspace_provisioned",
            workspace_id=workspace_id,
            name=name,
            admin_id=admin_id,
            creator_id=creator_id,
            role_count=role_count,
            permission_count=permission_count,
        )

    def workspace_provisioning_failed(
        self,
        name: str,
        error: str,
    ) -> None:
        """Record failed workspace provisioning."""
        self._emit("error", "workspace_provisioning_failed", name=name, error=error)

    def workspace_retrieved(
        self,
        workspace_id: str,
        user_id: str,
    ) -> None:
        """Record workspace retrieval."""
        self._emit(
            "debug",
            "workspace_retrieved",
            workspace_id=workspace_id,
            user_id=user_id,
        )

    def workspaces_listed(
        self,
        user_id: str,
        count: int,
    ) -> None:
        """Record workspaces listed."""
        self._emit("debug", "workspaces_listed", user_id=user_id, count=count)
