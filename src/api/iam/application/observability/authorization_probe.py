"""Protocol for authorization resolver observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from iam.application.observability.base import StructlogProbe

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthorizationProbe(Protocol):
    """Domain probe for authorization decisions."""

    def authorization_granted(
        self,
        user_id: str,
        workspace_id: str,
        permission: str,
        via_super_admin: bool,
    ) -> None:
        """Record an allowed check."""
        ...

    def authorization_denied(
        self,
        user_id: str,
        workspace_id: str,
        permission: str,
        reason: str,
    ) -> None:
        """Record a denied check and why."""
        ...

    def with_context(self, context: ObservationContext) -> AuthorizationProbe:
        """Return a new probe with additional context."""
        ...


class DefaultAuthorizationProbe(StructlogProbe):
    """Default implementation of AuthorizationProbe using structlog."""

    def authorization_granted(
        self,
        user_id: str,
        workspace_id: str,
        permission: str,
        via_super_admin: bool,
    ) -> None:
        self._emit(
            "debug",
            "authorization_granted",
            user_id=user_id,
            workspace_id=workspace_id,
            permission=permission,
            via_super_admin=via_super_admin,
        )

    def authorization_denied(
        self,
        user_id: str,
        workspace_id: str,
        permission: str,
        reason: str,
    ) -> None:
        self._emit(
            "warning",
            "authorization_denied",
            user_id=user_id,
            workspace_id=workspace_id,
            permission=permission,
            reason=reason,
        )
