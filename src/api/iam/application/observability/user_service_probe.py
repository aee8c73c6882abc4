"""Protocol for user application service observability.

Defines the interface for domain probes that capture application-level
domain events for user service operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from iam.application.observability.base import StructlogProbe

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user application service operations."""

    def user_created(self, user_id: str, username: str, user_type: str) -> None:
        """Record that a user record was registered."""
        ...

    def user_provision_failed(
        self,
        user_id: str,
        username: str,
        error: str,
    ) -> None:
        """Record that user provisioning failed."""
        ...

    def users_listed(self, count: int) -> None:
        """Record users listed."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe(StructlogProbe):
    """Default implementation of UserServiceProbe using structlog."""

    def user_created(self, user_id: str, username: str, user_type: str) -> None:
        self._emit(
            "info",
            "user_created",
            user_id=user_id,
            username=username,
            user_type=user_type,
        )

    def user_provision_failed(
        self,
        user_id: str,
        username: str,
        error: str,
    ) -> None:
        """Record that user provisioning failed."""
        self._emit(
            "error",
            "user_provision_failed",
            user_id=user_id,
            username=username,
            error=error,
        )

    def users_listed(self, count: int) -> None:
        """Record users listed."""
        self._emit("debug", "users_listed", count=count)
