"""Authorization provider protocol.

Defines the interface bounded contexts use to ask "may this caller do X on
entity Y in workspace Z", allowing the IAM resolver to be swapped for a
mock in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from shared_kernel.authorization.types import CurrentUser, EntityType, Operation
from shared_kernel.identifiers import UserId, WorkspaceId


@runtime_checkable
class AuthorizationProvider(Protocol):
    """Protocol for workspace-scoped authorization decisions.

    Implementations must read committed state on every call; decisions are
    never cached across calls.
    """

    async def authorize(
        self,
        user: CurrentUser,
        workspace_id: WorkspaceId,
        entity: EntityType,
        operation: Operation,
    ) -> bool:
        """Decide whether the user may perform the operation on the entity.

        Args:
            user: The authenticated caller
            workspace_id: Workspace the request targets
            entity: Entity type being acted on
            operation: Operation being performed

        Returns:
            True if allowed, False otherwise
        """
        ...

    async def require(
        self,
        user: CurrentUser,
        workspace_id: WorkspaceId,
        entity: EntityType,
        operation: Operation,
    ) -> None:
        """Like ``authorize`` but raise on denial.

        Raises:
            AuthorizationError: If the user is not allowed
        """
        ...

    async def is_member(self, user_id: UserId, workspace_id: WorkspaceId) -> bool:
        """Check whether the user holds any role in the workspace."""
        ...
