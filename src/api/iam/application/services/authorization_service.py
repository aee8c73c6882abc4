"""Authorization resolver for IAM bounded context.

Answers "may this user perform this operation on this entity in this
workspace" from the user's single role assignment and the role's grants.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    AuthorizationProbe,
    DefaultAuthorizationProbe,
)
from iam.ports.repositories import IAssignmentRepository, IRoleRepository
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import (
    CurrentUser,
    EntityType,
    Operation,
    PermissionKey,
)
from shared_kernel.exceptions import AuthorizationError
from shared_kernel.identifiers import UserId, WorkspaceId


class AuthorizationService(AuthorizationProvider):
    """Resolves workspace-scoped permissions.

    Decision procedure:
    1. Super admins are allowed unconditionally.
    2. Without an assignment in the workspace the request is denied.
    3. Otherwise the request is allowed iff the assigned role grants the
       exact (entity, operation) pair.

    Nothing is cached: each call reads committed state in its own short
    transaction, so a revoked grant takes effect on the very next check.
    """

    def __init__(
        self,
        session: AsyncSession,
        assignment_repository: IAssignmentRepository,
        role_repository: IRoleRepository,
        probe: AuthorizationProbe | None = None,
    ):
        """Initialize AuthorizationService with dependencies.

        Args:
            session: Read session; one transaction is opened per check
            assignment_repository: Repository for user-role assignments
            role_repository: Repository for roles and their grants
            probe: Optional domain probe for observability
        """
        self._session = session
        self._assignment_repository = assignment_repository
        self._role_repository = role_repository
        self._probe = probe or DefaultAuthorizationProbe()

    async def effective_permissions(
        self, user_id: UserId, workspace_id: WorkspaceId
    ) -> frozenset[PermissionKey]:
        """Return the permission keys the user holds in the workspace."""
        async with self._session.begin():
            assignment = await self._assignment_repository.get_for_user(
                user_id, workspace_id
            )
            if assignment is None:
                return frozenset()
            return await self._role_repository.get_permission_keys(assignment.role_id)

    async def authorize(
        self,
        user: CurrentUser,
        workspace_id: WorkspaceId,
        entity: EntityType,
        operation: Operation,
    ) -> bool:
        key = PermissionKey(entity, operation)

        if user.is_super_admin:
            self._probe.authorization_granted(
                user_id=user.user_id.value,
                workspace_id=workspace_id.value,
                permission=str(key),
                via_super_admin=True,
            )
            return True

        async with self._session.begin():
            assignment = await self._assignment_repository.get_for_user(
                user.user_id, workspace_id
            )
            keys = (
                await self._role_repository.get_permission_keys(assignment.role_id)
                if assignment is not None
                else frozenset()
            )

        if assignment is None:
            self._probe.authorization_denied(
                user_id=user.user_id.value,
                workspace_id=workspace_id.value,
                permission=str(key),
                reason="no_assignment",
            )
            return False

        if key not in keys:
            self._probe.authorization_denied(
                user_id=user.user_id.value,
                workspace_id=workspace_id.value,
                permission=str(key),
                reason="permission_not_granted",
            )
            return False

        self._probe.authorization_granted(
            user_id=user.user_id.value,
            workspace_id=workspace_id.value,
            permission=str(key),
            via_super_admin=False,
        )
        return True

    async def require(
        self,
        user: CurrentUser,
        workspace_id: WorkspaceId,
        entity: EntityType,
        operation: Operation,
    ) -> None:
        if not await self.authorize(user, workspace_id, entity, operation):
            key = PermissionKey(entity, operation)
            raise AuthorizationError(
                f"Missing permission {key} in workspace {workspace_id.value}",
                permission=str(key),
            )

    async def is_member(self, user_id: UserId, workspace_id: WorkspaceId) -> bool:
        async with self._session.begin():
            assignment = await self._assignment_repository.get_for_user(
                user_id, workspace_id
            )
        return assignment is not None
