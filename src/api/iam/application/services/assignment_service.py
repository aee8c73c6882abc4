"""Assignment application service for IAM bounded context.

A user holds at most one role per workspace. Every replacement deletes the
user's existing binding and inserts the new one inside a single
SERIALIZABLE transaction; a concurrent replacement for the same user
aborts with ConcurrentModificationError instead of leaving two rows.
"""

from __future__ import annotations

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    AssignmentServiceProbe,
    DefaultAssignmentServiceProbe,
)
from iam.application.value_objects import AssignmentView
from iam.domain.aggregates import Assignment, Role
from iam.domain.value_objects import RoleId, UserId, WorkspaceId
from iam.ports.exceptions import (
    ConcurrentModificationError,
    InvalidRoleAssignmentError,
    RoleNotFoundError,
    SuperAdminRequiredError,
    UserNotFoundError,
    WorkspaceNotFoundError,
)
from iam.ports.repositories import (
    IAssignmentRepository,
    IRoleRepository,
    IUserRepository,
    IWorkspaceRepository,
)
from infrastructure.database.transactions import (
    is_serialization_failure,
    mentions_constraint,
    use_serializable,
)
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import CurrentUser, EntityType, Operation
from shared_kernel.exceptions import ValidationError

_ONE_ROLE_PER_WORKSPACE = "uq_user_roles_user_id_workspace_id"


class AssignmentService:
    """Application service for user-role assignments within a workspace."""

    def __init__(
        self,
        session: AsyncSession,
        assignment_repository: IAssignmentRepository,
        role_repository: IRoleRepository,
        user_repository: IUserRepository,
        workspace_repository: IWorkspaceRepository,
        authz: AuthorizationProvider,
        probe: AssignmentServiceProbe | None = None,
    ):
        """Initialize AssignmentService with dependencies.

        Args:
            session: Database session for transaction management
            assignment_repository: Repository for assignments
            role_repository: Repository used to resolve roles in the workspace
            user_repository: Repository used to validate users
            workspace_repository: Repository used to validate the workspace
            authz: Authorization provider for permission checks
            probe: Optional domain probe for observability
        """
        self._session = session
        self._assignment_repository = assignment_repository
        self._role_repository = role_repository
        self._user_repository = user_repository
        self._workspace_repository = workspace_repository
        self._authz = authz
        self._probe = probe or DefaultAssignmentServiceProbe()

    async def assign_roles(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        user_ids: list[UserId],
        role_ids: list[RoleId],
    ) -> list[AssignmentView]:
        """Bulk-assign roles, pairing ``user_ids[i]`` with ``role_ids[i]``.

        A user listed more than once keeps the last role given. Every
        existing assignment of the resolved users in the workspace is
        replaced.

        Raises:
            AuthorizationError: If the caller lacks USER_ROLE:CREATE
            ValidationError: If the lists are empty or differ in length
            WorkspaceNotFoundError: If the workspace does not exist
            InvalidRoleAssignmentError: If a role is not in the workspace
            UserNotFoundError: If a user does not exist
            SuperAdminRequiredError: If the Admin role is granted or replaced
                by a caller who is not a super admin
            ConcurrentModificationError: If a concurrent write aborted this one
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.USER_ROLE, Operation.CREATE
        )

        if not user_ids or not role_ids:
            raise ValidationError("user_ids and role_ids must not be empty")
        if len(user_ids) != len(role_ids):
            raise ValidationError(
                "user_ids and role_ids must have the same length",
                user_count=len(user_ids),
                role_count=len(role_ids),
            )

        # Last role wins for a repeated user; dict keeps first-seen order
        resolved: dict[UserId, RoleId] = {}
        for user_id, role_id in zip(user_ids, role_ids):
            resolved.pop(user_id, None)
            resolved[user_id] = role_id

        try:
            async with self._session.begin():
                await use_serializable(self._session)

                if await self._workspace_repository.get_by_id(workspace_id) is None:
                    raise WorkspaceNotFoundError(
                        f"Workspace {workspace_id.value} not found"
                    )

                wanted_role_ids = list(dict.fromkeys(role_ids))
                roles = {
                    role.id: role
                    for role in await self._role_repository.list_by_ids(
                        workspace_id, wanted_role_ids
                    )
                }
                invalid = [r.value for r in wanted_role_ids if r not in roles]
                if invalid:
                    raise InvalidRoleAssignmentError(
                        "Roles do not belong to this workspace",
                        invalid_role_ids=invalid,
                    )

                users = {
                    user.id: user
                    for user in await self._user_repository.list_by_ids(resolved)
                }
                missing = [u.value for u in resolved if u not in users]
                if missing:
                    raise UserNotFoundError(
                        "Users do not exist",
                        missing_user_ids=missing,
                    )

                if not current_user.is_super_admin:
                    await self._guard_admin_changes(
                        current_user,
                        workspace_id,
                        [(user_id, roles[role_id]) for user_id, role_id in resolved.items()],
                        operation="assign_roles",
                    )

                replaced = await self._assignment_repository.delete_for_users(
                    workspace_id, list(resolved)
                )
                assignments = [
                    Assignment(user_id=user_id, workspace_id=workspace_id, role_id=role_id)
                    for user_id, role_id in resolved.items()
                ]
                await self._assignment_repository.add_many(assignments)
        except (IntegrityError, DBAPIError) as e:
            self._raise_concurrent_modification(e, "assign_roles", workspace_id)
            raise

        self._probe.roles_assigned(
            workspace_id=workspace_id.value,
            acting_user_id=current_user.user_id.value,
            user_count=len(assignments),
            replaced_count=replaced,
        )
        return [AssignmentView.build(a, users, roles) for a in assignments]

    async def set_user_role(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        user_id: UserId,
        role_id: RoleId,
    ) -> AssignmentView:
        """Replace a single user's role in the workspace.

        Raises:
            AuthorizationError: If the caller lacks USER_ROLE:UPDATE
            UserNotFoundError: If the user does not exist
            RoleNotFoundError: If the role is not in the workspace
            SuperAdminRequiredError: If the Admin role is involved and the
                caller is not a super admin
            ConcurrentModificationError: If a concurrent write aborted this one
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.USER_ROLE, Operation.UPDATE
        )

        try:
            async with self._session.begin():
                await use_serializable(self._session)

                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    raise UserNotFoundError(
                        f"User {user_id.value} does not exist",
                        missing_user_ids=[user_id.value],
                    )

                role = await self._role_repository.get_by_id(workspace_id, role_id)
                if role is None:
                    raise RoleNotFoundError(
                        f"Role {role_id.value} not found in workspace "
                        f"{workspace_id.value}"
                    )

                if not current_user.is_super_admin:
                    await self._guard_admin_changes(
                        current_user,
                        workspace_id,
                        [(user_id, role)],
                        operation="set_user_role",
                    )

                await self._assignment_repository.delete_for_users(
                    workspace_id, [user_id]
                )
                assignment = Assignment(
                    user_id=user_id, workspace_id=workspace_id, role_id=role_id
                )
                await self._assignment_repository.add_many([assignment])
        except (IntegrityError, DBAPIError) as e:
            self._raise_concurrent_modification(e, "set_user_role", workspace_id)
            raise

        self._probe.user_role_set(
            workspace_id=workspace_id.value,
            user_id=user_id.value,
            role_id=role_id.value,
            acting_user_id=current_user.user_id.value,
        )
        return AssignmentView.build(assignment, {user.id: user}, {role.id: role})

    async def remove_user_role(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        user_id: UserId,
        role_id: RoleId | None = None,
    ) -> int:
        """Remove a user's assignment, optionally only for ``role_id``.

        Returns:
            Number of assignments removed (zero when nothing matched)

        Raises:
            AuthorizationError: If the caller lacks USER_ROLE:DELETE
            UserNotFoundError: If the user does not exist
            RoleNotFoundError: If ``role_id`` is not in the workspace
            SuperAdminRequiredError: If the removed assignment is for the
                Admin role and the caller is not a super admin
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.USER_ROLE, Operation.DELETE
        )

        try:
            async with self._session.begin():
                await use_serializable(self._session)

                if await self._user_repository.get_by_id(user_id) is None:
                    raise UserNotFoundError(
                        f"User {user_id.value} does not exist",
                        missing_user_ids=[user_id.value],
                    )

                if (
                    role_id is not None
                    and await self._role_repository.get_by_id(workspace_id, role_id)
                    is None
                ):
                    raise RoleNotFoundError(
                        f"Role {role_id.value} not found in workspace "
                        f"{workspace_id.value}"
                    )

                if not current_user.is_super_admin:
                    current = await self._assignment_repository.get_for_user(
                        user_id, workspace_id
                    )
                    if current is not None and (
                        role_id is None or current.role_id == role_id
                    ):
                        current_role = await self._role_repository.get_by_id(
                            workspace_id, current.role_id
                        )
                        if current_role is not None and current_role.is_admin:
                            self._deny_admin_change(
                                current_user, workspace_id, "remove_user_role"
                            )

                removed = await self._assignment_repository.delete(
                    workspace_id, user_id, role_id
                )
        except DBAPIError as e:
            self._raise_concurrent_modification(e, "remove_user_role", workspace_id)
            raise

        self._probe.user_role_removed(
            workspace_id=workspace_id.value,
            user_id=user_id.value,
            role_id=role_id.value if role_id else None,
            removed_count=removed,
            acting_user_id=current_user.user_id.value,
        )
        return removed

    async def list_assignments(
        self, current_user: CurrentUser, workspace_id: WorkspaceId
    ) -> list[AssignmentView]:
        """List the workspace's assignments with user and role names."""
        await self._authz.require(
            current_user, workspace_id, EntityType.USER_ROLE, Operation.READ
        )

        async with self._session.begin():
            assignments = await self._assignment_repository.list_by_workspace(
                workspace_id
            )
            users = {
                user.id: user
                for user in await self._user_repository.list_by_ids(
                    [a.user_id for a in assignments]
                )
            }
            roles = {
                role.id: role
                for role in await self._role_repository.list_by_workspace(workspace_id)
            }

        return [AssignmentView.build(a, users, roles) for a in assignments]

    async def _guard_admin_changes(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        changes: list[tuple[UserId, Role]],
        operation: str,
    ) -> None:
        """Deny granting Admin or replacing a user's current Admin role."""
        if any(role.is_admin for _, role in changes):
            self._deny_admin_change(current_user, workspace_id, operation)

        for user_id, new_role in changes:
            current = await self._assignment_repository.get_for_user(
                user_id, workspace_id
            )
            if current is None or current.role_id == new_role.id:
                continue
            current_role = await self._role_repository.get_by_id(
                workspace_id, current.role_id
            )
            if current_role is not None and current_role.is_admin:
                self._deny_admin_change(current_user, workspace_id, operation)

    def _deny_admin_change(
        self, current_user: CurrentUser, workspace_id: WorkspaceId, operation: str
    ) -> None:
        self._probe.admin_guard_denied(
            workspace_id=workspace_id.value,
            acting_user_id=current_user.user_id.value,
            operation=operation,
        )
        raise SuperAdminRequiredError(
            "Only super admins can grant, replace or remove the Admin role",
            operation=operation,
        )

    def _raise_concurrent_modification(
        self, error: DBAPIError, operation: str, workspace_id: WorkspaceId
    ) -> None:
        """Translate serialization failures and one-role-per-workspace races."""
        if is_serialization_failure(error) or (
            isinstance(error, IntegrityError)
            and mentions_constraint(error, _ONE_ROLE_PER_WORKSPACE)
        ):
            self._probe.concurrent_modification(operation, workspace_id.value)
            raise ConcurrentModificationError(
                "Assignments were modified concurrently; retry the request"
            ) from error
