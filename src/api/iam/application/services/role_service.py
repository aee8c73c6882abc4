"""Role application service for IAM bounded context.

Manages workspace roles and their permission grants. Replacing a role's
grant set runs at SERIALIZABLE isolation so that concurrent replacements
can never interleave their delete and insert phases.
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultRoleServiceProbe, RoleServiceProbe
from iam.domain.aggregates import Role
from iam.domain.value_objects import ADMIN_ROLE_NAME, RoleId, WorkspaceId
from iam.ports.exceptions import (
    ConcurrentModificationError,
    DuplicateRoleNameError,
    PermissionNotFoundError,
    RoleInUseError,
    RoleNotFoundError,
    SuperAdminRequiredError,
)
from iam.ports.repositories import (
    IAssignmentRepository,
    IPermissionRepository,
    IRoleRepository,
)
from infrastructure.database.transactions import (
    is_serialization_failure,
    mentions_constraint,
    use_serializable,
)
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import (
    CurrentUser,
    EntityType,
    Operation,
    PermissionKey,
)

_ROLE_NAME_CONSTRAINT = "uq_roles_workspace_id_name"
_ASSIGNMENT_ROLE_FK = "fk_user_roles_role_id_roles"


class RoleService:
    """Application service for role management within a workspace.

    Every operation checks the caller's ROLE permission before touching
    the database. The Admin role can only be created, renamed or deleted
    by super admins.
    """

    def __init__(
        self,
        session: AsyncSession,
        role_repository: IRoleRepository,
        permission_repository: IPermissionRepository,
        assignment_repository: IAssignmentRepository,
        authz: AuthorizationProvider,
        probe: RoleServiceProbe | None = None,
    ):
        """Initialize RoleService with dependencies.

        Args:
            session: Database session for transaction management
            role_repository: Repository for role persistence
            permission_repository: Permission registry
            assignment_repository: Used to detect roles still in use
            authz: Authorization provider for permission checks
            probe: Optional domain probe for observability
        """
        self._session = session
        self._role_repository = role_repository
        self._permission_repository = permission_repository
        self._assignment_repository = assignment_repository
        self._authz = authz
        self._probe = probe or DefaultRoleServiceProbe()

    async def list_roles(
        self, current_user: CurrentUser, workspace_id: WorkspaceId
    ) -> list[Role]:
        """List the workspace's roles ordered by name."""
        await self._authz.require(
            current_user, workspace_id, EntityType.ROLE, Operation.READ
        )

        async with self._session.begin():
            roles = await self._role_repository.list_by_workspace(workspace_id)

        self._probe.roles_listed(workspace_id=workspace_id.value, count=len(roles))
        return roles

    async def create_role(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        name: str,
        description: str,
        permissions: Iterable[PermissionKey],
    ) -> Role:
        """Create a role and link its permissions.

        Raises:
            AuthorizationError: If the caller lacks ROLE:CREATE
            ValidationError: If the name is invalid or permissions are empty
            DuplicateRoleNameError: If the name exists in the workspace
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.ROLE, Operation.CREATE
        )

        role = Role.create(
            workspace_id=workspace_id,
            name=name,
            description=description,
            permissions=frozenset(permissions),
        )
        self._guard_admin_name(current_user, role.name)

        try:
            async with self._session.begin():
                if await self._role_repository.get_by_name(workspace_id, role.name):
                    raise DuplicateRoleNameError(
                        f"Role '{role.name}' already exists in workspace"
                    )

                await self._role_repository.save(role)
                registered = await self._permission_repository.ensure_many(
                    sorted(role.permissions)
                )
                await self._role_repository.link_permissions(
                    role.id, [p.id for p in registered]
                )
        except IntegrityError as e:
            if mentions_constraint(e, _ROLE_NAME_CONSTRAINT):
                raise DuplicateRoleNameError(
                    f"Role '{role.name}' already exists in workspace"
                ) from e
            raise

        self._probe.role_created(
            role_id=role.id.value,
            workspace_id=workspace_id.value,
            name=role.name,
            permission_count=len(role.permissions),
        )
        return role

    async def update_role(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        role_id: RoleId,
        name: str | None = None,
        description: str | None = None,
        permissions: Iterable[PermissionKey] | None = None,
    ) -> Role:
        """Update a role's details and optionally replace its whole grant set.

        When ``permissions`` is given, all existing links are deleted and
        the new set inserted inside one SERIALIZABLE transaction.

        Raises:
            AuthorizationError: If the caller lacks ROLE:UPDATE
            RoleNotFoundError: If the role is not in the workspace
            DuplicateRoleNameError: If the new name is taken
            ConcurrentModificationError: If a concurrent write aborted this one
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.ROLE, Operation.UPDATE
        )
        replacement = frozenset(permissions) if permissions is not None else None

        try:
            async with self._session.begin():
                if replacement is not None:
                    await use_serializable(self._session)

                role = await self._get_role(workspace_id, role_id)

                if name is not None:
                    new_name = name.strip()
                    if new_name != role.name:
                        self._guard_admin_name(current_user, role.name)
                        self._guard_admin_name(current_user, new_name)
                        if await self._role_repository.get_by_name(
                            workspace_id, new_name
                        ):
                            raise DuplicateRoleNameError(
                                f"Role '{new_name}' already exists in workspace"
                            )

                role.update_details(name=name, description=description)
                await self._role_repository.save(role)

                if replacement is not None:
                    role.replace_permissions(replacement)
                    await self._role_repository.clear_permissions(role.id)
                    registered = await self._permission_repository.ensure_many(
                        sorted(replacement)
                    )
                    await self._role_repository.link_permissions(
                        role.id, [p.id for p in registered]
                    )
        except IntegrityError as e:
            if mentions_constraint(e, _ROLE_NAME_CONSTRAINT):
                raise DuplicateRoleNameError(
                    f"Role '{name}' already exists in workspace"
                ) from e
            raise
        except DBAPIError as e:
            if is_serialization_failure(e):
                self._probe.concurrent_modification("update_role", workspace_id.value)
                raise ConcurrentModificationError(
                    "Role was modified concurrently; retry the request"
                ) from e
            raise

        self._probe.role_updated(
            role_id=role.id.value,
            workspace_id=workspace_id.value,
            permissions_replaced=replacement is not None,
            permission_count=len(role.permissions),
        )
        return role

    async def delete_role(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        role_id: RoleId,
    ) -> None:
        """Delete a role that nobody is assigned to.

        Raises:
            AuthorizationError: If the caller lacks ROLE:DELETE
            RoleNotFoundError: If the role is not in the workspace
            RoleInUseError: If any user is still assigned the role
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.ROLE, Operation.DELETE
        )

        try:
            async with self._session.begin():
                role = await self._get_role(workspace_id, role_id)
                self._guard_admin_name(current_user, role.name)

                if await self._assignment_repository.exists_for_role(role.id):
                    raise RoleInUseError(
                        f"Role '{role.name}' is assigned to users and cannot be deleted"
                    )

                await self._role_repository.delete(role.id)
        except IntegrityError as e:
            # An assignment referencing the role was committed concurrently
            if mentions_constraint(e, _ASSIGNMENT_ROLE_FK):
                raise RoleInUseError(
                    f"Role {role_id.value} is assigned to users and cannot be deleted"
                ) from e
            raise

        self._probe.role_deleted(role_id=role_id.value, workspace_id=workspace_id.value)

    async def grant_permissions(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        role_id: RoleId,
        permissions: Iterable[PermissionKey],
    ) -> Role:
        """Add permissions to a role, keeping existing grants.

        Raises:
            AuthorizationError: If the caller lacks ROLE:UPDATE
            RoleNotFoundError: If the role is not in the workspace
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.ROLE, Operation.UPDATE
        )
        wanted = frozenset(permissions)

        async with self._session.begin():
            role = await self._get_role(workspace_id, role_id)
            added = role.grant(wanted)
            if added:
                registered = await self._permission_repository.ensure_many(
                    sorted(added)
                )
                await self._role_repository.link_permissions(
                    role.id, [p.id for p in registered]
                )
                await self._role_repository.save(role)

        self._probe.permissions_granted(
            role_id=role.id.value,
            workspace_id=workspace_id.value,
            added=[str(key) for key in sorted(added)],
        )
        return role

    async def revoke_permissions(
        self,
        current_user: CurrentUser,
        workspace_id: WorkspaceId,
        role_id: RoleId,
        permissions: Iterable[PermissionKey],
    ) -> Role:
        """Remove permissions from a role.

        Raises:
            AuthorizationError: If the caller lacks ROLE:UPDATE
            RoleNotFoundError: If the role is not in the workspace
            PermissionNotFoundError: If none of the permissions are registered
        """
        await self._authz.require(
            current_user, workspace_id, EntityType.ROLE, Operation.UPDATE
        )
        wanted = frozenset(permissions)

        async with self._session.begin():
            role = await self._get_role(workspace_id, role_id)

            registered = await self._permission_repository.find_by_keys(sorted(wanted))
            if not registered:
                raise PermissionNotFoundError(
                    "None of the listed permissions exist",
                    permissions=[str(key) for key in sorted(wanted)],
                )

            removed = role.revoke(frozenset(p.key for p in registered))
            if removed:
                await self._role_repository.unlink_permissions(
                    role.id, [p.id for p in registered if p.key in removed]
                )
                await self._role_repository.save(role)

        self._probe.permissions_revoked(
            role_id=role.id.value,
            workspace_id=workspace_id.value,
            removed=[str(key) for key in sorted(removed)],
        )
        return role

    async def _get_role(self, workspace_id: WorkspaceId, role_id: RoleId) -> Role:
        role = await self._role_repository.get_by_id(workspace_id, role_id)
        if role is None:
            raise RoleNotFoundError(
                f"Role {role_id.value} not found in workspace {workspace_id.value}"
            )
        return role

    @staticmethod
    def _guard_admin_name(current_user: CurrentUser, name: str) -> None:
        if name == ADMIN_ROLE_NAME and not current_user.is_super_admin:
            raise SuperAdminRequiredError(
                f"Only super admins can create, rename or delete the {ADMIN_ROLE_NAME} role"
            )
