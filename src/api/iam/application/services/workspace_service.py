"""Workspace application service for IAM bounded context.

Provisions workspaces atomically: the workspace row, the permission
registry entries for the default role template, the default roles and
their grants, and the admin user's assignment are written in a single
transaction.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultWorkspaceServiceProbe,
    WorkspaceServiceProbe,
)
from iam.domain.aggregates import Assignment, Role, Workspace
from iam.domain.default_roles import (
    DEFAULT_ROLE_TEMPLATES,
    RoleTemplate,
    template_permission_keys,
)
from iam.domain.value_objects import UserId, WorkspaceId
from iam.ports.exceptions import (
    DuplicateWorkspaceNameError,
    SuperAdminRequiredError,
    UserNotFoundError,
    WorkspaceNotFoundError,
    WorkspaceProvisioningError,
)
from iam.ports.repositories import (
    IAssignmentRepository,
    IPermissionRepository,
    IRoleRepository,
    IUserRepository,
    IWorkspaceRepository,
)
from infrastructure.database.transactions import mentions_constraint
from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import CurrentUser
from shared_kernel.exceptions import AuthorizationError


class WorkspaceService:
    """Application service for workspace provisioning and lookup."""

    def __init__(
        self,
        session: AsyncSession,
        workspace_repository: IWorkspaceRepository,
        user_repository: IUserRepository,
        role_repository: IRoleRepository,
        permission_repository: IPermissionRepository,
        assignment_repository: IAssignmentRepository,
        authz: AuthorizationProvider,
        probe: WorkspaceServiceProbe | None = None,
        role_templates: tuple[RoleTemplate, ...] = DEFAULT_ROLE_TEMPLATES,
    ):
        """Initialize WorkspaceService with dependencies.

        Args:
            session: Database session for transaction management
            workspace_repository: Repository for workspace persistence
            user_repository: Repository used to validate the admin user
            role_repository: Repository for the seeded roles
            permission_repository: Permission registry
            assignment_repository: Repository for the admin assignment
            authz: Authorization provider used for membership checks
            probe: Optional domain probe for observability
            role_templates: Roles seeded into every new workspace
        """
        self._session = session
        self._workspace_repository = workspace_repository
        self._user_repository = user_repository
        self._role_repository = role_repository
        self._permission_repository = permission_repository
        self._assignment_repository = assignment_repository
        self._authz = authz
        self._probe = probe or DefaultWorkspaceServiceProbe()
        self._role_templates = role_templates

    async def create_workspace(
        self,
        current_user: CurrentUser,
        name: str,
        admin_id: UserId,
    ) -> Workspace:
        """Provision a workspace with its default roles.

        Business rules:
        - Only super admins can create workspaces
        - Names are unique case-insensitively
        - The admin user must exist and is assigned the Admin role

        Args:
            current_user: The caller (must be a super admin)
            name: Workspace name (1-255 characters)
            admin_id: User who becomes the workspace Admin

        Returns:
            The created Workspace aggregate

        Raises:
            SuperAdminRequiredError: If the caller is not a super admin
            ValidationError: If the name is empty or too long
            DuplicateWorkspaceNameError: If the name is already taken
            UserNotFoundError: If the admin user does not exist
        """
        if not current_user.is_super_admin:
            raise SuperAdminRequiredError("Only super admins can create workspaces")

        workspace = Workspace.create(
            name=name,
            created_by=current_user.user_id,
            admin_id=admin_id,
        )
        permission_keys = template_permission_keys(self._role_templates)

        try:
            async with self._session.begin():
                existing = await self._workspace_repository.get_by_name(workspace.name)
                if existing:
                    raise DuplicateWorkspaceNameError(
                        f"Workspace '{workspace.name}' already exists"
                    )

                admin = await self._user_repository.get_by_id(admin_id)
                if admin is None:
                    raise UserNotFoundError(
                        f"Admin user {admin_id.value} does not exist",
                        missing_user_ids=[admin_id.value],
                    )

                await self._workspace_repository.save(workspace)

                permissions = await self._permission_repository.ensure_many(
                    permission_keys
                )
                ids_by_key = {p.key: p.id for p in permissions}

                admin_role: Role | None = None
                for template in self._role_templates:
                    role = Role.create(
                        workspace_id=workspace.id,
                        name=template.name,
                        description=template.description,
                        permissions=template.permissions,
                    )
                    await self._role_repository.save(role)
                    await self._role_repository.link_permissions(
                        role.id, [ids_by_key[key] for key in sorted(role.permissions)]
                    )
                    if role.is_admin:
                        admin_role = role

                if admin_role is None:
                    raise WorkspaceProvisioningError(
                        "Role template does not define an Admin role"
                    )

                await self._assignment_repository.add_many(
                    [
                        Assignment(
                            user_id=admin_id,
                            workspace_id=workspace.id,
                            role_id=admin_role.id,
                        )
                    ]
                )

        except IntegrityError as e:
            # DB unique index violation (race with a concurrent create)
            if mentions_constraint(e, "ux_workspaces_lower_name"):
                self._probe.workspace_provisioning_failed(
                    name=workspace.name,
                    error="duplicate workspace name",
                )
                raise DuplicateWorkspaceNameError(
                    f"Workspace '{workspace.name}' already exists"
                ) from e
            self._probe.workspace_provisioning_failed(name=workspace.name, error=str(e))
            raise
        except (DuplicateWorkspaceNameError, UserNotFoundError) as e:
            self._probe.workspace_provisioning_failed(name=workspace.name, error=str(e))
            raise

        self._probe.workspace_provisioned(
            workspace_id=workspace.id.value,
            name=workspace.name,
            admin_id=admin_id.value,
            creator_id=current_user.user_id.value,
            role_count=len(self._role_templates),
            permission_count=len(permission_keys),
        )
        return workspace

    async def get_workspace(
        self, current_user: CurrentUser, workspace_id: WorkspaceId
    ) -> Workspace:
        """Return a workspace the caller belongs to.

        Raises:
            AuthorizationError: If the caller is neither a member nor a super admin
            WorkspaceNotFoundError: If the workspace does not exist
        """
        if not current_user.is_super_admin and not await self._authz.is_member(
            current_user.user_id, workspace_id
        ):
            raise AuthorizationError(
                f"User {current_user.user_id.value} is not a member of workspace "
                f"{workspace_id.value}"
            )

        async with self._session.begin():
            workspace = await self._workspace_repository.get_by_id(workspace_id)

        if workspace is None:
            raise WorkspaceNotFoundError(f"Workspace {workspace_id.value} not found")

        self._probe.workspace_retrieved(
            workspace_id=workspace_id.value,
            user_id=current_user.user_id.value,
        )
        return workspace

    async def list_workspaces(self, current_user: CurrentUser) -> list[Workspace]:
        """List workspaces visible to the caller.

        Super admins see every workspace; other users see the workspaces in
        which they hold a role.
        """
        async with self._session.begin():
            if current_user.is_super_admin:
                workspaces = await self._workspace_repository.list_all()
            else:
                workspaces = await self._workspace_repository.list_for_member(
                    current_user.user_id
                )

        self._probe.workspaces_listed(
            user_id=current_user.user_id.value,
            count=len(workspaces),
        )
        return workspaces
