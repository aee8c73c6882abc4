"""Application-layer value objects for IAM bounded context.

These are read-only view objects assembled by application services from
several aggregates, for presentation to callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from iam.domain.aggregates import Assignment, Role, User
from iam.domain.value_objects import RoleId, UserId, WorkspaceId


@dataclass(frozen=True)
class AssignmentView:
    """An assignment enriched with the user's name and the role's name."""

    user_id: UserId
    username: str
    workspace_id: WorkspaceId
    role_id: RoleId
    role_name: str
    created_at: datetime

    @classmethod
    def build(
        cls,
        assignment: Assignment,
        users: dict[UserId, User],
        roles: dict[RoleId, Role],
    ) -> AssignmentView:
        """Join an assignment with looked-up users and roles.

        Missing lookups fall back to the raw id so that a view can always
        be rendered.
        """
        user = users.get(assignment.user_id)
        role = roles.get(assignment.role_id)
        return cls(
            user_id=assignment.user_id,
            username=user.username if user else assignment.user_id.value,
            workspace_id=assignment.workspace_id,
            role_id=assignment.role_id,
            role_name=role.name if role else assignment.role_id.value,
            created_at=assignment.created_at,
        )
