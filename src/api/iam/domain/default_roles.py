"""Default role template applied to every new workspace."""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.value_objects import ADMIN_ROLE_NAME
from shared_kernel.authorization.types import (
    EntityType,
    Operation,
    PermissionKey,
    crud,
)


@dataclass(frozen=True)
class RoleTemplate:
    """Blueprint for a role seeded at workspace creation."""

    name: str
    description: str
    permissions: frozenset[PermissionKey]


ADMIN_TEMPLATE = RoleTemplate(
    name=ADMIN_ROLE_NAME,
    description="Full access to workspace administration, tickets and comments",
    permissions=(
        crud(EntityType.ROLE)
        | crud(EntityType.USER)
        | crud(EntityType.USER_ROLE)
        | crud(EntityType.ROLE_PERMISSION)
        | crud(EntityType.TICKET)
        | crud(EntityType.COMMENT)
        | {PermissionKey(EntityType.HISTORY, Operation.READ)}
    ),
)

MEMBER_TEMPLATE = RoleTemplate(
    name="Member",
    description="Works on tickets and comments",
    permissions=(
        crud(EntityType.TICKET)
        | crud(EntityType.COMMENT)
        | {
            PermissionKey(EntityType.ROLE, Operation.READ),
            PermissionKey(EntityType.USER, Operation.READ),
            PermissionKey(EntityType.HISTORY, Operation.READ),
        }
    ),
)

VIEWER_TEMPLATE = RoleTemplate(
    name="Viewer",
    description="Read-only access to tickets",
    permissions=frozenset(
        {
            PermissionKey(EntityType.TICKET, Operation.READ),
            PermissionKey(EntityType.COMMENT, Operation.READ),
            PermissionKey(EntityType.HISTORY, Operation.READ),
        }
    ),
)

DEFAULT_ROLE_TEMPLATES: tuple[RoleTemplate, ...] = (
    ADMIN_TEMPLATE,
    MEMBER_TEMPLATE,
    VIEWER_TEMPLATE,
)


def template_permission_keys(
    templates: tuple[RoleTemplate, ...] = DEFAULT_ROLE_TEMPLATES,
) -> list[PermissionKey]:
    """Every permission referenced by the templates, in a stable order."""
    keys: set[PermissionKey] = set()
    for template in templates:
        keys |= template.permissions
    return sorted(keys)
