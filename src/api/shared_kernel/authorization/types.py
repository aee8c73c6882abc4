"""Authorization type definitions.

Permissions are flat ``(entity, operation)`` pairs. These enums are the
closed vocabulary for both halves and ensure no hardcoded strings leak
across the codebase.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from shared_kernel.exceptions import ValidationError
from shared_kernel.identifiers import UserId


class EntityType(StrEnum):
    """Resource kinds a permission can target."""

    WORKSPACE = "WORKSPACE"
    ROLE = "ROLE"
    USER = "USER"
    USER_ROLE = "USER_ROLE"
    ROLE_PERMISSION = "ROLE_PERMISSION"
    TICKET = "TICKET"
    COMMENT = "COMMENT"
    HISTORY = "HISTORY"

    @classmethod
    def parse(cls, value: str) -> EntityType:
        """Parse an entity tag case-insensitively.

        Raises:
            ValidationError: If the tag is not part of the vocabulary
        """
        try:
            return cls(value.strip().upper())
        except (ValueError, AttributeError) as e:
            raise ValidationError(f"Unknown entity type: {value!r}") from e


class Operation(StrEnum):
    """Operations a permission can allow on an entity."""

    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: str) -> Operation:
        """Parse an operation tag case-insensitively.

        Raises:
            ValidationError: If the tag is not part of the vocabulary
        """
        try:
            return cls(value.strip().upper())
        except (ValueError, AttributeError) as e:
            raise ValidationError(f"Unknown operation: {value!r}") from e


@dataclass(frozen=True, order=True)
class PermissionKey:
    """Natural identity of a permission.

    Two permissions with the same entity and operation are the same
    permission, whichever workspace references them.
    """

    entity: EntityType
    operation: Operation

    def __str__(self) -> str:
        """Return string representation (e.g. ``TICKET:READ``)."""
        return f"{self.entity}:{self.operation}"

    @classmethod
    def of(cls, entity: str, operation: str) -> PermissionKey:
        """Build a key from raw strings, validating both halves."""
        return cls(entity=EntityType.parse(entity), operation=Operation.parse(operation))


def crud(entity: EntityType) -> frozenset[PermissionKey]:
    """Return all four operations on an entity."""
    return frozenset(PermissionKey(entity, operation) for operation in Operation)


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated caller of a request.

    Produced by the identity layer; ``is_super_admin`` comes from the
    stored user type and bypasses workspace role checks.
    """

    user_id: UserId
    username: str
    is_super_admin: bool = False
