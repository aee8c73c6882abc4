"""Value objects for IAM domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID

from shared_kernel.identifiers import UserId, WorkspaceId

ADMIN_ROLE_NAME = "Admin"

__all__ = [
    "ADMIN_ROLE_NAME",
    "PermissionId",
    "RoleId",
    "UserId",
    "UserType",
    "WorkspaceId",
]


@dataclass(frozen=True)
class RoleId:
    """Identifier for a Role aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> RoleId:
        """Generate a new RoleId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> RoleId:
        """Create RoleId from string value.

        Args:
            value: ULID string

        Returns:
            RoleId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid RoleId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class PermissionId:
    """Identifier for a registered permission."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> PermissionId:
        """Generate a new PermissionId using ULID."""
        return cls(value=str(ULID()))


class UserType(StrEnum):
    """Kind of user account.

    SUPER_ADMIN users bypass workspace role checks everywhere.
    """

    SUPER_ADMIN = "SUPER_ADMIN"
    OTHER = "OTHER"
