"""User aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.value_objects import UserId, UserType
from shared_kernel.exceptions import ValidationError


@dataclass(frozen=True)
class User:
    """User aggregate representing a person in the system.

    Users are authenticated upstream; this aggregate only carries what
    authorization needs: the account type and whether it is active.
    """

    id: UserId
    username: str
    user_type: UserType = UserType.OTHER
    is_active: bool = True

    def __post_init__(self) -> None:
        if not self.username or not self.username.strip() or len(self.username) > 255:
            raise ValidationError("Username must be between 1 and 255 characters")

    @property
    def is_super_admin(self) -> bool:
        """Whether the account bypasses workspace role checks."""
        return self.user_type == UserType.SUPER_ADMIN

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.username})"

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)
