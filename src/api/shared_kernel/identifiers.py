"""Identifiers shared across bounded contexts.

Users and workspaces are referenced by both the IAM and Tickets contexts,
so their identifiers live in the shared kernel.
"""

from __future__ import annotations

from dataclasses import dataclass

from ulid import ULID


@dataclass(frozen=True)
class UserId:
    """Identifier for a user.

    User ids are issued by the external identity provider, so any
    non-empty string up to 255 characters is accepted.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> UserId:
        """Generate a new UserId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from string value.

        Raises:
            ValueError: If value is empty or longer than 255 characters
        """
        if not value or not value.strip() or len(value) > 255:
            raise ValueError(f"Invalid UserId: {value!r}")
        return cls(value=value)


@dataclass(frozen=True)
class WorkspaceId:
    """Identifier for a Workspace aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> WorkspaceId:
        """Generate a new WorkspaceId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> WorkspaceId:
        """Create WorkspaceId from string value.

        Args:
            value: ULID string

        Returns:
            WorkspaceId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid WorkspaceId: {value}") from e

        return cls(value=value)
