"""Value objects for the Tickets domain."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID

from shared_kernel.exceptions import ValidationError
from shared_kernel.identifiers import UserId, WorkspaceId

__all__ = [
    "CommentId",
    "HistoryAction",
    "TicketId",
    "TicketPriority",
    "TicketStatus",
    "TicketType",
    "UserId",
    "WorkspaceId",
]


@dataclass(frozen=True)
class TicketId:
    """Identifier for a Ticket aggregate (ULID)."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TicketId:
        """Generate a new TicketId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TicketId:
        """Create TicketId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid TicketId: {value}") from e
        return cls(value=value)


@dataclass(frozen=True)
class CommentId:
    """Identifier for a Comment (ULID)."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> CommentId:
        """Generate a new CommentId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> CommentId:
        """Create CommentId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid CommentId: {value}") from e
        return cls(value=value)


class _ParsableEnum(StrEnum):
    """StrEnum accepting any letter case on input."""

    @classmethod
    def parse(cls, value: str | _ParsableEnum):
        """Parse a tag case-insensitively.

        Raises:
            ValidationError: If the tag is not a member
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError as e:
            allowed = ", ".join(member.value for member in cls)
            raise ValidationError(
                f"Invalid {cls.__name__} {value!r}; expected one of {allowed}"
            ) from e


class TicketStatus(_ParsableEnum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    CLOSED = "CLOSED"


class TicketPriority(_ParsableEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class TicketType(_ParsableEnum):
    TASK = "TASK"
    BUG = "BUG"
    FEATURE = "FEATURE"
    STORY = "STORY"


class HistoryAction(StrEnum):
    """Kind of mutation a history row records."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
