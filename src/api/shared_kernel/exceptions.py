"""Error taxonomy shared by all bounded contexts.

Every domain error raised by an application service derives from one of
these classes. The ``kind`` attribute is a stable machine-readable tag that
the presentation layer maps to an HTTP status code.
"""

from __future__ import annotations

from typing import Any


class DeskflowError(Exception):
    """Base class for domain errors.

    Attributes:
        kind: Stable error category tag
        details: Extra structured data included in error responses
    """

    kind: str = "unexpected"

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(DeskflowError, ValueError):
    """Raised when a payload or argument fails validation."""

    kind = "validation"


class AuthorizationError(DeskflowError):
    """Raised when the caller lacks the permission for an operation."""

    kind = "authorization"


class NotFoundError(DeskflowError):
    """Raised when a referenced entity does not exist in scope."""

    kind = "not_found"


class ConflictError(DeskflowError):
    """Raised when an operation conflicts with existing state."""

    kind = "conflict"


class UnexpectedError(DeskflowError):
    """Raised for failures that are not the caller's fault."""

    kind = "unexpected"
