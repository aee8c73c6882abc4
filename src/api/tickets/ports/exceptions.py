"""Domain exceptions for the Tickets bounded context."""

from __future__ import annotations

from shared_kernel.exceptions import AuthorizationError, NotFoundError, ValidationError


class TicketNotFoundError(NotFoundError):
    """Raised when a ticket does not exist in the workspace."""

    pass


class CommentNotFoundError(NotFoundError):
    """Raised when a comment does not exist in the workspace."""

    pass


class InvalidParentTicketError(ValidationError):
    """Raised when a parent ticket is missing, foreign, or the ticket itself."""

    pass


class AssigneeNotMemberError(ValidationError):
    """Raised when the assignee holds no role in the workspace."""

    pass


class InvalidCommentParentError(ValidationError):
    """Raised when a reply targets a missing comment, another ticket, or a reply."""

    pass


class NotCommentAuthorError(AuthorizationError):
    """Raised when someone other than the author edits or deletes a comment."""

    pass
