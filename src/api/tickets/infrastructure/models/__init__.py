"""SQLAlchemy ORM models for the Tickets bounded context."""

from tickets.infrastructure.models.comment import CommentModel
from tickets.infrastructure.models.history import TicketHistoryModel
from tickets.infrastructure.models.ticket import TicketModel

__all__ = ["CommentModel", "TicketHistoryModel", "TicketModel"]
