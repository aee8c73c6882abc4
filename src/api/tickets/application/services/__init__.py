"""Application services for the Tickets bounded context."""

from tickets.application.services.comment_service import CommentService
from tickets.application.services.history_writer import HistoryWriter
from tickets.application.services.ticket_service import TicketService

__all__ = [
    "CommentService",
    "HistoryWriter",
    "TicketService",
]
