"""Domain-Oriented Observability for the Tickets application layer."""

from tickets.application.observability.comment_service_probe import (
    CommentServiceProbe,
    DefaultCommentServiceProbe,
)
from tickets.application.observability.history_probe import (
    DefaultHistoryProbe,
    HistoryProbe,
)
from tickets.application.observability.ticket_service_probe import (
    DefaultTicketServiceProbe,
    TicketServiceProbe,
)

__all__ = [
    "CommentServiceProbe",
    "DefaultCommentServiceProbe",
    "DefaultHistoryProbe",
    "HistoryProbe",
    "DefaultTicketServiceProbe",
    "TicketServiceProbe",
]
