"""Domain-Oriented Observability for Tickets infrastructure layer."""

from tickets.infrastructure.observability.repository_probe import (
    CommentRepositoryProbe,
    DefaultCommentRepositoryProbe,
    DefaultHistoryRepositoryProbe,
    DefaultTicketRepositoryProbe,
    HistoryRepositoryProbe,
    TicketRepositoryProbe,
)

__all__ = [
    "CommentRepositoryProbe",
    "DefaultCommentRepositoryProbe",
    "DefaultHistoryRepositoryProbe",
    "DefaultTicketRepositoryProbe",
    "HistoryRepositoryProbe",
    "TicketRepositoryProbe",
]
