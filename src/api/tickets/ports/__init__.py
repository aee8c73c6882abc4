"""Ports for the Tickets bounded context."""

from tickets.ports.repositories import (
    ICommentRepository,
    IHistoryRepository,
    ITicketRepository,
    TicketFilters,
)

__all__ = [
    "ICommentRepository",
    "IHistoryRepository",
    "ITicketRepository",
    "TicketFilters",
]
