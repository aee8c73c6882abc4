"""Aggregates for the Tickets domain."""

from tickets.domain.aggregates.comment import Comment
from tickets.domain.aggregates.history import HistoryEntry
from tickets.domain.aggregates.ticket import Ticket

__all__ = ["Comment", "HistoryEntry", "Ticket"]
