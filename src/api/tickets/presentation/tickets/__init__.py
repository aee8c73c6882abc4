"""Ticket presentation layer."""

from tickets.presentation.tickets.routes import router

__all__ = ["router"]
