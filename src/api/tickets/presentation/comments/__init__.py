"""Comment presentation layer."""

from tickets.presentation.comments.routes import router

__all__ = ["router"]
