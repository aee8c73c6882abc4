"""Role assignment presentation layer."""

from iam.presentation.assignments.routes import router

__all__ = ["router"]
