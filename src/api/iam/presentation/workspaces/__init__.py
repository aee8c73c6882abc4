"""Workspace presentation layer."""

from iam.presentation.workspaces.routes import router

__all__ = ["router"]
