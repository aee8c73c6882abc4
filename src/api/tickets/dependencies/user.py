"""Caller identity for ticket routes, borrowed from IAM."""

from iam.dependencies.user import get_current_user

__all__ = ["get_current_user"]
