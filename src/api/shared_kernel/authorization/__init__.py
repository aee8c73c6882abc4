"""Authorization primitives for workspace-scoped access control.

This module provides the shared permission vocabulary and the provider
protocol used across bounded contexts.
"""

from shared_kernel.authorization.protocols import AuthorizationProvider
from shared_kernel.authorization.types import (
    CurrentUser,
    EntityType,
    Operation,
    PermissionKey,
    crud,
)

__all__ = [
    "AuthorizationProvider",
    "CurrentUser",
    "EntityType",
    "Operation",
    "PermissionKey",
    "crud",
]
