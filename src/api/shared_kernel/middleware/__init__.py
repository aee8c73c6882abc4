"""Shared middleware for cross-cutting concerns.

This module contains middleware that is shared across bounded contexts.
The request context middleware is the primary component, tagging every
request and its log lines with a request id.
"""

from shared_kernel.middleware.request_context import (
    REQUEST_ID_HEADER,
    RequestContextMiddleware,
)

__all__ = ["REQUEST_ID_HEADER", "RequestContextMiddleware"]
