"""Tickets bounded context.

Workspace-scoped tickets with a field-level, append-only change history
and threaded comments. Access is decided by the authorization provider
from the shared kernel; this context never imports IAM internals.
"""
