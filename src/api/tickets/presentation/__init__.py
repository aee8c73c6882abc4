"""Tickets presentation layer.

Ticket and comment routes live in their own aggregate packages; both are
scoped under ``/workspaces/{workspace_id}``.
"""

from __future__ import annotations

from fastapi import APIRouter

from tickets.presentation import comments, tickets

router = APIRouter(tags=["tickets"])

router.include_router(tickets.router)
router.include_router(comments.router)

__all__ = ["router"]
