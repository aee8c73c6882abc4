"""IAM presentation layer - aggregate-based organization.

Organizes presentation concerns by domain aggregate (workspaces, roles,
assignments, users). Each aggregate package contains its own routes and
models.
"""

from __future__ import annotations

from fastapi import APIRouter

from iam.presentation import assignments, roles, users, workspaces

# Auth is enforced per-endpoint: each handler declares get_current_user.
router = APIRouter(
    prefix="/iam",
    tags=["iam"],
)

router.include_router(workspaces.router)
router.include_router(roles.router)
router.include_router(assignments.router)
router.include_router(users.router)

__all__ = ["router"]
