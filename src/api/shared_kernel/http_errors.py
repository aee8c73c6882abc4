"""Translation of domain errors into HTTP responses.

Route handlers catch ``DeskflowError`` and raise the result of
``to_http_exception`` so every context reports errors with the same body:
``{"detail": {"kind": ..., "message": ..., **details}}``.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from shared_kernel.authorization.types import CurrentUser
from shared_kernel.exceptions import DeskflowError
from shared_kernel.identifiers import WorkspaceId

STATUS_BY_KIND: dict[str, int] = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "authorization": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "unexpected": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(error: DeskflowError) -> HTTPException:
    """Map a domain error to an HTTPException with a structured detail."""
    status_code = STATUS_BY_KIND.get(
        error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    detail = {"kind": error.kind, "message": error.message, **error.details}
    return HTTPException(status_code=status_code, detail=detail)


def internal_error(message: str) -> HTTPException:
    """Build the generic 500 response used for unexpected failures."""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"kind": "unexpected", "message": message},
    )


def bad_request(message: str) -> HTTPException:
    """Build a 400 response for malformed path or query parameters."""
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"kind": "validation", "message": message},
    )


def parse_workspace_path(workspace_id: str, current_user: CurrentUser) -> WorkspaceId:
    """Parse the workspace id of a request path.

    A malformed id names no workspace, so only a super admin could be
    authorized for it; every other caller gets the 403 first.
    """
    try:
        return WorkspaceId.from_string(workspace_id)
    except ValueError as e:
        if not current_user.is_super_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "kind": "authorization",
                    "message": f"No access to workspace {workspace_id}",
                },
            ) from e
        raise bad_request("Invalid workspace ID format") from e
