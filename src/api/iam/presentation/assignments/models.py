"""Request and response models for assignment API endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from iam.application.value_objects import AssignmentView


class AssignRolesRequest(BaseModel):
    """Bulk assignment: ``user_ids[i]`` receives ``role_ids[i]``.

    Lengths are checked by the service so that the error names both counts.
    """

    user_ids: list[str] = Field(..., examples=[["alice", "bob"]])
    role_ids: list[str] = Field(
        ..., examples=[["01HN3XQ7K2XYZ123456789ABCD", "01HN3XQ7K2XYZ123456789ABCE"]]
    )


class SetUserRoleRequest(BaseModel):
    """Replace a user's role in the workspace."""

    role_id: str = Field(..., min_length=26, max_length=26)


class AssignmentResponse(BaseModel):
    """A user's role in a workspace."""

    user_id: str
    username: str
    workspace_id: str
    role_id: str
    role_name: str
    created_at: datetime

    @classmethod
    def from_view(cls, view: AssignmentView) -> AssignmentResponse:
        return cls(
            user_id=view.user_id.value,
            username=view.username,
            workspace_id=view.workspace_id.value,
            role_id=view.role_id.value,
            role_name=view.role_name,
            created_at=view.created_at,
        )


class AssignmentListResponse(BaseModel):
    assignments: list[AssignmentResponse]
    count: int


class RemoveAssignmentResponse(BaseModel):
    """Outcome of removing a user's assignment."""

    removed: int = Field(..., description="Number of assignments removed")
