"""Request and response models for user API endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from iam.domain.aggregates import User
from iam.domain.value_objects import UserType


class CreateUserRequest(BaseModel):
    """Register a user known to the upstream identity provider."""

    id: str = Field(..., min_length=1, max_length=255, description="Upstream user id")
    username: str = Field(..., min_length=1, max_length=255)
    user_type: UserType = Field(default=UserType.OTHER)


class UserResponse(BaseModel):
    id: str
    username: str
    user_type: UserType
    is_active: bool

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        return cls(
            id=user.id.value,
            username=user.username,
            user_type=user.user_type,
            is_active=user.is_active,
        )


class UserListResponse(BaseModel):
    users: list[UserResponse]
    count: int
