"""User routes. Restricted to super admins."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from iam.application.services import UserService
from iam.dependencies.user import get_current_user, get_user_service
from iam.domain.value_objects import UserId
from iam.presentation.users.models import (
    CreateUserRequest,
    UserListResponse,
    UserResponse,
)
from shared_kernel.authorization.types import CurrentUser
from shared_kernel.exceptions import DeskflowError
from shared_kernel.http_errors import bad_request, internal_error, to_http_exception

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    description="List users who are not super admins, ordered by username.",
)
async def list_users(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserListResponse:
    try:
        users = await service.list_users(current_user)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to list users") from e

    return UserListResponse(
        users=[UserResponse.from_domain(u) for u in users],
        count=len(users),
    )


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
    responses={409: {"description": "User id or username already exists"}},
)
async def create_user(
    request: CreateUserRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    try:
        user_id = UserId.from_string(request.id)
    except ValueError as e:
        raise bad_request("Invalid user ID") from e

    try:
        user = await service.create_user(
            current_user, user_id, request.username, request.user_type
        )
        return UserResponse.from_domain(user)
    except DeskflowError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        raise internal_error("Failed to create user") from e
