"""
User administration API routes.

This module provides (all admin only):
- GET /api/v1/users - List users (paginated, filterable)
- POST /api/v1/users - Create user
- GET /api/v1/users/{user_id} - Get user
- PUT /api/v1/users/{user_id} - Update user (name, email, role, state)
- DELETE /api/v1/users/{user_id} - Delete user
- PUT /api/v1/users/{user_id}/password - Reset password
"""

import logging
import uuid

from fastapi import APIRouter, Depends, status

from src.api.dependencies import AdminUser, UserServiceDep
from src.schemas.common import MessageResponse, PaginatedResponse, PaginationParams
from src.schemas.user import (
    UserCreate,
    UserFilterParams,
    UserPasswordReset,
    UserResponse,
    UserUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=PaginatedResponse[UserResponse],
    summary="List users",
    description="""
    List users with pagination, search (name or email) and state/role filters.

    **Permission:** Admin only
    """,
)
async def list_users(
    current_user: AdminUser,
    user_service: UserServiceDep,
    pagination: PaginationParams = Depends(),
    filters: UserFilterParams = Depends(),
) -> PaginatedResponse[UserResponse]:
    """
    List all users.

    Query parameters:
        - page / page_size: Pagination
        - search: Substring of name or email
        - state: active or blocked
        - role: ordinary or admin
    """
    return await user_service.list_users(pagination=pagination, filters=filters)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
async def create_user(
    user_data: UserCreate,
    current_user: AdminUser,
    user_service: UserServiceDep,
) -> UserResponse:
    """
    Create a user with an explicit role and state.

    Raises:
        - 409 Conflict: If the email is already registered
    """
    user = await user_service.create_user(current_user, user_data)
    return UserResponse.model_validate(user)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user",
)
async def get_user(
    user_id: uuid.UUID,
    current_user: AdminUser,
    user_service: UserServiceDep,
) -> UserResponse:
    user = await user_service.get_user(user_id)
    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update user",
    description="""
    Update name, email, role and/or state. Setting `state` to `blocked`
    refuses further logins and tokens.

    **Permission:** Admin only
    """,
)
async def update_user(
    user_id: uuid.UUID,
    update_data: UserUpdate,
    current_user: AdminUser,
    user_service: UserServiceDep,
) -> UserResponse:
    """
    Update a user.

    Raises:
        - 404 Not Found: If the user does not exist
        - 409 Conflict: If the new email is already in use
    """
    user = await user_service.update_user(current_user, user_id, update_data)
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user",
)
async def delete_user(
    user_id: uuid.UUID,
    current_user: AdminUser,
    user_service: UserServiceDep,
) -> None:
    """
    Permanently delete a user.

    Raises:
        - 400 Bad Request: If the admin targets themselves
        - 404 Not Found: If the user does not exist
    """
    await user_service.delete_user(current_user, user_id)


@router.put(
    "/{user_id}/password",
    response_model=MessageResponse,
    summary="Reset user password",
)
async def reset_password(
    user_id: uuid.UUID,
    password_data: UserPasswordReset,
    current_user: AdminUser,
    user_service: UserServiceDep,
) -> MessageResponse:
    await user_service.reset_password(current_user, user_id, password_data.new_password)
    return MessageResponse(message="Password reset successfully")
