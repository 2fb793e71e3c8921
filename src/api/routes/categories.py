"""
Category API routes.

This module provides:
- GET /api/v1/accounts/{account_id}/categories - Categories usable in the account
- POST /api/v1/accounts/{account_id}/categories - Create account category
- GET/PUT/DELETE /api/v1/accounts/{account_id}/categories/{category_id}
- GET /api/v1/categories/global - Global template categories (any user)
- POST/PUT/DELETE /api/v1/categories/global[/{category_id}] - Admin only

Only an account's own categories can be changed through account routes;
global categories are managed by admins and copied into new accounts.
"""

import logging
import uuid

from fastapi import APIRouter, Query, status

from src.api.dependencies import (
    AdminUser,
    CategoryServiceDep,
    CurrentUser,
    ManageCategoriesAccess,
    ViewAccess,
)
from src.models.enums import CategoryType
from src.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Categories"])


# ============================================================================
# Account Categories
# ============================================================================


@router.get(
    "/accounts/{account_id}/categories",
    response_model=list[CategoryResponse],
    summary="List account categories",
    description="""
    List the categories usable in the account: globals first, then by
    display order and name. The `type` filter also matches `both`.
    """,
)
async def list_categories(
    account_id: uuid.UUID,
    access: ViewAccess,
    category_service: CategoryServiceDep,
    category_type: CategoryType | None = Query(default=None, alias="type"),
) -> list[CategoryResponse]:
    categories = await category_service.list_categories(account_id, category_type)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post(
    "/accounts/{account_id}/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create account category",
)
async def create_category(
    account_id: uuid.UUID,
    category_data: CategoryCreate,
    current_user: CurrentUser,
    access: ManageCategoriesAccess,
    category_service: CategoryServiceDep,
) -> CategoryResponse:
    """
    Raises:
        - 409 Conflict: The account already has a category with that name
    """
    category = await category_service.create_category(current_user, account_id, category_data)
    return CategoryResponse.model_validate(category)


@router.get(
    "/accounts/{account_id}/categories/{category_id}",
    response_model=CategoryResponse,
    summary="Get account category",
)
async def get_category(
    account_id: uuid.UUID,
    category_id: uuid.UUID,
    access: ViewAccess,
    category_service: CategoryServiceDep,
) -> CategoryResponse:
    category = await category_service.get_category(account_id, category_id)
    return CategoryResponse.model_validate(category)


@router.put(
    "/accounts/{account_id}/categories/{category_id}",
    response_model=CategoryResponse,
    summary="Update account category",
)
async def update_category(
    account_id: uuid.UUID,
    category_id: uuid.UUID,
    category_data: CategoryUpdate,
    current_user: CurrentUser,
    access: ManageCategoriesAccess,
    category_service: CategoryServiceDep,
) -> CategoryResponse:
    category = await category_service.update_category(
        current_user, account_id, category_id, category_data
    )
    return CategoryResponse.model_validate(category)


@router.delete(
    "/accounts/{account_id}/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete account category",
)
async def delete_category(
    account_id: uuid.UUID,
    category_id: uuid.UUID,
    current_user: CurrentUser,
    access: ManageCategoriesAccess,
    category_service: CategoryServiceDep,
) -> None:
    """
    Raises:
        - 400 Bad Request: Movements still use the category
    """
    await category_service.delete_category(current_user, account_id, category_id)


# ============================================================================
# Global Categories
# ============================================================================


@router.get(
    "/categories/global",
    response_model=list[CategoryResponse],
    summary="List global categories",
)
async def list_global_categories(
    current_user: CurrentUser,
    category_service: CategoryServiceDep,
    category_type: CategoryType | None = Query(default=None, alias="type"),
) -> list[CategoryResponse]:
    categories = await category_service.list_global_categories(category_type)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post(
    "/categories/global",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create global category",
    description="Admin only. Existing accounts are unaffected; new accounts get a copy.",
)
async def create_global_category(
    category_data: CategoryCreate,
    current_user: AdminUser,
    category_service: CategoryServiceDep,
) -> CategoryResponse:
    category = await category_service.create_global_category(current_user, category_data)
    return CategoryResponse.model_validate(category)


@router.put(
    "/categories/global/{category_id}",
    response_model=CategoryResponse,
    summary="Update global category",
)
async def update_global_category(
    category_id: uuid.UUID,
    category_data: CategoryUpdate,
    current_user: AdminUser,
    category_service: CategoryServiceDep,
) -> CategoryResponse:
    category = await category_service.update_global_category(
        current_user, category_id, category_data
    )
    return CategoryResponse.model_validate(category)


@router.delete(
    "/categories/global/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete global category",
)
async def delete_global_category(
    category_id: uuid.UUID,
    current_user: AdminUser,
    category_service: CategoryServiceDep,
) -> None:
    await category_service.delete_global_category(current_user, category_id)
