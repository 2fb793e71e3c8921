"""
Movement API routes.

This module provides:
- GET /api/v1/accounts/{account_id}/movements - List movements (filtered, paginated)
- POST /api/v1/accounts/{account_id}/movements - Create movement
- POST /api/v1/accounts/{account_id}/movements/bulk - Create several movements
- GET /api/v1/accounts/{account_id}/movements/{movement_id} - Get with tags and documents
- PUT /api/v1/accounts/{account_id}/movements/{movement_id} - Update movement
- DELETE /api/v1/accounts/{account_id}/movements/{movement_id} - Delete movement
- POST /api/v1/accounts/{account_id}/movements/{movement_id}/confirm - Confirm scanned movement
"""

import logging
import uuid

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    CreateAccess,
    CurrentUser,
    DeleteAccess,
    EditAccess,
    MovementServiceDep,
    ViewAccess,
)
from src.schemas.common import ErrorResponse, PaginatedResponse, PaginationParams
from src.schemas.movement import (
    MovementBulkCreate,
    MovementBulkResult,
    MovementCreate,
    MovementDetailResponse,
    MovementFilterParams,
    MovementResponse,
    MovementUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts/{account_id}/movements", tags=["Movements"])


@router.get(
    "",
    response_model=PaginatedResponse[MovementResponse],
    summary="List movements",
    description="""
    List the account's movements, most recent operation date first.

    Filters: type, state, category, date range (inclusive), provider
    (case-insensitive substring) and a free-text search over description,
    provider and notes.
    """,
)
async def list_movements(
    account_id: uuid.UUID,
    access: ViewAccess,
    movement_service: MovementServiceDep,
    filters: MovementFilterParams = Depends(),
    pagination: PaginationParams = Depends(),
) -> PaginatedResponse[MovementResponse]:
    return await movement_service.list_movements(account_id, filters, pagination)


@router.post(
    "",
    response_model=MovementResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create movement",
    description="""
    Record an income or expense in the account currency.

    The category must be global or belong to the account. Tag ids that do
    not belong to the account are ignored.
    """,
    responses={400: {"description": "Category not usable in this account", "model": ErrorResponse}},
)
async def create_movement(
    account_id: uuid.UUID,
    movement_data: MovementCreate,
    current_user: CurrentUser,
    access: CreateAccess,
    movement_service: MovementServiceDep,
) -> MovementResponse:
    movement = await movement_service.create_movement(current_user, account_id, movement_data)
    return MovementResponse.model_validate(movement)


@router.post(
    "/bulk",
    response_model=MovementBulkResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create several movements",
    description="Rows whose category is not usable in the account are skipped.",
)
async def bulk_create_movements(
    account_id: uuid.UUID,
    bulk_data: MovementBulkCreate,
    current_user: CurrentUser,
    access: CreateAccess,
    movement_service: MovementServiceDep,
) -> MovementBulkResult:
    return await movement_service.bulk_create_movements(current_user, account_id, bulk_data)


@router.get(
    "/{movement_id}",
    response_model=MovementDetailResponse,
    summary="Get movement",
)
async def get_movement(
    account_id: uuid.UUID,
    movement_id: uuid.UUID,
    access: ViewAccess,
    movement_service: MovementServiceDep,
) -> MovementDetailResponse:
    """Return the movement with its tags and documents."""
    return await movement_service.get_movement_detail(account_id, movement_id)


@router.put(
    "/{movement_id}",
    response_model=MovementResponse,
    summary="Update movement",
    description="Omitted fields stay unchanged; `tag_ids`, when given, replaces the tag set.",
)
async def update_movement(
    account_id: uuid.UUID,
    movement_id: uuid.UUID,
    movement_data: MovementUpdate,
    current_user: CurrentUser,
    access: EditAccess,
    movement_service: MovementServiceDep,
) -> MovementResponse:
    movement = await movement_service.update_movement(
        current_user, account_id, movement_id, movement_data
    )
    return MovementResponse.model_validate(movement)


@router.delete(
    "/{movement_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete movement",
)
async def delete_movement(
    account_id: uuid.UUID,
    movement_id: uuid.UUID,
    current_user: CurrentUser,
    access: DeleteAccess,
    movement_service: MovementServiceDep,
) -> None:
    await movement_service.delete_movement(current_user, account_id, movement_id)


@router.post(
    "/{movement_id}/confirm",
    response_model=MovementResponse,
    summary="Confirm movement",
    description="Move a `pending_review` movement to `confirmed`. Anything else returns 404.",
)
async def confirm_movement(
    account_id: uuid.UUID,
    movement_id: uuid.UUID,
    current_user: CurrentUser,
    access: EditAccess,
    movement_service: MovementServiceDep,
) -> MovementResponse:
    movement = await movement_service.confirm_movement(current_user, account_id, movement_id)
    return MovementResponse.model_validate(movement)
