"""
Tag API routes.

This module provides:
- GET /api/v1/accounts/{account_id}/tags - List tags with usage counts
- POST /api/v1/accounts/{account_id}/tags - Create tag
- GET/PUT/DELETE /api/v1/accounts/{account_id}/tags/{tag_id}
- GET /api/v1/accounts/{account_id}/tags/{tag_id}/movements - Movements carrying the tag
"""

import logging
import uuid

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    CurrentUser,
    DeleteAccess,
    EditAccess,
    TagServiceDep,
    ViewAccess,
)
from src.schemas.common import PaginatedResponse, PaginationMeta, PaginationParams
from src.schemas.movement import MovementResponse
from src.schemas.tag import TagCreate, TagResponse, TagUpdate, TagWithUsage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts/{account_id}/tags", tags=["Tags"])


@router.get("", response_model=list[TagWithUsage], summary="List tags")
async def list_tags(
    account_id: uuid.UUID,
    access: ViewAccess,
    tag_service: TagServiceDep,
) -> list[TagWithUsage]:
    """List the account's tags by name, each with the number of movements carrying it."""
    return await tag_service.list_tags(account_id)


@router.post(
    "",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create tag",
)
async def create_tag(
    account_id: uuid.UUID,
    tag_data: TagCreate,
    current_user: CurrentUser,
    access: EditAccess,
    tag_service: TagServiceDep,
) -> TagResponse:
    """
    Raises:
        - 409 Conflict: The account already has a tag with that name
    """
    tag = await tag_service.create_tag(current_user, account_id, tag_data)
    return TagResponse.model_validate(tag)


@router.get("/{tag_id}", response_model=TagWithUsage, summary="Get tag")
async def get_tag(
    account_id: uuid.UUID,
    tag_id: uuid.UUID,
    access: ViewAccess,
    tag_service: TagServiceDep,
) -> TagWithUsage:
    return await tag_service.get_tag_with_usage(account_id, tag_id)


@router.put("/{tag_id}", response_model=TagResponse, summary="Update tag")
async def update_tag(
    account_id: uuid.UUID,
    tag_id: uuid.UUID,
    tag_data: TagUpdate,
    current_user: CurrentUser,
    access: EditAccess,
    tag_service: TagServiceDep,
) -> TagResponse:
    tag = await tag_service.update_tag(current_user, account_id, tag_id, tag_data)
    return TagResponse.model_validate(tag)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete tag")
async def delete_tag(
    account_id: uuid.UUID,
    tag_id: uuid.UUID,
    current_user: CurrentUser,
    access: DeleteAccess,
    tag_service: TagServiceDep,
) -> None:
    """Delete the tag; movements lose it but are otherwise untouched."""
    await tag_service.delete_tag(current_user, account_id, tag_id)


@router.get(
    "/{tag_id}/movements",
    response_model=PaginatedResponse[MovementResponse],
    summary="List movements by tag",
)
async def list_movements_by_tag(
    account_id: uuid.UUID,
    tag_id: uuid.UUID,
    access: ViewAccess,
    tag_service: TagServiceDep,
    pagination: PaginationParams = Depends(),
) -> PaginatedResponse[MovementResponse]:
    movements, total = await tag_service.list_movements_by_tag(account_id, tag_id, pagination)

    return PaginatedResponse(
        data=[MovementResponse.model_validate(m) for m in movements],
        meta=PaginationMeta.build(total, pagination),
    )
