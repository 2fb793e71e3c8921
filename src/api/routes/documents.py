"""
Document API routes.

Documents are metadata records pointing at a file URL; nothing is uploaded
through this API.

This module provides:
- GET /api/v1/accounts/{account_id}/movements/{movement_id}/documents
- POST /api/v1/accounts/{account_id}/movements/{movement_id}/documents
- DELETE /api/v1/accounts/{account_id}/movements/{movement_id}/documents/{document_id}
"""

import logging
import uuid

from fastapi import APIRouter, status

from src.api.dependencies import (
    CreateAccess,
    CurrentUser,
    DeleteAccess,
    DocumentServiceDep,
    ViewAccess,
)
from src.schemas.document import DocumentCreate, DocumentResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/accounts/{account_id}/movements/{movement_id}/documents",
    tags=["Documents"],
)


@router.get("", response_model=list[DocumentResponse], summary="List movement documents")
async def list_documents(
    account_id: uuid.UUID,
    movement_id: uuid.UUID,
    access: ViewAccess,
    document_service: DocumentServiceDep,
) -> list[DocumentResponse]:
    documents = await document_service.list_documents(account_id, movement_id)
    return [DocumentResponse.model_validate(d) for d in documents]


@router.post(
    "",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Attach document",
    description="""
    Register a file attached to the movement. The file type (`image`, `pdf`
    or `other`) is derived from the file name extension, or from the URL
    path when no name is given.
    """,
)
async def add_document(
    account_id: uuid.UUID,
    movement_id: uuid.UUID,
    document_data: DocumentCreate,
    current_user: CurrentUser,
    access: CreateAccess,
    document_service: DocumentServiceDep,
) -> DocumentResponse:
    document = await document_service.add_document(
        current_user, account_id, movement_id, document_data
    )
    return DocumentResponse.model_validate(document)


@router.delete(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete document",
)
async def delete_document(
    account_id: uuid.UUID,
    movement_id: uuid.UUID,
    document_id: uuid.UUID,
    current_user: CurrentUser,
    access: DeleteAccess,
    document_service: DocumentServiceDep,
) -> None:
    await document_service.delete_document(current_user, account_id, movement_id, document_id)
