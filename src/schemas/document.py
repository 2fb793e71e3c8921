"""
Document Pydantic schemas for API request/response handling.

Documents are metadata records pointing at an already stored file; the API
never receives file contents.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.models.enums import DocumentOrigin, DocumentType


class DocumentCreate(BaseModel):
    """
    Schema for registering a document on a movement.

    The file type is derived from the extension of ``file_name`` (or of
    ``file_url`` when no name is given).

    Attributes:
        file_url: Where the file is stored
        file_name: Original file name
        origin: photo or manual_upload
        size_bytes: File size
    """

    file_url: str = Field(
        min_length=1,
        max_length=500,
        description="Location of the stored file",
        examples=["https://files.example.com/receipts/2024-03-01.pdf"],
    )
    file_name: str | None = Field(
        default=None,
        max_length=255,
        description="Original file name",
        examples=["receipt.jpg"],
    )
    origin: DocumentOrigin = Field(
        default=DocumentOrigin.manual_upload,
        description="How the document was attached",
    )
    size_bytes: int | None = Field(default=None, ge=0, description="File size in bytes")

    @field_validator("file_url")
    @classmethod
    def validate_file_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("File URL cannot be empty")
        return value


class DocumentResponse(BaseModel):
    """
    Schema for document response.

    Attributes:
        id: Document UUID
        movement_id: Movement the document is attached to
        file_url: Location of the stored file
        file_name: Original file name
        file_type: image, pdf or other
        origin: photo or manual_upload
        size_bytes: File size
        created_at: When the document was registered
    """

    id: uuid.UUID
    movement_id: uuid.UUID
    file_url: str
    file_name: str | None = None
    file_type: DocumentType
    origin: DocumentOrigin
    size_bytes: int | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
