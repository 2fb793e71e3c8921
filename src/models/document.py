"""
Document model.

Documents are metadata records for files attached to a movement (receipts,
invoices). The file itself lives wherever ``file_url`` points.
"""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base
from src.models.enums import DocumentOrigin, DocumentType
from src.models.mixins import CreatedAtMixin


class Document(Base, CreatedAtMixin):
    """
    File attached to a movement.

    Attributes:
        id: UUID primary key
        movement_id: Movement the document belongs to
        file_url: Location of the stored file
        file_name: Original file name
        file_type: image, pdf or other (derived from the extension)
        origin: photo or manual_upload
        size_bytes: File size, when known
    """

    __tablename__ = "documents"

    movement_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("movements.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    file_url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )

    file_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    file_type: Mapped[DocumentType] = mapped_column(
        nullable=False,
    )

    origin: Mapped[DocumentOrigin] = mapped_column(
        nullable=False,
        default=DocumentOrigin.manual_upload,
    )

    size_bytes: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"Document(id={self.id}, file_name={self.file_name})"
