"""
Document service.

Documents are metadata records for files attached to a movement. The file
type is derived from the extension of the file name (or of the URL when no
name is given).
"""

import logging
import uuid
from pathlib import PurePosixPath
from urllib.parse import urlparse

from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import NotFoundError
from src.models.document import Document
from src.models.enums import DocumentType
from src.models.movement import Movement
from src.models.user import User
from src.repositories.document_repository import DocumentRepository
from src.repositories.movement_repository import MovementRepository
from src.schemas.document import DocumentCreate

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp", "bmp"})


def detect_file_type(file_name: str | None, file_url: str) -> DocumentType:
    """
    Classify a file by extension.

    Example:
        >>> detect_file_type("receipt.JPG", "https://cdn/x")
        <DocumentType.image: 'image'>
        >>> detect_file_type(None, "https://cdn/invoices/march.pdf?sig=1")
        <DocumentType.pdf: 'pdf'>
    """
    source = file_name or urlparse(file_url).path
    extension = PurePosixPath(source).suffix.lower().lstrip(".")

    if extension in IMAGE_EXTENSIONS:
        return DocumentType.image
    if extension == "pdf":
        return DocumentType.pdf
    return DocumentType.other


class DocumentService:
    """Service class for movement documents."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repo = DocumentRepository(session)
        self.movement_repo = MovementRepository(session)

    async def _get_movement(self, account_id: uuid.UUID, movement_id: uuid.UUID) -> Movement:
        movement = await self.movement_repo.get_in_account(movement_id, account_id)
        if movement is None:
            raise NotFoundError("Movement")
        return movement

    async def list_documents(
        self, account_id: uuid.UUID, movement_id: uuid.UUID
    ) -> list[Document]:
        """List the documents of a movement, newest first."""
        movement = await self._get_movement(account_id, movement_id)
        return await self.document_repo.list_by_movement(movement.id)

    async def add_document(
        self,
        user: User,
        account_id: uuid.UUID,
        movement_id: uuid.UUID,
        data: DocumentCreate,
    ) -> Document:
        """
        Register a file attached to a movement.

        Raises:
            NotFoundError: If the movement does not belong to the account
        """
        movement = await self._get_movement(account_id, movement_id)

        document = await self.document_repo.add(
            Document(
                movement_id=movement.id,
                file_url=data.file_url,
                file_name=data.file_name,
                file_type=detect_file_type(data.file_name, data.file_url),
                origin=data.origin,
                size_bytes=data.size_bytes,
            )
        )
        await self.session.commit()

        logger.info(
            f"User {user.id} attached {document.file_type.value} document {document.id} "
            f"to movement {movement.id}"
        )
        return document

    async def delete_document(
        self,
        user: User,
        account_id: uuid.UUID,
        movement_id: uuid.UUID,
        document_id: uuid.UUID,
    ) -> None:
        """
        Delete a document record.

        Raises:
            NotFoundError: If the movement or the document is not found
        """
        movement = await self._get_movement(account_id, movement_id)
        document = await self.document_repo.get_in_movement(document_id, movement.id)
        if document is None:
            raise NotFoundError("Document")

        await self.document_repo.delete(document)
        await self.session.commit()

        logger.info(f"User {user.id} deleted document {document_id} of movement {movement.id}")
