"""
Document repository for database operations.

This module provides database operations for the Document model:
- Standard CRUD operations (inherited from BaseRepository)
- Documents of a movement
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.document import Document
from src.repositories.base import BaseRepository


class DocumentRepository(BaseRepository[Document]):
    """Repository for Document model database operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Document, session)

    async def list_by_movement(self, movement_id: uuid.UUID) -> list[Document]:
        """Get the documents of a movement, newest first."""
        query = (
            select(Document)
            .where(Document.movement_id == movement_id)
            .order_by(Document.created_at.desc())
        )

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_in_movement(
        self, document_id: uuid.UUID, movement_id: uuid.UUID
    ) -> Document | None:
        """Get a document only if it belongs to the given movement."""
        query = select(Document).where(
            Document.id == document_id,
            Document.movement_id == movement_id,
        )

        result = await self.session.execute(query)
        return result.scalar_one_or_none()
