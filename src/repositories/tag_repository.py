"""
Tag repository for database operations.

This module provides database operations for the Tag model:
- Standard CRUD operations (inherited from BaseRepository)
- Account listings with usage counts
- Case-insensitive name checks
"""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.movement import Tag, movement_tags
from src.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """Repository for Tag model database operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Tag, session)

    async def list_with_usage(self, account_id: uuid.UUID) -> list[tuple[Tag, int]]:
        """
        Get the tags of an account with the number of movements using each.

        Returns:
            List of (tag, movement_count) ordered by tag name
        """
        usage = func.count(movement_tags.c.movement_id)
        query = (
            select(Tag, usage)
            .outerjoin(movement_tags, movement_tags.c.tag_id == Tag.id)
            .where(Tag.account_id == account_id)
            .group_by(Tag.id)
            .order_by(Tag.name.asc())
        )

        result = await self.session.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def get_in_account(
        self, tag_id: uuid.UUID, account_id: uuid.UUID
    ) -> Tag | None:
        """Get a tag only if it belongs to the given account."""
        query = select(Tag).where(Tag.id == tag_id, Tag.account_id == account_id)

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_many_in_account(
        self, tag_ids: list[uuid.UUID], account_id: uuid.UUID
    ) -> list[Tag]:
        """
        Resolve tag ids to tags of the account.

        Ids of other accounts' tags, or of no tag at all, are dropped.
        """
        if not tag_ids:
            return []

        query = select(Tag).where(Tag.id.in_(tag_ids), Tag.account_id == account_id)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def name_exists(
        self,
        account_id: uuid.UUID,
        name: str,
        exclude_id: uuid.UUID | None = None,
    ) -> bool:
        """Check for a case-insensitive tag name clash inside an account."""
        query = select(func.count()).select_from(Tag).where(
            Tag.account_id == account_id,
            func.lower(Tag.name) == name.lower(),
        )

        if exclude_id is not None:
            query = query.where(Tag.id != exclude_id)

        result = await self.session.execute(query)
        return result.scalar_one() > 0

    async def count_usage(self, tag_id: uuid.UUID) -> int:
        """Number of movements carrying the tag."""
        query = (
            select(func.count())
            .select_from(movement_tags)
            .where(movement_tags.c.tag_id == tag_id)
        )

        result = await self.session.execute(query)
        return result.scalar_one()
