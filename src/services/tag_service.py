"""
Tag management service.

Tags are free-form labels scoped to one account. Names are unique per
account, compared case-insensitively.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import AlreadyExistsError, NotFoundError
from src.models.movement import Movement, Tag
from src.models.user import User
from src.repositories.movement_repository import MovementRepository
from src.repositories.tag_repository import TagRepository
from src.schemas.common import PaginationParams
from src.schemas.tag import TagCreate, TagUpdate, TagWithUsage

logger = logging.getLogger(__name__)


class TagService:
    """Service class for tag operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.tag_repo = TagRepository(session)
        self.movement_repo = MovementRepository(session)

    async def _ensure_unique_name(
        self, account_id: uuid.UUID, name: str, exclude_id: uuid.UUID | None = None
    ) -> None:
        if await self.tag_repo.name_exists(account_id, name, exclude_id=exclude_id):
            logger.warning(f"Duplicate tag name '{name}' in account {account_id}")
            raise AlreadyExistsError(f"Tag '{name}'")

    async def list_tags(self, account_id: uuid.UUID) -> list[TagWithUsage]:
        """List the tags of an account with their usage counts, by name."""
        rows = await self.tag_repo.list_with_usage(account_id)
        return [
            TagWithUsage(
                id=tag.id,
                account_id=tag.account_id,
                name=tag.name,
                color=tag.color,
                created_at=tag.created_at,
                movement_count=count,
            )
            for tag, count in rows
        ]

    async def get_tag(self, account_id: uuid.UUID, tag_id: uuid.UUID) -> Tag:
        """
        Get a tag of the account.

        Raises:
            NotFoundError: If the tag does not belong to the account
        """
        tag = await self.tag_repo.get_in_account(tag_id, account_id)
        if tag is None:
            raise NotFoundError("Tag")
        return tag

    async def get_tag_with_usage(self, account_id: uuid.UUID, tag_id: uuid.UUID) -> TagWithUsage:
        tag = await self.get_tag(account_id, tag_id)
        count = await self.tag_repo.count_usage(tag.id)
        return TagWithUsage(
            id=tag.id,
            account_id=tag.account_id,
            name=tag.name,
            color=tag.color,
            created_at=tag.created_at,
            movement_count=count,
        )

    async def create_tag(self, user: User, account_id: uuid.UUID, data: TagCreate) -> Tag:
        """
        Create a tag in an account.

        Raises:
            AlreadyExistsError: If the account already has a tag with that name
        """
        await self._ensure_unique_name(account_id, data.name)

        tag = await self.tag_repo.add(Tag(account_id=account_id, name=data.name, color=data.color))
        await self.session.commit()

        logger.info(f"User {user.id} created tag {tag.id} ({tag.name}) in account {account_id}")
        return tag

    async def update_tag(
        self, user: User, account_id: uuid.UUID, tag_id: uuid.UUID, data: TagUpdate
    ) -> Tag:
        """Rename and/or recolor a tag."""
        tag = await self.get_tag(account_id, tag_id)

        if data.name is not None:
            await self._ensure_unique_name(account_id, data.name, exclude_id=tag.id)
            tag.name = data.name
        if data.color is not None:
            tag.color = data.color

        tag = await self.tag_repo.update(tag)
        await self.session.commit()

        logger.info(f"User {user.id} updated tag {tag.id} in account {account_id}")
        return tag

    async def delete_tag(self, user: User, account_id: uuid.UUID, tag_id: uuid.UUID) -> None:
        """Delete a tag; movements lose the tag, nothing else changes."""
        tag = await self.get_tag(account_id, tag_id)
        await self.tag_repo.delete(tag)
        await self.session.commit()

        logger.info(f"User {user.id} deleted tag {tag_id} from account {account_id}")

    async def list_movements_by_tag(
        self,
        account_id: uuid.UUID,
        tag_id: uuid.UUID,
        pagination: PaginationParams,
    ) -> tuple[list[Movement], int]:
        """List the movements carrying a tag, newest operation date first."""
        tag = await self.get_tag(account_id, tag_id)
        return await self.movement_repo.list_by_tag(
            tag.id, offset=pagination.offset, limit=pagination.page_size
        )
