"""
Category repository for database operations.

This module provides database operations for the Category model:
- Standard CRUD operations (inherited from BaseRepository)
- Account listings (account categories plus globals)
- Global template listing used when seeding new accounts
- Name and usage checks used before writes
"""

import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.category import Category
from src.models.enums import CategoryType
from src.models.movement import Movement
from src.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category model database operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Category, session)

    @staticmethod
    def _type_filter(category_type: CategoryType):
        # A "both" category matches either movement type
        return or_(Category.type == category_type, Category.type == CategoryType.both)

    async def list_for_account(
        self,
        account_id: uuid.UUID,
        category_type: CategoryType | None = None,
    ) -> list[Category]:
        """
        Get the categories usable in an account.

        Includes the account's own categories and the global ones, ordered
        globals first, then by display order, then by name.

        Args:
            account_id: Account whose categories to list
            category_type: Optional type filter (``both`` always matches)
        """
        query = select(Category).where(
            or_(Category.account_id == account_id, Category.is_global.is_(True))
        )

        if category_type is not None:
            query = query.where(self._type_filter(category_type))

        query = query.order_by(
            Category.is_global.desc(),
            Category.display_order.asc(),
            Category.name.asc(),
        )

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_globals(
        self, category_type: CategoryType | None = None
    ) -> list[Category]:
        """Get all global categories, by display order then name."""
        query = select(Category).where(Category.is_global.is_(True))

        if category_type is not None:
            query = query.where(self._type_filter(category_type))

        query = query.order_by(Category.display_order.asc(), Category.name.asc())

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_for_account(
        self, category_id: uuid.UUID, account_id: uuid.UUID
    ) -> Category | None:
        """Get a category only if it is private to the given account."""
        query = select(Category).where(
            Category.id == category_id,
            Category.account_id == account_id,
        )

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_global(self, category_id: uuid.UUID) -> Category | None:
        """Get a category only if it is global."""
        query = select(Category).where(
            Category.id == category_id,
            Category.is_global.is_(True),
        )

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def is_usable_in_account(
        self, category_id: uuid.UUID, account_id: uuid.UUID
    ) -> bool:
        """
        Check that a category is global or belongs to the account.

        Movements may only reference such categories.
        """
        query = (
            select(func.count())
            .select_from(Category)
            .where(
                Category.id == category_id,
                or_(Category.is_global.is_(True), Category.account_id == account_id),
            )
        )

        result = await self.session.execute(query)
        return result.scalar_one() > 0

    async def name_exists(
        self,
        name: str,
        account_id: uuid.UUID | None,
        exclude_id: uuid.UUID | None = None,
    ) -> bool:
        """
        Check for a case-insensitive name clash.

        Args:
            name: Candidate name
            account_id: Account scope, or None to check among global categories
            exclude_id: Category to ignore (the one being renamed)
        """
        query = select(func.count()).select_from(Category).where(
            func.lower(Category.name) == name.lower()
        )

        if account_id is None:
            query = query.where(Category.is_global.is_(True))
        else:
            query = query.where(Category.account_id == account_id)

        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)

        result = await self.session.execute(query)
        return result.scalar_one() > 0

    async def is_in_use(self, category_id: uuid.UUID) -> bool:
        """Check whether any movement references the category."""
        query = (
            select(func.count())
            .select_from(Movement)
            .where(Movement.category_id == category_id)
        )

        result = await self.session.execute(query)
        return result.scalar_one() > 0
