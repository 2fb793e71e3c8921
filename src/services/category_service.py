"""
Category management service.

This module provides:
- Account category listing (account categories plus globals)
- Create, update and delete of an account's own categories
- Global category administration (admin routes)

Global categories are never edited through account routes; new accounts
receive private copies of them at creation (see AccountService).
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import AlreadyExistsError, CategoryInUseError, NotFoundError
from src.models.category import Category
from src.models.enums import CategoryType
from src.models.user import User
from src.repositories.category_repository import CategoryRepository
from src.schemas.category import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Service class for category operations.

    This service handles:
    - Listings filtered by type (``both`` matches income and expense)
    - Case-insensitive name uniqueness within an account, and among globals
    - The in-use rule: a category referenced by movements cannot be deleted
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize CategoryService.

        Args:
            session: Async database session
        """
        self.session = session
        self.category_repo = CategoryRepository(session)

    async def _ensure_unique_name(
        self,
        name: str,
        account_id: uuid.UUID | None,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        if await self.category_repo.name_exists(name, account_id, exclude_id=exclude_id):
            scope = f"account {account_id}" if account_id else "global categories"
            logger.warning(f"Duplicate category name '{name}' in {scope}")
            raise AlreadyExistsError(f"Category '{name}'")

    @staticmethod
    def _apply_update(category: Category, data: CategoryUpdate) -> None:
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None or field in ("icon", "color"):
                setattr(category, field, value)

    async def _delete(self, category: Category) -> None:
        if await self.category_repo.is_in_use(category.id):
            logger.warning(f"Refused to delete category {category.id}: still in use")
            raise CategoryInUseError()
        await self.category_repo.delete(category)
        await self.session.commit()

    # -------------------------------------------------------------------------
    # Account categories
    # -------------------------------------------------------------------------

    async def list_categories(
        self,
        account_id: uuid.UUID,
        category_type: CategoryType | None = None,
    ) -> list[Category]:
        """
        List the categories usable in an account.

        Globals first, then by display order, then by name.
        """
        return await self.category_repo.list_for_account(account_id, category_type)

    async def get_category(self, account_id: uuid.UUID, category_id: uuid.UUID) -> Category:
        """
        Get one of the account's own categories.

        Raises:
            NotFoundError: If the category is not private to the account
        """
        category = await self.category_repo.get_for_account(category_id, account_id)
        if category is None:
            raise NotFoundError("Category")
        return category

    async def create_category(
        self, user: User, account_id: uuid.UUID, data: CategoryCreate
    ) -> Category:
        """
        Create a category private to an account.

        Raises:
            AlreadyExistsError: If the account already has a category with
                that name (case-insensitive)
        """
        await self._ensure_unique_name(data.name, account_id)

        category = await self.category_repo.add(
            Category(account_id=account_id, is_global=False, **data.model_dump())
        )
        await self.session.commit()

        logger.info(f"User {user.id} created category {category.id} in account {account_id}")
        return category

    async def update_category(
        self,
        user: User,
        account_id: uuid.UUID,
        category_id: uuid.UUID,
        data: CategoryUpdate,
    ) -> Category:
        """
        Update one of the account's own categories.

        Raises:
            NotFoundError: If the category is global or of another account
            AlreadyExistsError: If the new name clashes
        """
        category = await self.get_category(account_id, category_id)

        if data.name is not None:
            await self._ensure_unique_name(data.name, account_id, exclude_id=category.id)

        self._apply_update(category, data)
        category = await self.category_repo.update(category)
        await self.session.commit()

        logger.info(f"User {user.id} updated category {category.id} in account {account_id}")
        return category

    async def delete_category(
        self, user: User, account_id: uuid.UUID, category_id: uuid.UUID
    ) -> None:
        """
        Delete one of the account's own categories.

        Raises:
            NotFoundError: If the category is global or of another account
            CategoryInUseError: If movements still reference it
        """
        category = await self.get_category(account_id, category_id)
        await self._delete(category)

        logger.info(f"User {user.id} deleted category {category_id} from account {account_id}")

    # -------------------------------------------------------------------------
    # Global categories
    # -------------------------------------------------------------------------

    async def list_global_categories(
        self, category_type: CategoryType | None = None
    ) -> list[Category]:
        """List the global template categories."""
        return await self.category_repo.list_globals(category_type)

    async def _get_global(self, category_id: uuid.UUID) -> Category:
        category = await self.category_repo.get_global(category_id)
        if category is None:
            raise NotFoundError("Category")
        return category

    async def create_global_category(self, admin: User, data: CategoryCreate) -> Category:
        """
        Create a global template category.

        Existing accounts are not affected; accounts created afterwards get
        a private copy.
        """
        await self._ensure_unique_name(data.name, None)

        category = await self.category_repo.add(
            Category(account_id=None, is_global=True, **data.model_dump())
        )
        await self.session.commit()

        logger.info(f"Admin {admin.id} created global category {category.id} ({category.name})")
        return category

    async def update_global_category(
        self, admin: User, category_id: uuid.UUID, data: CategoryUpdate
    ) -> Category:
        """Update a global template category; account copies keep their values."""
        category = await self._get_global(category_id)

        if data.name is not None:
            await self._ensure_unique_name(data.name, None, exclude_id=category.id)

        self._apply_update(category, data)
        category = await self.category_repo.update(category)
        await self.session.commit()

        logger.info(f"Admin {admin.id} updated global category {category.id}")
        return category

    async def delete_global_category(self, admin: User, category_id: uuid.UUID) -> None:
        """
        Delete a global template category.

        Raises:
            NotFoundError: If no global category has that ID
            CategoryInUseError: If movements still reference it
        """
        category = await self._get_global(category_id)
        await self._delete(category)

        logger.info(f"Admin {admin.id} deleted global category {category_id}")
