"""
User repository for database operations.

This module provides database operations for the User model:
- Standard CRUD operations (inherited from BaseRepository)
- Case-insensitive lookup by email
- Filtered, paginated listing for the admin user list
- Uniqueness checks used before inserts and email changes
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.enums import UserRole, UserState
from src.models.user import User
from src.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """
    Repository for User model database operations.

    Emails are stored lower-case; every lookup lower-cases its input too, so
    ``Alice@Example.com`` and ``alice@example.com`` find the same user.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> User | None:
        """
        Get user by email address (case-insensitive).

        Args:
            email: Email address to search for

        Returns:
            User instance or None if not found

        Example:
            user = await user_repo.get_by_email("Partner@Example.com")
        """
        query = select(User).where(func.lower(User.email) == email.lower())

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def update_last_login(self, user: User) -> None:
        """
        Stamp the user's last successful login with the current time.

        Called after successful authentication.
        """
        user.last_login_at = datetime.now(UTC)
        await self.session.flush()

    async def filter_users(
        self,
        search: str | None = None,
        state: UserState | None = None,
        role: UserRole | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[User], int]:
        """
        Filter users with multiple criteria and pagination.

        Used for the admin user list view.

        Args:
            search: Substring matched (case-insensitive) against name and email
            state: Filter by login state
            role: Filter by global role
            offset: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (users, total_count), newest users first

        Example:
            users, total = await user_repo.filter_users(
                search="garcia",
                state=UserState.active,
                offset=0,
                limit=20,
            )
        """
        query = select(User)

        if search:
            search_pattern = f"%{search}%"
            query = query.where(
                or_(
                    User.name.ilike(search_pattern),
                    User.email.ilike(search_pattern),
                )
            )

        if state is not None:
            query = query.where(User.state == state)

        if role is not None:
            query = query.where(User.role == role)

        query = query.order_by(User.created_at.desc())

        return await self._paginate(query, offset, limit)

    async def email_exists(
        self, email: str, exclude_user_id: uuid.UUID | None = None
    ) -> bool:
        """
        Check if email is already in use by another user.

        Args:
            email: Email address to check (case-insensitive)
            exclude_user_id: User ID to exclude from check (for updates)

        Returns:
            True if email exists, False otherwise

        Example:
            # During profile update
            if await user_repo.email_exists(new_email, exclude_user_id=user.id):
                raise AlreadyExistsError("User with this email")
        """
        query = select(func.count()).select_from(User).where(
            func.lower(User.email) == email.lower()
        )

        if exclude_user_id:
            query = query.where(User.id != exclude_user_id)

        result = await self.session.execute(query)
        return result.scalar_one() > 0
