"""
User administration service.

This module provides (administrators only; enforced by the routes):
- List users with search, state and role filters and pagination
- Get, create and update users
- Delete users (never oneself)
- Reset a user's password
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.security import hash_password
from src.exceptions import AlreadyExistsError, CannotDeleteSelfError, UserNotFoundError
from src.models.user import User
from src.repositories.user_repository import UserRepository
from src.schemas.common import PaginatedResponse, PaginationMeta, PaginationParams
from src.schemas.user import UserCreate, UserFilterParams, UserResponse, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """
    Service class for user management operations.

    This service handles:
    - User listing and filtering
    - User creation with an explicit role and state
    - User updates (with email uniqueness validation)
    - Hard deletion; memberships, tasks and events of the user cascade
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize UserService with database session.

        Args:
            session: Async database session
        """
        self.session = session
        self.user_repo = UserRepository(session)

    async def _get_or_404(self, user_id: uuid.UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    async def list_users(
        self,
        pagination: PaginationParams,
        filters: UserFilterParams,
    ) -> PaginatedResponse[UserResponse]:
        """
        List users with pagination and filtering.

        Args:
            pagination: Pagination parameters (page, page_size)
            filters: Search text (name/email), state and role

        Returns:
            PaginatedResponse with users, newest first
        """
        users, total = await self.user_repo.filter_users(
            search=filters.search,
            state=filters.state,
            role=filters.role,
            offset=pagination.offset,
            limit=pagination.page_size,
        )

        return PaginatedResponse(
            data=[UserResponse.model_validate(user) for user in users],
            meta=PaginationMeta.build(total, pagination),
        )

    async def get_user(self, user_id: uuid.UUID) -> User:
        """
        Get a user by ID.

        Raises:
            UserNotFoundError: If no user has that ID
        """
        return await self._get_or_404(user_id)

    async def create_user(self, admin: User, data: UserCreate) -> User:
        """
        Create a user on behalf of an administrator.

        Raises:
            AlreadyExistsError: If the email is already registered
        """
        if await self.user_repo.email_exists(data.email):
            logger.warning(f"Admin {admin.id} attempted to create user with existing email {data.email}")
            raise AlreadyExistsError("User with this email")

        user = await self.user_repo.add(
            User(
                name=data.name,
                email=data.email.lower(),
                password_hash=hash_password(data.password),
                role=data.role,
                state=data.state,
            )
        )
        await self.session.commit()

        logger.info(f"Admin {admin.id} created user {user.id} ({user.email}, {user.role.value})")
        return user

    async def update_user(self, admin: User, user_id: uuid.UUID, data: UserUpdate) -> User:
        """
        Update name, email, role and/or state of a user.

        Args:
            admin: Administrator performing the change
            user_id: User to update
            data: Fields to change; omitted fields stay as they are

        Raises:
            UserNotFoundError: If the user does not exist
            AlreadyExistsError: If the new email belongs to another user

        Example:
            # Block a user; their tokens are refused from the next request on
            await user_service.update_user(
                admin, user_id, UserUpdate(state=UserState.blocked)
            )
        """
        user = await self._get_or_404(user_id)

        if data.email is not None and data.email.lower() != user.email:
            if await self.user_repo.email_exists(data.email, exclude_user_id=user.id):
                logger.warning(f"Admin {admin.id} attempted to reuse email {data.email}")
                raise AlreadyExistsError("User with this email")
            user.email = data.email.lower()

        if data.name is not None:
            user.name = data.name
        if data.role is not None:
            user.role = data.role
        if data.state is not None:
            user.state = data.state

        user = await self.user_repo.update(user)
        await self.session.commit()

        logger.info(f"Admin {admin.id} updated user {user.id}")
        return user

    async def delete_user(self, admin: User, user_id: uuid.UUID) -> None:
        """
        Permanently delete a user.

        Raises:
            CannotDeleteSelfError: If an administrator targets themselves
            UserNotFoundError: If the user does not exist
        """
        if user_id == admin.id:
            logger.warning(f"Admin {admin.id} attempted to delete their own user")
            raise CannotDeleteSelfError()

        user = await self._get_or_404(user_id)
        await self.user_repo.delete(user)
        await self.session.commit()

        logger.info(f"Admin {admin.id} deleted user {user_id}")

    async def reset_password(self, admin: User, user_id: uuid.UUID, new_password: str) -> None:
        """Set a new password for a user without knowing the old one."""
        user = await self._get_or_404(user_id)
        user.password_hash = hash_password(new_password)
        await self.user_repo.update(user)
        await self.session.commit()

        logger.info(f"Admin {admin.id} reset the password of user {user.id}")
