"""
Account repository for database operations.

This module provides database operations for the Account model:
- Standard CRUD operations (inherited from BaseRepository)
- The caller's accounts together with their membership
- The full account list for administrators
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.account import Account, Membership
from src.models.enums import AccountState, AccountType
from src.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """
    Repository for Account model database operations.

    Usage:
        account_repo = AccountRepository(session)
        rows = await account_repo.list_for_user(user.id)
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Account, session)

    async def list_for_user(
        self,
        user_id: uuid.UUID,
        state: AccountState | None = None,
        account_type: AccountType | None = None,
    ) -> list[tuple[Account, Membership]]:
        """
        Get every account the user is a member of, with the membership row.

        Args:
            user_id: Member
            state: Optional filter by account state
            account_type: Optional filter by account type

        Returns:
            List of (account, membership) pairs, newest accounts first
        """
        query = (
            select(Account, Membership)
            .join(Membership, Membership.account_id == Account.id)
            .where(Membership.user_id == user_id)
        )

        if state is not None:
            query = query.where(Account.state == state)
        if account_type is not None:
            query = query.where(Account.type == account_type)

        query = query.order_by(Account.created_at.desc())

        result = await self.session.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def list_all(
        self,
        state: AccountState | None = None,
        account_type: AccountType | None = None,
    ) -> list[Account]:
        """
        Get every account in the system (administrator view).

        Args:
            state: Optional filter by account state
            account_type: Optional filter by account type
        """
        query = select(Account)

        if state is not None:
            query = query.where(Account.state == state)
        if account_type is not None:
            query = query.where(Account.type == account_type)

        query = query.order_by(Account.created_at.desc())

        result = await self.session.execute(query)
        return list(result.scalars().all())
