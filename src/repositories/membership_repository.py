"""
Membership repository for database operations.

This module provides database operations for the Membership model:
- Standard CRUD operations (inherited from BaseRepository)
- Access lookups: a user's role on an account joined with the account state
- Member listings for an account
"""

import uuid

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.account import Account, Membership
from src.models.enums import AccountRole, AccountState
from src.repositories.base import BaseRepository


class MembershipRepository(BaseRepository[Membership]):
    """
    Repository for Membership model database operations.

    Usage:
        membership_repo = MembershipRepository(session)
        access = await membership_repo.get_access(user.id, account.id)
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Membership, session)

    async def get_access(
        self,
        user_id: uuid.UUID,
        account_id: uuid.UUID,
    ) -> tuple[AccountRole, AccountState] | None:
        """
        Get the user's role on an account together with the account state.

        This is the single query behind every permission check. A missing
        account and a missing membership both come back as None.

        Args:
            user_id: ID of the user
            account_id: ID of the account

        Returns:
            (role, account_state) or None if the user has no access
        """
        query = (
            select(Membership.role, Account.state)
            .join(Account, Account.id == Membership.account_id)
            .where(
                Membership.user_id == user_id,
                Membership.account_id == account_id,
            )
        )

        result = await self.session.execute(query)
        row = result.one_or_none()
        if row is None:
            return None
        return row[0], row[1]

    async def get_membership(
        self,
        user_id: uuid.UUID,
        account_id: uuid.UUID,
    ) -> Membership | None:
        """
        Get the membership row of a user on an account.

        Example:
            membership = await membership_repo.get_membership(user.id, account.id)
            if membership and membership.role == AccountRole.owner:
                # User is owner
        """
        query = select(Membership).where(
            Membership.user_id == user_id,
            Membership.account_id == account_id,
        )

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_by_account(self, account_id: uuid.UUID) -> list[Membership]:
        """
        Get all memberships of an account.

        Owner first, then editors, then read-only members; oldest first
        within a role.
        """
        role_rank = case(
            (Membership.role == AccountRole.owner, 0),
            (Membership.role == AccountRole.editor, 1),
            else_=2,
        )
        query = (
            select(Membership)
            .where(Membership.account_id == account_id)
            .order_by(role_rank, Membership.created_at.asc())
        )

        result = await self.session.execute(query)
        return list(result.scalars().all())
