"""
Movement repository for database operations.

This module provides database operations for the Movement model:
- Standard CRUD operations (inherited from BaseRepository)
- Filtered, paginated search inside an account
- Confirmed income/expense totals used for balances
- Row sets consumed by reports and currency conversion
"""

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.enums import MovementState, MovementType
from src.models.movement import Movement, movement_tags
from src.repositories.base import BaseRepository


class MovementRepository(BaseRepository[Movement]):
    """
    Repository for Movement model database operations.

    Usage:
        movement_repo = MovementRepository(session)
        movements, total = await movement_repo.search(account.id, offset=0, limit=20)
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Movement, session)

    async def get_in_account(
        self, movement_id: uuid.UUID, account_id: uuid.UUID
    ) -> Movement | None:
        """Get a movement only if it belongs to the given account."""
        query = select(Movement).where(
            Movement.id == movement_id,
            Movement.account_id == account_id,
        )

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def search(
        self,
        account_id: uuid.UUID,
        movement_type: MovementType | None = None,
        state: MovementState | None = None,
        category_id: uuid.UUID | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        provider: str | None = None,
        search: str | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Movement], int]:
        """
        Search the movements of an account.

        Args:
            account_id: Account to search in
            movement_type: Filter by income/expense
            state: Filter by confirmed/pending_review
            category_id: Filter by category
            date_from: Operation date lower bound (inclusive)
            date_to: Operation date upper bound (inclusive)
            provider: Case-insensitive substring of the provider
            search: Case-insensitive substring of description, provider or notes
            offset: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (movements, total_count), newest operation date first

        Example:
            movements, total = await repo.search(
                account_id=account.id,
                movement_type=MovementType.expense,
                date_from=date(2024, 1, 1),
                search="grocer",
            )
        """
        filters = [Movement.account_id == account_id]

        if movement_type is not None:
            filters.append(Movement.type == movement_type)
        if state is not None:
            filters.append(Movement.state == state)
        if category_id is not None:
            filters.append(Movement.category_id == category_id)
        if date_from is not None:
            filters.append(Movement.operation_date >= date_from)
        if date_to is not None:
            filters.append(Movement.operation_date <= date_to)
        if provider:
            filters.append(Movement.provider.ilike(f"%{provider}%"))
        if search:
            pattern = f"%{search}%"
            filters.append(
                or_(
                    Movement.description.ilike(pattern),
                    Movement.provider.ilike(pattern),
                    Movement.notes.ilike(pattern),
                )
            )

        query = (
            select(Movement)
            .where(and_(*filters))
            .order_by(Movement.operation_date.desc(), Movement.created_at.desc())
        )

        return await self._paginate(query, offset, limit)

    async def list_by_tag(
        self,
        tag_id: uuid.UUID,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Movement], int]:
        """Get the movements carrying a tag, newest operation date first."""
        query = (
            select(Movement)
            .join(movement_tags, movement_tags.c.movement_id == Movement.id)
            .where(movement_tags.c.tag_id == tag_id)
            .order_by(Movement.operation_date.desc(), Movement.created_at.desc())
        )

        return await self._paginate(query, offset, limit)

    async def list_confirmed(
        self,
        account_id: uuid.UUID,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[Movement]:
        """
        Get confirmed movements of an account in a date range.

        This is the row set every report aggregates over.
        """
        query = select(Movement).where(
            Movement.account_id == account_id,
            Movement.state == MovementState.confirmed,
        )

        if date_from is not None:
            query = query.where(Movement.operation_date >= date_from)
        if date_to is not None:
            query = query.where(Movement.operation_date <= date_to)

        query = query.order_by(Movement.operation_date.asc())

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_by_account(self, account_id: uuid.UUID) -> list[Movement]:
        """Get every movement of an account regardless of state."""
        query = select(Movement).where(Movement.account_id == account_id)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def confirmed_totals(
        self, account_ids: list[uuid.UUID]
    ) -> dict[uuid.UUID, dict[MovementType, Decimal]]:
        """
        Sum confirmed income and expense per account.

        Args:
            account_ids: Accounts to total

        Returns:
            Mapping account_id -> {income: Decimal, expense: Decimal}; accounts
            without movements map to zeros
        """
        totals: dict[uuid.UUID, dict[MovementType, Decimal]] = {
            account_id: {MovementType.income: Decimal("0"), MovementType.expense: Decimal("0")}
            for account_id in account_ids
        }
        if not account_ids:
            return totals

        query = (
            select(
                Movement.account_id,
                Movement.type,
                func.coalesce(func.sum(Movement.amount), 0),
            )
            .where(
                Movement.account_id.in_(account_ids),
                Movement.state == MovementState.confirmed,
            )
            .group_by(Movement.account_id, Movement.type)
        )

        result = await self.session.execute(query)
        for account_id, movement_type, total in result.all():
            totals[account_id][movement_type] = Decimal(str(total))
        return totals
