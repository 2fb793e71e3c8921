"""
Calendar repository for database operations.

This module provides database operations for the CalendarEvent and
Reminder models:
- Standard CRUD operations (inherited from BaseRepository)
- Account event listings by date range
- Upcoming events of a user
- Account-scoped reminder lookups
"""

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.calendar import CalendarEvent, Reminder
from src.repositories.base import BaseRepository


class CalendarEventRepository(BaseRepository[CalendarEvent]):
    """Repository for CalendarEvent model database operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(CalendarEvent, session)

    async def list_for_account(
        self,
        account_id: uuid.UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[CalendarEvent]:
        """
        Get the events of an account, earliest first.

        Args:
            account_id: Account whose events to list
            start: Only events starting at or after this moment
            end: Only events starting at or before this moment
        """
        query = select(CalendarEvent).where(CalendarEvent.account_id == account_id)

        if start is not None:
            query = query.where(CalendarEvent.start_at >= start)
        if end is not None:
            query = query.where(CalendarEvent.start_at <= end)

        query = query.order_by(CalendarEvent.start_at.asc())

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_in_account(
        self, event_id: uuid.UUID, account_id: uuid.UUID
    ) -> CalendarEvent | None:
        """Get an event only if it belongs to the given account."""
        query = select(CalendarEvent).where(
            CalendarEvent.id == event_id,
            CalendarEvent.account_id == account_id,
        )

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_with_amount(self, account_id: uuid.UUID) -> list[CalendarEvent]:
        """Get the events of an account that carry an amount."""
        query = select(CalendarEvent).where(
            CalendarEvent.account_id == account_id,
            CalendarEvent.amount.is_not(None),
        )

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_upcoming(
        self,
        user_id: uuid.UUID,
        after: datetime,
        limit: int = 5,
    ) -> list[CalendarEvent]:
        """Get the user's next events starting after ``after``, earliest first."""
        query = (
            select(CalendarEvent)
            .where(CalendarEvent.user_id == user_id, CalendarEvent.start_at >= after)
            .order_by(CalendarEvent.start_at.asc())
            .limit(limit)
        )

        result = await self.session.execute(query)
        return list(result.scalars().all())


class ReminderRepository(BaseRepository[Reminder]):
    """Repository for Reminder model database operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Reminder, session)

    async def list_pending_for_account(self, account_id: uuid.UUID) -> list[Reminder]:
        """
        Get the unsent reminders of an account's events.

        Ordered by reminder time (reminders without one last).
        """
        query = (
            select(Reminder)
            .join(CalendarEvent, CalendarEvent.id == Reminder.event_id)
            .where(
                CalendarEvent.account_id == account_id,
                Reminder.sent.is_(False),
            )
            .order_by(Reminder.remind_at.asc().nulls_last(), Reminder.created_at.asc())
        )

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_in_account(
        self, reminder_id: uuid.UUID, account_id: uuid.UUID
    ) -> Reminder | None:
        """Get a reminder only if its event belongs to the given account."""
        query = (
            select(Reminder)
            .join(CalendarEvent, CalendarEvent.id == Reminder.event_id)
            .where(
                Reminder.id == reminder_id,
                CalendarEvent.account_id == account_id,
            )
        )

        result = await self.session.execute(query)
        return result.scalar_one_or_none()
