"""
Calendar service for account events and reminders.

This module provides:
- Account event listing by date range
- Create, update and delete account events
- Payment events created from a movement, with reminders
- Account reminders (a generic reminder event is created when none is given)
- The caller's upcoming events across accounts
"""

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import transaction_scope
from src.exceptions import BadRequestError, InvalidCategoryForAccountError, NotFoundError
from src.models.calendar import CalendarEvent, Reminder
from src.models.enums import EventType, Recurrence
from src.models.user import User
from src.repositories.calendar_repository import CalendarEventRepository, ReminderRepository
from src.repositories.category_repository import CategoryRepository
from src.repositories.movement_repository import MovementRepository
from src.schemas.calendar import (
    EventCreate,
    EventUpdate,
    PaymentEventCreate,
    PaymentReminderOptions,
    ReminderCreate,
)

logger = logging.getLogger(__name__)


def payment_event_type(recurrence: Recurrence) -> EventType:
    """Event type of a payment with the given recurrence."""
    if recurrence == Recurrence.none:
        return EventType.one_time_payment
    return EventType.recurring_payment


class CalendarService:
    """
    Service class for calendar operations.

    Events carry amounts in the account currency; AccountService converts
    them together with movements when the currency changes.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize CalendarService.

        Args:
            session: Async database session
        """
        self.session = session
        self.event_repo = CalendarEventRepository(session)
        self.reminder_repo = ReminderRepository(session)
        self.movement_repo = MovementRepository(session)
        self.category_repo = CategoryRepository(session)

    async def _check_category(self, account_id: uuid.UUID, category_id: uuid.UUID | None) -> None:
        if category_id is None:
            return
        if not await self.category_repo.is_usable_in_account(category_id, account_id):
            raise InvalidCategoryForAccountError(details={"category_id": str(category_id)})

    async def get_event(self, account_id: uuid.UUID, event_id: uuid.UUID) -> CalendarEvent:
        """
        Get an event of the account.

        Raises:
            NotFoundError: If the event does not belong to the account
        """
        event = await self.event_repo.get_in_account(event_id, account_id)
        if event is None:
            raise NotFoundError("Event")
        return event

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    async def list_events(
        self,
        account_id: uuid.UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[CalendarEvent]:
        """List the events of an account starting inside [start, end], earliest first."""
        return await self.event_repo.list_for_account(account_id, start=start, end=end)

    async def create_event(
        self, user: User, account_id: uuid.UUID, data: EventCreate
    ) -> CalendarEvent:
        """
        Create an event in an account.

        Raises:
            InvalidCategoryForAccountError: If the category is not usable
        """
        await self._check_category(account_id, data.category_id)

        values = data.model_dump()
        if values["type"] is None:
            values["type"] = payment_event_type(data.recurrence)

        event = await self.event_repo.add(
            CalendarEvent(user_id=user.id, account_id=account_id, **values)
        )
        await self.session.commit()

        logger.info(f"User {user.id} created {event.type.value} event {event.id} in account {account_id}")
        return event

    async def update_event(
        self,
        user: User,
        account_id: uuid.UUID,
        event_id: uuid.UUID,
        data: EventUpdate,
    ) -> CalendarEvent:
        """Update an event of the account; omitted fields stay unchanged."""
        event = await self.get_event(account_id, event_id)
        await self._check_category(account_id, data.category_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None or field in ("description", "end_at", "amount", "recurrence_config"):
                setattr(event, field, value)

        event = await self.event_repo.update(event)
        await self.session.commit()

        logger.info(f"User {user.id} updated event {event.id}")
        return event

    async def delete_event(self, user: User, account_id: uuid.UUID, event_id: uuid.UUID) -> None:
        """Delete an event and its reminders."""
        event = await self.get_event(account_id, event_id)
        await self.event_repo.delete(event)
        await self.session.commit()

        logger.info(f"User {user.id} deleted event {event_id} from account {account_id}")

    async def create_payment_event(
        self, user: User, account_id: uuid.UUID, data: PaymentEventCreate
    ) -> CalendarEvent:
        """
        Create a payment event with its reminders in one transaction.

        When a movement is given its amount and category are copied onto
        the event. Without explicit reminders one reminder is created a day
        (1440 minutes) before the event.

        Raises:
            BadRequestError: If the movement does not belong to the account

        Example:
            event = await calendar_service.create_payment_event(
                user,
                account.id,
                PaymentEventCreate(
                    movement_id=rent.id,
                    title="Rent",
                    start_at=datetime(2024, 4, 1, 9, tzinfo=UTC),
                    recurrence=Recurrence.monthly,
                ),
            )
            event.type  # EventType.recurring_payment
        """
        amount = None
        category_id = None
        if data.movement_id is not None:
            movement = await self.movement_repo.get_in_account(data.movement_id, account_id)
            if movement is None:
                logger.warning(
                    f"Payment event refused: movement {data.movement_id} is not in account {account_id}"
                )
                raise BadRequestError("Movement does not belong to this account")
            amount = movement.amount
            category_id = movement.category_id

        options = data.reminders if data.reminders is not None else [PaymentReminderOptions()]

        async with transaction_scope(self.session):
            event = CalendarEvent(
                user_id=user.id,
                account_id=account_id,
                title=data.title,
                description=data.description,
                start_at=data.start_at,
                type=payment_event_type(data.recurrence),
                amount=amount,
                category_id=category_id,
                movement_id=data.movement_id,
                recurrence=data.recurrence,
                recurrence_config=data.recurrence_config,
            )
            for option in options:
                event.reminders.append(
                    Reminder(
                        minutes_before=option.minutes_before,
                        channel=option.channel,
                        active=option.active,
                    )
                )
            event = await self.event_repo.add(event)

        logger.info(
            f"User {user.id} created payment event {event.id} in account {account_id} "
            f"with {len(options)} reminders"
        )
        return event

    # -------------------------------------------------------------------------
    # Reminders
    # -------------------------------------------------------------------------

    async def list_reminders(self, account_id: uuid.UUID) -> list[Reminder]:
        """List the unsent reminders of the account's events."""
        return await self.reminder_repo.list_pending_for_account(account_id)

    async def create_reminder(
        self, user: User, account_id: uuid.UUID, data: ReminderCreate
    ) -> Reminder:
        """
        Create a reminder on an account event.

        Without ``event_id`` a ``generic_reminder`` event titled with the
        message and starting at ``remind_at`` is created to carry it.

        Raises:
            NotFoundError: If ``event_id`` is not an event of the account
        """
        async with transaction_scope(self.session):
            if data.event_id is not None:
                event = await self.get_event(account_id, data.event_id)
            else:
                event = await self.event_repo.add(
                    CalendarEvent(
                        user_id=user.id,
                        account_id=account_id,
                        title=data.message[:255],
                        start_at=data.remind_at,
                        type=EventType.generic_reminder,
                        recurrence=Recurrence.none,
                    )
                )

            reminder = await self.reminder_repo.add(
                Reminder(
                    event_id=event.id,
                    message=data.message,
                    remind_at=data.remind_at,
                    minutes_before=data.minutes_before,
                    channel=data.channel,
                )
            )

        logger.info(f"User {user.id} created reminder {reminder.id} on event {event.id}")
        return reminder

    async def delete_reminder(
        self, user: User, account_id: uuid.UUID, reminder_id: uuid.UUID
    ) -> None:
        """
        Delete a reminder of an account event.

        Raises:
            NotFoundError: If the reminder is not on an event of the account
        """
        reminder = await self.reminder_repo.get_in_account(reminder_id, account_id)
        if reminder is None:
            raise NotFoundError("Reminder")

        await self.reminder_repo.delete(reminder)
        await self.session.commit()

        logger.info(f"User {user.id} deleted reminder {reminder_id}")

    # -------------------------------------------------------------------------
    # Upcoming
    # -------------------------------------------------------------------------

    async def list_upcoming(self, user: User, limit: int = 5) -> list[CalendarEvent]:
        """The caller's next events from now on, earliest first."""
        return await self.event_repo.list_upcoming(user.id, after=datetime.now(UTC), limit=limit)
