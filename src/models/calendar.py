"""
CalendarEvent and Reminder models.

Events are dated entries on a user's calendar, usually tied to an account
(payments due, recurring bills). Reminders hang off an event and describe
when and how the user should be notified.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base
from src.models.enums import EventType, Recurrence, ReminderChannel
from src.models.mixins import CreatedAtMixin, TimestampMixin


class CalendarEvent(Base, TimestampMixin):
    """
    Calendar entry.

    Attributes:
        id: UUID primary key
        user_id: Owner of the event
        account_id: Optional account (events of an account are listed
            under the account routes)
        title / description: Content
        start_at / end_at: Schedule
        type: one_time_payment, recurring_payment, generic_reminder
        amount: Optional amount in the account's currency; converted
            together with movements when the account currency changes
        category_id: Optional category
        movement_id: Optional movement the payment event was created from
        recurrence: none, daily, weekly, monthly, yearly, custom
        recurrence_config: Free-form JSON for custom rules

    Relationships:
        reminders: Reminder rows of the event (eager-loaded)
    """

    __tablename__ = "calendar_events"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    account_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    start_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    end_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    type: Mapped[EventType] = mapped_column(
        nullable=False,
    )

    amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(15, 2),
        nullable=True,
    )

    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )

    movement_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("movements.id", ondelete="SET NULL"),
        nullable=True,
    )

    recurrence: Mapped[Recurrence] = mapped_column(
        nullable=False,
        default=Recurrence.none,
    )

    # JSONB on PostgreSQL, plain JSON elsewhere
    recurrence_config: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True,
    )

    reminders: Mapped[list["Reminder"]] = relationship(
        "Reminder",
        back_populates="event",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Reminder.created_at",
    )

    def __repr__(self) -> str:
        return (
            f"CalendarEvent(id={self.id}, title={self.title}, "
            f"type={self.type.value}, start={self.start_at})"
        )


class Reminder(Base, CreatedAtMixin):
    """
    Notification attached to an event.

    Attributes:
        event_id: Event being reminded
        message: Optional text
        remind_at: Explicit reminder time (optional)
        minutes_before: Offset from the event start (default 60)
        channel: app, email or sms
        active: Whether the reminder should still fire
        sent / sent_at: Delivery bookkeeping
    """

    __tablename__ = "reminders"

    event_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("calendar_events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    message: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    remind_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )

    minutes_before: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=60,
    )

    channel: Mapped[ReminderChannel] = mapped_column(
        nullable=False,
        default=ReminderChannel.app,
    )

    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    sent: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    sent_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    event: Mapped[CalendarEvent] = relationship(
        CalendarEvent,
        back_populates="reminders",
        lazy="selectin",
    )
