"""
Calendar Pydantic schemas for API request/response handling.

This module provides:
- Calendar event creation and update schemas
- Payment event creation (event linked to a movement, with reminders)
- Reminder creation schemas
- Event and reminder responses
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.models.enums import EventType, Recurrence, ReminderChannel
from src.schemas.movement import validate_amount

DEFAULT_PAYMENT_REMINDER_MINUTES = 1440


class EventCreate(BaseModel):
    """
    Schema for creating an account calendar event.

    When ``type`` is omitted it is derived from the recurrence: recurring
    events become ``recurring_payment``, the rest ``one_time_payment``.

    Attributes:
        title: Event title
        description: Longer description
        start_at: When the event happens
        end_at: Optional end
        type: Event type
        amount: Optional positive amount in the account currency
        recurrence: Recurrence rule
        recurrence_config: Free-form settings for ``custom`` recurrences
        category_id: Optional related category
    """

    title: str = Field(min_length=1, max_length=255, examples=["Rent"])
    description: str | None = None
    start_at: datetime = Field(description="Event start")
    end_at: datetime | None = None
    type: EventType | None = Field(default=None, description="Derived when omitted")
    amount: Decimal | None = Field(default=None, examples=["850.00"])
    recurrence: Recurrence = Field(default=Recurrence.none)
    recurrence_config: dict[str, Any] | None = None
    category_id: uuid.UUID | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Event title cannot be empty or only whitespace")
        return value

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: Decimal | None) -> Decimal | None:
        if value is None:
            return None
        return validate_amount(value)


class EventUpdate(BaseModel):
    """Schema for updating an event; all fields optional."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    type: EventType | None = None
    amount: Decimal | None = None
    recurrence: Recurrence | None = None
    recurrence_config: dict[str, Any] | None = None
    category_id: uuid.UUID | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str | None) -> str | None:
        if value is not None:
            value = value.strip()
            if not value:
                raise ValueError("Event title cannot be empty or only whitespace")
        return value

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: Decimal | None) -> Decimal | None:
        if value is None:
            return None
        return validate_amount(value)


class PaymentReminderOptions(BaseModel):
    """
    Reminder attached to a payment event.

    Attributes:
        minutes_before: How long before the event to remind
        channel: Delivery channel
        active: Whether the reminder fires
    """

    minutes_before: int = Field(default=DEFAULT_PAYMENT_REMINDER_MINUTES, ge=0)
    channel: ReminderChannel = Field(default=ReminderChannel.app)
    active: bool = Field(default=True)


class PaymentEventCreate(BaseModel):
    """
    Schema for creating a payment event, optionally from a movement.

    A movement given here must belong to the account; its amount and
    category are copied onto the event. Without ``reminders`` the event
    gets one reminder a day before.

    Attributes:
        movement_id: Movement the payment corresponds to
        title: Event title
        description: Longer description
        start_at: Payment date
        recurrence: Recurrence rule
        recurrence_config: Free-form settings for ``custom`` recurrences
        reminders: Reminders to create
    """

    movement_id: uuid.UUID | None = None
    title: str = Field(min_length=1, max_length=255, examples=["Internet bill"])
    description: str | None = None
    start_at: datetime
    recurrence: Recurrence = Field(default=Recurrence.none)
    recurrence_config: dict[str, Any] | None = None
    reminders: list[PaymentReminderOptions] | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Event title cannot be empty or only whitespace")
        return value


class ReminderCreate(BaseModel):
    """
    Schema for creating an account reminder.

    Without ``event_id`` a ``generic_reminder`` event is created at
    ``remind_at`` to carry the reminder.

    Attributes:
        message: Reminder text
        remind_at: When to remind
        minutes_before: Offset from the event start
        event_id: Existing event of the account
        channel: Delivery channel
    """

    message: str = Field(min_length=1, max_length=500)
    remind_at: datetime
    minutes_before: int = Field(default=0, ge=0)
    event_id: uuid.UUID | None = None
    channel: ReminderChannel = Field(default=ReminderChannel.app)


class ReminderResponse(BaseModel):
    """
    Schema for reminder response.

    Attributes:
        id: Reminder UUID
        event_id: Event the reminder belongs to
        message: Reminder text
        remind_at: When to remind
        minutes_before: Offset from the event start
        channel: Delivery channel
        active: Whether the reminder fires
        sent: Whether it was delivered
        sent_at: Delivery time
        created_at: Creation timestamp
    """

    id: uuid.UUID
    event_id: uuid.UUID
    message: str | None = None
    remind_at: datetime | None = None
    minutes_before: int
    channel: ReminderChannel
    active: bool
    sent: bool
    sent_at: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class EventResponse(BaseModel):
    """
    Schema for calendar event response.

    Attributes:
        id: Event UUID
        user_id: Creator
        account_id: Owning account
        title: Title
        description: Description
        start_at: Start
        end_at: End
        type: Event type
        amount: Amount in the account currency
        category_id: Related category
        movement_id: Linked movement
        recurrence: Recurrence rule
        recurrence_config: Custom recurrence settings
        reminders: Reminders of the event
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: uuid.UUID
    user_id: uuid.UUID
    account_id: uuid.UUID | None = None
    title: str
    description: str | None = None
    start_at: datetime
    end_at: datetime | None = None
    type: EventType
    amount: Decimal | None = None
    category_id: uuid.UUID | None = None
    movement_id: uuid.UUID | None = None
    recurrence: Recurrence
    recurrence_config: dict[str, Any] | None = None
    reminders: list[ReminderResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EventFilterParams(BaseModel):
    """Date range for account event listings (on the event start)."""

    start: datetime | None = None
    end: datetime | None = None
