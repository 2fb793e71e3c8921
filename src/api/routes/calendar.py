"""
Calendar API routes.

This module provides:
- GET/POST /api/v1/accounts/{account_id}/events - List (date range) / create events
- PUT/DELETE /api/v1/accounts/{account_id}/events/{event_id}
- POST /api/v1/accounts/{account_id}/payment-events - Payment event with reminders
- GET/POST /api/v1/accounts/{account_id}/reminders - Pending reminders / create reminder
- DELETE /api/v1/accounts/{account_id}/reminders/{reminder_id}
- GET /api/v1/events/upcoming - The caller's next events
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    CalendarServiceDep,
    CurrentUser,
    DeleteAccess,
    EditAccess,
    ViewAccess,
)
from src.schemas.calendar import (
    EventCreate,
    EventFilterParams,
    EventResponse,
    EventUpdate,
    PaymentEventCreate,
    ReminderCreate,
    ReminderResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Calendar"])


# ============================================================================
# Events
# ============================================================================


@router.get(
    "/accounts/{account_id}/events",
    response_model=list[EventResponse],
    summary="List account events",
    description="Events whose start falls inside [start, end], earliest first.",
)
async def list_events(
    account_id: uuid.UUID,
    access: ViewAccess,
    calendar_service: CalendarServiceDep,
    filters: EventFilterParams = Depends(),
) -> list[EventResponse]:
    events = await calendar_service.list_events(account_id, start=filters.start, end=filters.end)
    return [EventResponse.model_validate(e) for e in events]


@router.post(
    "/accounts/{account_id}/events",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create event",
)
async def create_event(
    account_id: uuid.UUID,
    event_data: EventCreate,
    current_user: CurrentUser,
    access: EditAccess,
    calendar_service: CalendarServiceDep,
) -> EventResponse:
    """Without an explicit `type` the event type follows the recurrence."""
    event = await calendar_service.create_event(current_user, account_id, event_data)
    return EventResponse.model_validate(event)


@router.put(
    "/accounts/{account_id}/events/{event_id}",
    response_model=EventResponse,
    summary="Update event",
)
async def update_event(
    account_id: uuid.UUID,
    event_id: uuid.UUID,
    event_data: EventUpdate,
    current_user: CurrentUser,
    access: EditAccess,
    calendar_service: CalendarServiceDep,
) -> EventResponse:
    event = await calendar_service.update_event(current_user, account_id, event_id, event_data)
    return EventResponse.model_validate(event)


@router.delete(
    "/accounts/{account_id}/events/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete event",
)
async def delete_event(
    account_id: uuid.UUID,
    event_id: uuid.UUID,
    current_user: CurrentUser,
    access: DeleteAccess,
    calendar_service: CalendarServiceDep,
) -> None:
    await calendar_service.delete_event(current_user, account_id, event_id)


@router.post(
    "/accounts/{account_id}/payment-events",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create payment event",
    description="""
    Create a one-time or recurring payment event, optionally from a
    movement of the account (its amount and category are copied).

    Without explicit reminders one reminder is created 1440 minutes (one
    day) before the event.
    """,
)
async def create_payment_event(
    account_id: uuid.UUID,
    event_data: PaymentEventCreate,
    current_user: CurrentUser,
    access: EditAccess,
    calendar_service: CalendarServiceDep,
) -> EventResponse:
    """
    Raises:
        - 400 Bad Request: The movement does not belong to the account
    """
    event = await calendar_service.create_payment_event(current_user, account_id, event_data)
    return EventResponse.model_validate(event)


# ============================================================================
# Reminders
# ============================================================================


@router.get(
    "/accounts/{account_id}/reminders",
    response_model=list[ReminderResponse],
    summary="List pending reminders",
)
async def list_reminders(
    account_id: uuid.UUID,
    access: ViewAccess,
    calendar_service: CalendarServiceDep,
) -> list[ReminderResponse]:
    """Unsent reminders on the account's events."""
    reminders = await calendar_service.list_reminders(account_id)
    return [ReminderResponse.model_validate(r) for r in reminders]


@router.post(
    "/accounts/{account_id}/reminders",
    response_model=ReminderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create reminder",
    description="Without `event_id` a `generic_reminder` event is created to carry the reminder.",
)
async def create_reminder(
    account_id: uuid.UUID,
    reminder_data: ReminderCreate,
    current_user: CurrentUser,
    access: EditAccess,
    calendar_service: CalendarServiceDep,
) -> ReminderResponse:
    reminder = await calendar_service.create_reminder(current_user, account_id, reminder_data)
    return ReminderResponse.model_validate(reminder)


@router.delete(
    "/accounts/{account_id}/reminders/{reminder_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete reminder",
)
async def delete_reminder(
    account_id: uuid.UUID,
    reminder_id: uuid.UUID,
    current_user: CurrentUser,
    access: EditAccess,
    calendar_service: CalendarServiceDep,
) -> None:
    await calendar_service.delete_reminder(current_user, account_id, reminder_id)


# ============================================================================
# Upcoming
# ============================================================================


@router.get(
    "/events/upcoming",
    response_model=list[EventResponse],
    summary="Upcoming events",
    description="The caller's next events from now on, earliest first.",
)
async def list_upcoming_events(
    current_user: CurrentUser,
    calendar_service: CalendarServiceDep,
    limit: int = Query(default=5, ge=1, le=50),
) -> list[EventResponse]:
    events = await calendar_service.list_upcoming(current_user, limit=limit)
    return [EventResponse.model_validate(e) for e in events]
