"""
Integration tests for calendar and task routes.

Tests cover:
- Events: create (type derived from recurrence), date-range listing, update, delete
- Payment events: default reminder, copying amount and category from a movement
- Reminders: generic reminder events, pending list, deletion
- Upcoming events across the caller's accounts
- Tasks: creation with history, filters, status changes, summary, ownership
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient

API = "/api/v1/accounts"
TASKS = "/api/v1/tasks"


@pytest_asyncio.fixture
async def owner_headers(test_user, auth_headers):
    return auth_headers(test_user)


@pytest_asyncio.fixture
async def rent(async_client: AsyncClient, account, owner_headers) -> dict:
    """A 850.00 expense in the account."""
    listed = await async_client.get(f"{API}/{account.id}/categories", headers=owner_headers)
    groceries = next(c["id"] for c in listed.json() if c["name"] == "Groceries")
    response = await async_client.post(
        f"{API}/{account.id}/movements",
        headers=owner_headers,
        json={
            "type": "expense",
            "operation_date": "2024-03-01",
            "amount": "850.00",
            "category_id": groceries,
            "description": "Rent",
        },
    )
    return response.json()


# ============================================================================
# Events
# ============================================================================
class TestEvents:
    """Test /api/v1/accounts/{id}/events."""

    @pytest.mark.asyncio
    async def test_type_follows_recurrence(self, async_client, account, owner_headers):
        url = f"{API}/{account.id}/events"

        once = await async_client.post(
            url,
            headers=owner_headers,
            json={"title": "Dentist", "start_at": "2024-05-02T10:00:00Z"},
        )
        monthly = await async_client.post(
            url,
            headers=owner_headers,
            json={
                "title": "Gym",
                "start_at": "2024-05-01T07:00:00Z",
                "recurrence": "monthly",
                "amount": "39.90",
            },
        )

        assert once.status_code == 201
        assert once.json()["type"] == "one_time_payment"
        assert monthly.json()["type"] == "recurring_payment"
        assert Decimal(monthly.json()["amount"]) == Decimal("39.90")

    @pytest.mark.asyncio
    async def test_list_by_range(self, async_client, account, owner_headers):
        url = f"{API}/{account.id}/events"
        for title, start in [
            ("April", "2024-04-15T09:00:00Z"),
            ("May", "2024-05-15T09:00:00Z"),
            ("June", "2024-06-15T09:00:00Z"),
        ]:
            await async_client.post(
                url, headers=owner_headers, json={"title": title, "start_at": start}
            )

        response = await async_client.get(
            url,
            headers=owner_headers,
            params={"start": "2024-05-01T00:00:00Z", "end": "2024-06-30T23:59:59Z"},
        )

        assert [e["title"] for e in response.json()] == ["May", "June"]

    @pytest.mark.asyncio
    async def test_update_and_delete(self, async_client, account, owner_headers):
        url = f"{API}/{account.id}/events"
        event = (
            await async_client.post(
                url,
                headers=owner_headers,
                json={"title": "Insurance", "start_at": "2024-07-01T09:00:00Z"},
            )
        ).json()

        updated = await async_client.put(
            f"{url}/{event['id']}", headers=owner_headers, json={"title": "Car insurance"}
        )
        deleted = await async_client.delete(f"{url}/{event['id']}", headers=owner_headers)
        again = await async_client.delete(f"{url}/{event['id']}", headers=owner_headers)

        assert updated.json()["title"] == "Car insurance"
        assert deleted.status_code == 204
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_readonly_member_cannot_create(
        self, async_client, account, owner_headers, other_user, auth_headers
    ):
        await async_client.post(
            f"{API}/{account.id}/members",
            headers=owner_headers,
            json={"email": other_user.email, "role": "readonly"},
        )

        response = await async_client.post(
            f"{API}/{account.id}/events",
            headers=auth_headers(other_user),
            json={"title": "Nope", "start_at": "2024-07-01T09:00:00Z"},
        )

        assert response.status_code == 403


# ============================================================================
# Payment events
# ============================================================================
class TestPaymentEvents:
    """Test POST /api/v1/accounts/{id}/payment-events."""

    @pytest.mark.asyncio
    async def test_default_reminder_one_day_before(self, async_client, account, owner_headers):
        response = await async_client.post(
            f"{API}/{account.id}/payment-events",
            headers=owner_headers,
            json={"title": "Internet bill", "start_at": "2024-06-10T09:00:00Z"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["type"] == "one_time_payment"
        assert len(data["reminders"]) == 1
        assert data["reminders"][0]["minutes_before"] == 1440
        assert data["reminders"][0]["channel"] == "app"
        assert data["reminders"][0]["sent"] is False

    @pytest.mark.asyncio
    async def test_copies_movement_amount_and_category(
        self, async_client, account, owner_headers, rent
    ):
        response = await async_client.post(
            f"{API}/{account.id}/payment-events",
            headers=owner_headers,
            json={
                "movement_id": rent["id"],
                "title": "Rent",
                "start_at": "2024-04-01T09:00:00Z",
                "recurrence": "monthly",
                "reminders": [
                    {"minutes_before": 60, "channel": "email"},
                    {"minutes_before": 2880},
                ],
            },
        )

        data = response.json()
        assert data["type"] == "recurring_payment"
        assert data["movement_id"] == rent["id"]
        assert data["category_id"] == rent["category_id"]
        assert Decimal(data["amount"]) == Decimal("850.00")
        assert sorted(r["minutes_before"] for r in data["reminders"]) == [60, 2880]

    @pytest.mark.asyncio
    async def test_explicit_empty_reminders(self, async_client, account, owner_headers):
        response = await async_client.post(
            f"{API}/{account.id}/payment-events",
            headers=owner_headers,
            json={"title": "Quiet", "start_at": "2024-06-10T09:00:00Z", "reminders": []},
        )

        assert response.status_code == 201
        assert response.json()["reminders"] == []

    @pytest.mark.asyncio
    async def test_created_event_listed_once(self, async_client, account, owner_headers):
        response = await async_client.post(
            f"{API}/{account.id}/payment-events",
            headers=owner_headers,
            json={"title": "Internet bill", "start_at": "2024-06-10T09:00:00Z"},
        )
        assert response.status_code == 201

        listing = await async_client.get(f"{API}/{account.id}/events", headers=owner_headers)

        assert listing.status_code == 200
        assert [e["id"] for e in listing.json()] == [response.json()["id"]]

    @pytest.mark.asyncio
    async def test_movement_of_other_account(
        self, async_client, account, rent, other_user, auth_headers
    ):
        headers = auth_headers(other_user)
        other = (await async_client.post(API, headers=headers, json={"name": "B"})).json()

        response = await async_client.post(
            f"{API}/{other['id']}/payment-events",
            headers=headers,
            json={
                "movement_id": rent["id"],
                "title": "Stolen rent",
                "start_at": "2024-04-01T09:00:00Z",
            },
        )

        assert response.status_code == 400


# ============================================================================
# Reminders
# ============================================================================
class TestReminders:
    """Test /api/v1/accounts/{id}/reminders."""

    @pytest.mark.asyncio
    async def test_reminder_without_event_creates_generic_event(
        self, async_client, account, owner_headers
    ):
        response = await async_client.post(
            f"{API}/{account.id}/reminders",
            headers=owner_headers,
            json={"message": "Check the water meter", "remind_at": "2024-08-01T08:00:00Z"},
        )

        assert response.status_code == 201
        reminder = response.json()
        assert reminder["message"] == "Check the water meter"

        events = await async_client.get(f"{API}/{account.id}/events", headers=owner_headers)
        event = next(e for e in events.json() if e["id"] == reminder["event_id"])
        assert event["type"] == "generic_reminder"
        assert event["title"] == "Check the water meter"

    @pytest.mark.asyncio
    async def test_reminder_on_existing_event(self, async_client, account, owner_headers):
        event = (
            await async_client.post(
                f"{API}/{account.id}/events",
                headers=owner_headers,
                json={"title": "Tax filing", "start_at": "2024-06-30T09:00:00Z"},
            )
        ).json()

        response = await async_client.post(
            f"{API}/{account.id}/reminders",
            headers=owner_headers,
            json={
                "message": "Gather receipts",
                "remind_at": "2024-06-23T09:00:00Z",
                "minutes_before": 10080,
                "event_id": event["id"],
            },
        )

        assert response.json()["event_id"] == event["id"]

    @pytest.mark.asyncio
    async def test_list_and_delete(self, async_client, account, owner_headers):
        url = f"{API}/{account.id}/reminders"
        created = (
            await async_client.post(
                url,
                headers=owner_headers,
                json={"message": "Renew passport", "remind_at": "2024-09-01T08:00:00Z"},
            )
        ).json()

        listed = await async_client.get(url, headers=owner_headers)
        assert created["id"] in [r["id"] for r in listed.json()]

        deleted = await async_client.delete(f"{url}/{created['id']}", headers=owner_headers)
        assert deleted.status_code == 204
        listed = await async_client.get(url, headers=owner_headers)
        assert created["id"] not in [r["id"] for r in listed.json()]

    @pytest.mark.asyncio
    async def test_event_of_other_account(
        self, async_client, account, owner_headers, other_user, auth_headers
    ):
        event = (
            await async_client.post(
                f"{API}/{account.id}/events",
                headers=owner_headers,
                json={"title": "Private", "start_at": "2024-06-30T09:00:00Z"},
            )
        ).json()
        headers = auth_headers(other_user)
        other = (await async_client.post(API, headers=headers, json={"name": "B"})).json()

        response = await async_client.post(
            f"{API}/{other['id']}/reminders",
            headers=headers,
            json={"message": "x", "remind_at": "2024-06-29T09:00:00Z", "event_id": event["id"]},
        )

        assert response.status_code == 404


class TestUpcoming:
    @pytest.mark.asyncio
    async def test_only_future_events_earliest_first(self, async_client, account, owner_headers):
        url = f"{API}/{account.id}/events"
        for title, start in [
            ("Past", "2020-01-01T09:00:00Z"),
            ("Later", "2099-06-01T09:00:00Z"),
            ("Sooner", "2099-01-01T09:00:00Z"),
        ]:
            await async_client.post(
                url, headers=owner_headers, json={"title": title, "start_at": start}
            )

        response = await async_client.get(
            "/api/v1/events/upcoming", headers=owner_headers, params={"limit": 5}
        )

        assert [e["title"] for e in response.json()] == ["Sooner", "Later"]


# ============================================================================
# Tasks
# ============================================================================
class TestTasks:
    """Test /api/v1/tasks."""

    @pytest.mark.asyncio
    async def test_create_records_history(self, async_client, owner_headers):
        response = await async_client.post(
            TASKS,
            headers=owner_headers,
            json={"title": "Cancel old gym", "priority": "high", "list_name": "admin"},
        )

        assert response.status_code == 201
        task = response.json()
        assert task["state"] == "pending"

        detail = await async_client.get(f"{TASKS}/{task['id']}", headers=owner_headers)
        history = detail.json()["history"]
        assert len(history) == 1
        assert history[0]["previous_state"] is None
        assert history[0]["new_state"] == "pending"
        assert history[0]["comment"] == "Task created"

    @pytest.mark.asyncio
    async def test_end_before_start_rejected(self, async_client, owner_headers):
        response = await async_client.post(
            TASKS,
            headers=owner_headers,
            json={
                "title": "Backwards",
                "start_at": "2024-05-02T00:00:00Z",
                "end_at": "2024-05-01T00:00:00Z",
            },
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_task_in_account_needs_membership(
        self, async_client, account, other_user, auth_headers
    ):
        response = await async_client.post(
            TASKS,
            headers=auth_headers(other_user),
            json={"title": "Snoop", "account_id": str(account.id)},
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_assignee(self, async_client, owner_headers):
        response = await async_client.post(
            TASKS,
            headers=owner_headers,
            json={"title": "Delegate", "assignee_id": "00000000-0000-0000-0000-000000000000"},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_list_ordered_and_filtered(self, async_client, owner_headers):
        for title, priority in [("Low", "low"), ("High", "high"), ("Medium", "medium")]:
            await async_client.post(
                TASKS, headers=owner_headers, json={"title": title, "priority": priority}
            )

        everything = await async_client.get(TASKS, headers=owner_headers)
        high = await async_client.get(TASKS, headers=owner_headers, params={"priority": "high"})

        assert [t["title"] for t in everything.json()["data"]] == ["High", "Medium", "Low"]
        assert high.json()["meta"]["total"] == 1

    @pytest.mark.asyncio
    async def test_status_change(self, async_client, owner_headers):
        task = (
            await async_client.post(TASKS, headers=owner_headers, json={"title": "File taxes"})
        ).json()
        url = f"{TASKS}/{task['id']}/status"

        moved = await async_client.put(
            url, headers=owner_headers, json={"state": "in_progress", "comment": "started"}
        )
        same = await async_client.put(url, headers=owner_headers, json={"state": "in_progress"})

        assert moved.status_code == 200
        assert moved.json()["previous_state"] == "pending"
        assert moved.json()["new_state"] == "in_progress"
        assert same.status_code == 400

        detail = await async_client.get(f"{TASKS}/{task['id']}", headers=owner_headers)
        assert len(detail.json()["history"]) == 2

    @pytest.mark.asyncio
    async def test_summary(self, async_client, owner_headers):
        await async_client.post(
            TASKS,
            headers=owner_headers,
            json={"title": "Overdue", "priority": "high", "end_at": "2020-01-01T00:00:00Z"},
        )
        done = (
            await async_client.post(TASKS, headers=owner_headers, json={"title": "Done"})
        ).json()
        await async_client.put(
            f"{TASKS}/{done['id']}/status", headers=owner_headers, json={"state": "completed"}
        )

        response = await async_client.get(f"{TASKS}/summary", headers=owner_headers)

        assert response.json() == {
            "total": 2,
            "pending": 1,
            "in_progress": 0,
            "completed": 1,
            "cancelled": 0,
            "high_priority": 1,
            "overdue": 1,
        }

    @pytest.mark.asyncio
    async def test_tasks_are_private(self, async_client, owner_headers, other_user, auth_headers):
        task = (
            await async_client.post(TASKS, headers=owner_headers, json={"title": "Mine"})
        ).json()

        response = await async_client.get(
            f"{TASKS}/{task['id']}", headers=auth_headers(other_user)
        )
        deleted = await async_client.delete(f"{TASKS}/{task['id']}", headers=owner_headers)

        assert response.status_code == 404
        assert deleted.status_code == 204
