"""
Integration tests for movement and document routes.

Tests cover:
- Creating movements with global and private categories
- Category and tag scoping across accounts
- Search filters and pagination
- Update, confirm and delete
- Bulk creation skipping unusable categories
- Documents attached to movements
- Role checks (editor vs readonly)
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient

API = "/api/v1/accounts"


def _movement(category_id, amount="25.00", **overrides):
    body = {
        "type": "expense",
        "operation_date": "2024-03-15",
        "amount": amount,
        "category_id": category_id,
    }
    body.update(overrides)
    return body


@pytest_asyncio.fixture
async def owner_headers(test_user, auth_headers):
    return auth_headers(test_user)


@pytest_asyncio.fixture
async def categories(async_client: AsyncClient, account, owner_headers) -> dict[str, str]:
    """Ids of the account's own categories by name."""
    response = await async_client.get(f"{API}/{account.id}/categories", headers=owner_headers)
    return {
        c["name"]: c["id"]
        for c in response.json()
        if c["account_id"] == str(account.id)
    }


@pytest_asyncio.fixture
async def foreign_account(async_client: AsyncClient, other_user, auth_headers) -> dict:
    """Account owned by other_user, with its own private category."""
    headers = auth_headers(other_user)
    account = (
        await async_client.post(API, headers=headers, json={"name": "Other ledger"})
    ).json()
    category = (
        await async_client.post(
            f"{API}/{account['id']}/categories",
            headers=headers,
            json={"name": "Secret", "type": "expense"},
        )
    ).json()
    tag = (
        await async_client.post(
            f"{API}/{account['id']}/tags", headers=headers, json={"name": "theirs"}
        )
    ).json()
    return {"id": account["id"], "category_id": category["id"], "tag_id": tag["id"]}


# ============================================================================
# Create
# ============================================================================
class TestCreateMovement:
    """Test POST /api/v1/accounts/{id}/movements."""

    @pytest.mark.asyncio
    async def test_create_with_private_category(
        self, async_client: AsyncClient, account, test_user, owner_headers, categories
    ):
        response = await async_client.post(
            f"{API}/{account.id}/movements",
            headers=owner_headers,
            json=_movement(categories["Groceries"], "42.50", provider="Mercadona"),
        )

        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["amount"]) == Decimal("42.50")
        assert data["category"]["name"] == "Groceries"
        assert data["origin"] == "manual"
        assert data["state"] == "confirmed"
        assert data["created_by"] == str(test_user.id)

    @pytest.mark.asyncio
    async def test_create_with_global_category(
        self, async_client: AsyncClient, account, owner_headers, global_categories
    ):
        response = await async_client.post(
            f"{API}/{account.id}/movements",
            headers=owner_headers,
            json=_movement(str(global_categories[0].id), type="income"),
        )

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_category_of_other_account_rejected(
        self, async_client: AsyncClient, account, owner_headers, foreign_account
    ):
        response = await async_client.post(
            f"{API}/{account.id}/movements",
            headers=owner_headers,
            json=_movement(foreign_account["category_id"]),
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_CATEGORY_FOR_ACCOUNT"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["0", "-5.00", "1.005"])
    async def test_invalid_amounts(
        self, async_client: AsyncClient, account, owner_headers, categories, amount
    ):
        response = await async_client.post(
            f"{API}/{account.id}/movements",
            headers=owner_headers,
            json=_movement(categories["Groceries"], amount),
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_foreign_tags_are_ignored(
        self, async_client: AsyncClient, account, owner_headers, categories, foreign_account
    ):
        own_tag = (
            await async_client.post(
                f"{API}/{account.id}/tags", headers=owner_headers, json={"name": "weekly"}
            )
        ).json()

        response = await async_client.post(
            f"{API}/{account.id}/movements",
            headers=owner_headers,
            json=_movement(
                categories["Groceries"], tag_ids=[own_tag["id"], foreign_account["tag_id"]]
            ),
        )

        assert response.status_code == 201
        assert [t["id"] for t in response.json()["tags"]] == [own_tag["id"]]


# ============================================================================
# Search
# ============================================================================
class TestListMovements:
    """Test GET /api/v1/accounts/{id}/movements."""

    @pytest_asyncio.fixture
    async def ledger(self, async_client: AsyncClient, account, owner_headers, categories):
        rows = [
            _movement(categories["Salary"], "2000.00", type="income", operation_date="2024-01-31", description="January payroll"),
            _movement(categories["Groceries"], "80.00", operation_date="2024-02-03", provider="Mercadona"),
            _movement(categories["Groceries"], "45.00", operation_date="2024-02-17", provider="Lidl", notes="mercadona closed"),
            _movement(categories["Transfers"], "300.00", operation_date="2024-03-01", state="pending_review"),
        ]
        for row in rows:
            response = await async_client.post(
                f"{API}/{account.id}/movements", headers=owner_headers, json=row
            )
            assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_newest_first_with_meta(self, async_client, account, owner_headers, ledger):
        response = await async_client.get(f"{API}/{account.id}/movements", headers=owner_headers)

        data = response.json()
        assert [m["operation_date"] for m in data["data"]] == [
            "2024-03-01",
            "2024-02-17",
            "2024-02-03",
            "2024-01-31",
        ]
        assert data["meta"]["total"] == 4
        assert data["meta"]["total_pages"] == 1

    @pytest.mark.asyncio
    async def test_filters(self, async_client, account, owner_headers, ledger):
        url = f"{API}/{account.id}/movements"

        income = await async_client.get(url, headers=owner_headers, params={"type": "income"})
        pending = await async_client.get(
            url, headers=owner_headers, params={"state": "pending_review"}
        )
        february = await async_client.get(
            url,
            headers=owner_headers,
            params={"date_from": "2024-02-01", "date_to": "2024-02-29"},
        )
        text = await async_client.get(url, headers=owner_headers, params={"search": "MERCADONA"})
        provider = await async_client.get(url, headers=owner_headers, params={"provider": "lidl"})

        assert income.json()["meta"]["total"] == 1
        assert pending.json()["data"][0]["state"] == "pending_review"
        assert february.json()["meta"]["total"] == 2
        assert text.json()["meta"]["total"] == 2
        assert provider.json()["data"][0]["provider"] == "Lidl"

    @pytest.mark.asyncio
    async def test_inverted_date_range(self, async_client, account, owner_headers):
        response = await async_client.get(
            f"{API}/{account.id}/movements",
            headers=owner_headers,
            params={"date_from": "2024-03-01", "date_to": "2024-02-01"},
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_pagination(self, async_client, account, owner_headers, ledger):
        response = await async_client.get(
            f"{API}/{account.id}/movements",
            headers=owner_headers,
            params={"page": 2, "page_size": 3},
        )

        meta = response.json()["meta"]
        assert len(response.json()["data"]) == 1
        assert meta["total_pages"] == 2
        assert meta["has_next"] is False
        assert meta["has_previous"] is True


# ============================================================================
# Update / confirm / delete
# ============================================================================
class TestModifyMovement:
    """Test PUT, confirm and DELETE on a movement."""

    @pytest_asyncio.fixture
    async def movement(self, async_client, account, owner_headers, categories):
        tag = (
            await async_client.post(
                f"{API}/{account.id}/tags", headers=owner_headers, json={"name": "home"}
            )
        ).json()
        response = await async_client.post(
            f"{API}/{account.id}/movements",
            headers=owner_headers,
            json=_movement(
                categories["Groceries"], state="pending_review", tag_ids=[tag["id"]]
            ),
        )
        return response.json()

    @pytest.mark.asyncio
    async def test_update_fields_and_clear_tags(
        self, async_client, account, owner_headers, categories, movement
    ):
        response = await async_client.put(
            f"{API}/{account.id}/movements/{movement['id']}",
            headers=owner_headers,
            json={"amount": "30.10", "category_id": categories["Transfers"], "tag_ids": []},
        )

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["amount"]) == Decimal("30.10")
        assert data["category"]["name"] == "Transfers"
        assert data["tags"] == []

    @pytest.mark.asyncio
    async def test_update_without_tag_ids_keeps_tags(
        self, async_client, account, owner_headers, movement
    ):
        response = await async_client.put(
            f"{API}/{account.id}/movements/{movement['id']}",
            headers=owner_headers,
            json={"description": "weekly shop"},
        )

        assert response.status_code == 200
        assert [t["name"] for t in response.json()["tags"]] == ["home"]

    @pytest.mark.asyncio
    async def test_confirm_once(self, async_client, account, owner_headers, movement):
        url = f"{API}/{account.id}/movements/{movement['id']}/confirm"

        first = await async_client.post(url, headers=owner_headers)
        second = await async_client.post(url, headers=owner_headers)

        assert first.status_code == 200
        assert first.json()["state"] == "confirmed"
        assert second.status_code == 404

    @pytest.mark.asyncio
    async def test_delete(self, async_client, account, owner_headers, movement):
        url = f"{API}/{account.id}/movements/{movement['id']}"

        deleted = await async_client.delete(url, headers=owner_headers)
        missing = await async_client.get(url, headers=owner_headers)

        assert deleted.status_code == 204
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_movement_of_other_account_not_found(
        self, async_client, owner_headers, other_user, auth_headers, movement, foreign_account
    ):
        response = await async_client.get(
            f"{API}/{foreign_account['id']}/movements/{movement['id']}",
            headers=auth_headers(other_user),
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_editor_edits_but_cannot_delete(
        self, async_client, account, owner_headers, other_user, auth_headers, movement
    ):
        await async_client.post(
            f"{API}/{account.id}/members",
            headers=owner_headers,
            json={"email": other_user.email, "role": "editor"},
        )
        url = f"{API}/{account.id}/movements/{movement['id']}"

        edit = await async_client.put(
            url, headers=auth_headers(other_user), json={"notes": "checked"}
        )
        delete = await async_client.delete(url, headers=auth_headers(other_user))

        assert edit.status_code == 200
        assert delete.status_code == 403


# ============================================================================
# Bulk
# ============================================================================
class TestBulkCreate:
    @pytest.mark.asyncio
    async def test_bulk_skips_unusable_categories(
        self, async_client, account, owner_headers, categories, foreign_account
    ):
        response = await async_client.post(
            f"{API}/{account.id}/movements/bulk",
            headers=owner_headers,
            json={
                "movements": [
                    _movement(categories["Groceries"], "10.00"),
                    _movement(foreign_account["category_id"], "20.00"),
                    _movement(categories["Transfers"], "30.00"),
                ]
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["count"] == 2
        assert len(data["ids"]) == 2
        assert data["message"] == "2 movements created successfully"

        listed = await async_client.get(f"{API}/{account.id}/movements", headers=owner_headers)
        assert listed.json()["meta"]["total"] == 2


# ============================================================================
# Documents
# ============================================================================
class TestDocuments:
    """Test /movements/{id}/documents."""

    @pytest.mark.asyncio
    async def test_add_list_delete(self, async_client, account, owner_headers, categories):
        movement = (
            await async_client.post(
                f"{API}/{account.id}/movements",
                headers=owner_headers,
                json=_movement(categories["Groceries"]),
            )
        ).json()
        url = f"{API}/{account.id}/movements/{movement['id']}/documents"

        created = await async_client.post(
            url,
            headers=owner_headers,
            json={
                "file_url": "https://files.example.com/r/123",
                "file_name": "receipt.JPG",
                "origin": "photo",
                "size_bytes": 2048,
            },
        )
        assert created.status_code == 201
        assert created.json()["file_type"] == "image"

        listed = await async_client.get(url, headers=owner_headers)
        assert [d["id"] for d in listed.json()] == [created.json()["id"]]

        detail = await async_client.get(
            f"{API}/{account.id}/movements/{movement['id']}", headers=owner_headers
        )
        assert len(detail.json()["documents"]) == 1

        deleted = await async_client.delete(
            f"{url}/{created.json()['id']}", headers=owner_headers
        )
        assert deleted.status_code == 204
        assert (await async_client.get(url, headers=owner_headers)).json() == []

    @pytest.mark.asyncio
    async def test_documents_of_unknown_movement(
        self, async_client, account, owner_headers
    ):
        response = await async_client.get(
            f"{API}/{account.id}/movements/00000000-0000-0000-0000-000000000000/documents",
            headers=owner_headers,
        )

        assert response.status_code == 404
