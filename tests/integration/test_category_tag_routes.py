"""
Integration tests for category and tag routes.

Tests cover:
- Account categories: listing with globals, CRUD, unique names, in-use deletion
- Global categories: admin-only management, copies in new accounts
- Tags: CRUD, unique names, usage counts, movements by tag
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient

API = "/api/v1/accounts"
GLOBAL_API = "/api/v1/categories/global"


@pytest_asyncio.fixture
async def owner_headers(test_user, auth_headers):
    return auth_headers(test_user)


async def _own_category_id(client: AsyncClient, account_id, headers, name: str) -> str:
    response = await client.get(f"{API}/{account_id}/categories", headers=headers)
    return next(
        c["id"]
        for c in response.json()
        if c["name"] == name and c["account_id"] == str(account_id)
    )


async def _spend(client: AsyncClient, account_id, headers, category_id, **extra) -> dict:
    response = await client.post(
        f"{API}/{account_id}/movements",
        headers=headers,
        json={
            "type": "expense",
            "operation_date": "2024-05-01",
            "amount": "12.00",
            "category_id": category_id,
            **extra,
        },
    )
    assert response.status_code == 201
    return response.json()


# ============================================================================
# Account categories
# ============================================================================
class TestAccountCategories:
    """Test /api/v1/accounts/{id}/categories."""

    @pytest.mark.asyncio
    async def test_list_puts_globals_first(
        self, async_client: AsyncClient, account, owner_headers, global_categories
    ):
        response = await async_client.get(
            f"{API}/{account.id}/categories", headers=owner_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert [c["is_global"] for c in data[:3]] == [True, True, True]
        assert all(not c["is_global"] for c in data[3:])
        assert {c["name"] for c in data[3:]} == {"Salary", "Groceries", "Transfers"}

    @pytest.mark.asyncio
    async def test_type_filter_matches_both(
        self, async_client: AsyncClient, account, owner_headers, global_categories
    ):
        response = await async_client.get(
            f"{API}/{account.id}/categories",
            headers=owner_headers,
            params={"type": "expense"},
        )

        assert {c["type"] for c in response.json()} == {"expense", "both"}

    @pytest.mark.asyncio
    async def test_create_and_rename(self, async_client: AsyncClient, account, owner_headers):
        created = await async_client.post(
            f"{API}/{account.id}/categories",
            headers=owner_headers,
            json={"name": "Pets", "type": "expense", "icon": "paw", "color": "#AA3300"},
        )
        assert created.status_code == 201
        assert created.json()["is_global"] is False

        renamed = await async_client.put(
            f"{API}/{account.id}/categories/{created.json()['id']}",
            headers=owner_headers,
            json={"name": "Pet care"},
        )

        assert renamed.status_code == 200
        assert renamed.json()["name"] == "Pet care"
        assert renamed.json()["icon"] == "paw"

    @pytest.mark.asyncio
    async def test_duplicate_name_case_insensitive(
        self, async_client: AsyncClient, account, owner_headers
    ):
        response = await async_client.post(
            f"{API}/{account.id}/categories",
            headers=owner_headers,
            json={"name": "groceries", "type": "expense"},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALREADY_EXISTS"

    @pytest.mark.asyncio
    async def test_global_category_not_editable_through_account(
        self, async_client: AsyncClient, account, owner_headers, global_categories
    ):
        response = await async_client.put(
            f"{API}/{account.id}/categories/{global_categories[0].id}",
            headers=owner_headers,
            json={"name": "Hijacked"},
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_in_use_then_free(
        self, async_client: AsyncClient, account, owner_headers
    ):
        category = (
            await async_client.post(
                f"{API}/{account.id}/categories",
                headers=owner_headers,
                json={"name": "Hobbies", "type": "expense"},
            )
        ).json()
        movement = await _spend(async_client, account.id, owner_headers, category["id"])
        url = f"{API}/{account.id}/categories/{category['id']}"

        refused = await async_client.delete(url, headers=owner_headers)
        assert refused.status_code == 400
        assert refused.json()["error"]["code"] == "CATEGORY_IN_USE"

        await async_client.delete(
            f"{API}/{account.id}/movements/{movement['id']}", headers=owner_headers
        )
        deleted = await async_client.delete(url, headers=owner_headers)
        assert deleted.status_code == 204

    @pytest.mark.asyncio
    async def test_readonly_member_cannot_create(
        self, async_client: AsyncClient, account, owner_headers, other_user, auth_headers
    ):
        await async_client.post(
            f"{API}/{account.id}/members",
            headers=owner_headers,
            json={"email": other_user.email, "role": "readonly"},
        )

        listed = await async_client.get(
            f"{API}/{account.id}/categories", headers=auth_headers(other_user)
        )
        created = await async_client.post(
            f"{API}/{account.id}/categories",
            headers=auth_headers(other_user),
            json={"name": "Mine", "type": "expense"},
        )

        assert listed.status_code == 200
        assert created.status_code == 403
        assert created.json()["error"]["code"] == "INSUFFICIENT_PERMISSIONS"


# ============================================================================
# Global categories
# ============================================================================
class TestGlobalCategories:
    """Test /api/v1/categories/global."""

    @pytest.mark.asyncio
    async def test_any_user_can_list(
        self, async_client: AsyncClient, test_user, auth_headers, global_categories
    ):
        response = await async_client.get(GLOBAL_API, headers=auth_headers(test_user))

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Salary", "Groceries", "Transfers"]

    @pytest.mark.asyncio
    async def test_ordinary_user_cannot_create(
        self, async_client: AsyncClient, test_user, auth_headers
    ):
        response = await async_client.post(
            GLOBAL_API,
            headers=auth_headers(test_user),
            json={"name": "Rent", "type": "expense"},
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_new_global_reaches_new_accounts_only(
        self, async_client: AsyncClient, admin_user, test_user, auth_headers, account
    ):
        created = await async_client.post(
            GLOBAL_API,
            headers=auth_headers(admin_user),
            json={"name": "Rent", "type": "expense", "display_order": 4},
        )
        assert created.status_code == 201
        assert created.json()["account_id"] is None

        headers = auth_headers(test_user)
        fresh = (await async_client.post(API, headers=headers, json={"name": "Later"})).json()

        old_own = await async_client.get(f"{API}/{account.id}/categories", headers=headers)
        new_own = await async_client.get(f"{API}/{fresh['id']}/categories", headers=headers)

        assert "Rent" not in {c["name"] for c in old_own.json() if not c["is_global"]}
        assert "Rent" in {c["name"] for c in new_own.json() if not c["is_global"]}

    @pytest.mark.asyncio
    async def test_admin_update_and_delete(
        self, async_client: AsyncClient, admin_user, auth_headers, global_categories
    ):
        headers = auth_headers(admin_user)
        target = global_categories[2]

        updated = await async_client.put(
            f"{GLOBAL_API}/{target.id}", headers=headers, json={"color": "#00FF00"}
        )
        deleted = await async_client.delete(f"{GLOBAL_API}/{target.id}", headers=headers)
        missing = await async_client.delete(f"{GLOBAL_API}/{target.id}", headers=headers)

        assert updated.status_code == 200
        assert updated.json()["color"] == "#00FF00"
        assert deleted.status_code == 204
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_global_in_use_cannot_be_deleted(
        self,
        async_client: AsyncClient,
        admin_user,
        auth_headers,
        account,
        owner_headers,
        global_categories,
    ):
        await _spend(async_client, account.id, owner_headers, str(global_categories[1].id))

        response = await async_client.delete(
            f"{GLOBAL_API}/{global_categories[1].id}", headers=auth_headers(admin_user)
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "CATEGORY_IN_USE"


# ============================================================================
# Tags
# ============================================================================
class TestTags:
    """Test /api/v1/accounts/{id}/tags."""

    @pytest.mark.asyncio
    async def test_create_defaults_color(self, async_client: AsyncClient, account, owner_headers):
        response = await async_client.post(
            f"{API}/{account.id}/tags", headers=owner_headers, json={"name": "  travel  "}
        )

        assert response.status_code == 201
        assert response.json()["name"] == "travel"
        assert response.json()["color"] == "#3B82F6"

    @pytest.mark.asyncio
    async def test_invalid_color(self, async_client: AsyncClient, account, owner_headers):
        response = await async_client.post(
            f"{API}/{account.id}/tags",
            headers=owner_headers,
            json={"name": "bad", "color": "blue"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_duplicate_name(self, async_client: AsyncClient, account, owner_headers):
        url = f"{API}/{account.id}/tags"
        await async_client.post(url, headers=owner_headers, json={"name": "Travel"})

        response = await async_client.post(url, headers=owner_headers, json={"name": "TRAVEL"})

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_usage_counts_and_movements_by_tag(
        self, async_client: AsyncClient, account, owner_headers
    ):
        url = f"{API}/{account.id}/tags"
        used = (await async_client.post(url, headers=owner_headers, json={"name": "kids"})).json()
        await async_client.post(url, headers=owner_headers, json={"name": "unused"})
        groceries = await _own_category_id(async_client, account.id, owner_headers, "Groceries")
        for _ in range(2):
            await _spend(async_client, account.id, owner_headers, groceries, tag_ids=[used["id"]])
        await _spend(async_client, account.id, owner_headers, groceries)

        listed = await async_client.get(url, headers=owner_headers)
        counts = {t["name"]: t["movement_count"] for t in listed.json()}
        assert counts == {"kids": 2, "unused": 0}

        detail = await async_client.get(f"{url}/{used['id']}", headers=owner_headers)
        assert detail.json()["movement_count"] == 2

        movements = await async_client.get(
            f"{url}/{used['id']}/movements", headers=owner_headers
        )
        assert movements.json()["meta"]["total"] == 2

    @pytest.mark.asyncio
    async def test_delete_detaches_from_movements(
        self, async_client: AsyncClient, account, owner_headers
    ):
        url = f"{API}/{account.id}/tags"
        tag = (await async_client.post(url, headers=owner_headers, json={"name": "temp"})).json()
        groceries = await _own_category_id(async_client, account.id, owner_headers, "Groceries")
        movement = await _spend(
            async_client, account.id, owner_headers, groceries, tag_ids=[tag["id"]]
        )

        deleted = await async_client.delete(f"{url}/{tag['id']}", headers=owner_headers)
        detail = await async_client.get(
            f"{API}/{account.id}/movements/{movement['id']}", headers=owner_headers
        )

        assert deleted.status_code == 204
        assert detail.status_code == 200
        assert detail.json()["tags"] == []

    @pytest.mark.asyncio
    async def test_tag_of_other_account_not_found(
        self, async_client: AsyncClient, account, owner_headers, other_user, auth_headers
    ):
        other_headers = auth_headers(other_user)
        other = (await async_client.post(API, headers=other_headers, json={"name": "B"})).json()
        tag = (
            await async_client.post(
                f"{API}/{other['id']}/tags", headers=other_headers, json={"name": "x"}
            )
        ).json()

        response = await async_client.get(
            f"{API}/{account.id}/tags/{tag['id']}", headers=owner_headers
        )

        assert response.status_code == 404
