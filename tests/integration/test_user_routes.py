"""
Integration tests for the administrator user routes.

Tests cover:
- GET /api/v1/users - List with search and filters
- POST /api/v1/users - Create user with role and state
- GET/PUT/DELETE /api/v1/users/{user_id}
- PUT /api/v1/users/{user_id}/password - Reset password

Test scenarios:
- Admin-only enforcement
- Blocking a user refuses login and existing tokens
- Duplicate emails and self-deletion
"""

import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient

from src.models.user import User

USERS = "/api/v1/users"


@pytest_asyncio.fixture
async def admin_headers(admin_user, auth_headers):
    return auth_headers(admin_user)


# ============================================================================
# Permission Enforcement
# ============================================================================
@pytest.mark.asyncio
async def test_ordinary_user_forbidden(
    async_client: AsyncClient, test_user: User, auth_headers
):
    response = await async_client.get(USERS, headers=auth_headers(test_user))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_unauthenticated(async_client: AsyncClient):
    response = await async_client.get(USERS)

    assert response.status_code == 401


# ============================================================================
# List / Get
# ============================================================================
class TestListUsers:
    @pytest.mark.asyncio
    async def test_list_all(
        self, async_client: AsyncClient, admin_headers, test_user, other_user, blocked_user
    ):
        response = await async_client.get(USERS, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["meta"]["total"] == 4

    @pytest.mark.asyncio
    async def test_filters(
        self, async_client: AsyncClient, admin_headers, test_user, other_user, blocked_user
    ):
        blocked = await async_client.get(USERS, headers=admin_headers, params={"state": "blocked"})
        admins = await async_client.get(USERS, headers=admin_headers, params={"role": "admin"})
        search = await async_client.get(USERS, headers=admin_headers, params={"search": "bruno"})

        assert [u["email"] for u in blocked.json()["data"]] == ["blocked@example.com"]
        assert [u["email"] for u in admins.json()["data"]] == ["admin@example.com"]
        assert [u["email"] for u in search.json()["data"]] == ["other@example.com"]

    @pytest.mark.asyncio
    async def test_get_user(self, async_client: AsyncClient, admin_headers, test_user):
        found = await async_client.get(f"{USERS}/{test_user.id}", headers=admin_headers)
        missing = await async_client.get(f"{USERS}/{uuid.uuid4()}", headers=admin_headers)

        assert found.json()["name"] == "Ana Owner"
        assert missing.status_code == 404
        assert missing.json()["error"]["code"] == "USER_NOT_FOUND"


# ============================================================================
# Create / Update
# ============================================================================
class TestCreateAndUpdate:
    @pytest.mark.asyncio
    async def test_create_admin_user(self, async_client: AsyncClient, admin_headers):
        response = await async_client.post(
            USERS,
            headers=admin_headers,
            json={
                "name": "Second Admin",
                "email": "Second@Example.com",
                "password": "AdminPass123!",
                "role": "admin",
            },
        )

        assert response.status_code == 201
        assert response.json()["email"] == "second@example.com"
        assert response.json()["role"] == "admin"

    @pytest.mark.asyncio
    async def test_create_duplicate(self, async_client: AsyncClient, admin_headers, test_user):
        response = await async_client.post(
            USERS,
            headers=admin_headers,
            json={"name": "Copy", "email": "owner@example.com", "password": "AdminPass123!"},
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_block_user_refuses_login_and_tokens(
        self, async_client: AsyncClient, admin_headers, test_user, auth_headers
    ):
        response = await async_client.put(
            f"{USERS}/{test_user.id}", headers=admin_headers, json={"state": "blocked"}
        )
        assert response.status_code == 200
        assert response.json()["state"] == "blocked"

        login = await async_client.post(
            "/api/auth/login",
            json={"email": "owner@example.com", "password": "TestPass123!"},
        )
        profile = await async_client.get("/api/auth/profile", headers=auth_headers(test_user))

        assert login.status_code == 403
        assert profile.status_code == 403

    @pytest.mark.asyncio
    async def test_update_email_taken(
        self, async_client: AsyncClient, admin_headers, test_user, other_user
    ):
        response = await async_client.put(
            f"{USERS}/{test_user.id}",
            headers=admin_headers,
            json={"email": "other@example.com"},
        )

        assert response.status_code == 409


# ============================================================================
# Delete / Password
# ============================================================================
class TestDeleteAndPassword:
    @pytest.mark.asyncio
    async def test_delete_user(self, async_client: AsyncClient, admin_headers, other_user):
        deleted = await async_client.delete(f"{USERS}/{other_user.id}", headers=admin_headers)
        again = await async_client.get(f"{USERS}/{other_user.id}", headers=admin_headers)

        assert deleted.status_code == 204
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_cannot_delete_self(self, async_client: AsyncClient, admin_headers, admin_user):
        response = await async_client.delete(f"{USERS}/{admin_user.id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "CANNOT_DELETE_SELF"

    @pytest.mark.asyncio
    async def test_reset_password(self, async_client: AsyncClient, admin_headers, test_user):
        response = await async_client.put(
            f"{USERS}/{test_user.id}/password",
            headers=admin_headers,
            json={"new_password": "ResetPass789#"},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Password reset successfully"

        login = await async_client.post(
            "/api/auth/login",
            json={"email": "owner@example.com", "password": "ResetPass789#"},
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_reset_password_weak(self, async_client: AsyncClient, admin_headers, test_user):
        response = await async_client.put(
            f"{USERS}/{test_user.id}/password",
            headers=admin_headers,
            json={"new_password": "short"},
        )

        assert response.status_code == 422
