"""
Integration tests for authentication routes.

Tests cover:
- User registration
- User login (including blocked users)
- Token refresh
- Profile read/update
- Password change
- Error cases and validation
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from src.core.security import create_access_token, create_refresh_token
from src.models.user import User


# ============================================================================
# Registration Tests
# ============================================================================
class TestRegistration:
    """Test user registration endpoint."""

    @pytest.mark.asyncio
    async def test_register_success(self, async_client: AsyncClient):
        """Registration returns the user and a token pair."""
        response = await async_client.post(
            "/api/auth/register",
            json={
                "name": "New User",
                "email": "newuser@example.com",
                "password": "NewPass123!",
            },
        )

        assert response.status_code == 201
        data = response.json()

        assert data["user"]["email"] == "newuser@example.com"
        assert data["user"]["role"] == "ordinary"
        assert data["user"]["state"] == "active"
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["refresh_token"]
        assert "password_hash" not in data["user"]

    @pytest.mark.asyncio
    async def test_register_duplicate_email_case_insensitive(
        self, async_client: AsyncClient, test_user: User
    ):
        response = await async_client.post(
            "/api/auth/register",
            json={
                "name": "Copy",
                "email": "OWNER@example.com",
                "password": "NewPass123!",
            },
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALREADY_EXISTS"

    @pytest.mark.asyncio
    async def test_register_weak_password(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/register",
            json={"name": "Weak", "email": "weak@example.com", "password": "password"},
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_register_invalid_email(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/register",
            json={"name": "Bad", "email": "not-an-email", "password": "NewPass123!"},
        )

        assert response.status_code == 422


# ============================================================================
# Login Tests
# ============================================================================
class TestLogin:
    """Test login endpoint."""

    @pytest.mark.asyncio
    async def test_login_success(self, async_client: AsyncClient, test_user: User):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": "owner@example.com", "password": "TestPass123!"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == str(test_user.id)
        assert data["user"]["last_login_at"] is not None

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, async_client: AsyncClient, test_user: User):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": "owner@example.com", "password": "WrongPass123!"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    @pytest.mark.asyncio
    async def test_login_unknown_user_same_error(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": "ghost@example.com", "password": "TestPass123!"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    @pytest.mark.asyncio
    async def test_login_blocked_user(self, async_client: AsyncClient, blocked_user: User):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": "blocked@example.com", "password": "TestPass123!"},
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "ACCOUNT_BLOCKED"


# ============================================================================
# Token Tests
# ============================================================================
class TestTokens:
    """Test token refresh and bearer authentication."""

    @pytest.mark.asyncio
    async def test_refresh_success(self, async_client: AsyncClient, test_user: User):
        refresh = create_refresh_token({"sub": str(test_user.id)})

        response = await async_client.post(
            "/api/auth/refresh", json={"refresh_token": refresh}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["access_token"]
        assert data["expires_in"] > 0

    @pytest.mark.asyncio
    async def test_refresh_with_access_token_rejected(
        self, async_client: AsyncClient, test_user: User
    ):
        access = create_access_token({"sub": str(test_user.id)})

        response = await async_client.post(
            "/api/auth/refresh", json={"refresh_token": access}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    @pytest.mark.asyncio
    async def test_missing_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/auth/profile")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_FAILED"

    @pytest.mark.asyncio
    async def test_expired_token(self, async_client: AsyncClient, test_user: User):
        token = create_access_token(
            {"sub": str(test_user.id)}, expires_delta=timedelta(seconds=-5)
        )

        response = await async_client.get(
            "/api/auth/profile", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"

    @pytest.mark.asyncio
    async def test_refresh_token_not_accepted_as_bearer(
        self, async_client: AsyncClient, test_user: User
    ):
        token = create_refresh_token({"sub": str(test_user.id)})

        response = await async_client.get(
            "/api/auth/profile", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    @pytest.mark.asyncio
    async def test_blocked_user_token_refused(
        self, async_client: AsyncClient, blocked_user: User, auth_headers
    ):
        response = await async_client.get(
            "/api/auth/profile", headers=auth_headers(blocked_user)
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "ACCOUNT_BLOCKED"


# ============================================================================
# Profile Tests
# ============================================================================
class TestProfile:
    """Test profile endpoints."""

    @pytest.mark.asyncio
    async def test_get_profile(self, async_client: AsyncClient, test_user: User, auth_headers):
        response = await async_client.get("/api/auth/profile", headers=auth_headers(test_user))

        assert response.status_code == 200
        assert response.json()["email"] == "owner@example.com"

    @pytest.mark.asyncio
    async def test_update_profile(self, async_client: AsyncClient, test_user: User, auth_headers):
        response = await async_client.put(
            "/api/auth/profile",
            headers=auth_headers(test_user),
            json={"name": "Ana Renamed"},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Ana Renamed"

    @pytest.mark.asyncio
    async def test_update_profile_email_taken(
        self, async_client: AsyncClient, test_user: User, other_user: User, auth_headers
    ):
        response = await async_client.put(
            "/api/auth/profile",
            headers=auth_headers(test_user),
            json={"email": "other@example.com"},
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_change_password_then_login(
        self, async_client: AsyncClient, test_user: User, auth_headers
    ):
        response = await async_client.put(
            "/api/auth/change-password",
            headers=auth_headers(test_user),
            json={"current_password": "TestPass123!", "new_password": "Changed456$"},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Password changed successfully"

        login = await async_client.post(
            "/api/auth/login",
            json={"email": "owner@example.com", "password": "Changed456$"},
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_change_password_wrong_current(
        self, async_client: AsyncClient, test_user: User, auth_headers
    ):
        response = await async_client.put(
            "/api/auth/change-password",
            headers=auth_headers(test_user),
            json={"current_password": "WrongPass123!", "new_password": "Changed456$"},
        )

        assert response.status_code == 401
