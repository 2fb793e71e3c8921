"""
Unit tests for AuthService.

All tests are fully mocked - no database or external dependencies.
"""

import uuid
from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from src.core.security import create_access_token, create_refresh_token, hash_password
from src.exceptions import (
    AlreadyExistsError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    UserBlockedError,
)
from src.models.enums import UserRole, UserState
from src.models.user import User
from src.schemas.user import ProfileUpdate, UserRegister
from src.services.auth_service import AuthService

PASSWORD = "TestPass123!"


@pytest.fixture
def mock_session():
    """Create a mock AsyncSession."""
    session = AsyncMock()
    session.commit = AsyncMock()
    session.flush = AsyncMock()
    return session


@pytest.fixture
def mock_user_repo():
    """Create a mock UserRepository."""
    return AsyncMock()


@pytest.fixture
def auth_service(mock_session, mock_user_repo):
    """Create AuthService with mocked dependencies."""
    with patch("src.services.auth_service.UserRepository", return_value=mock_user_repo):
        service = AuthService(mock_session)
    return service


@pytest.fixture
def sample_user():
    """Create a sample User instance."""
    return User(
        id=uuid.uuid4(),
        name="Ana",
        email="ana@example.com",
        password_hash=hash_password(PASSWORD),
        role=UserRole.ordinary,
        state=UserState.active,
    )


class TestRegister:
    """Test AuthService.register."""

    @pytest.mark.asyncio
    async def test_register_creates_ordinary_active_user(
        self, auth_service, mock_user_repo, mock_session
    ):
        mock_user_repo.email_exists.return_value = False
        mock_user_repo.add.side_effect = lambda user: user

        user, tokens = await auth_service.register(
            UserRegister(name="Ana", email="Ana@Example.com", password=PASSWORD)
        )

        assert user.email == "ana@example.com"
        assert user.role == UserRole.ordinary
        assert user.state == UserState.active
        assert user.password_hash != PASSWORD
        assert tokens.token_type == "bearer"
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, auth_service, mock_user_repo, mock_session):
        mock_user_repo.email_exists.return_value = True

        with pytest.raises(AlreadyExistsError):
            await auth_service.register(
                UserRegister(name="Ana", email="ana@example.com", password=PASSWORD)
            )

        mock_user_repo.add.assert_not_awaited()
        mock_session.commit.assert_not_awaited()


class TestLogin:
    """Test AuthService.login."""

    @pytest.mark.asyncio
    async def test_login_success(self, auth_service, mock_user_repo, sample_user):
        mock_user_repo.get_by_email.return_value = sample_user

        user, tokens = await auth_service.login("ana@example.com", PASSWORD)

        assert user is sample_user
        assert tokens.access_token
        assert tokens.refresh_token
        mock_user_repo.update_last_login.assert_awaited_once_with(sample_user)

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, auth_service, mock_user_repo):
        mock_user_repo.get_by_email.return_value = None

        with pytest.raises(InvalidCredentialsError):
            await auth_service.login("nobody@example.com", PASSWORD)

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, auth_service, mock_user_repo, sample_user):
        mock_user_repo.get_by_email.return_value = sample_user

        with pytest.raises(InvalidCredentialsError):
            await auth_service.login("ana@example.com", "WrongPass123!")

    @pytest.mark.asyncio
    async def test_login_blocked_user(self, auth_service, mock_user_repo, sample_user):
        sample_user.state = UserState.blocked
        mock_user_repo.get_by_email.return_value = sample_user

        with pytest.raises(UserBlockedError):
            await auth_service.login("ana@example.com", PASSWORD)

        mock_user_repo.update_last_login.assert_not_awaited()


class TestRefresh:
    """Test AuthService.refresh_access_token."""

    @pytest.mark.asyncio
    async def test_refresh_issues_new_pair(self, auth_service, mock_user_repo, sample_user):
        mock_user_repo.get_by_id.return_value = sample_user
        refresh = create_refresh_token({"sub": str(sample_user.id)})

        tokens = await auth_service.refresh_access_token(refresh)

        assert tokens.refresh_token != refresh
        mock_user_repo.get_by_id.assert_awaited_once_with(sample_user.id)

    @pytest.mark.asyncio
    async def test_access_token_is_not_a_refresh_token(self, auth_service, sample_user):
        access = create_access_token({"sub": str(sample_user.id)})

        with pytest.raises(InvalidTokenError):
            await auth_service.refresh_access_token(access)

    @pytest.mark.asyncio
    async def test_expired_refresh_token(self, auth_service, sample_user):
        expired = create_refresh_token(
            {"sub": str(sample_user.id)}, expires_delta=timedelta(seconds=-5)
        )

        with pytest.raises(TokenExpiredError):
            await auth_service.refresh_access_token(expired)

    @pytest.mark.asyncio
    async def test_garbage_token(self, auth_service):
        with pytest.raises(InvalidTokenError):
            await auth_service.refresh_access_token("not-a-jwt")

    @pytest.mark.asyncio
    async def test_deleted_user(self, auth_service, mock_user_repo):
        mock_user_repo.get_by_id.return_value = None
        refresh = create_refresh_token({"sub": str(uuid.uuid4())})

        with pytest.raises(InvalidTokenError):
            await auth_service.refresh_access_token(refresh)

    @pytest.mark.asyncio
    async def test_blocked_user(self, auth_service, mock_user_repo, sample_user):
        sample_user.state = UserState.blocked
        mock_user_repo.get_by_id.return_value = sample_user

        with pytest.raises(UserBlockedError):
            await auth_service.refresh_access_token(
                create_refresh_token({"sub": str(sample_user.id)})
            )


class TestProfile:
    """Test profile update and password change."""

    @pytest.mark.asyncio
    async def test_update_profile_email_taken(self, auth_service, mock_user_repo, sample_user):
        mock_user_repo.email_exists.return_value = True

        with pytest.raises(AlreadyExistsError):
            await auth_service.update_profile(
                sample_user, ProfileUpdate(email="taken@example.com")
            )

    @pytest.mark.asyncio
    async def test_update_profile_name(self, auth_service, mock_user_repo, sample_user):
        mock_user_repo.update.side_effect = lambda user: user

        user = await auth_service.update_profile(sample_user, ProfileUpdate(name="Ana María"))

        assert user.name == "Ana María"
        mock_user_repo.email_exists.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_change_password_wrong_current(self, auth_service, sample_user):
        with pytest.raises(InvalidCredentialsError):
            await auth_service.change_password(sample_user, "WrongPass123!", "NewPass123!")

    @pytest.mark.asyncio
    async def test_change_password_rehashes(self, auth_service, mock_session, sample_user):
        old_hash = sample_user.password_hash

        await auth_service.change_password(sample_user, PASSWORD, "NewPass123!")

        assert sample_user.password_hash != old_hash
        mock_session.commit.assert_awaited_once()
