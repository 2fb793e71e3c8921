"""
Self-service identity: registration, login, token refresh, profile and
password.

Tokens are stateless (see ``src.core.security``). A blocked or deleted user
is caught when a token is next presented, here for refresh tokens and in
``get_current_user`` for access tokens.
"""

import logging
import uuid

from jose import ExpiredSignatureError, JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.security import (
    TOKEN_TYPE_REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
    verify_token_type,
)
from src.exceptions import (
    AlreadyExistsError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    UserBlockedError,
)
from src.models.enums import UserRole, UserState
from src.models.user import User
from src.repositories.user_repository import UserRepository
from src.schemas.auth import TokenResponse
from src.schemas.user import ProfileUpdate, UserRegister

logger = logging.getLogger(__name__)


def issue_tokens(user: User) -> TokenResponse:
    """Sign a fresh access/refresh pair for ``user``."""
    subject = str(user.id)
    return TokenResponse(
        access_token=create_access_token(
            {"sub": subject, "email": user.email, "role": user.role.value}
        ),
        refresh_token=create_refresh_token({"sub": subject}),
        expires_in=settings.access_token_expire_minutes * 60,
    )


class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    async def register(self, user_data: UserRegister) -> tuple[User, TokenResponse]:
        """
        Create an ordinary, active user and log them in.

        Raises:
            AlreadyExistsError: the email (compared case-insensitively) is taken
        """
        email = user_data.email.lower()
        if await self.user_repo.email_exists(email):
            logger.warning("Registration refused, email already in use: %s", email)
            raise AlreadyExistsError("User with this email")

        user = await self.user_repo.add(
            User(
                name=user_data.name,
                email=email,
                password_hash=hash_password(user_data.password),
                role=UserRole.ordinary,
                state=UserState.active,
            )
        )
        await self.session.commit()

        logger.info("Registered user %s", user.id)
        return user, issue_tokens(user)

    async def login(self, email: str, password: str) -> tuple[User, TokenResponse]:
        """
        Check credentials and issue a token pair.

        Unknown email and wrong password both raise ``InvalidCredentialsError``
        so the response does not reveal which emails are registered. The
        blocked check comes after the password check for the same reason.

        Raises:
            InvalidCredentialsError: unknown email or wrong password
            UserBlockedError: correct credentials, blocked user
        """
        user = await self.user_repo.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %s", email)
            raise InvalidCredentialsError()

        if user.is_blocked:
            logger.warning("Blocked user %s tried to log in", user.id)
            raise UserBlockedError()

        await self.user_repo.update_last_login(user)
        await self.session.commit()

        logger.info("User %s logged in", user.id)
        return user, issue_tokens(user)

    async def refresh_access_token(self, refresh_token: str) -> TokenResponse:
        """
        Swap a valid refresh token for a new pair.

        Raises:
            TokenExpiredError: the refresh token is past its expiry
            InvalidTokenError: bad signature, an access token, or a user that
                no longer exists
            UserBlockedError: the user was blocked after the token was issued
        """
        try:
            claims = decode_token(refresh_token)
        except ExpiredSignatureError:
            raise TokenExpiredError("Refresh token has expired")
        except JWTError:
            raise InvalidTokenError("Invalid refresh token")

        if not verify_token_type(claims, TOKEN_TYPE_REFRESH):
            raise InvalidTokenError("Token is not a refresh token")

        try:
            user_id = uuid.UUID(claims.get("sub", ""))
        except ValueError:
            raise InvalidTokenError("Invalid refresh token")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            logger.warning("Refresh token presented for missing user %s", user_id)
            raise InvalidTokenError("User not found")
        if user.is_blocked:
            logger.warning("Refresh refused for blocked user %s", user.id)
            raise UserBlockedError()

        logger.debug("Refreshed tokens for user %s", user.id)
        return issue_tokens(user)

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        """
        Change the caller's name and/or email.

        Raises:
            AlreadyExistsError: the new email belongs to someone else
        """
        if data.email is not None:
            email = data.email.lower()
            if email != user.email:
                if await self.user_repo.email_exists(email, exclude_user_id=user.id):
                    logger.warning("User %s asked for email in use: %s", user.id, email)
                    raise AlreadyExistsError("User with this email")
                user.email = email

        if data.name is not None:
            user.name = data.name

        user = await self.user_repo.update(user)
        await self.session.commit()

        logger.info("User %s updated their profile", user.id)
        return user

    async def change_password(
        self, user: User, current_password: str, new_password: str
    ) -> None:
        """
        Replace the caller's password after re-checking the current one.

        Tokens already issued stay valid until they expire.

        Raises:
            InvalidCredentialsError: ``current_password`` is wrong
        """
        if not verify_password(current_password, user.password_hash):
            logger.warning("User %s gave a wrong current password", user.id)
            raise InvalidCredentialsError("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        await self.user_repo.update(user)
        await self.session.commit()

        logger.info("User %s changed their password", user.id)
