"""
Request and response bodies of ``/api/auth``.

Login takes an email and password and answers with a token pair plus the
user; refresh swaps a refresh token for a new pair.
"""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from src.schemas.user import UserResponse


class LoginRequest(BaseModel):
    email: EmailStr
    # Only checked against the stored hash; the strength policy applies when set
    password: str = Field(min_length=1, max_length=128)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class TokenResponse(BaseModel):
    """
    Bearer token pair.

    Attributes:
        access_token: Short-lived token for the ``Authorization`` header
        refresh_token: Long-lived token accepted only by ``/api/auth/refresh``
        token_type: Always ``bearer``
        expires_in: Access token lifetime in seconds
    """

    access_token: str
    refresh_token: str
    token_type: Literal["bearer"] = "bearer"
    expires_in: int = Field(description="Access token lifetime in seconds")


class AuthResponse(TokenResponse):
    """Token pair plus the user, returned by register and login."""

    user: UserResponse
