"""
Password hashing and bearer tokens.

Passwords are hashed with Argon2id (cost parameters from settings). Tokens are
stateless HS256 JWTs carrying ``sub`` (user id), ``exp``, ``iat``, ``type``
(``access`` or ``refresh``) and a random ``jti``; nothing about an issued
token is stored, so a refresh token is simply a longer-lived JWT of type
``refresh`` that ``/api/auth/refresh`` swaps for a new pair.
"""

import logging
import re
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from jose import JWTError, jwt

from src.core.config import settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"

MIN_PASSWORD_LENGTH = 8

# (pattern, message) pairs checked in order; the first miss is reported
PASSWORD_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"\d"), "Password must contain at least one digit"),
    (
        re.compile(r"[!@#$%^&*()_+\-=\[\]{}|;:,.<>?]"),
        "Password must contain at least one special character",
    ),
)

_hasher = PasswordHasher(
    time_cost=settings.argon2_time_cost,
    memory_cost=settings.argon2_memory_cost,
    parallelism=settings.argon2_parallelism,
    hash_len=32,
    salt_len=16,
)


# ----------------------------------------------------------------------------
# Passwords
# ----------------------------------------------------------------------------


def hash_password(password: str) -> str:
    """Return an encoded ``$argon2id$...`` hash (salt and parameters included)."""
    return _hasher.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Check ``password`` against a stored hash.

    A corrupt or foreign hash counts as a mismatch rather than an error so that
    login answers 401 instead of 500.
    """
    try:
        return _hasher.verify(hashed_password, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def validate_password_strength(password: str) -> tuple[bool, str | None]:
    """
    Apply the password policy.

    At least 8 characters with an upper-case letter, a lower-case letter, a
    digit and one of ``!@#$%^&*()_+-=[]{}|;:,.<>?``.

    Returns:
        ``(True, None)`` when the password is acceptable, otherwise
        ``(False, message)`` describing the first rule it breaks.

    Example:
        >>> validate_password_strength("weak")
        (False, 'Password must be at least 8 characters long')
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        return False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"

    for pattern, message in PASSWORD_RULES:
        if not pattern.search(password):
            return False, message

    return True, None


# ----------------------------------------------------------------------------
# Tokens
# ----------------------------------------------------------------------------


def _issue(claims: dict[str, Any], token_type: str, lifetime: timedelta) -> str:
    issued_at = datetime.now(UTC)
    payload = {
        **claims,
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "type": token_type,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Sign an access token for ``data`` (which must hold ``sub``).

    Lifetime defaults to ``ACCESS_TOKEN_EXPIRE_MINUTES``.
    """
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    return _issue(data, TOKEN_TYPE_ACCESS, lifetime)


def create_refresh_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Sign a refresh token; lifetime defaults to ``REFRESH_TOKEN_EXPIRE_DAYS``."""
    lifetime = expires_delta or timedelta(days=settings.refresh_token_expire_days)
    return _issue(data, TOKEN_TYPE_REFRESH, lifetime)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        jose.ExpiredSignatureError: the token is past ``exp``
        jose.JWTError: any other signature or format problem
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        raise


def verify_token_type(token_data: dict[str, Any], expected_type: str) -> bool:
    return token_data.get("type") == expected_type
