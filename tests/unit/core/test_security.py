"""
Unit tests for security utilities (password hashing, JWT tokens).

All tests are fully in-memory - no database or external dependencies.
"""

import uuid
from datetime import timedelta

import pytest
from jose import ExpiredSignatureError, JWTError, jwt

from src.core import security


class TestPasswordHashing:
    """Test password hashing with Argon2id."""

    def test_hash_password_returns_argon2id_hash(self):
        hashed = security.hash_password("TestPass123!")

        assert isinstance(hashed, str)
        assert hashed.startswith("$argon2id$")

    def test_hash_password_different_for_same_password(self):
        """Hashing the same password twice produces different hashes (due to salt)."""
        assert security.hash_password("TestPass123!") != security.hash_password("TestPass123!")

    def test_verify_password_correct_password(self):
        hashed = security.hash_password("TestPass123!")

        assert security.verify_password("TestPass123!", hashed) is True

    def test_verify_password_incorrect_password(self):
        hashed = security.hash_password("TestPass123!")

        assert security.verify_password("WrongPass123!", hashed) is False

    def test_verify_password_invalid_hash(self):
        """A malformed hash is a failed verification, not an error."""
        assert security.verify_password("TestPass123!", "invalid_hash") is False


class TestPasswordStrength:
    """Test validate_password_strength."""

    @pytest.mark.parametrize(
        ("password", "fragment"),
        [
            ("Ab1!", "at least 8 characters"),
            ("testpass123!", "uppercase"),
            ("TESTPASS123!", "lowercase"),
            ("TestPassword!", "digit"),
            ("TestPass1234", "special character"),
        ],
    )
    def test_rejects_weak_passwords(self, password, fragment):
        is_valid, error = security.validate_password_strength(password)

        assert is_valid is False
        assert fragment in error

    def test_accepts_strong_password(self):
        assert security.validate_password_strength("TestPass123!") == (True, None)


class TestJWTTokens:
    """Test JWT creation and decoding."""

    def test_access_token_claims(self):
        user_id = str(uuid.uuid4())

        token = security.create_access_token({"sub": user_id})
        payload = security.decode_token(token)

        assert payload["sub"] == user_id
        assert payload["type"] == "access"
        assert {"exp", "iat", "jti"} <= payload.keys()

    def test_refresh_token_type(self):
        token = security.create_refresh_token({"sub": str(uuid.uuid4())})
        payload = security.decode_token(token)

        assert security.verify_token_type(payload, "refresh") is True
        assert security.verify_token_type(payload, "access") is False

    def test_tokens_are_unique(self):
        """Two tokens for the same subject in the same second differ by jti."""
        data = {"sub": str(uuid.uuid4())}

        assert security.create_access_token(data) != security.create_access_token(data)

    def test_custom_expiry_is_applied(self):
        token = security.create_access_token(
            {"sub": "abc"}, expires_delta=timedelta(minutes=5)
        )
        payload = security.decode_token(token)

        assert payload["exp"] - payload["iat"] == 300

    def test_expired_token_raises_expired_signature(self):
        token = security.create_access_token(
            {"sub": "abc"}, expires_delta=timedelta(seconds=-10)
        )

        with pytest.raises(ExpiredSignatureError):
            security.decode_token(token)

    def test_tampered_token_raises(self):
        token = security.create_access_token({"sub": "abc"})

        with pytest.raises(JWTError):
            security.decode_token(token[:-4] + "abcd")

    def test_token_signed_with_other_key_raises(self):
        forged = jwt.encode(
            {"sub": "abc", "type": "access"},
            "another-secret-key-that-is-long-enough-123",
            algorithm=security.ALGORITHM,
        )

        with pytest.raises(JWTError):
            security.decode_token(forged)
