"""
Unit Tests for Authentication Utilities
Tests password hashing and session token generation in isolation
"""

from datetime import UTC, datetime, timedelta

import pytest

from medclaims.utils.auth import (
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    verify_password,
)


@pytest.mark.unit
class TestPasswordHashing:
    """Test password hashing and verification"""

    def test_password_hashing(self):
        password = "password123"
        hashed = get_password_hash(password)

        assert hashed != password
        # bcrypt hash
        assert hashed.startswith("$2b$")

    def test_password_verification(self):
        hashed = get_password_hash("password123")

        assert verify_password("password123", hashed) is True
        assert verify_password("password124", hashed) is False
        assert verify_password("", hashed) is False

    def test_same_password_salted_differently(self):
        hash1 = get_password_hash("password123")
        hash2 = get_password_hash("password123")

        assert hash1 != hash2
        assert verify_password("password123", hash1)
        assert verify_password("password123", hash2)

    @pytest.mark.security
    @pytest.mark.parametrize("stored", [None, ""])
    def test_account_without_password_never_matches(self, stored):
        """OAuth-created accounts carry no hash and cannot log in with a password."""
        assert verify_password("password123", stored) is False

    @pytest.mark.security
    def test_password_beyond_bcrypt_limit(self):
        hashed = get_password_hash("a" * 72)

        assert verify_password("a" * 72, hashed) is True
        assert verify_password("a" * 100, hashed) is False
        with pytest.raises(ValueError):
            get_password_hash("\u00e9" * 40 + "a1")


@pytest.mark.unit
class TestSessionTokens:
    """Test session token creation and decoding"""

    def test_access_token_carries_identity_and_role(self):
        token = create_access_token({"sub": "user-1", "role": "INSURANCE"})
        payload = decode_token(token)

        assert payload is not None
        assert payload["sub"] == "user-1"
        assert payload["role"] == "INSURANCE"
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_refresh_token_type(self):
        payload = decode_token(create_refresh_token({"sub": "user-1"}))

        assert payload is not None
        assert payload["type"] == "refresh"

    def test_custom_expiration(self):
        delta = timedelta(minutes=15)
        payload = decode_token(create_access_token({"sub": "user-1"}, expires_delta=delta))

        expected = datetime.now(UTC) + delta
        actual = datetime.fromtimestamp(payload["exp"], tz=UTC)
        assert abs((expected - actual).total_seconds()) < 5

    @pytest.mark.security
    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-10))

        assert decode_token(token) is None

    @pytest.mark.security
    @pytest.mark.parametrize("token", ["", "not-a-jwt", "invalid.token.here"])
    def test_malformed_tokens(self, token):
        assert decode_token(token) is None

    @pytest.mark.security
    def test_tampered_token_rejected(self):
        token = create_access_token({"sub": "user-1", "role": "PATIENT"})
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        assert decode_token(tampered) is None
