"""Unit tests for authentication utilities"""
import pytest
from datetime import timedelta
from types import SimpleNamespace

from portal.core.auth import (
    create_access_token,
    create_user_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from portal.exceptions import AuthenticationRequired


class TestTokenGeneration:
    """Tests for JWT token generation"""

    def test_create_access_token(self):
        """Test creating access token"""
        token = create_access_token({"sub": "12"})

        assert token is not None
        assert isinstance(token, str)
        assert len(token) > 0

    def test_decode_access_token_valid(self):
        """Test decoding valid token"""
        token = create_access_token({"sub": "12", "email": "user@example.com"}, expires_delta=timedelta(minutes=5))

        payload = decode_access_token(token)

        assert payload["sub"] == "12"
        assert payload["email"] == "user@example.com"
        assert "exp" in payload

    def test_decode_access_token_invalid(self):
        """Test decoding invalid token raises AuthenticationRequired"""
        with pytest.raises(AuthenticationRequired):
            decode_access_token("invalid.token.here")

    def test_expired_token_is_rejected(self):
        token = create_access_token({"sub": "12"}, expires_delta=timedelta(minutes=-1))

        with pytest.raises(AuthenticationRequired):
            decode_access_token(token)

    def test_user_token_carries_id_as_subject(self):
        user = SimpleNamespace(id=42, email="someone@example.com")

        payload = decode_access_token(create_user_token(user))

        assert payload["sub"] == "42"
        assert payload["email"] == "someone@example.com"


class TestPasswordHashing:

    def test_hash_and_verify(self):
        hashed = hash_password("s3cret-pass")

        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_hashes_are_salted(self):
        assert hash_password("same") != hash_password("same")
