"""
Unit tests for password hashing and token helpers.
"""

from datetime import timedelta

import pytest
from jose import jwt

from app.core.config import settings
from app.core.errors import AuthenticationError
from app.core.security import (
    create_access_token,
    create_api_key,
    decode_token,
    get_password_hash,
    hash_token,
    validate_password_strength,
    verify_password,
)


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = get_password_hash("secret123")

        assert hashed != "secret123"
        assert hashed.startswith("$2b$")
        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    @pytest.mark.parametrize("password, valid", [("", False), ("12345", False), ("123456", True)])
    def test_minimum_length(self, password, valid):
        is_valid, message = validate_password_strength(password)

        assert is_valid is valid
        assert (message is None) is valid


class TestTokens:

    def test_access_token_round_trip(self):
        token = create_access_token({"sub": "user-1"})

        payload = decode_token(token)

        assert payload["sub"] == "user-1"
        assert payload["type"] == "access"
        assert payload["jti"]

    def test_api_key_type(self):
        payload = decode_token(create_api_key("user-1"))

        assert payload["type"] == "api_key"
        assert payload["sub"] == "user-1"

    def test_tokens_are_unique(self):
        assert create_access_token({"sub": "u"}) != create_access_token({"sub": "u"})

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-5))

        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_foreign_signature_rejected(self):
        token = jwt.encode({"sub": "user-1"}, "another-secret", algorithm=settings.jwt.jwt_algorithm)

        with pytest.raises(AuthenticationError) as exc_info:
            decode_token(token)

        assert exc_info.value.status_code == 401

    def test_garbage_rejected(self):
        with pytest.raises(AuthenticationError):
            decode_token("not-a-token")

    def test_hash_token_is_stable_sha256(self):
        assert hash_token("abc") == hash_token("abc")
        assert len(hash_token("abc")) == 64
        assert hash_token("abc") != hash_token("abd")
