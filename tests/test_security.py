"""
Employees API — Security Helper Tests
======================================

    ✅ argon2 hashes verify only the hashed password
    ✅ tokens carry sub and role, and expire
    ✅ forged or malformed tokens raise AuthenticationError
"""

from datetime import timedelta

import jwt
import pytest

from employees_api.config import settings
from employees_api.exceptions import AuthenticationError
from employees_api.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:

    def test_hash_is_not_plain_text(self):
        hashed = hash_password("Admin12345")

        assert hashed != "Admin12345"
        assert hashed.startswith("$argon2")

    def test_verify_accepts_right_password(self):
        assert verify_password("Admin12345", hash_password("Admin12345"))

    def test_verify_rejects_wrong_password(self):
        assert not verify_password("admin12345", hash_password("Admin12345"))

    def test_verify_rejects_garbage_hash(self):
        assert not verify_password("Admin12345", "not-a-hash")


class TestAccessTokens:

    def test_round_trip_claims(self):
        token = create_access_token("admin@tel-ran.com", "ADMIN")

        claims = decode_access_token(token)

        assert claims["sub"] == "admin@tel-ran.com"
        assert claims["role"] == "ADMIN"
        assert "exp" in claims

    def test_default_expiry_is_configured_minutes(self):
        claims = decode_access_token(create_access_token("user@tel-ran.com", "USER"))

        assert claims["exp"] - claims["iat"] == settings.jwt_expire_minutes * 60

    def test_expired_token_rejected(self):
        token = create_access_token("user@tel-ran.com", "USER", expires_delta=timedelta(seconds=-1))

        with pytest.raises(AuthenticationError):
            decode_access_token(token)

    def test_token_signed_with_other_secret_rejected(self):
        token = jwt.encode(
            {"sub": "admin@tel-ran.com", "role": "ADMIN", "exp": 9999999999},
            "another-secret-that-is-long-enough-for-hs256",
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationError):
            decode_access_token(token)

    def test_malformed_token_rejected(self):
        with pytest.raises(AuthenticationError):
            decode_access_token("not.a.token")

    def test_token_without_role_rejected(self):
        token = jwt.encode(
            {"sub": "admin@tel-ran.com", "exp": 9999999999},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(AuthenticationError):
            decode_access_token(token)
