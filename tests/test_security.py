"""
Parking API — Security Helper Tests
====================================

What:  Password hashing and JWT issue/verify.
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import jwt

from parking_api.config import settings
from parking_api.exceptions import AuthenticationError
from parking_api.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("correct horse battery")
        assert hashed != "correct horse battery"
        assert hashed.startswith("$argon2")

    def test_verify_accepts_correct_password(self):
        hashed = hash_password("correct horse battery")
        assert verify_password("correct horse battery", hashed) is True

    def test_verify_rejects_wrong_password(self):
        hashed = hash_password("correct horse battery")
        assert verify_password("wrong horse battery", hashed) is False

    def test_verify_rejects_garbage_hash(self):
        assert verify_password("anything", "not-a-hash") is False


class TestAccessTokens:

    def test_round_trip_claims(self):
        user_id = str(uuid4())
        token = create_access_token(subject=user_id, role="admin", email="a@example.com")

        claims = decode_access_token(token)

        assert claims["sub"] == user_id
        assert claims["role"] == "admin"
        assert claims["email"] == "a@example.com"
        assert claims["exp"] > claims["iat"]

    def test_expired_token_rejected(self):
        token = create_access_token(
            subject=str(uuid4()), role="user", expires_delta=timedelta(minutes=-5)
        )
        with pytest.raises(AuthenticationError, match="expired"):
            decode_access_token(token)

    def test_token_signed_with_other_secret_rejected(self):
        token = jwt.encode(
            {"sub": str(uuid4()), "role": "admin", "exp": 9999999999},
            "some-other-secret-entirely-different",
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError, match="Invalid"):
            decode_access_token(token)

    def test_malformed_token_rejected(self):
        with pytest.raises(AuthenticationError):
            decode_access_token("not.a.jwt")

    def test_token_without_role_claim_rejected(self):
        token = jwt.encode(
            {"sub": str(uuid4()), "exp": 9999999999},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(AuthenticationError):
            decode_access_token(token)
