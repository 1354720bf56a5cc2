"""Password hashing and token round trips."""

import jwt
import pytest

from storefront.config import settings
from storefront.errors import UnauthorizedError
from storefront.security import create_access_token, decode_token, hash_password, verify_password


def test_password_hash_verifies_and_is_salted():
    first = hash_password("Secret123")
    second = hash_password("Secret123")

    assert first != second
    assert verify_password("Secret123", first)
    assert not verify_password("Secret124", first)


def test_verify_password_rejects_garbage_hash():
    assert not verify_password("Secret123", "not base64!!")
    assert not verify_password("Secret123", "")


def test_token_carries_user_identity():
    identity = decode_token(create_access_token(5, "a@example.com"))

    assert identity.userId == 5
    assert identity.email == "a@example.com"


def test_expired_token_is_rejected():
    token = jwt.encode(
        {"sub": "1", "email": "a@example.com", "iat": 0, "exp": 1},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(UnauthorizedError) as excinfo:
        decode_token(token)
    assert excinfo.value.message == "Invalid token"


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode({"sub": "1", "email": "a@example.com"}, "other-secret", algorithm="HS256")

    with pytest.raises(UnauthorizedError):
        decode_token(token)
