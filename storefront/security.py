"""Password hashing and bearer-token helpers."""
from __future__ import annotations

import base64
import hashlib
import hmac
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Header

from .config import settings
from .errors import UnauthorizedError
from .models import UserIdentity

_PBKDF2_ALGO = "sha256"
_PBKDF2_ITERATIONS = 100_000
_SALT_BYTES = 16


def _pbkdf2_hash(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac(_PBKDF2_ALGO, password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)


def hash_password(password: str) -> str:
    """Hash a plain-text password using PBKDF2-SHA256.

    Stored format: base64( salt || derived_key )
    """
    salt = os.urandom(_SALT_BYTES)
    return base64.b64encode(salt + _pbkdf2_hash(password, salt)).decode("ascii")


def verify_password(plain_password: str, stored_hash: str) -> bool:
    try:
        raw = base64.b64decode(stored_hash.encode("ascii"), validate=True)
    except (ValueError, UnicodeEncodeError):
        return False
    if len(raw) <= _SALT_BYTES:
        return False
    salt, stored_dk = raw[:_SALT_BYTES], raw[_SALT_BYTES:]
    return hmac.compare_digest(stored_dk, _pbkdf2_hash(plain_password, salt))


def create_access_token(user_id: int, email: str) -> str:
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=settings.jwt_expires_in)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> UserIdentity:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return UserIdentity(userId=int(payload["sub"]), email=payload["email"])
    except (jwt.InvalidTokenError, KeyError, ValueError) as exc:
        raise UnauthorizedError("Invalid token") from exc


async def require_user(authorization: Optional[str] = Header(default=None)) -> UserIdentity:
    """FastAPI dependency ensuring the request carries a valid ``Bearer`` token."""
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Authorization header is required or malformed")
    return decode_token(authorization.split(" ", 1)[1].strip())
