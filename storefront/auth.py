"""Signup and signin against the ``users`` table."""
from __future__ import annotations

import asyncio
import logging

from .errors import StorageError, UnauthorizedError
from .models import SignInRequest, SignUpRequest
from .security import create_access_token, hash_password, verify_password
from .storage import Statement, StorageExecutor

logger = logging.getLogger(__name__)


def _user_by_email(email: str) -> Statement:
    return Statement("SELECT id, password FROM users WHERE email = :email", (("email", email),))


async def sign_up(storage: StorageExecutor, payload: SignUpRequest) -> str:
    existing = await storage.fetch_one(_user_by_email(payload.email))
    if existing is not None:
        raise UnauthorizedError("Email already exists")

    hashed = await asyncio.to_thread(hash_password, payload.password)
    result = await storage.execute(
        Statement(
            "INSERT INTO users (email, password) VALUES (:email, :password)",
            (("email", payload.email), ("password", hashed)),
        )
    )
    if result.rowcount == 0 or result.lastrowid is None:
        raise StorageError("insert into users affected no rows")
    logger.info("Registered user id=%s", result.lastrowid)
    return create_access_token(result.lastrowid, payload.email)


async def sign_in(storage: StorageExecutor, payload: SignInRequest) -> str:
    row = await storage.fetch_one(_user_by_email(payload.email))
    if row is None:
        raise UnauthorizedError("Invalid email or password")
    valid = await asyncio.to_thread(verify_password, payload.password, row["password"])
    if not valid:
        raise UnauthorizedError("Invalid email or password")
    return create_access_token(row["id"], payload.email)
