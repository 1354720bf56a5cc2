"""Relational storage access.

The rest of the code works against the synchronous SQLAlchemy engine. Blocking
calls are moved to a worker thread via ``asyncio.to_thread`` so request
handlers never stall the event loop.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Optional, Protocol, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .errors import StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Statement:
    """SQL template with named placeholders and its ordered bound values."""

    sql: str
    params: Tuple[Tuple[str, Any], ...] = ()

    def bind(self) -> Dict[str, Any]:
        return dict(self.params)


@dataclass(frozen=True)
class WriteResult:
    rowcount: int
    lastrowid: Optional[int] = None


class StorageExecutor(Protocol):
    async def fetch_all(self, statement: Statement) -> List[Dict[str, Any]]: ...

    async def fetch_one(self, statement: Statement) -> Optional[Dict[str, Any]]: ...

    async def fetch_scalar(self, statement: Statement) -> int: ...

    async def execute(self, statement: Statement) -> WriteResult: ...


class SqlAlchemyExecutor:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def _fetch_all(self, statement: Statement) -> List[Dict[str, Any]]:
        with self.engine.connect() as conn:
            result = conn.execute(text(statement.sql), statement.bind())
            return [dict(row) for row in result.mappings()]

    def _fetch_scalar(self, statement: Statement) -> int:
        with self.engine.connect() as conn:
            value = conn.execute(text(statement.sql), statement.bind()).scalar()
        return int(value or 0)

    def _execute(self, statement: Statement) -> WriteResult:
        with self.engine.begin() as conn:
            result = conn.execute(text(statement.sql), statement.bind())
            return WriteResult(rowcount=result.rowcount, lastrowid=result.lastrowid)

    async def _run(self, func, statement: Statement):
        try:
            return await asyncio.to_thread(func, statement)
        except SQLAlchemyError as exc:
            logger.error("Storage failure sql=%r: %s", statement.sql, exc)
            raise StorageError(str(exc)) from exc

    async def fetch_all(self, statement: Statement) -> List[Dict[str, Any]]:
        return await self._run(self._fetch_all, statement)

    async def fetch_one(self, statement: Statement) -> Optional[Dict[str, Any]]:
        rows = await self.fetch_all(statement)
        return rows[0] if rows else None

    async def fetch_scalar(self, statement: Statement) -> int:
        return await self._run(self._fetch_scalar, statement)

    async def execute(self, statement: Statement) -> WriteResult:
        return await self._run(self._execute, statement)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    logger.info("Connecting to database at %s", redact_url(settings.database_url))
    return create_engine(settings.database_url, echo=settings.db_echo, pool_pre_ping=True)


def get_storage() -> StorageExecutor:
    """FastAPI dependency; tests swap it through ``app.dependency_overrides``."""
    return SqlAlchemyExecutor(get_engine())


def redact_url(url: str) -> str:
    if "@" not in url or "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    return f"{scheme}://***@{rest.rsplit('@', 1)[1]}"
