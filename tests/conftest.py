"""Shared fixtures: a throwaway SQLite database behind the real executor."""
from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, insert, select
from sqlalchemy.engine import Engine

from storefront.database import categories, init_db, products
from storefront.main import app
from storefront.storage import SqlAlchemyExecutor, get_storage


def category_id(engine: Engine, name: str) -> int:
    with engine.connect() as conn:
        return conn.execute(select(categories.c.id).where(categories.c.name == name)).scalar_one()


@pytest.fixture()
def engine(tmp_path) -> Iterator[Engine]:
    engine = create_engine(f"sqlite:///{tmp_path / 'storefront-test.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def catalog(engine: Engine) -> Engine:
    """Twelve Electronics products named ``Product n`` plus three Books named ``Novel n``."""

    electronics = category_id(engine, "Electronics")
    books = category_id(engine, "Books")
    rows = [
        {
            "name": f"Product {n}",
            "description": f"Description for Product {n}",
            "original_price": 1000 + n * 100,
            "discount_price": 900 + n * 100,
            "category_id": electronics,
        }
        for n in range(1, 13)
    ]
    rows += [
        {
            "name": f"Novel {n}",
            "description": None,
            "original_price": 300 + n,
            "discount_price": 250 + n,
            "category_id": books,
        }
        for n in range(1, 4)
    ]
    with engine.begin() as conn:
        conn.execute(insert(products), rows)
    return engine


@pytest.fixture()
def client(engine: Engine) -> Iterator[TestClient]:
    app.dependency_overrides[get_storage] = lambda: SqlAlchemyExecutor(engine)
    yield TestClient(app)
    app.dependency_overrides.clear()
