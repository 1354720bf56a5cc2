"""Schema creation and fake data seeding."""
from __future__ import annotations

import logging
import random
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    func,
    insert,
    select,
)
from sqlalchemy.engine import Engine

from .constants import CATEGORY_NAMES, OrderStatus, PaymentMethod

logger = logging.getLogger(__name__)

metadata = MetaData()

categories = Table(
    "categories",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False, unique=True),
)

products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("category_id", Integer, ForeignKey("categories.id"), nullable=False),
    Column("name", String(100), nullable=False),
    Column("original_price", Numeric(10, 2), nullable=False),
    Column("discount_price", Numeric(10, 2), nullable=False),
    Column("description", Text),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
    Column("updated_at", DateTime, server_default=func.current_timestamp(), onupdate=func.current_timestamp()),
    CheckConstraint("original_price > 0", name="ck_products_original_price"),
    CheckConstraint("discount_price > 0", name="ck_products_discount_price"),
)

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(150), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
    Column("updated_at", DateTime, server_default=func.current_timestamp(), onupdate=func.current_timestamp()),
)

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("total_price", Numeric(10, 2), nullable=False),
    Column(
        "status",
        Enum(*(status.value for status in OrderStatus), name="order_status"),
        server_default=OrderStatus.PENDING.value,
    ),
    Column(
        "payment_method",
        Enum(*(method.value for method in PaymentMethod), name="payment_method"),
        server_default=PaymentMethod.CREDIT_CARD.value,
    ),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
    Column("updated_at", DateTime, server_default=func.current_timestamp(), onupdate=func.current_timestamp()),
    CheckConstraint("total_price > 0", name="ck_orders_total_price"),
)

order_items = Table(
    "order_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Integer, ForeignKey("orders.id"), nullable=False),
    Column("product_id", Integer, ForeignKey("products.id"), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("purchase_price", Numeric(10, 2), nullable=False),
    CheckConstraint("quantity > 0", name="ck_order_items_quantity"),
    CheckConstraint("purchase_price > 0", name="ck_order_items_purchase_price"),
)


def init_db(engine: Engine) -> None:
    """Create missing tables and make sure every known category exists."""
    metadata.create_all(engine)
    seed_categories(engine)


def drop_db(engine: Engine) -> None:
    metadata.drop_all(engine)


def seed_categories(engine: Engine) -> int:
    with engine.begin() as conn:
        existing = set(conn.execute(select(categories.c.name)).scalars())
        missing = [{"name": name} for name in CATEGORY_NAMES if name not in existing]
        if missing:
            conn.execute(insert(categories), missing)
    if missing:
        logger.info("Inserted %s categories", len(missing))
    return len(missing)


def product_count(engine: Engine) -> int:
    with engine.connect() as conn:
        return conn.execute(select(func.count()).select_from(products)).scalar_one()


def _fake_product(index: int, category_ids: list[int], rng: random.Random) -> dict:
    original = rng.randint(1000, 10000)
    if rng.random() < 0.5:
        original += 0.5
    discount = round(original * rng.uniform(0.5, 0.95), 2)
    return {
        "name": f"Product {index}",
        "description": f"Description for Product {index}",
        "original_price": original,
        "discount_price": discount,
        "category_id": rng.choice(category_ids),
    }


def seed_products(engine: Engine, count: int = 100, seed: Optional[int] = None) -> int:
    """Insert ``count`` fake products, numbering on from the current row count."""
    if count <= 0:
        return 0
    rng = random.Random(seed)
    with engine.begin() as conn:
        category_ids = list(conn.execute(select(categories.c.id).order_by(categories.c.id)).scalars())
        if not category_ids:
            raise RuntimeError("No categories present; run init_db first")
        start = conn.execute(select(func.count()).select_from(products)).scalar_one() + 1
        rows = [_fake_product(index, category_ids, rng) for index in range(start, start + count)]
        conn.execute(insert(products), rows)
    logger.info("Seeded %s products", count)
    return count


def seed_if_empty(engine: Engine, count: int = 100) -> int:
    if product_count(engine) > 0:
        return 0
    return seed_products(engine, count)
