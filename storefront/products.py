"""Single-product catalog operations."""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Tuple

from pydantic import ValidationError as PydanticValidationError

from .constants import MAX_BOUND_INTEGER
from .errors import FieldIssue, NotFoundError, StorageError, ValidationError, issues_from_pydantic
from .filters import normalize_keys
from .models import Product, ProductCreate, ProductPatch, ProductUpdate
from .query_builder import build_product_lookup
from .storage import Statement, StorageExecutor

logger = logging.getLogger(__name__)

_POSITIVE_INT_RE = re.compile(r"[1-9]\d*", re.ASCII)
_MAX_ID_DIGITS = len(str(MAX_BOUND_INTEGER))

# Closed mapping from patch model field to the literal column it may touch.
PATCHABLE_COLUMNS = {
    "name": "name",
    "category_id": "category_id",
    "original_price": "original_price",
    "discount_price": "discount_price",
    "description": "description",
}


def parse_id(raw: str, label: str = "Product") -> int:
    # Ids past the 64-bit key range are rejected before int() or the driver sees them.
    if (
        not _POSITIVE_INT_RE.fullmatch(raw or "")
        or len(raw) > _MAX_ID_DIGITS
        or int(raw) > MAX_BOUND_INTEGER
    ):
        field = f"{label.lower()}Id"
        raise ValidationError([FieldIssue(field, f"{label} id must be a positive integer")])
    return int(raw)


async def get_product(storage: StorageExecutor, product_id: int) -> Product:
    row = await storage.fetch_one(build_product_lookup(product_id))
    if row is None:
        raise NotFoundError("Product not found")
    return Product.from_row(row)


async def create_product(storage: StorageExecutor, payload: ProductCreate) -> int:
    result = await storage.execute(
        Statement(
            "INSERT INTO products (name, original_price, discount_price, description, category_id) "
            "VALUES (:name, :original_price, :discount_price, :description, :category_id)",
            (
                ("name", payload.name),
                ("original_price", payload.original_price),
                ("discount_price", payload.discount_price),
                ("description", payload.description),
                ("category_id", payload.category_id),
            ),
        )
    )
    if result.rowcount == 0 or result.lastrowid is None:
        raise StorageError("insert into products affected no rows")
    logger.info("Created product id=%s name=%r", result.lastrowid, payload.name)
    return result.lastrowid


async def update_product(storage: StorageExecutor, product_id: int, payload: ProductUpdate) -> None:
    result = await storage.execute(
        Statement(
            "UPDATE products SET name = :name, original_price = :original_price, "
            "discount_price = :discount_price, description = :description "
            "WHERE id = :product_id",
            (
                ("name", payload.name),
                ("original_price", payload.original_price),
                ("discount_price", payload.discount_price),
                ("description", payload.description),
                ("product_id", product_id),
            ),
        )
    )
    if result.rowcount == 0:
        raise NotFoundError("Product not found")


def parse_patch(body: Mapping[str, Any]) -> ProductPatch:
    """Validate a partial update; unknown keys and empty bodies are rejected."""
    if not isinstance(body, dict):
        raise ValidationError([FieldIssue(None, "Request body must be a JSON object")])
    try:
        patch = ProductPatch.model_validate(normalize_keys(body))
    except PydanticValidationError as exc:
        raise ValidationError(issues_from_pydantic(exc.errors())) from exc
    if not patch.model_fields_set:
        raise ValidationError([FieldIssue(None, "No updatable fields supplied")])
    return patch


def build_patch_statement(product_id: int, patch: ProductPatch) -> Statement:
    assignments: List[str] = []
    params: List[Tuple[str, Any]] = []
    values: Dict[str, Any] = patch.model_dump(exclude_unset=True)
    for field, column in PATCHABLE_COLUMNS.items():
        if field not in values:
            continue
        assignments.append(f"{column} = :{field}")
        params.append((field, values[field]))
    params.append(("product_id", product_id))
    return Statement(
        f"UPDATE products SET {', '.join(assignments)} WHERE id = :product_id",
        tuple(params),
    )


async def patch_product(storage: StorageExecutor, product_id: int, patch: ProductPatch) -> None:
    result = await storage.execute(build_patch_statement(product_id, patch))
    if result.rowcount == 0:
        raise NotFoundError("Product not found")


async def delete_product(storage: StorageExecutor, product_id: int) -> None:
    result = await storage.execute(
        Statement("DELETE FROM products WHERE id = :product_id", (("product_id", product_id),))
    )
    if result.rowcount == 0:
        raise NotFoundError("Product not found")
    logger.info("Deleted product id=%s", product_id)
