"""SQL for the product listing.

User supplied values only ever travel as bound parameters. The ``ORDER BY``
identifier comes from :data:`SORT_COLUMNS`, a closed mapping from the validated
enum to a literal column reference.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Tuple

from .constants import MAX_BOUND_INTEGER, SortColumn, SortOrder
from .filters import FilterDescriptor
from .pagination import compute_offset
from .storage import Statement

logger = logging.getLogger(__name__)

PRODUCT_SOURCE = "FROM products p\nLEFT JOIN categories c ON p.category_id = c.id"

PRODUCT_COLUMNS = (
    "p.id, p.name, p.original_price, p.discount_price, p.description, "
    "c.name AS category_name"
)

SORT_COLUMNS = {
    SortColumn.ID: "p.id",
    SortColumn.NAME: "p.name",
    SortColumn.ORIGINAL_PRICE: "p.original_price",
    SortColumn.DISCOUNT_PRICE: "p.discount_price",
}

SORT_DIRECTIONS = {
    SortOrder.ASC: "ASC",
    SortOrder.DESC: "DESC",
}

LIKE_ESCAPE = "!"


def escape_like(value: str) -> str:
    """Make ``%`` and ``_`` in user text match themselves under ``ESCAPE '!'``."""
    for char in (LIKE_ESCAPE, "%", "_"):
        value = value.replace(char, LIKE_ESCAPE + char)
    return value


def _bounded(value: int) -> int:
    # Every stored price and row count sits below the cap, so the matched rows are unchanged.
    return min(value, MAX_BOUND_INTEGER)


@dataclass(frozen=True)
class ListingStatements:
    data: Statement
    count: Statement


def build_where(descriptor: FilterDescriptor) -> Tuple[str, Tuple[Tuple[str, Any], ...]]:
    """AND together one predicate per present filter; empty string when none apply."""
    predicates: List[str] = []
    params: List[Tuple[str, Any]] = []

    if descriptor.category is not None:
        predicates.append("c.name = :category")
        params.append(("category", descriptor.category))
    if descriptor.price_min is not None:
        predicates.append("p.discount_price >= :price_min")
        params.append(("price_min", _bounded(descriptor.price_min)))
    if descriptor.price_max is not None:
        predicates.append("p.discount_price <= :price_max")
        params.append(("price_max", _bounded(descriptor.price_max)))
    if descriptor.search:
        predicates.append(f"p.name LIKE :search ESCAPE '{LIKE_ESCAPE}'")
        params.append(("search", f"%{escape_like(descriptor.search)}%"))

    if not predicates:
        return "", ()
    return "WHERE " + " AND ".join(predicates), tuple(params)


def build_order_by(descriptor: FilterDescriptor) -> str:
    column = SORT_COLUMNS[descriptor.sort_by]
    direction = SORT_DIRECTIONS[descriptor.order]
    clause = f"ORDER BY {column} {direction}"
    # Ties on non-unique columns would otherwise let rows hop between pages.
    if descriptor.sort_by is not SortColumn.ID:
        clause += f", p.id {direction}"
    return clause


def build_listing_statements(descriptor: FilterDescriptor) -> ListingStatements:
    where, where_params = build_where(descriptor)
    offset = _bounded(compute_offset(descriptor.page, descriptor.limit))

    data_sql = "\n".join(
        part
        for part in (
            f"SELECT {PRODUCT_COLUMNS}",
            PRODUCT_SOURCE,
            where,
            build_order_by(descriptor),
            "LIMIT :limit OFFSET :offset",
        )
        if part
    )
    count_sql = "\n".join(
        part for part in ("SELECT COUNT(*) AS total", PRODUCT_SOURCE, where) if part
    )

    data = Statement(data_sql, where_params + (("limit", descriptor.limit), ("offset", offset)))
    count = Statement(count_sql, where_params)
    logger.debug("listing sql=%r params=%s", data.sql, data.params)
    return ListingStatements(data=data, count=count)


def build_product_lookup(product_id: int) -> Statement:
    return Statement(
        f"SELECT {PRODUCT_COLUMNS}\n{PRODUCT_SOURCE}\nWHERE p.id = :product_id",
        (("product_id", product_id),),
    )
