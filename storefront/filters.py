"""Validation of the product listing query string.

Raw query parameters arrive as a string mapping whose keys may be written in
snake_case (``price_min``) or camelCase (``priceMin``); keys are normalized to
camelCase before lookup. Every rule is checked independently and all problems
are reported together so a client can flag every bad field in one round trip.
The cross-field price rule only runs once both bounds parsed on their own.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from .constants import (
    CATEGORY_NAMES,
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    SortColumn,
    SortOrder,
)
from .errors import FieldIssue, InvalidFilter, ValidationError

_NON_NEGATIVE_INT_RE = re.compile(r"\d+", re.ASCII)
_POSITIVE_INT_RE = re.compile(r"[1-9]\d*", re.ASCII)
_KEY_SEPARATOR_RE = re.compile(r"[_\-\s]+")


@dataclass(frozen=True)
class FilterDescriptor:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort_by: SortColumn = SortColumn.ID
    order: SortOrder = SortOrder.DESC
    category: Optional[str] = None
    price_min: Optional[int] = None
    price_max: Optional[int] = None
    search: Optional[str] = None


def camel_case(key: str) -> str:
    """``price_min`` / ``price-min`` -> ``priceMin``; already camelCased keys pass through."""
    parts = [part for part in _KEY_SEPARATOR_RE.split(key.strip()) if part]
    if not parts:
        return ""
    head, *tail = parts
    head = head.lower() if tail else head[:1].lower() + head[1:]
    return head + "".join(part[:1].upper() + part[1:].lower() for part in tail)


def normalize_keys(raw: Mapping[str, Optional[str]]) -> Dict[str, Optional[str]]:
    return {camel_case(key): value for key, value in raw.items()}


def _parse_int(value: str, pattern: re.Pattern[str]) -> Optional[int]:
    if not pattern.fullmatch(value):
        return None
    try:
        return int(value)
    except ValueError:
        # Longer than the interpreter's int conversion limit.
        return None


def parse_product_filters(raw: Mapping[str, Optional[str]]) -> FilterDescriptor:
    """Build a :class:`FilterDescriptor` or raise :class:`ValidationError` listing every issue."""
    params = normalize_keys(raw)
    issues: List[FieldIssue] = []

    category = params.get("category")
    if category is not None and category not in CATEGORY_NAMES:
        issues.append(
            InvalidFilter("category", f"Category must be one of: {', '.join(CATEGORY_NAMES)}")
        )
        category = None

    price_min: Optional[int] = None
    raw_min = params.get("priceMin")
    if raw_min is not None:
        price_min = _parse_int(raw_min, _NON_NEGATIVE_INT_RE)
        if price_min is None:
            issues.append(InvalidFilter("priceMin", "Minimum price must be a non-negative integer"))

    price_max: Optional[int] = None
    raw_max = params.get("priceMax")
    if raw_max is not None:
        price_max = _parse_int(raw_max, _POSITIVE_INT_RE)
        if price_max is None:
            issues.append(InvalidFilter("priceMax", "Maximum price must be a positive integer"))

    page = DEFAULT_PAGE
    raw_page = params.get("page")
    if raw_page is not None:
        parsed_page = _parse_int(raw_page, _POSITIVE_INT_RE)
        if parsed_page is None:
            issues.append(InvalidFilter("page", "Page must be a positive integer"))
        else:
            page = parsed_page

    limit = DEFAULT_LIMIT
    raw_limit = params.get("limit")
    if raw_limit is not None:
        parsed_limit = _parse_int(raw_limit, _POSITIVE_INT_RE)
        if parsed_limit is None:
            issues.append(InvalidFilter("limit", "Limit must be a positive integer"))
        elif parsed_limit > MAX_LIMIT:
            issues.append(InvalidFilter("limit", f"Limit must be less than or equal to {MAX_LIMIT}"))
        else:
            limit = parsed_limit

    sort_by = SortColumn.ID
    raw_sort = params.get("sortBy")
    if raw_sort is not None:
        try:
            sort_by = SortColumn(raw_sort)
        except ValueError:
            allowed = ", ".join(column.value for column in SortColumn)
            issues.append(InvalidFilter("sortBy", f"Sort column must be one of: {allowed}"))

    order = SortOrder.DESC
    raw_order = params.get("order")
    if raw_order is not None:
        try:
            order = SortOrder(raw_order.upper())
        except ValueError:
            issues.append(InvalidFilter("order", "Order must be either asc or desc"))

    if price_min is not None and price_max is not None and price_min >= price_max:
        issues.append(FieldIssue(field=None, message="Minimum price must be less than maximum price"))

    if issues:
        raise ValidationError(issues)

    search = params.get("search") or None
    return FilterDescriptor(
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
        category=category,
        price_min=price_min,
        price_max=price_max,
        search=search,
    )
