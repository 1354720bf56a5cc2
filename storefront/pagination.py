"""Pagination math for listing endpoints."""
from __future__ import annotations

from .models import Pagination


def compute_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def compute_total_pages(total_items: int, limit: int) -> int:
    """Ceiling division; zero matching rows means zero pages."""
    if total_items <= 0:
        return 0
    return -(-total_items // limit)


def build_pagination(*, current_items: int, total_items: int, page: int, limit: int) -> Pagination:
    # Pages past the end are not clamped: they yield an empty, well-formed page.
    return Pagination(
        currentItems=current_items,
        totalItems=total_items,
        currentPage=page,
        itemsPerPage=limit,
        totalPages=compute_total_pages(total_items, limit),
    )
