"""Product listing: validate, build SQL, run it, shape the page."""
from __future__ import annotations

import asyncio
import logging
from time import perf_counter
from typing import Mapping, Optional

from .filters import parse_product_filters
from .models import Product, ProductListing
from .pagination import build_pagination
from .query_builder import build_listing_statements
from .storage import StorageExecutor

logger = logging.getLogger(__name__)


async def list_products(raw_params: Mapping[str, Optional[str]], storage: StorageExecutor) -> ProductListing:
    """Return one page of products matching ``raw_params``.

    Raises :class:`~storefront.errors.ValidationError` before any SQL runs when
    the parameters are invalid. A :class:`~storefront.errors.StorageError` from
    either query aborts the whole request.
    """
    t0 = perf_counter()
    descriptor = parse_product_filters(raw_params)
    statements = build_listing_statements(descriptor)
    t1 = perf_counter()

    # Data and count queries are independent; the first failure propagates.
    rows, total = await asyncio.gather(
        storage.fetch_all(statements.data),
        storage.fetch_scalar(statements.count),
    )
    t2 = perf_counter()

    products = [Product.from_row(row) for row in rows]
    pagination = build_pagination(
        current_items=len(products),
        total_items=total,
        page=descriptor.page,
        limit=descriptor.limit,
    )
    logger.info(
        "timing: total=%.2fms build=%.2fms db=%.2fms filters=%s rows=%s total_items=%s",
        (t2 - t0) * 1000,
        (t1 - t0) * 1000,
        (t2 - t1) * 1000,
        descriptor,
        len(products),
        total,
    )
    return ProductListing(products=products, pagination=pagination)
