"""Order lookups scoped to the authenticated user."""
from __future__ import annotations

from typing import List

from .errors import NotFoundError
from .models import OrderDetail, OrderItem, OrderSummary
from .storage import Statement, StorageExecutor


async def list_orders(storage: StorageExecutor, user_id: int) -> List[OrderSummary]:
    rows = await storage.fetch_all(
        Statement(
            "SELECT id, total_price, status, payment_method FROM orders "
            "WHERE user_id = :user_id ORDER BY id",
            (("user_id", user_id),),
        )
    )
    return [
        OrderSummary(
            id=row["id"],
            totalPrice=float(row["total_price"]),
            status=row["status"],
            paymentMethod=row["payment_method"],
        )
        for row in rows
    ]


async def get_order(storage: StorageExecutor, user_id: int, order_id: int) -> OrderDetail:
    rows = await storage.fetch_all(
        Statement(
            "SELECT o.id, o.total_price, o.status, o.payment_method, "
            "oi.product_id, oi.quantity, oi.purchase_price\n"
            "FROM orders o\n"
            "LEFT JOIN order_items oi ON o.id = oi.order_id\n"
            "WHERE o.id = :order_id AND o.user_id = :user_id\n"
            "ORDER BY oi.id",
            (("order_id", order_id), ("user_id", user_id)),
        )
    )
    if not rows:
        raise NotFoundError("Order not found")

    head = rows[0]
    # An order without items still yields one row with NULL item columns.
    items = [
        OrderItem(
            productId=row["product_id"],
            quantity=row["quantity"],
            purchasePrice=float(row["purchase_price"]),
        )
        for row in rows
        if row["product_id"] is not None
    ]
    return OrderDetail(
        id=head["id"],
        totalPrice=float(head["total_price"]),
        status=head["status"],
        paymentMethod=head["payment_method"],
        items=items,
    )
