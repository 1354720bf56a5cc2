"""Closed value sets shared by validation, SQL building and seeding."""
from __future__ import annotations

from enum import Enum


class ProductCategory(str, Enum):
    ELECTRONICS = "Electronics"
    BOOKS = "Books"
    HOME_DECOR = "Home Decor"
    CLOTHING = "Clothing"
    FOOD_AND_BEVERAGES = "Food & Beverages"
    HEALTH_AND_BEAUTY = "Health & Beauty"
    SPORTS_AND_LEISURE = "Sports & Leisure"
    TOYS = "Toys"
    HANDICRAFTS = "Handicrafts"
    OFFICE_SUPPLIES = "Office Supplies"


class SortColumn(str, Enum):
    ID = "id"
    NAME = "name"
    ORIGINAL_PRICE = "original_price"
    DISCOUNT_PRICE = "discount_price"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"
    SHIPPED = "Shipped"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "Credit Card"
    PAYPAL = "PayPal"
    BANK_TRANSFER = "Bank Transfer"


CATEGORY_NAMES: tuple[str, ...] = tuple(category.value for category in ProductCategory)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
MIN_PRODUCT_PRICE = 100
# Largest integer a signed 64-bit SQL parameter can carry.
MAX_BOUND_INTEGER = 2**63 - 1
