"""Pydantic models for request/response payloads."""
from __future__ import annotations

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .constants import MIN_PRODUCT_PRICE

MIN_PASSWORD_LENGTH = 8
_UPPER_RE = re.compile(r"[A-Z]")
_LOWER_RE = re.compile(r"[a-z]")
_DIGIT_RE = re.compile(r"\d")


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    originalPrice: float
    discountPrice: float
    description: Optional[str] = None
    categoryName: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "Product":
        return cls(
            id=row["id"],
            name=row["name"],
            originalPrice=float(row["original_price"]),
            discountPrice=float(row["discount_price"]),
            description=row.get("description"),
            categoryName=row.get("category_name"),
        )


class Pagination(BaseModel):
    model_config = ConfigDict(frozen=True)

    currentItems: int
    totalItems: int
    currentPage: int
    itemsPerPage: int
    totalPages: int


class ProductListing(BaseModel):
    model_config = ConfigDict(frozen=True)

    products: List[Product]
    pagination: Pagination


class _CamelModel(BaseModel):
    """Bodies are camelCase on the wire; snake_case names are accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class ProductCreate(_CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    category_id: int = Field(..., gt=0)
    original_price: float = Field(..., ge=MIN_PRODUCT_PRICE)
    discount_price: float = Field(..., ge=MIN_PRODUCT_PRICE)
    description: str = ""

    @model_validator(mode="after")
    def _discount_below_original(self) -> "ProductCreate":
        if self.discount_price >= self.original_price:
            raise ValueError("Discount price must be less than original price")
        return self


class ProductUpdate(_CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    original_price: float = Field(..., ge=MIN_PRODUCT_PRICE)
    discount_price: float = Field(..., ge=MIN_PRODUCT_PRICE)
    description: str = ""


class ProductPatch(_CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category_id: Optional[int] = Field(None, gt=0)
    original_price: Optional[float] = Field(None, ge=MIN_PRODUCT_PRICE)
    discount_price: Optional[float] = Field(None, ge=MIN_PRODUCT_PRICE)
    description: Optional[str] = None

    @model_validator(mode="after")
    def _required_columns_not_null(self) -> "ProductPatch":
        for field in ("name", "category_id", "original_price", "discount_price"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{to_camel(field)} must not be null")
        return self


class SignInRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must contain at least {MIN_PASSWORD_LENGTH} character(s)")
        if not (_UPPER_RE.search(value) and _LOWER_RE.search(value) and _DIGIT_RE.search(value)):
            raise ValueError(
                "Password must contain at least 1 uppercase letter, 1 lowercase letter and 1 digit"
            )
        return value


class SignUpRequest(SignInRequest):
    confirmPassword: str

    @model_validator(mode="after")
    def _passwords_match(self) -> "SignUpRequest":
        if self.password != self.confirmPassword:
            raise ValueError("Password and confirm password don't match")
        return self


class UserIdentity(BaseModel):
    userId: int
    email: str


class OrderSummary(BaseModel):
    id: int
    totalPrice: float
    status: str
    paymentMethod: str


class OrderItem(BaseModel):
    productId: int
    quantity: int
    purchasePrice: float


class OrderDetail(OrderSummary):
    items: List[OrderItem]
