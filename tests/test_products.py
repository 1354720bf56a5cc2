"""Partial product updates only touch whitelisted columns."""

import pytest

from storefront.constants import MIN_PRODUCT_PRICE
from storefront.errors import ValidationError
from storefront.products import build_patch_statement, parse_id, parse_patch


def test_patch_maps_fields_to_literal_columns():
    patch = parse_patch({"discountPrice": 850, "name": "Lamp"})

    statement = build_patch_statement(7, patch)

    assert statement.sql == "UPDATE products SET name = :name, discount_price = :discount_price WHERE id = :product_id"
    assert statement.bind() == {"name": "Lamp", "discount_price": 850, "product_id": 7}


def test_patch_accepts_snake_case_keys():
    patch = parse_patch({"original_price": 1200, "category_id": 3})

    assert build_patch_statement(1, patch).bind() == {
        "category_id": 3,
        "original_price": 1200,
        "product_id": 1,
    }


def test_patch_rejects_unknown_columns():
    """Client-chosen identifiers never reach the SQL text."""

    with pytest.raises(ValidationError):
        parse_patch({"name": "x", "id = 1; DROP TABLE products; --": 1})


def test_patch_rejects_empty_body():
    with pytest.raises(ValidationError) as excinfo:
        parse_patch({})
    assert excinfo.value.message == "No updatable fields supplied"


def test_patch_rejects_null_for_required_column():
    with pytest.raises(ValidationError) as excinfo:
        parse_patch({"name": None})
    assert "name must not be null" in excinfo.value.message


def test_patch_allows_clearing_description():
    patch = parse_patch({"description": None})

    assert build_patch_statement(2, patch).bind() == {"description": None, "product_id": 2}


def test_patch_validates_values():
    with pytest.raises(ValidationError):
        parse_patch({"originalPrice": 5})


def test_price_floor_is_inclusive():
    patch = parse_patch({"originalPrice": MIN_PRODUCT_PRICE})
    assert build_patch_statement(3, patch).bind()["original_price"] == MIN_PRODUCT_PRICE

    with pytest.raises(ValidationError):
        parse_patch({"discountPrice": MIN_PRODUCT_PRICE - 1})


@pytest.mark.parametrize(
    "raw", ["0", "abc", "-4", "1e3", "", "7\n", "\u0667", "9223372036854775808", "1" * 40]
)
def test_parse_id_rejects_malformed_or_out_of_range_ids(raw):
    with pytest.raises(ValidationError) as excinfo:
        parse_id(raw)
    assert excinfo.value.message == "Product id must be a positive integer"


def test_parse_id():
    assert parse_id("42") == 42
    assert parse_id("9223372036854775807") == 2**63 - 1
