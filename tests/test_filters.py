"""Validation of product listing query parameters."""

import pytest

from storefront.constants import SortColumn, SortOrder
from storefront.errors import ValidationError
from storefront.filters import FilterDescriptor, camel_case, parse_product_filters


def test_defaults_when_no_parameters():
    """An empty query string yields the documented defaults and no filters."""

    descriptor = parse_product_filters({})

    assert descriptor == FilterDescriptor(page=1, limit=10, sort_by=SortColumn.ID, order=SortOrder.DESC)
    assert descriptor.category is None
    assert descriptor.search is None


def test_snake_case_keys_are_normalized():
    descriptor = parse_product_filters(
        {"price_min": "100", "price_max": "1000", "sort_by": "discount_price", "order": "asc"}
    )

    assert descriptor.price_min == 100
    assert descriptor.price_max == 1000
    assert descriptor.sort_by is SortColumn.DISCOUNT_PRICE
    assert descriptor.order is SortOrder.ASC


@pytest.mark.parametrize(
    "key, expected",
    [
        ("price_min", "priceMin"),
        ("priceMin", "priceMin"),
        ("sort-by", "sortBy"),
        ("page", "page"),
        ("PRICE_MIN", "priceMin"),
        ("Sort_By", "sortBy"),
    ],
)
def test_camel_case(key, expected):
    assert camel_case(key) == expected


def test_limit_boundary():
    """100 is the largest accepted page size; 101 is rejected with its own message."""

    assert parse_product_filters({"limit": "100"}).limit == 100

    with pytest.raises(ValidationError) as excinfo:
        parse_product_filters({"limit": "101"})
    assert excinfo.value.fields == ["limit"]
    assert "less than or equal to 100" in excinfo.value.message


def test_limit_not_a_positive_integer():
    with pytest.raises(ValidationError) as excinfo:
        parse_product_filters({"limit": "ten"})
    assert excinfo.value.message == "Limit must be a positive integer"


@pytest.mark.parametrize("page", ["0", "-1", "1.5", "", "01", "2\n", "1\u0665", "\u0665"])
def test_page_must_be_positive_integer(page):
    with pytest.raises(ValidationError) as excinfo:
        parse_product_filters({"page": page})
    assert excinfo.value.fields == ["page"]


def test_unknown_category_names_the_field():
    with pytest.raises(ValidationError) as excinfo:
        parse_product_filters({"category": "InvalidCategory"})
    assert excinfo.value.fields == ["category"]


def test_category_with_spaces_and_symbols_is_accepted():
    assert parse_product_filters({"category": "Food & Beverages"}).category == "Food & Beverages"


def test_price_min_allows_zero_but_price_max_does_not():
    assert parse_product_filters({"priceMin": "0"}).price_min == 0

    with pytest.raises(ValidationError) as excinfo:
        parse_product_filters({"priceMax": "0"})
    assert excinfo.value.fields == ["priceMax"]


def test_price_range_cross_field_rule():
    """An inverted or empty price range is reported against the request as a whole."""

    assert parse_product_filters({"priceMin": "100", "priceMax": "1000"}).price_max == 1000

    with pytest.raises(ValidationError) as excinfo:
        parse_product_filters({"priceMin": "1000", "priceMax": "100"})
    assert excinfo.value.fields == [None]
    assert excinfo.value.message == "Minimum price must be less than maximum price"

    with pytest.raises(ValidationError):
        parse_product_filters({"priceMin": "500", "priceMax": "500"})


def test_cross_field_rule_skipped_when_a_bound_is_invalid():
    with pytest.raises(ValidationError) as excinfo:
        parse_product_filters({"priceMin": "abc", "priceMax": "100"})
    assert excinfo.value.fields == ["priceMin"]


def test_order_is_case_insensitive():
    assert parse_product_filters({"order": "Asc"}).order is SortOrder.ASC
    assert parse_product_filters({"order": "DESC"}).order is SortOrder.DESC


def test_sort_column_outside_whitelist_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        parse_product_filters({"sortBy": "name; DROP TABLE products"})
    assert excinfo.value.fields == ["sortBy"]


def test_all_failures_reported_together():
    """Every invalid field shows up, in a newline-joined message."""

    with pytest.raises(ValidationError) as excinfo:
        parse_product_filters(
            {
                "category": "Nope",
                "page": "0",
                "limit": "500",
                "sortBy": "price",
                "order": "sideways",
                "priceMin": "-3",
            }
        )
    error = excinfo.value
    assert error.fields == ["category", "priceMin", "page", "limit", "sortBy", "order"]
    assert len(error.message.split("\n")) == 6


def test_empty_search_is_treated_as_absent():
    assert parse_product_filters({"search": ""}).search is None


@pytest.mark.parametrize("price", ["5\n", "١٠٠", "12٣"])
def test_prices_accept_ascii_digits_only(price):
    with pytest.raises(ValidationError) as excinfo:
        parse_product_filters({"priceMin": price, "priceMax": price})
    assert excinfo.value.fields == ["priceMin", "priceMax"]


def test_numbers_beyond_64_bits_still_parse():
    """Bounds past any stored value are valid; the builder caps what it binds."""

    huge = "9" * 30
    descriptor = parse_product_filters({"priceMin": "0", "priceMax": huge, "page": huge})

    assert descriptor.price_max == int(huge)
    assert descriptor.page == int(huge)
