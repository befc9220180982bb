"""Pytest fixtures shared across chart-data tests."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import pytest

PRODUCT_ROWS: tuple[dict[str, Any], ...] = (
    {
        "name": "Laptop Pro",
        "description": "High-performance laptop for professionals",
        "price": Decimal("1299.99"),
        "rating": 4.5,
        "stock_count": 15,
        "category": "electronics",
        "status": "active",
        "featured": True,
        "deleted_at": None,
    },
    {
        "name": "Gaming Mouse",
        "description": "Ergonomic gaming mouse with RGB lighting",
        "price": Decimal("79.99"),
        "rating": 4.2,
        "stock_count": 0,
        "category": "electronics",
        "status": "active",
        "featured": False,
        "deleted_at": None,
    },
    {
        "name": "Office Chair",
        "description": "Comfortable office chair for long work sessions",
        "price": Decimal("299.99"),
        "rating": 3.8,
        "stock_count": 5,
        "category": "furniture",
        "status": "discontinued",
        "featured": False,
        "deleted_at": datetime(2025, 11, 30, 12, 0, tzinfo=timezone.utc),
    },
    {
        "name": "Wireless Headphones",
        "description": "Premium noise-canceling headphones",
        "price": Decimal("199.99"),
        "rating": 4.7,
        "stock_count": 25,
        "category": "electronics",
        "status": "active",
        "featured": True,
        "deleted_at": None,
    },
    {
        "name": "Standing Desk",
        "description": None,
        "price": Decimal("449.99"),
        "rating": 4.1,
        "stock_count": 8,
        "category": "furniture",
        "status": "active",
        "featured": False,
        "deleted_at": None,
    },
)


@pytest.fixture
def product_rows() -> list[dict[str, Any]]:
    """Return fresh copies of the five catalog products as plain mappings."""

    return [dict(row) for row in PRODUCT_ROWS]


@pytest.fixture
def memory_products(product_rows):
    """Return an in-memory resource holding the catalog products."""

    from tapir.resources import MemoryResource

    return MemoryResource(product_rows, name="products")


@pytest.fixture
def products(db):
    """Create the five catalog products in the database."""

    from catalog.models import Product

    return [Product.objects.create(**row) for row in PRODUCT_ROWS]


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no database access.
    - `integration`: tests touching Django, database, views, or commands.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
