from __future__ import annotations

from decimal import Decimal

import pytest

from rest_framework.test import APIClient

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem
from modules.products.models import Product


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def make_product():
    """Factory for persisted products."""

    def _make(**overrides) -> Product:
        defaults = {
            "name": "Widget",
            "description": "",
            "price": Decimal("50.00"),
            "stock_quantity": 10,
        }
        defaults.update(overrides)
        return Product.objects.create(**defaults)

    return _make


@pytest.fixture()
def make_order():
    """Factory for persisted orders (PENDING unless told otherwise)."""

    def _make(**overrides) -> Order:
        defaults = {
            "customer_name": "John Doe",
            "customer_email": "john@example.com",
            "status": OrderStatus.PENDING,
        }
        defaults.update(overrides)
        return Order.objects.create(**defaults)

    return _make


@pytest.fixture()
def make_item():
    """Factory for persisted items that bypasses stock reservation."""

    def _make(order: Order, product: Product, quantity: int = 1) -> OrderItem:
        return OrderItem.objects.create(
            order=order,
            product=product,
            quantity=quantity,
            unit_price=product.price,
        )

    return _make
