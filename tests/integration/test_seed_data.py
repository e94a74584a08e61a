from __future__ import annotations

from io import StringIO

import pytest
from django.core.management import call_command

from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.products.models import Product

pytestmark = pytest.mark.integration


def _seed() -> str:
    out = StringIO()
    call_command("seed_data", stdout=out)
    return out.getvalue()


class TestSeedData:
    def test_creates_catalog_and_orders(self):
        output = _seed()

        assert "Seed completed" in output
        assert Product.objects.count() == 5
        assert Order.objects.count() == 2

    def test_pending_order_reserved_stock(self):
        _seed()

        john = Order.objects.get(customer_email="john.doe@example.com")
        assert john.status == OrderStatus.PENDING
        assert john.items.count() == 3
        assert Product.objects.get(name="Laptop Dell XPS 15").stock_quantity == 49
        assert Product.objects.get(name="Logitech MX Master 3").stock_quantity == 98

    def test_processing_order(self):
        _seed()

        jane = Order.objects.get(customer_email="jane.smith@example.com")
        assert jane.status == OrderStatus.PROCESSING
        assert jane.items.count() == 2

    def test_is_idempotent(self):
        _seed()
        _seed()

        assert Product.objects.count() == 5
        assert Order.objects.count() == 2
        assert Product.objects.get(name="Laptop Dell XPS 15").stock_quantity == 49
