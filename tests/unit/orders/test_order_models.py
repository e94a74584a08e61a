"""Unit tests for Order and OrderItem models."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.db.models import ProtectedError

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.unit


class TestOrder:
    def test_defaults_to_pending(self):
        order = Order.objects.create(customer_name="John", customer_email="j@example.com")
        assert order.status == OrderStatus.PENDING
        assert order.is_mutable is True

    @pytest.mark.parametrize(
        "status",
        [
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
            OrderStatus.COMPLETED,
        ],
    )
    def test_only_pending_is_mutable(self, make_order, status):
        assert make_order(status=status).is_mutable is False

    def test_total_amount_of_empty_order_is_zero(self, make_order):
        assert make_order().total_amount == Decimal("0.00")

    def test_total_amount_sums_subtotals(self, make_order, make_product, make_item):
        order = make_order()
        make_item(order, make_product(name="A", price=Decimal("10.00")), quantity=2)
        make_item(order, make_product(name="B", price=Decimal("0.50")), quantity=3)

        assert order.total_amount == Decimal("21.50")

    def test_total_amount_follows_item_changes(self, make_order, make_product, make_item):
        order = make_order()
        item = make_item(order, make_product(price=Decimal("10.00")), quantity=1)
        item.quantity = 4
        item.save()

        order = Order.objects.get(id=order.id)
        assert order.total_amount == Decimal("40.00")

    def test_delete_cascades_items(self, make_order, make_product, make_item):
        order = make_order()
        item = make_item(order, make_product())
        order.delete()
        assert not OrderItem.objects.filter(id=item.id).exists()


class TestOrderItem:
    def test_subtotal_computed_on_save(self, make_order, make_product, make_item):
        item = make_item(make_order(), make_product(price=Decimal("50.00")), quantity=3)
        item.refresh_from_db()
        assert item.subtotal == Decimal("150.00")

    def test_unit_price_snapshotted_from_product(self, make_order, make_product):
        product = make_product(price=Decimal("12.34"))
        item = OrderItem.objects.create(order=make_order(), product=product, quantity=2)
        assert item.unit_price == Decimal("12.34")
        assert item.subtotal == Decimal("24.68")

    def test_unit_price_survives_product_price_change(
        self, make_order, make_product, make_item
    ):
        product = make_product(price=Decimal("50.00"))
        item = make_item(make_order(), product, quantity=1)

        product.price = Decimal("99.00")
        product.save()
        item.refresh_from_db()

        assert item.unit_price == Decimal("50.00")

    def test_subtotal_included_in_update_fields(self, make_order, make_product, make_item):
        item = make_item(make_order(), make_product(price=Decimal("2.00")), quantity=1)
        item.quantity = 5
        item.save(update_fields=["quantity"])
        item.refresh_from_db()
        assert item.subtotal == Decimal("10.00")

    def test_referenced_product_cannot_be_deleted(
        self, make_order, make_product, make_item
    ):
        product = make_product()
        make_item(make_order(), product)
        with pytest.raises(ProtectedError):
            product.delete()
