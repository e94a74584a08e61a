"""Django ORM implementations of the Order and OrderItem repositories.

Satisfy ``IOrderRepository`` / ``IOrderItemRepository`` using Django's
QuerySet API.  Missing or malformed IDs yield ``None`` (Null Object
pattern); the Service Layer turns that into a domain exception.

Concurrency control uses ``select_for_update()`` (no ``version`` field
exists on the models).  Lock order across the codebase is
order → item → product.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import (
    IOrderItemRepository,
    IOrderRepository,
)

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded items and products.

        ``prefetch_related`` loads items and item→product in two batched
        queries, so ``total_amount`` and serializers do not trigger N+1.
        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.prefetch_related("items__product")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Eager-loads items (with product) so the caller can iterate over
        them while the row is locked.
        """
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items__product")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Order]:
        """List orders with optional filters and eager-loaded items.

        Supported filter keys include ``status``, ``customer_email`` and
        ``created_at__range``.
        """
        queryset = Order.objects.prefetch_related("items__product")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    # ------------------------------------------------------------------
    # Save / Delete
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order."""
        entity.save()
        logger.info("order.saved", order_id=str(entity.id), status=entity.status)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete an order; its items go with it (CASCADE)."""
        deleted, _ = Order.objects.filter(id=id).delete()
        if not deleted:
            return False
        logger.info("order.deleted", order_id=str(id))
        return True


class OrderItemDjangoRepository(IOrderItemRepository):
    """Concrete OrderItem repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[OrderItem]:
        """Retrieve an item with its product and order joined in."""
        try:
            return (
                OrderItem.objects.select_related("product", "order")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[OrderItem]:
        """Lock the item row only; the order and product are locked separately."""
        try:
            return OrderItem.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_in_order_for_update(
        self, order_id: str, item_id: str
    ) -> Optional[OrderItem]:
        try:
            return (
                OrderItem.objects.select_for_update()
                .filter(id=item_id, order_id=order_id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[OrderItem]:
        queryset = OrderItem.objects.select_related("product")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def list_for_order(self, order_id: str) -> QuerySet[OrderItem]:
        return self.list({"order_id": order_id})

    @transaction.atomic
    def save(self, entity: OrderItem) -> OrderItem:
        """Persist (create or update) an item; ``subtotal`` is recomputed."""
        entity.save()
        logger.info(
            "order_item.saved",
            item_id=str(entity.id),
            order_id=str(entity.order_id),
            quantity=entity.quantity,
            subtotal=str(entity.subtotal),
        )
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete an item by ID."""
        try:
            deleted, _ = OrderItem.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        if not deleted:
            return False
        logger.info("order_item.deleted", item_id=str(id))
        return True

    def exists_for_product(self, product_id: str) -> bool:
        try:
            return OrderItem.objects.filter(product_id=product_id).exists()
        except (ValueError, ValidationError):
            return False
