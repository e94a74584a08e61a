"""Order and OrderItem repository interfaces.

Extend ``IRepository`` with the look-ups the order services need:
items scoped to one order, and the product-reference check used by
the product delete guard.

The Service Layer depends exclusively on these contracts (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository, Queryable

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    ``get_by_id`` and ``get_for_update`` return the order with its items
    (and their products) eager-loaded.
    """


class IOrderItemRepository(IRepository["OrderItem"]):
    """Repository contract for order line items."""

    @abstractmethod
    def list_for_order(self, order_id: str) -> Queryable[OrderItem]:
        """Items of one order, in creation order."""

    @abstractmethod
    def get_in_order_for_update(
        self, order_id: str, item_id: str
    ) -> Optional[OrderItem]:
        """Lock and return an item only if it belongs to *order_id*."""

    @abstractmethod
    def exists_for_product(self, product_id: str) -> bool:
        """Return ``True`` if any persisted item references *product_id*."""
