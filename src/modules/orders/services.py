"""Order service layer (Use Cases).

Orchestrates the business logic for orders and their line items.
All write operations are atomic; the service defines the unit-of-work
boundary, and every stock adjustment goes through ``StockLedger``.

Business rules enforced:
- Orders start PENDING; customer data, items and the order itself can
  only change while it is PENDING.
- Adding an item reserves stock and snapshots the product price.
- Changing an item's quantity reserves or releases only the difference;
  the subtotal is recomputed from the snapshot price.
- Removing an item, or deleting its order, releases its full quantity.
- Lock order: order row → item row → product rows (sorted by id).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction
from django.db.models import QuerySet

from modules.orders.constants import OrderStatus
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderItemNotFound,
    OrderNotFound,
)
from modules.orders.models import Order, OrderItem

if TYPE_CHECKING:
    from modules.orders.dtos import (
        AddOrderItemDTO,
        OrderCustomerDTO,
        UpdateOrderItemDTO,
    )
    from modules.orders.repositories.interfaces import (
        IOrderItemRepository,
        IOrderRepository,
    )
    from modules.orders.stock import StockLedger

logger = structlog.get_logger(__name__)


def _ensure_mutable(order: Order, operation: str, message: str) -> None:
    if not order.is_mutable:
        logger.warning(
            "order.not_mutable",
            order_id=str(order.id),
            operation=operation,
            current_status=order.status,
        )
        raise InvalidOrderStatus(operation, order.status, message)


class OrderItemService:
    """Application service for order line items.

    Both the order-scoped endpoints (``/orders/{id}/items/{item_id}/``) and
    the item-scoped ones (``/order-items/{id}/``) end up in
    ``_change_quantity`` / ``_remove``, so the stock math is written once.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        order_item_repository: IOrderItemRepository,
        stock_ledger: StockLedger,
    ) -> None:
        self._order_repo = order_repository
        self._item_repo = order_item_repository
        self._ledger = stock_ledger

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_item(self, order_id: str, dto: AddOrderItemDTO) -> OrderItem:
        """Reserve stock and append a new line item to a PENDING order.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: order is not PENDING.
            ProductNotFound: product does not exist.
            InsufficientStock: not enough stock for ``dto.quantity``.
        """
        order = self._lock_order(order_id)
        _ensure_mutable(order, "add_item", "Cannot modify a finalized order.")

        product = self._ledger.reserve(dto.product_id, dto.quantity)

        item = OrderItem(
            order=order,
            product=product,
            quantity=dto.quantity,
            unit_price=product.price,
        )
        item = self._item_repo.save(item)

        logger.info(
            "order.item_added",
            order_id=str(order.id),
            item_id=str(item.id),
            product_id=str(product.id),
            quantity=item.quantity,
            unit_price=str(item.unit_price),
        )
        return item

    @transaction.atomic
    def update_order_item(
        self, order_id: str, item_id: str, dto: UpdateOrderItemDTO
    ) -> OrderItem:
        """Change the quantity of an item looked up within its order.

        Raises:
            OrderNotFound: order does not exist.
            OrderItemNotFound: the item does not belong to the order.
            InvalidOrderStatus: order is not PENDING.
            InsufficientStock: the increase exceeds available stock.
        """
        order = self._lock_order(order_id)
        item = self._lock_item_in(order, item_id)
        return self._change_quantity(order, item, dto.quantity)

    @transaction.atomic
    def update_item(self, item_id: str, dto: UpdateOrderItemDTO) -> OrderItem:
        """Change the quantity of an item looked up by its own id.

        Raises:
            OrderItemNotFound: item does not exist.
            InvalidOrderStatus: the item's order is not PENDING.
            InsufficientStock: the increase exceeds available stock.
        """
        order, item = self._lock_item(item_id)
        return self._change_quantity(order, item, dto.quantity)

    @transaction.atomic
    def remove_order_item(self, order_id: str, item_id: str) -> None:
        """Remove an item looked up within its order, releasing its stock.

        Raises:
            OrderNotFound: order does not exist.
            OrderItemNotFound: the item does not belong to the order.
            InvalidOrderStatus: order is not PENDING.
        """
        order = self._lock_order(order_id)
        item = self._lock_item_in(order, item_id)
        self._remove(order, item)

    @transaction.atomic
    def remove_item(self, item_id: str) -> None:
        """Remove an item looked up by its own id, releasing its stock.

        Raises:
            OrderItemNotFound: item does not exist.
            InvalidOrderStatus: the item's order is not PENDING.
        """
        order, item = self._lock_item(item_id)
        self._remove(order, item)

    @transaction.atomic
    def release_items(self, order: Order) -> None:
        """Return the stock of every item of *order* to its product.

        Products are locked in id order so concurrent callers cannot
        deadlock.  The items themselves are left in place.
        """
        items = sorted(order.items.all(), key=lambda i: str(i.product_id))
        for item in items:
            self._ledger.release(item.product_id, item.quantity)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_items(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[OrderItem]:
        return self._item_repo.list(filters)

    def list_order_items(self, order_id: str) -> QuerySet[OrderItem]:
        """Items of one order.

        Raises:
            OrderNotFound: order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(order_id)
        return self._item_repo.list_for_order(str(order.id))

    def get_item(self, item_id: str) -> OrderItem:
        item = self._item_repo.get_by_id(item_id)
        if not item:
            raise OrderItemNotFound(item_id)
        return item

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _change_quantity(
        self, order: Order, item: OrderItem, new_quantity: int
    ) -> OrderItem:
        _ensure_mutable(order, "update_item", "Cannot modify a finalized order.")

        old_quantity = item.quantity
        delta = new_quantity - old_quantity
        self._ledger.reserve(item.product_id, delta)

        item.quantity = new_quantity
        item = self._item_repo.save(item)

        logger.info(
            "order.item_updated",
            order_id=str(order.id),
            item_id=str(item.id),
            old_quantity=old_quantity,
            new_quantity=new_quantity,
            subtotal=str(item.subtotal),
        )
        return self._item_repo.get_by_id(str(item.id)) or item

    def _remove(self, order: Order, item: OrderItem) -> None:
        _ensure_mutable(order, "remove_item", "Cannot modify a finalized order.")

        self._ledger.release(item.product_id, item.quantity)
        self._item_repo.delete(str(item.id))

        logger.info(
            "order.item_removed",
            order_id=str(order.id),
            item_id=str(item.id),
            released=item.quantity,
        )

    def _lock_order(self, order_id: str) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order

    def _lock_item_in(self, order: Order, item_id: str) -> OrderItem:
        item = self._item_repo.get_in_order_for_update(str(order.id), item_id)
        if not item:
            raise OrderItemNotFound(item_id)
        return item

    def _lock_item(self, item_id: str) -> tuple[Order, OrderItem]:
        # Resolve the parent order first so locks are taken order -> item.
        found = self._item_repo.get_by_id(item_id)
        if not found:
            raise OrderItemNotFound(item_id)
        order = self._lock_order(str(found.order_id))
        return order, self._lock_item_in(order, item_id)


class OrderService:
    """Application service for Order use-cases.

    Receives its repository and the item service via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        order_item_service: OrderItemService,
    ) -> None:
        self._order_repo = order_repository
        self._items = order_item_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: OrderCustomerDTO) -> Order:
        """Create an empty PENDING order."""
        order = Order(
            customer_name=dto.customer_name,
            customer_email=dto.customer_email,
            status=OrderStatus.PENDING,
        )
        order = self._order_repo.save(order)
        logger.info("order.created", order_id=str(order.id))
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_order(self, order_id: str, dto: OrderCustomerDTO) -> Order:
        """Overwrite the customer fields of a PENDING order.

        Status and items are left untouched.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: order is not PENDING.
        """
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(order_id)
        _ensure_mutable(order, "update_order", "Cannot modify a finalized order.")

        order.customer_name = dto.customer_name
        order.customer_email = dto.customer_email
        self._order_repo.save(order)

        logger.info("order.updated", order_id=str(order.id))
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def delete_order(self, order_id: str) -> None:
        """Delete a PENDING order and its items, restoring their stock.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: order is not PENDING.
        """
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(order_id)
        _ensure_mutable(
            order, "delete_order", "Only PENDING orders can be deleted."
        )

        self._items.release_items(order)
        self._order_repo.delete(str(order.id))
        logger.info("order.deleted", order_id=str(order.id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Order]:
        """Return the orders, optionally filtered."""
        return self._order_repo.list(filters)
