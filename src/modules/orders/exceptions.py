"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from typing import Any

from modules.core.exceptions import DomainError, InvalidState, NotFound
from modules.orders.constants import OrderStatus


class OrderNotFound(NotFound):
    """The requested order does not exist."""

    entity = "Order"


class OrderItemNotFound(NotFound):
    """The requested order item does not exist (or not in that order)."""

    entity = "Order item"


class InvalidOrderStatus(InvalidState):
    """The order is no longer PENDING, so it cannot be changed."""

    def __init__(self, operation: str, current_status: str, message: str) -> None:
        super().__init__(operation, current_status, OrderStatus.PENDING, message)


class InsufficientStock(DomainError):
    """Not enough stock to reserve the requested quantity."""

    def __init__(self, product_id: Any, requested: int, available: int) -> None:
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough stock for product {product_id}: "
            f"requested {requested}, available {available}."
        )
