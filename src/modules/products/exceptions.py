"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from modules.core.exceptions import Conflict, NotFound


class ProductNotFound(NotFound):
    """The requested product does not exist."""

    entity = "Product"


class ProductInUse(Conflict):
    """The product is still referenced by at least one order item."""

    entity = "Product"

    def __init__(self, id) -> None:
        super().__init__(id, "it is used in existing orders")
