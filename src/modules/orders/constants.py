"""Order domain constants.

Defines status choices and the set of statuses in which an order's
customer data and line items may still change.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    PROCESSING = "PROCESSING", "Processing"
    SHIPPED = "SHIPPED", "Shipped"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"
    COMPLETED = "COMPLETED", "Completed"


MUTABLE_STATES: frozenset[str] = frozenset({OrderStatus.PENDING})
