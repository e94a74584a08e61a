"""Order and OrderItem models.

Business rules implemented:
- An order starts PENDING and can only be edited or deleted while PENDING
  (enforced at service layer through ``Order.is_mutable``).
- ``total_amount`` is derived from the items on every read, never stored.
- OrderItem snapshots product price at creation time (``unit_price``).
- OrderItem subtotal is always ``quantity * unit_price`` (calculated on save).
- Product FK uses PROTECT: a referenced product cannot be deleted.
- Deleting an Order cascades to its items.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import MUTABLE_STATES, OrderStatus

logger = structlog.get_logger(__name__)


class Order(BaseModel):
    """Order aggregate root.

    Owns its ``items`` (reverse FK, ordered by creation).  Customer data is
    stored inline on the order.
    """

    customer_name: models.CharField = models.CharField(
        max_length=100,
        validators=[MinLengthValidator(2)],
    )
    customer_email: models.EmailField = models.EmailField(max_length=100)
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # Status gate
    # ------------------------------------------------------------------

    @property
    def is_mutable(self) -> bool:
        """Return ``True`` while customer data and items may still change."""
        return self.status in MUTABLE_STATES

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def total_amount(self) -> Decimal:
        """Sum of item subtotals, recomputed from the current item set."""
        return sum((item.subtotal for item in self.items.all()), Decimal("0.00"))

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderItem(BaseModel):
    """Line item linking an Order to a Product.

    ``unit_price`` is a **snapshot** of the product price at the time the
    item was added; it never changes even if the product price is updated
    later.  ``subtotal`` is always ``quantity * unit_price``, recalculated on
    every save.  Its width holds the largest unit price times the largest
    accepted quantity.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
    )
    unit_price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    subtotal: models.DecimalField = models.DecimalField(
        max_digits=20,
        decimal_places=2,
        editable=False,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if self.unit_price is None:
            unit_price = getattr(self.product, "price", None)
            if unit_price is None:
                raise ValidationError({"unit_price": "Product price is required."})
            self.unit_price = unit_price
        self.subtotal = self.quantity * Decimal(self.unit_price)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "subtotal" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["subtotal"]
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.product_id} x{self.quantity} (${self.subtotal})"
