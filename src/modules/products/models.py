"""Product model with price and stock control.

Business rules implemented:
- Price is an exact decimal with two places and must be at least 0.01.
- Stock quantity cannot be negative (DB check constraint).
- Products are hard-deleted; ``OrderItem.product`` uses PROTECT so the
  database refuses to delete a product that is still referenced.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxLengthValidator, MinLengthValidator, MinValueValidator
from django.db import models

from modules.core.models import BaseModel

MIN_PRICE = Decimal("0.01")


class Product(BaseModel):
    """Catalog product.

    ``stock_quantity`` is the available stock counter.  It is only ever
    adjusted through ``StockLedger`` while the row is locked, or overwritten
    explicitly by a product update.
    """

    name = models.CharField(
        max_length=100,
        validators=[MinLengthValidator(2)],
    )
    description = models.TextField(
        blank=True,
        default="",
        validators=[MaxLengthValidator(500)],
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(MIN_PRICE)],
    )
    stock_quantity = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=MIN_PRICE),
                name="products_price_min",
            ),
            models.CheckConstraint(
                condition=models.Q(stock_quantity__gte=0),
                name="products_stock_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.price is not None and self.price < MIN_PRICE:
            raise ValidationError({"price": "Price must be at least 0.01."})
        if self.stock_quantity is not None and self.stock_quantity < 0:
            raise ValidationError(
                {"stock_quantity": "Stock quantity cannot be negative."}
            )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.name} (${self.price})"
