"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (Views) and the
Service layer.  DTOs are immutable (``frozen=True``) and reject
unknown fields (``extra="forbid"``).

- ``CreateProductDTO``: input for product creation.
- ``ReplaceProductDTO``: input for a full overwrite (PUT).
- ``PatchProductDTO``: input for a partial merge (PATCH).
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from modules.products.models import Product

# Largest value a PositiveIntegerField column holds on every backend.
MAX_STOCK = 2_147_483_647

Money = Annotated[Decimal, Field(max_digits=10, decimal_places=2)]


def _check_name(v: str) -> str:
    v = v.strip()
    if not 2 <= len(v) <= 100:
        raise ValueError("Name must be between 2 and 100 characters.")
    return v


def _check_description(v: str) -> str:
    if len(v) > 500:
        raise ValueError("Description must be at most 500 characters.")
    return v


def _check_price(v: Decimal) -> Decimal:
    if v < Decimal("0.01"):
        raise ValueError("Price must be at least 0.01.")
    return v


def _check_stock(v: int) -> int:
    if v < 0:
        raise ValueError("Stock quantity cannot be negative.")
    if v > MAX_STOCK:
        raise ValueError(f"Stock quantity must be at most {MAX_STOCK}.")
    return v


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` is 2-100 characters after stripping.
    - ``description`` is at most 500 characters.
    - ``price`` is at least 0.01 with at most two decimal places.
    - ``stock_quantity`` is between 0 and ``MAX_STOCK``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    price: Money
    description: str = ""
    stock_quantity: int

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("description")
    @classmethod
    def description_length(cls, v: str) -> str:
        return _check_description(v)

    @field_validator("price")
    @classmethod
    def price_minimum(cls, v: Decimal) -> Decimal:
        return _check_price(v)

    @field_validator("stock_quantity")
    @classmethod
    def stock_non_negative(cls, v: int) -> int:
        return _check_stock(v)


class ReplaceProductDTO(CreateProductDTO):
    """Immutable DTO for a full product overwrite.

    Same shape as creation: every stored field is replaced, an omitted
    ``description`` becomes empty.
    """


class PatchProductDTO(BaseModel):
    """Immutable DTO for partial product updates.

    All fields are optional; ``None`` means "leave unchanged".
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Optional[str] = None
    price: Optional[Money] = None
    description: Optional[str] = None
    stock_quantity: Optional[int] = None

    @field_validator("name")
    @classmethod
    def name_length(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_name(v)

    @field_validator("description")
    @classmethod
    def description_length(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_description(v)

    @field_validator("price")
    @classmethod
    def price_minimum(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return None if v is None else _check_price(v)

    @field_validator("stock_quantity")
    @classmethod
    def stock_non_negative(cls, v: Optional[int]) -> Optional[int]:
        return None if v is None else _check_stock(v)

    def apply_to(self, product: Product) -> List[str]:
        """Copy every supplied field onto *product*.

        Returns the names of the fields that were written.
        """
        changed: List[str] = []
        if self.name is not None:
            product.name = self.name
            changed.append("name")
        if self.description is not None:
            product.description = self.description
            changed.append("description")
        if self.price is not None:
            product.price = self.price
            changed.append("price")
        if self.stock_quantity is not None:
            product.stock_quantity = self.stock_quantity
            changed.append("stock_quantity")
        return changed
