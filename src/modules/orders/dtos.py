"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``OrderCustomerDTO``: customer data for order creation and update.
- ``AddOrderItemDTO``: product and quantity of a new line item.
- ``UpdateOrderItemDTO``: new quantity of an existing line item.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


# Largest value a PositiveIntegerField column holds on every backend.
MAX_QUANTITY = 2_147_483_647


def _check_quantity(v: int) -> int:
    if v < 1:
        raise ValueError("Quantity must be at least 1.")
    if v > MAX_QUANTITY:
        raise ValueError(f"Quantity must be at most {MAX_QUANTITY}.")
    return v


class OrderCustomerDTO(BaseModel):
    """Immutable DTO with the customer fields of an order.

    Validates:
    - ``customer_name`` is 2-100 characters after stripping.
    - ``customer_email`` is a well-formed address (Pydantic ``EmailStr``).
    """

    model_config = ConfigDict(frozen=True)

    customer_name: str
    customer_email: EmailStr

    @field_validator("customer_name")
    @classmethod
    def name_length(cls, v: str) -> str:
        v = v.strip()
        if not 2 <= len(v) <= 100:
            raise ValueError("Customer name must be between 2 and 100 characters.")
        return v

    @field_validator("customer_email")
    @classmethod
    def email_length(cls, v: str) -> str:
        if len(v) > 100:
            raise ValueError("Customer email must be at most 100 characters.")
        return v


class AddOrderItemDTO(BaseModel):
    """Immutable DTO for a new line item.

    ``unit_price`` is not accepted: it is snapshotted from the product
    by the Service Layer.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_in_range(cls, v: int) -> int:
        return _check_quantity(v)


class UpdateOrderItemDTO(BaseModel):
    """Immutable DTO carrying the new quantity of a line item."""

    model_config = ConfigDict(frozen=True)

    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_in_range(cls, v: int) -> int:
        return _check_quantity(v)
