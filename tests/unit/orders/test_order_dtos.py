"""Unit tests for the order DTOs."""

from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.dtos import (
    MAX_QUANTITY,
    AddOrderItemDTO,
    OrderCustomerDTO,
    UpdateOrderItemDTO,
)

pytestmark = pytest.mark.unit


class TestOrderCustomerDTO:
    def test_valid(self):
        dto = OrderCustomerDTO(customer_name=" John Doe ", customer_email="john@example.com")
        assert dto.customer_name == "John Doe"
        assert dto.customer_email == "john@example.com"

    def test_short_name_rejected(self):
        with pytest.raises(ValidationError, match="between 2 and 100"):
            OrderCustomerDTO(customer_name="J", customer_email="john@example.com")

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            OrderCustomerDTO(customer_name="John", customer_email="not-an-email")

    def test_email_too_long_rejected(self):
        email = "a" * 95 + "@example.com"
        with pytest.raises(ValidationError):
            OrderCustomerDTO(customer_name="John", customer_email=email)

    def test_missing_fields_rejected(self):
        with pytest.raises(ValidationError):
            OrderCustomerDTO(customer_name="John")


class TestOrderItemDTOs:
    def test_add_item_valid(self):
        product_id = uuid4()
        dto = AddOrderItemDTO(product_id=str(product_id), quantity=3)
        assert dto.product_id == product_id
        assert dto.quantity == 3

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_add_item_quantity_must_be_positive(self, quantity):
        with pytest.raises(ValidationError, match="at least 1"):
            AddOrderItemDTO(product_id=uuid4(), quantity=quantity)

    def test_add_item_quantity_at_column_limit_accepted(self):
        dto = AddOrderItemDTO(product_id=uuid4(), quantity=MAX_QUANTITY)
        assert dto.quantity == 2_147_483_647

    @pytest.mark.parametrize("quantity", [MAX_QUANTITY + 1, 2**63])
    def test_add_item_quantity_above_column_limit_rejected(self, quantity):
        with pytest.raises(ValidationError, match="at most 2147483647"):
            AddOrderItemDTO(product_id=uuid4(), quantity=quantity)

    def test_add_item_invalid_product_id(self):
        with pytest.raises(ValidationError):
            AddOrderItemDTO(product_id="abc", quantity=1)

    def test_update_item_quantity_must_be_positive(self):
        with pytest.raises(ValidationError, match="at least 1"):
            UpdateOrderItemDTO(quantity=0)

    def test_update_item_quantity_above_column_limit_rejected(self):
        with pytest.raises(ValidationError, match="at most 2147483647"):
            UpdateOrderItemDTO(quantity=MAX_QUANTITY + 1)

    def test_update_item_is_frozen(self):
        dto = UpdateOrderItemDTO(quantity=2)
        with pytest.raises(ValidationError):
            dto.quantity = 5
