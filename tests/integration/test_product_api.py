"""Integration tests for Product API endpoints.

Covers:
- CRUD operations via /api/v1/products/.
- Filtering by name and price range.
- Domain exception mapping (400, 404, 409).
"""

from __future__ import annotations

import logging
from decimal import Decimal

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration

MISSING_ID = "00000000-0000-0000-0000-000000000000"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_product(make_product):
    return make_product(
        name="Widget Alpha",
        description="A fine widget",
        price=Decimal("19.99"),
        stock_quantity=100,
    )


# ===========================================================================
# LIST
# ===========================================================================


class TestProductList:
    def test_list_empty(self, api_client):
        response = api_client.get("/api/v1/products/")
        assert response.status_code == 200
        assert response.data == []

    def test_list_returns_products(self, api_client, sample_product):
        response = api_client.get("/api/v1/products/")
        assert response.status_code == 200
        assert len(response.data) == 1
        assert response.data[0]["name"] == "Widget Alpha"
        assert response.data[0]["price"] == "19.99"

    def test_filter_by_name(self, api_client, make_product):
        make_product(name="Laptop Dell XPS 15")
        make_product(name="Logitech MX Master 3")

        response = api_client.get("/api/v1/products/", {"name": "dell"})
        assert [p["name"] for p in response.data] == ["Laptop Dell XPS 15"]

    def test_filter_by_price_range(self, api_client, make_product):
        make_product(name="Cheap", price=Decimal("5.00"))
        make_product(name="Mid", price=Decimal("50.00"))
        make_product(name="Pricey", price=Decimal("500.00"))

        response = api_client.get(
            "/api/v1/products/", {"min_price": "10", "max_price": "100"}
        )
        assert [p["name"] for p in response.data] == ["Mid"]


# ===========================================================================
# RETRIEVE
# ===========================================================================


class TestProductRetrieve:
    def test_retrieve_success(self, api_client, sample_product):
        response = api_client.get(f"/api/v1/products/{sample_product.id}/")
        assert response.status_code == 200
        assert response.data["id"] == str(sample_product.id)
        assert response.data["stock_quantity"] == 100

    def test_retrieve_not_found(self, api_client):
        response = api_client.get(f"/api/v1/products/{MISSING_ID}/")
        assert response.status_code == 404
        assert "not found" in response.data["detail"]

    def test_retrieve_malformed_id(self, api_client):
        response = api_client.get("/api/v1/products/not-a-uuid/")
        assert response.status_code == 404


# ===========================================================================
# CREATE
# ===========================================================================


class TestProductCreate:
    def test_create_success(self, api_client):
        payload = {
            "name": "Mechanical Keyboard RGB",
            "description": "Clicky",
            "price": "149.99",
            "stock_quantity": 75,
        }
        response = api_client.post("/api/v1/products/", payload, format="json")

        assert response.status_code == 201
        assert response.data["name"] == "Mechanical Keyboard RGB"
        assert response.data["price"] == "149.99"
        assert Product.objects.filter(id=response.data["id"]).exists()

    def test_create_logs_one_creation_event(self, api_client, caplog):
        payload = {"name": "Logged", "price": "1.00", "stock_quantity": 1}
        with caplog.at_level(logging.INFO):
            response = api_client.post("/api/v1/products/", payload, format="json")

        assert response.status_code == 201
        messages = [record.getMessage() for record in caplog.records]
        assert sum("product.created" in m for m in messages) == 1, messages
        assert not any("product_created" in m for m in messages), messages

    def test_create_accepts_json_number_price(self, api_client):
        payload = {"name": "Mouse", "price": 99.99, "stock_quantity": 1}
        response = api_client.post("/api/v1/products/", payload, format="json")
        assert response.status_code == 201
        assert response.data["price"] == "99.99"

    def test_create_invalid_price(self, api_client):
        payload = {"name": "Bad", "price": "0.00", "stock_quantity": 1}
        response = api_client.post("/api/v1/products/", payload, format="json")
        assert response.status_code == 400
        assert response.data["detail"][0]["loc"] == ("price",)

    def test_create_negative_stock(self, api_client):
        payload = {"name": "Bad", "price": "1.00", "stock_quantity": -1}
        response = api_client.post("/api/v1/products/", payload, format="json")
        assert response.status_code == 400

    def test_create_stock_above_column_limit(self, api_client):
        payload = {"name": "Big", "price": "1.00", "stock_quantity": 2**63}
        response = api_client.post("/api/v1/products/", payload, format="json")
        assert response.status_code == 400
        assert response.data["detail"][0]["loc"] == ("stock_quantity",)
        assert Product.objects.count() == 0

    def test_create_missing_name(self, api_client):
        payload = {"price": "1.00", "stock_quantity": 1}
        response = api_client.post("/api/v1/products/", payload, format="json")
        assert response.status_code == 400
        assert Product.objects.count() == 0


# ===========================================================================
# UPDATE (PUT / PATCH)
# ===========================================================================


class TestProductUpdate:
    def test_put_replaces_all_fields(self, api_client, sample_product):
        payload = {"name": "Widget Beta", "price": "5.00", "stock_quantity": 1}
        response = api_client.put(
            f"/api/v1/products/{sample_product.id}/", payload, format="json"
        )

        assert response.status_code == 200
        assert response.data["name"] == "Widget Beta"
        assert response.data["description"] == ""
        assert response.data["stock_quantity"] == 1

    def test_put_requires_every_field(self, api_client, sample_product):
        response = api_client.put(
            f"/api/v1/products/{sample_product.id}/", {"name": "Only"}, format="json"
        )
        assert response.status_code == 400

    def test_put_not_found(self, api_client):
        payload = {"name": "Widget", "price": "5.00", "stock_quantity": 1}
        response = api_client.put(f"/api/v1/products/{MISSING_ID}/", payload, format="json")
        assert response.status_code == 404

    def test_patch_only_price(self, api_client, make_product):
        product = make_product(name="X", price=Decimal("100.00"), stock_quantity=10)

        response = api_client.patch(
            f"/api/v1/products/{product.id}/", {"price": "149.99"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["price"] == "149.99"
        assert response.data["name"] == "X"
        assert response.data["stock_quantity"] == 10

    def test_patch_null_field_left_untouched(self, api_client, sample_product):
        response = api_client.patch(
            f"/api/v1/products/{sample_product.id}/",
            {"name": None, "stock_quantity": 7},
            format="json",
        )
        assert response.status_code == 200
        assert response.data["name"] == "Widget Alpha"
        assert response.data["stock_quantity"] == 7

    def test_put_stock_above_column_limit(self, api_client, sample_product):
        payload = {"name": "Widget", "price": "5.00", "stock_quantity": 2**63}
        response = api_client.put(
            f"/api/v1/products/{sample_product.id}/", payload, format="json"
        )
        assert response.status_code == 400
        sample_product.refresh_from_db()
        assert sample_product.stock_quantity == 100

    def test_patch_stock_above_column_limit(self, api_client, sample_product):
        response = api_client.patch(
            f"/api/v1/products/{sample_product.id}/",
            {"stock_quantity": 2**31},
            format="json",
        )
        assert response.status_code == 400
        sample_product.refresh_from_db()
        assert sample_product.stock_quantity == 100

    def test_patch_unknown_field_rejected(self, api_client, sample_product):
        response = api_client.patch(
            f"/api/v1/products/{sample_product.id}/", {"sku": "X"}, format="json"
        )
        assert response.status_code == 400


# ===========================================================================
# DELETE
# ===========================================================================


class TestProductDelete:
    def test_delete_success(self, api_client, sample_product):
        response = api_client.delete(f"/api/v1/products/{sample_product.id}/")
        assert response.status_code == 204
        assert not Product.objects.filter(id=sample_product.id).exists()

    def test_delete_not_found(self, api_client):
        response = api_client.delete(f"/api/v1/products/{MISSING_ID}/")
        assert response.status_code == 404

    def test_delete_referenced_product_conflict(
        self, api_client, sample_product, make_order, make_item
    ):
        make_item(make_order(), sample_product)

        response = api_client.delete(f"/api/v1/products/{sample_product.id}/")

        assert response.status_code == 409
        assert "used in existing orders" in response.data["detail"]
        assert Product.objects.filter(id=sample_product.id).exists()
