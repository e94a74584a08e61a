"""Product DRF serializers for API output.

Input validation lives in the Pydantic DTOs (``dtos.py``); this
serializer only shapes responses.  ``price`` is rendered as a decimal
string so no precision is lost.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock_quantity",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
