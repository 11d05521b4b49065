"""Product DRF serializers for API output.

Field names follow the public JSON contract (camelCase); the model
attributes stay snake_case via ``source``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    stockQuantity = serializers.IntegerField(source="stock_quantity", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stockQuantity",
        ]
        read_only_fields = fields


class ProductSummarySerializer(serializers.ModelSerializer):
    """Product reference embedded in order items (no live stock)."""

    class Meta:
        model = Product
        fields = ["id", "name", "description", "price"]
        read_only_fields = fields
