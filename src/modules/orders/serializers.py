"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.  JSON keys are camelCase; ``source``
maps them onto the snake_case model and DTO attributes.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.dtos import MAX_PRODUCT_ID
from modules.orders.models import Order, OrderItem
from modules.products.serializers import ProductSummarySerializer

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Shape check for a single line in an order creation request."""

    productId = serializers.IntegerField(
        source="product_id", min_value=1, max_value=MAX_PRODUCT_ID
    )
    quantity = serializers.IntegerField()


class CreateOrderSerializer(serializers.Serializer):
    """Shape check for the order creation payload.

    Semantic rules (blank name, non-positive quantity, no items) are left
    to ``CreateOrderDTO`` so API and service report them identically.
    """

    customerName = serializers.CharField(
        source="customer_name", allow_blank=True, trim_whitespace=False
    )
    items = CreateOrderItemSerializer(many=True, allow_empty=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with the resolved product."""

    productId = serializers.IntegerField(source="product_id", read_only=True)
    product = ProductSummarySerializer(read_only=True)
    unitPrice = serializers.DecimalField(
        source="unit_price", max_digits=18, decimal_places=2, read_only=True
    )

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "productId",
            "product",
            "quantity",
            "unitPrice",
            "subtotal",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items."""

    customerName = serializers.CharField(source="customer_name", read_only=True)
    orderDate = serializers.DateTimeField(source="order_date", read_only=True)
    totalAmount = serializers.DecimalField(
        source="total_amount", max_digits=18, decimal_places=2, read_only=True
    )
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customerName",
            "orderDate",
            "totalAmount",
            "items",
        ]
        read_only_fields = fields
