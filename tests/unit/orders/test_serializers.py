"""Unit tests for order serializers.

Covers:
- CreateOrderSerializer: camelCase input mapped to snake_case.
- CreateOrderSerializer: shape errors (missing fields, wrong types).
- OrderSerializer: camelCase output with nested items and product.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.models import Order, OrderItem
from modules.orders.serializers import CreateOrderSerializer, OrderSerializer

pytestmark = pytest.mark.unit


class TestCreateOrderSerializer:
    def test_maps_camel_case_to_snake_case(self):
        serializer = CreateOrderSerializer(
            data={
                "customerName": "John",
                "items": [{"productId": 3, "quantity": 2}],
            }
        )
        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["customer_name"] == "John"
        assert serializer.validated_data["items"] == [
            {"product_id": 3, "quantity": 2}
        ]

    def test_blank_name_and_empty_items_pass_shape_check(self):
        serializer = CreateOrderSerializer(data={"customerName": "  ", "items": []})
        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["customer_name"] == "  "

    def test_missing_customer_name_is_invalid(self):
        serializer = CreateOrderSerializer(
            data={"items": [{"productId": 1, "quantity": 1}]}
        )
        assert not serializer.is_valid()
        assert "customerName" in serializer.errors

    def test_missing_items_is_invalid(self):
        serializer = CreateOrderSerializer(data={"customerName": "John"})
        assert not serializer.is_valid()
        assert "items" in serializer.errors

    def test_non_integer_quantity_is_invalid(self):
        serializer = CreateOrderSerializer(
            data={
                "customerName": "John",
                "items": [{"productId": 1, "quantity": "two"}],
            }
        )
        assert not serializer.is_valid()
        assert "items" in serializer.errors


class TestOrderSerializer:
    def test_output_uses_camel_case(self, espresso, latte):
        order = Order.objects.create(
            customer_name="John", total_amount=Decimal("17.00")
        )
        OrderItem.objects.create(order=order, product=espresso, quantity=2)
        OrderItem.objects.create(order=order, product=latte, quantity=3)

        data = OrderSerializer(order).data

        assert set(data) == {"id", "customerName", "orderDate", "totalAmount", "items"}
        assert data["customerName"] == "John"
        assert data["totalAmount"] == "17.00"
        assert len(data["items"]) == 2

        first = data["items"][0]
        assert first["productId"] == espresso.id
        assert first["quantity"] == 2
        assert first["unitPrice"] == "2.50"
        assert first["subtotal"] == "5.00"
        assert first["product"]["name"] == "Espresso"
        assert "stockQuantity" not in first["product"]
