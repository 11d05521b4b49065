"""Unit tests for Order and OrderItem models.

Covers:
- Order defaults (order_date, total_amount) and __str__.
- Non-empty customer name check constraint.
- OrderItem automatic subtotal calculation.
- OrderItem price snapshot from product.
- OrderItem quantity validation (>= 1).
- Items keep insertion order.
- CASCADE from Order to OrderItem.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.unit


class TestOrder:
    def test_defaults(self):
        order = Order.objects.create(customer_name="John")
        assert order.order_date is not None
        assert order.total_amount == Decimal("0.00")

    def test_str(self):
        order = Order.objects.create(
            customer_name="Jane", total_amount=Decimal("17.00")
        )
        assert str(order) == f"Order #{order.pk} for Jane (17.00)"

    def test_empty_customer_name_rejected_by_database(self):
        with pytest.raises(IntegrityError), transaction.atomic():
            Order.objects.create(customer_name="")


class TestOrderItem:
    def test_subtotal_is_price_times_quantity(self, espresso):
        order = Order.objects.create(customer_name="John")
        item = OrderItem.objects.create(
            order=order, product=espresso, quantity=3, unit_price=Decimal("2.50")
        )
        assert item.subtotal == Decimal("7.50")

    def test_unit_price_snapshots_product_price(self, latte):
        order = Order.objects.create(customer_name="John")
        item = OrderItem(order=order, product=latte, quantity=1)
        item.save()
        assert item.unit_price == Decimal("4.00")

    def test_snapshot_survives_catalogue_price_change(self, latte):
        order = Order.objects.create(customer_name="John")
        item = OrderItem.objects.create(order=order, product=latte, quantity=2)
        latte.price = Decimal("9.99")
        latte.save()
        item.refresh_from_db()
        assert item.unit_price == Decimal("4.00")
        assert item.subtotal == Decimal("8.00")

    def test_zero_quantity_fails_clean(self, espresso):
        order = Order.objects.create(customer_name="John")
        item = OrderItem(
            order=order, product=espresso, quantity=0, unit_price=Decimal("2.50")
        )
        with pytest.raises(ValidationError):
            item.clean()

    def test_items_keep_insertion_order(self, espresso, latte):
        order = Order.objects.create(customer_name="John")
        OrderItem.objects.create(order=order, product=latte, quantity=1)
        OrderItem.objects.create(order=order, product=espresso, quantity=1)
        assert [i.product.name for i in order.items.all()] == ["Latte", "Espresso"]

    def test_deleting_order_cascades_to_items(self, espresso):
        order = Order.objects.create(customer_name="John")
        OrderItem.objects.create(order=order, product=espresso, quantity=1)
        order.delete()
        assert OrderItem.objects.count() == 0
