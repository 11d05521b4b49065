"""Order and OrderItem models.

Rules implemented:
- OrderItem snapshots the product price at creation time (``unit_price``).
- OrderItem subtotal is always ``quantity * unit_price`` (calculated on save).
- Order total equals the sum of its item subtotals (set by the repository
  inside the creating transaction).
- Product FK uses PROTECT: a product with order history cannot be deleted.
- Deleting an Order cascades to its items.
- Orders are immutable once placed; there is no edit path.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel


class Order(BaseModel):
    """Order aggregate root.

    Items keep the order in which they were requested (``items`` is
    ordered by primary key, which follows insertion order).
    """

    customer_name: models.CharField = models.CharField(max_length=200)
    order_date: models.DateTimeField = models.DateTimeField(default=timezone.now)
    total_amount: models.DecimalField = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    class Meta:
        db_table = "orders"
        ordering = ["-order_date", "-id"]
        indexes = [
            models.Index(fields=["-order_date"], name="orders_order_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(customer_name=""),
                name="orders_customer_name_not_empty",
            ),
        ]

    def __str__(self) -> str:
        return f"Order #{self.pk} for {self.customer_name} ({self.total_amount})"


class OrderItem(BaseModel):
    """Line item linking an Order to a Product.

    ``unit_price`` is a **snapshot** of the product price at the time of
    purchase — it never changes even if the product price is updated later.
    ``subtotal`` is always ``quantity * unit_price``, recalculated on every save.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    unit_price: models.DecimalField = models.DecimalField(
        max_digits=18,
        decimal_places=2,
    )
    subtotal: models.DecimalField = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        editable=False,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    def save(self, *args: Any, **kwargs: Any) -> None:
        if self.unit_price is None:
            unit_price = getattr(self.product, "price", None)
            if unit_price is None:
                raise ValidationError({"unit_price": "Product price is required."})
            self.unit_price = unit_price
        self.subtotal = self.quantity * self.unit_price
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product} x{self.quantity} (${self.subtotal})"
