"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising HTTP-level exceptions — the Service Layer decides
how to translate a missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import structlog
from django.db.models import F, QuerySet
from django.utils import timezone

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return Product.objects.filter(id=int(id)).first()
        except (TypeError, ValueError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Product]:
        """List products with optional Django ORM look-ups.

        Returns a lazy QuerySet so the API layer can still paginate, filter
        and order it.

        Examples of valid filters::

            {"stock_quantity__gt": 0}
            {"name__icontains": "latte"}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def lock_many(self, ids: Iterable[int]) -> Dict[int, Product]:
        ordered_ids = sorted(set(ids))
        products = (
            Product.objects.select_for_update()
            .filter(id__in=ordered_ids)
            .order_by("id")
        )
        return {product.id: product for product in products}

    def decrement_stock(self, id: int, quantity: int) -> bool:
        updated = Product.objects.filter(id=id, stock_quantity__gte=quantity).update(
            stock_quantity=F("stock_quantity") - quantity,
            updated_at=timezone.now(),
        )
        if not updated:
            logger.warning(
                "product.stock_guard_rejected", product_id=id, quantity=quantity
            )
        return updated == 1
