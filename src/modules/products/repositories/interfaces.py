"""Product repository interface.

Extends ``IRepository[Product]`` with the locking and stock primitives
the order service needs for atomic stock reservation.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db import models

    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product catalogue."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List products with optional filters."""

    @abstractmethod
    def lock_many(self, ids: Iterable[int]) -> Dict[int, "Product"]:
        """Retrieve products with row-level locks (SELECT FOR UPDATE).

        Rows are locked in ascending primary-key order so concurrent
        orders touching overlapping products cannot deadlock.  Missing
        IDs are simply absent from the returned mapping.  Must be called
        inside a transaction.
        """

    @abstractmethod
    def decrement_stock(self, id: int, quantity: int) -> bool:
        """Subtract ``quantity`` from stock unless it would go negative.

        Returns ``False`` when the guard refused the update, which means
        another transaction consumed the stock first.
        """
