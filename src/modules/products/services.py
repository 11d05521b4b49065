"""Product service layer (catalogue reads).

Read-only access to the café catalogue, delegating persistence to the
injected ``IProductRepository``.  Prices and IDs are returned exactly as
stored; a missing product is reported as ``None``, not as an error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for catalogue look-ups.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    def list_products(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> QuerySet[Product]:
        """Return all products, optionally filtered, as a lazy QuerySet."""
        return self._repo.list(filters)

    def get_product(self, id: int) -> Optional[Product]:
        """Retrieve a single product by ID, or ``None`` if it does not exist."""
        product = self._repo.get_by_id(id)
        if product is None:
            logger.info("product.not_found", product_id=id)
            return None
        logger.info("product.retrieved", product_id=product.id)
        return product
