"""Order service layer (Use Cases).

Orchestrates order placement.  All writes happen in one database
transaction (the service owns the unit-of-work boundary), so an
order either commits whole (order, items, stock decrements) or leaves
no trace.

Rules enforced:
- Every referenced product must exist.
- Stock never goes negative: each line is checked against the stock
  still remaining inside this transaction, and product rows are locked
  (SELECT FOR UPDATE, ascending id) for the whole read-validate-decrement
  step.
- ``unit_price`` is snapshotted from the catalogue; line totals are
  ``unit_price * quantity`` in ``Decimal``.
- Items are stored in request order.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Dict, List, Optional

import structlog
from django.conf import settings
from django.db import DatabaseError, transaction

from modules.orders.exceptions import (
    InsufficientStock,
    ProductNotFound,
    StockConflict,
    TransientStorageFailure,
)

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        max_conflict_retries: Optional[int] = None,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        if max_conflict_retries is None:
            max_conflict_retries = settings.ORDER_CONFLICT_MAX_RETRIES
        self._max_attempts = max(1, max_conflict_retries + 1)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Place an order, reserving stock for every line atomically.

        Steps:
        1. Lock all referenced product rows (sorted by PK to avoid deadlocks).
        2. For each line, in request order:
           - Validate the product exists.
           - Validate enough stock remains.
           - Snapshot the current price and reserve the quantity.
        3. Apply the stock decrements (guarded against going negative).
        4. Persist order + items; the total is the sum of line subtotals.

        A lost stock race (guard refused a decrement) rolls the attempt
        back and re-runs it from step 1, at most ``max_conflict_retries``
        times.

        Raises:
            ProductNotFound: a line references an unknown product.
            InsufficientStock: a line asks for more than remains.
            StockConflict: stock kept changing under us; retries exhausted.
            TransientStorageFailure: the database failed to commit.
        """
        log = logger.bind(customer_name=dto.customer_name, line_count=len(dto.items))
        log.info("order.creation_started")

        conflict: Optional[StockConflict] = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                order = self._place(dto, log)
            except StockConflict as exc:
                conflict = exc
                log.warning("order.stock_conflict", attempt=attempt, error=str(exc))
                continue
            except (ProductNotFound, InsufficientStock) as exc:
                log.warning("order.rejected", reason=type(exc).__name__, error=str(exc))
                raise
            except DatabaseError as exc:
                log.error("order.storage_failure", attempt=attempt, exc_info=True)
                raise TransientStorageFailure(
                    "The order could not be stored; please retry."
                ) from exc

            log.info(
                "order.created",
                order_id=order.id,
                total_amount=str(order.total_amount),
                attempt=attempt,
            )
            # Re-fetch with prefetch for output
            return self._order_repo.get_by_id(order.id) or order

        raise StockConflict(
            f"Stock kept changing after {self._max_attempts} attempts."
        ) from conflict

    def _place(self, dto: CreateOrderDTO, log: BoundLogger) -> Order:
        with transaction.atomic():
            products = self._product_repo.lock_many(
                item.product_id for item in dto.items
            )
            remaining: Dict[int, int] = {
                product_id: product.stock_quantity
                for product_id, product in products.items()
            }
            reserved: Dict[int, int] = defaultdict(int)
            repo_items: List[dict] = []

            for item_dto in dto.items:
                product = products.get(item_dto.product_id)
                if product is None:
                    raise ProductNotFound(item_dto.product_id)

                available = remaining[product.id]
                if available < item_dto.quantity:
                    raise InsufficientStock(
                        product_id=product.id,
                        available=available,
                        requested=item_dto.quantity,
                    )

                remaining[product.id] = available - item_dto.quantity
                reserved[product.id] += item_dto.quantity
                line_total = product.price * item_dto.quantity

                log.info(
                    "order.stock_reserved",
                    product_id=product.id,
                    quantity=item_dto.quantity,
                    remaining=remaining[product.id],
                    line_total=str(line_total),
                )

                repo_items.append(
                    {
                        "product_id": product.id,
                        "quantity": item_dto.quantity,
                        "unit_price": product.price,
                    }
                )

            for product_id in sorted(reserved):
                if not self._product_repo.decrement_stock(
                    product_id, reserved[product_id]
                ):
                    raise StockConflict(
                        f"Stock for product {product_id} changed during the order."
                    )

            return self._order_repo.create(
                {
                    "customer_name": dto.customer_name,
                    "items": repo_items,
                }
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: int) -> Optional[Order]:
        """Retrieve a single order with its items, or ``None`` if absent."""
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            logger.info("order.not_found", order_id=order_id)
        return order
