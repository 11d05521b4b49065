"""Stock concurrency integration test.

Proves that concurrent calls to ``OrderService.create_order`` never
oversell: the read-validate-decrement step runs under a row lock
(``SELECT FOR UPDATE`` on PostgreSQL, an IMMEDIATE write lock on SQLite)
and the stock decrement is guarded by ``stock_quantity >= quantity``.

Scenario:
- Product "Espresso" with **stock = 9**.
- 10 threads attempt to buy 1 unit each simultaneously.
- Exactly 9 succeed, 1 raises ``InsufficientStock``.
- Final stock is 0 (never negative).

Uses ``TransactionTestCase`` so each thread can see committed data
and database locking behaves realistically.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal

from django.db import connection
from django.test import TransactionTestCase

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import InsufficientStock
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

logger = logging.getLogger(__name__)

INITIAL_STOCK = 9
NUM_WORKERS = 10


class TestStockConcurrency(TransactionTestCase):
    """Prove atomic stock reservation under concurrent load."""

    def setUp(self):
        self.product = Product.objects.create(
            name="Espresso",
            price=Decimal("2.50"),
            stock_quantity=INITIAL_STOCK,
        )

    def _create_order_in_thread(self, thread_id: int) -> str:
        """Attempt to create an order. Returns 'success' or 'insufficient'.

        Each thread gets its own DB connection via Django's per-thread
        connection handling and closes it when done.
        """
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        dto = CreateOrderDTO(
            customer_name=f"Customer {thread_id}",
            items=[CreateOrderItemDTO(product_id=self.product.id, quantity=1)],
        )
        try:
            service.create_order(dto)
            logger.info("Thread %d: order created successfully", thread_id)
            return "success"
        except InsufficientStock:
            logger.info("Thread %d: InsufficientStock (expected)", thread_id)
            return "insufficient"
        finally:
            connection.close()

    def _run_workers(self) -> list:
        results = []
        with ThreadPoolExecutor(max_workers=NUM_WORKERS) as pool:
            futures = {
                pool.submit(self._create_order_in_thread, i): i
                for i in range(NUM_WORKERS)
            }
            for future in as_completed(futures):
                results.append(future.result())
        return results

    def test_concurrent_orders_exhaust_stock(self):
        """10 threads buy 1 unit from stock=9: exactly 9 succeed."""
        results = self._run_workers()

        successes = results.count("success")
        failures = results.count("insufficient")

        self.assertEqual(
            successes,
            INITIAL_STOCK,
            f"Expected {INITIAL_STOCK} successes, got {successes}",
        )
        self.assertEqual(
            failures,
            NUM_WORKERS - INITIAL_STOCK,
            f"Expected {NUM_WORKERS - INITIAL_STOCK} failures, got {failures}",
        )

        self.product.refresh_from_db()
        self.assertEqual(
            self.product.stock_quantity,
            0,
            f"Stock should be 0, got {self.product.stock_quantity}",
        )
        self.assertEqual(Order.objects.count(), INITIAL_STOCK)

    def test_stock_never_negative(self):
        """Even under contention, stock_quantity >= 0 always holds."""
        results = self._run_workers()

        self.product.refresh_from_db()
        self.assertGreaterEqual(self.product.stock_quantity, 0)

        # initial = sold + remaining
        sold = results.count("success")
        remaining = self.product.stock_quantity
        self.assertEqual(
            INITIAL_STOCK,
            sold + remaining,
            f"Conservation violated: {INITIAL_STOCK} != {sold} + {remaining}",
        )
