"""Order domain exceptions.

Raised by the Service Layer when an order cannot be placed.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderError(Exception):
    """Base class for order placement failures."""


class InvalidRequest(OrderError):
    """The request is malformed (empty customer name, bad quantity, no items)."""


class ProductNotFound(OrderError):
    """A product referenced by an order line does not exist."""

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found.")


class InsufficientStock(OrderError):
    """Not enough stock to fulfil an order line."""

    def __init__(self, product_id: int, available: int, requested: int) -> None:
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}."
        )


class TransientStorageFailure(OrderError):
    """The database failed to commit; the whole call may be retried.

    Retrying is not idempotent: there is no deduplication key, so a retry
    after an ambiguous failure can create a second order.
    """


class StockConflict(TransientStorageFailure):
    """Stock changed under a locked read; retries were exhausted."""
