"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: input for a single order line.
- ``CreateOrderDTO``: input for order creation (nested lines).
- ``OrderItemOutputDTO``: output for a single line item.
- ``OrderOutputDTO``: output with items.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterable, List, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from modules.orders.exceptions import InvalidRequest

if TYPE_CHECKING:
    from modules.orders.models import Order

# Upper bound of the BigAutoField primary keys.
MAX_PRODUCT_ID = 2**63 - 1


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single line in an order request.

    The client sends ``product_id`` and ``quantity``.
    ``unit_price`` is resolved by the Service Layer from the catalogue.
    Two lines may name the same product; each consumes stock on its own.
    """

    model_config = ConfigDict(frozen=True)

    product_id: int
    quantity: int

    @field_validator("product_id")
    @classmethod
    def product_id_must_be_in_range(cls, v: int) -> int:
        if not 1 <= v <= MAX_PRODUCT_ID:
            raise ValueError("Product id is out of range.")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Validates:
    - ``customer_name`` is not blank (surrounding whitespace is stripped).
    - ``items`` must contain at least one line.
    - Each line quantity must be positive.
    """

    model_config = ConfigDict(frozen=True)

    customer_name: str
    items: List[CreateOrderItemDTO]

    @field_validator("customer_name")
    @classmethod
    def customer_name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Customer name must not be empty.")
        return v.strip()

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v

    @classmethod
    def from_payload(
        cls, customer_name: Any, items: Iterable[Mapping[str, Any]]
    ) -> CreateOrderDTO:
        """Build a DTO from raw request values.

        Raises:
            InvalidRequest: with the first validation message, when the
                payload does not describe a valid order.
        """
        try:
            return cls(
                customer_name=customer_name,
                items=[
                    CreateOrderItemDTO(
                        product_id=item.get("product_id"),
                        quantity=item.get("quantity"),
                    )
                    for item in items
                ],
            )
        except ValidationError as exc:
            raise InvalidRequest(_first_message(exc)) from exc


def _first_message(exc: ValidationError) -> str:
    error = exc.errors()[0]
    message = error["msg"]
    # Pydantic prefixes messages raised from validators.
    if message.startswith("Value error, "):
        message = message[len("Value error, ") :]
    field = ".".join(str(part) for part in error.get("loc", ()))
    return f"{field}: {message}" if field else message


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderItemOutputDTO(BaseModel):
    """Immutable DTO for a persisted order line."""

    model_config = ConfigDict(frozen=True)

    id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class OrderOutputDTO(BaseModel):
    """Immutable DTO for a persisted order, used by the seed command and logs."""

    model_config = ConfigDict(frozen=True)

    id: int
    customer_name: str
    order_date: datetime
    total_amount: Decimal
    items: List[OrderItemOutputDTO]

    @classmethod
    def from_entity(cls, order: Order) -> OrderOutputDTO:
        """Build an output DTO from an Order model instance.

        Assumes ``items`` (with ``product``) are prefetched.
        """
        items = [
            OrderItemOutputDTO(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product.name,  # type: ignore[attr-defined]
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=item.subtotal,
            )
            for item in order.items.all()
        ]
        return cls(
            id=order.id,
            customer_name=order.customer_name,
            order_date=order.order_date,
            total_amount=order.total_amount,
            items=items,
        )
