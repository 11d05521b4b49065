"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from typing import Any, Optional

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.reverse import reverse
from rest_framework.viewsets import GenericViewSet

from modules.orders.dtos import CreateOrderDTO
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidRequest,
    ProductNotFound,
    TransientStorageFailure,
)
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import CreateOrderSerializer, OrderSerializer
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


class OrderViewSet(GenericViewSet):
    """ViewSet for order placement and look-up.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet`` — all ORM access goes through
    the service/repository layer.  Orders cannot be edited or listed.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Body: ``{"customerName": str, "items": [{"productId": int,
        "quantity": int}]}``.  Returns 201 with the persisted order.
        """
        create_serializer = CreateOrderSerializer(data=request.data)
        if not create_serializer.is_valid():
            return Response(
                {
                    "detail": _first_error(create_serializer.errors),
                    "errors": create_serializer.errors,
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        data = create_serializer.validated_data

        try:
            dto = CreateOrderDTO.from_payload(data["customer_name"], data["items"])
            order = self._service.create_order(dto)
        except InvalidRequest as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except ProductNotFound as exc:
            return Response(
                {"detail": str(exc), "productId": exc.product_id},
                status=status.HTTP_404_NOT_FOUND,
            )
        except InsufficientStock as exc:
            return Response(
                {
                    "detail": str(exc),
                    "productId": exc.product_id,
                    "available": exc.available,
                    "requested": exc.requested,
                },
                status=status.HTTP_409_CONFLICT,
            )
        except TransientStorageFailure as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
                headers={"Retry-After": "1"},
            )

        out = OrderSerializer(order)
        location = reverse("order-detail", kwargs={"pk": order.id}, request=request)
        return Response(
            out.data,
            status=status.HTTP_201_CREATED,
            headers={"Location": location},
        )

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(pk) if pk is not None else None
        if order is None:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        serializer = OrderSerializer(order)
        return Response(serializer.data)


def _first_error(errors: Any, prefix: str = "") -> Optional[str]:
    """Flatten DRF's nested field errors into one ``"field: message"`` line.

    Nested paths are dotted (``items.0.productId``), matching the
    messages ``CreateOrderDTO.from_payload`` produces.
    """
    if isinstance(errors, dict):
        for key, value in errors.items():
            message = _first_error(value, f"{prefix}{key}.")
            if message:
                return message
    elif isinstance(errors, list):
        for index, value in enumerate(errors):
            if isinstance(value, (dict, list)):
                message = _first_error(value, f"{prefix}{index}.")
                if message:
                    return message
            else:
                field = prefix.rstrip(".")
                return f"{field}: {value}" if field else str(value)
    return None
