"""Integration tests for the read-only product API."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration


@pytest.fixture()
def sold_out():
    return Product.objects.create(
        name="Muffin",
        description="Blueberry muffin",
        price=Decimal("2.50"),
        stock_quantity=0,
    )


class TestProductList:
    def test_list_empty(self, api_client):
        response = api_client.get("/api/v1/products/")
        assert response.status_code == 200
        assert response.data["count"] == 0
        assert response.data["results"] == []

    def test_list_returns_products_in_id_order(self, api_client, espresso, latte):
        response = api_client.get("/api/v1/products/")
        assert response.status_code == 200
        assert [p["id"] for p in response.data["results"]] == [espresso.id, latte.id]

    def test_list_uses_camel_case_and_stored_prices(self, api_client, espresso):
        response = api_client.get("/api/v1/products/")
        product = response.json()["results"][0]
        assert product == {
            "id": espresso.id,
            "name": "Espresso",
            "description": "Strong Italian coffee",
            "price": "2.50",
            "stockQuantity": 100,
        }

    def test_filter_by_name(self, api_client, espresso, latte):
        response = api_client.get("/api/v1/products/", {"name": "lat"})
        assert [p["name"] for p in response.data["results"]] == ["Latte"]

    def test_filter_by_price_range(self, api_client, espresso, latte):
        response = api_client.get(
            "/api/v1/products/", {"min_price": "3.00", "max_price": "5.00"}
        )
        assert [p["name"] for p in response.data["results"]] == ["Latte"]

    def test_filter_in_stock(self, api_client, espresso, sold_out):
        response = api_client.get("/api/v1/products/", {"in_stock": "true"})
        assert [p["name"] for p in response.data["results"]] == ["Espresso"]

        response = api_client.get("/api/v1/products/", {"in_stock": "false"})
        assert [p["name"] for p in response.data["results"]] == ["Muffin"]

    def test_ordering_by_price(self, api_client, espresso, latte):
        response = api_client.get("/api/v1/products/", {"ordering": "-price"})
        assert [p["name"] for p in response.data["results"]] == ["Latte", "Espresso"]

    def test_list_goes_through_product_service(self, api_client, espresso, latte):
        with patch(
            "modules.products.views.ProductService.list_products",
            return_value=Product.objects.filter(name="Latte"),
        ) as list_products:
            response = api_client.get("/api/v1/products/", {"ordering": "-price"})

        list_products.assert_called_once_with()
        assert [p["name"] for p in response.data["results"]] == ["Latte"]


class TestProductRetrieve:
    def test_retrieve_success(self, api_client, espresso, latte):
        response = api_client.get(f"/api/v1/products/{latte.id}/")
        assert response.status_code == 200
        assert response.data["id"] == latte.id
        assert response.data["name"] == "Latte"
        assert response.data["price"] == "4.00"

    def test_retrieve_not_found(self, api_client):
        response = api_client.get("/api/v1/products/999999/")
        assert response.status_code == 404
        assert response.data["detail"] == "Product not found."

    def test_retrieve_malformed_id(self, api_client):
        response = api_client.get("/api/v1/products/abc/")
        assert response.status_code == 404


class TestProductReadOnly:
    def test_create_not_allowed(self, api_client):
        response = api_client.post(
            "/api/v1/products/", {"name": "Tea", "price": "1.00"}, format="json"
        )
        assert response.status_code == 405
