from decimal import Decimal

import pytest

from rest_framework.test import APIClient

from modules.products.models import Product


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def espresso():
    return Product.objects.create(
        name="Espresso",
        description="Strong Italian coffee",
        price=Decimal("2.50"),
        stock_quantity=100,
    )


@pytest.fixture()
def latte():
    return Product.objects.create(
        name="Latte",
        description="Espresso with steamed milk",
        price=Decimal("4.00"),
        stock_quantity=50,
    )
