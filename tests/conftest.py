"""
Pytest configuration and fixtures for the retail POS platform.
"""

from decimal import Decimal

import pytest

from apps.core.models import User

TEST_PASSWORD = "Register-Pass-2024"


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def administrator(django_user_model):
    return django_user_model.objects.create_user(
        username="admin1",
        email="admin1@retailpos.test",
        password=TEST_PASSWORD,
        role=User.ADMINISTRATOR,
    )


@pytest.fixture
def manager(django_user_model):
    return django_user_model.objects.create_user(
        username="manager1",
        email="manager1@retailpos.test",
        password=TEST_PASSWORD,
        role=User.MANAGER,
        first_name="Maria",
        last_name="Santos",
    )


@pytest.fixture
def cashier(django_user_model):
    return django_user_model.objects.create_user(
        username="cashier1",
        email="cashier1@retailpos.test",
        password=TEST_PASSWORD,
        role=User.CASHIER,
        first_name="Carl",
        last_name="Reyes",
    )


def _client_for(user):
    from rest_framework.test import APIClient

    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def administrator_client(administrator):
    """API client authenticated as an administrator."""
    return _client_for(administrator)


@pytest.fixture
def manager_client(manager):
    """API client authenticated as a manager."""
    return _client_for(manager)


@pytest.fixture
def cashier_client(cashier):
    """API client authenticated as a cashier."""
    return _client_for(cashier)


@pytest.fixture
def category():
    from apps.inventory.models import Category

    return Category.objects.create(name="Beverages", description="Drinks and juices")


@pytest.fixture
def product(category):
    """In-stock product well above its thresholds."""
    from apps.inventory.models import Product

    return Product.objects.create(
        name="Orange Juice 1L",
        sku="BEV-001",
        price=Decimal("10.00"),
        category=category,
        barcode="4800000000011",
        stock=20,
        low_stock_threshold=5,
        reorder_point=10,
    )


@pytest.fixture
def second_product(category):
    from apps.inventory.models import Product

    return Product.objects.create(
        name="Mineral Water 500ml",
        sku="BEV-002",
        price=Decimal("2.50"),
        category=category,
        stock=100,
        low_stock_threshold=10,
        reorder_point=20,
    )


@pytest.fixture
def make_sale(cashier):
    """
    Factory fixture creating a completed transaction through the sale service.

    Usage:
        txn = make_sale([(product, 2)])
    """
    from apps.sales.services import create_transaction

    def _make_sale(items, **kwargs):
        kwargs.setdefault("customer_name", "Jane Doe")
        kwargs.setdefault("customer_email", "")
        kwargs.setdefault("user", cashier)
        return create_transaction(items=items, **kwargs)

    return _make_sale
