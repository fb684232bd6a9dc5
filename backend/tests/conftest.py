"""
Pytest fixtures and configuration for Dukaan Seller Platform Backend tests

This file provides shared fixtures that can be used across all test modules.
Every fixture builds fresh in-memory repositories from the seed data, with
zero simulated latency and a seeded random source.

Author: TM3
Date: 2026-10-17
"""
import random
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import Container, get_container
from app.domain.order import (
    Order, OrderItem, OrderStatus, PaymentInfo, PaymentMethod, PaymentStatus, ShippingAddress,
)
from app.main import app
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.services.order_lifecycle_service import OrderLifecycleService
from app.services.order_processing_service import OrderProcessingService


@pytest.fixture
def rng():
    """Seeded random source so simulated gateways are reproducible"""
    return random.Random(42)


@pytest.fixture
def product_repo():
    return ProductRepository()


@pytest.fixture
def order_repo(rng):
    return OrderRepository(rng=rng)


@pytest.fixture
def processing_service(product_repo, rng):
    """
    OrderProcessingService over the seeded catalog

    Latency is zero; payments always succeed unless a test lowers the rate.
    """
    return OrderProcessingService(
        product_repo,
        rng=rng,
        latency_seconds=0,
        payment_latency_seconds=0,
        payment_success_rate=1.0,
    )


@pytest.fixture
def lifecycle_service(order_repo, processing_service):
    return OrderLifecycleService(order_repo, processing_service)


@pytest.fixture
def container(rng):
    """Application container with zero latency and no shipping aggregator"""
    container = Container(rng=rng, latency_seconds=0)
    container.processing_service.payment_success_rate = 1.0
    return container


@pytest.fixture
def client(container):
    """
    TestClient bound to a fresh container

    Scope: function (every test starts from the seed data)
    """
    app.dependency_overrides[get_container] = lambda: container
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def shipping_address():
    return ShippingAddress(
        name='Kavya Nair',
        phone='+91 99887 76655',
        street='12 Marine Drive',
        city='Kochi',
        state='Kerala',
        pincode='682001',
    )


@pytest.fixture
def make_order(shipping_address):
    """
    Factory for orders outside the seed data

    Usage: make_order(items=[...], total_amount=..., status=...)
    """
    def _make(items=None, total_amount=None, status=OrderStatus.PENDING, **overrides):
        items = items or [OrderItem(product_id='1', name='Cotton Kurti', quantity=1, price=Decimal('599'))]
        if total_amount is None:
            total_amount = sum((item.price * item.quantity for item in items), Decimal('0'))
        data = {
            'id': 'ORD900001',
            'customer_id': 'CUST9',
            'customer_name': 'Kavya Nair',
            'customer_phone': '+91 99887 76655',
            'items': items,
            'total_amount': Decimal(str(total_amount)),
            'status': status,
            'payment': PaymentInfo(status=PaymentStatus.PENDING, method=PaymentMethod.COD),
            'shipping_address': shipping_address,
            'created_at': datetime(2026, 1, 10, 10, 0, tzinfo=timezone.utc),
            'updated_at': datetime(2026, 1, 10, 10, 0, tzinfo=timezone.utc),
        }
        data.update(overrides)
        return Order(**data)

    return _make


@pytest.fixture
def sample_product_data():
    """
    Provides sample product data for tests
    """
    return {
        "name": "Block Print Bedsheet",
        "price": 1299,
        "description": "Hand block printed cotton bedsheet from Jaipur.",
        "category": "Home",
        "tags": ["Cotton", "Handmade"],
        "stock": 10,
    }
