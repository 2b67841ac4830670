from __future__ import annotations

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.customers.dtos import RegisterCustomerDTO
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerService
from modules.items.models import Item
from modules.orders.constants import OrderStatus
from modules.orders.dtos import PlaceOrderDTO
from modules.orders.models import Order, OrderLine
from modules.orders.payments import RazorpaySignatureVerifier

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


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


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_item():
    def _make(**overrides) -> Item:
        defaults = {
            "name": "Butter Croissant",
            "price": Decimal("80.00"),
            "regular_stock": 10,
            "eggless_stock": 0,
        }
        defaults.update(overrides)
        return Item.objects.create(**defaults)

    return _make


@pytest.fixture()
def item(make_item):
    return make_item()


@pytest.fixture()
def cake(make_item):
    """Eggless-capable cake sold by weight."""
    return make_item(
        name="Chocolate Truffle Cake",
        price=Decimal("650.00"),
        regular_stock=5,
        eggless_stock=3,
        has_eggless_option=True,
        price_per_kg={"0.5": "650.00", "1": "1200.00"},
    )


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_customer():
    service = CustomerService(repository=CustomerDjangoRepository())

    def _make(username: str = "priya", email: str | None = None, **overrides):
        user = User.objects.create_user(username=username, password="testpass123")
        dto = RegisterCustomerDTO(
            name=overrides.pop("name", username.title()),
            email=email or f"{username}@example.com",
            phone=overrides.pop("phone", "9876543210"),
            address=overrides.pop("address", "12 MG Road, Pune"),
            user_id=user.pk,
        )
        return service.register_customer(dto)

    return _make


@pytest.fixture()
def customer(make_customer):
    """Registered customer (with an empty cart) linked to a user account."""
    return make_customer()


@pytest.fixture()
def customer_client(api_client, customer):
    api_client.force_authenticate(user=customer.user)
    return api_client


@pytest.fixture()
def staff_client(api_client):
    staff = User.objects.create_user(username="owner", password="testpass123", is_staff=True)
    api_client.force_authenticate(user=staff)
    return api_client


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


def sign(payment_order_id: str, payment_id: str) -> str:
    return RazorpaySignatureVerifier().expected_signature(
        payment_order_id, payment_id
    )


@pytest.fixture()
def place_payload():
    """Valid checkout payload with a correctly signed payment."""

    def _payload(**overrides) -> dict:
        payload = {
            "customer_name": "Priya Sharma",
            "delivery_address": "12 MG Road, Camp, Pune 411001",
            "delivery_phone": "9876543210",
            "delivery_notes": "",
            "payment_id": "pay_test_001",
            "payment_order_id": "order_test_001",
        }
        payload.update(overrides)
        payload.setdefault(
            "payment_signature",
            sign(payload["payment_order_id"], payload["payment_id"]),
        )
        return payload

    return _payload


@pytest.fixture()
def place_dto(place_payload):
    def _dto(**overrides) -> PlaceOrderDTO:
        return PlaceOrderDTO(**place_payload(**overrides))

    return _dto


@pytest.fixture()
def make_order():
    """Persist a live order directly, bypassing checkout."""

    def _make(customer, lines, status: str = OrderStatus.CONFIRMED) -> Order:
        order = Order.objects.create(
            customer=customer,
            status=status,
            customer_name=customer.name,
            delivery_address="12 MG Road, Camp, Pune 411001",
            delivery_phone="9876543210",
            payment_id="pay_fixture",
            payment_order_id="order_fixture",
            payment_signature="signature_fixture",
            payment_verified=True,
        )
        for line_item, quantity, variant in lines:
            OrderLine.objects.create(
                order=order,
                item=line_item,
                item_name=line_item.name,
                quantity=quantity,
                unit_price=line_item.price,
                variant=variant,
            )
        order.total_amount = order.calculate_total()
        order.save(update_fields=["total_amount"])
        return order

    return _make
