"""Unit tests for order statuses, the transition table and order DTOs."""

from __future__ import annotations

import pytest

from modules.orders.constants import VALID_TRANSITIONS, OrderStatus, parse_status
from modules.orders.dtos import PlaceOrderDTO, UpdateAddressDTO
from modules.orders.models import Order

pytestmark = pytest.mark.unit


class TestParseStatus:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Confirmed", OrderStatus.CONFIRMED),
            ("out for delivery", OrderStatus.OUT_FOR_DELIVERY),
            ("OUT_FOR_DELIVERY", OrderStatus.OUT_FOR_DELIVERY),
            (" delivered ", OrderStatus.DELIVERED),
        ],
    )
    def test_known_spellings(self, raw, expected):
        assert parse_status(raw) == expected

    def test_unknown_status(self):
        with pytest.raises(ValueError):
            parse_status("Baking")


class TestTransitions:
    def test_confirmed_can_move_forward(self):
        order = Order(status=OrderStatus.CONFIRMED)
        assert order.can_transition_to(OrderStatus.OUT_FOR_DELIVERY)
        assert order.can_transition_to(OrderStatus.DELIVERED)
        assert order.is_cancellable

    def test_no_way_back(self):
        order = Order(status=OrderStatus.OUT_FOR_DELIVERY)
        assert not order.can_transition_to(OrderStatus.CONFIRMED)
        assert not order.is_cancellable

    def test_delivered_only_allows_redelivery(self):
        assert VALID_TRANSITIONS[OrderStatus.DELIVERED] == {OrderStatus.DELIVERED}
        assert Order(status=OrderStatus.DELIVERED).address_locked

    def test_cancelled_is_terminal(self):
        assert VALID_TRANSITIONS[OrderStatus.CANCELLED] == set()

    def test_order_number_format(self, customer):
        order = Order.objects.create(
            customer=customer,
            customer_name="Priya",
            delivery_address="12 MG Road, Pune",
            delivery_phone="9876543210",
            payment_id="pay_1",
            payment_order_id="order_1",
            payment_signature="sig",
            payment_verified=True,
        )
        assert order.order_number.startswith("ORD-")
        assert len(order.order_number) == len("ORD-20260101-ABCDEF")


class TestOrderDTOs:
    def test_place_order_validates_phone(self, place_payload):
        with pytest.raises(ValueError, match="10-15 digits"):
            PlaceOrderDTO(**place_payload(delivery_phone="98765-4321"))

    def test_place_order_validates_address_length(self, place_payload):
        with pytest.raises(ValueError, match="Address"):
            PlaceOrderDTO(**place_payload(delivery_address="Pune"))

    def test_place_order_requires_payment_fields(self, place_payload):
        with pytest.raises(ValueError, match="Payment"):
            PlaceOrderDTO(**place_payload(payment_signature="  "))

    @pytest.mark.parametrize(
        ("field", "limit"),
        [("payment_id", 100), ("payment_order_id", 100), ("payment_signature", 255)],
    )
    def test_payment_fields_fit_their_columns(self, place_payload, field, limit):
        assert PlaceOrderDTO(**place_payload(**{field: "p" * limit}))
        with pytest.raises(ValueError, match=f"exceed {limit}"):
            PlaceOrderDTO(**place_payload(**{field: "p" * (limit + 1)}))

    def test_address_coordinates_need_both_values(self):
        dto = UpdateAddressDTO(
            delivery_address="221B Baker Street, Pune",
            delivery_phone="9876543210",
            latitude=18.52,
        )
        assert not dto.has_coordinates
