"""Unit tests for order emails and their event handlers."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.orders.events import OrderAddressChanged, OrderDelivered, OrderPlaced
from modules.orders.handlers import OrderDeliveredHandler, OrderPlacedHandler
from modules.orders.notifications import OrderNotifier

pytestmark = pytest.mark.unit


def _placed() -> OrderPlaced:
    return OrderPlaced(
        aggregate_id=uuid4(),
        order_number="ORD-20260101-ABC123",
        customer_name="Priya",
        customer_email="priya@example.com",
        total_amount="760.00",
        delivery_address="12 MG Road, Pune",
        delivery_phone="9876543210",
        lines=(
            {"item_name": "Truffle Cake", "quantity": 1, "unit_price": "680.00", "variant": "EGGLESS"},
            {"item_name": "Croissant", "quantity": 1, "unit_price": "80.00", "variant": None},
        ),
    )


def test_placed_handler_mails_customer_and_admin(mailoutbox):
    OrderPlacedHandler(OrderNotifier(admin_email="owner@bakery.test")).handle(_placed())

    assert [m.to for m in mailoutbox] == [["priya@example.com"], ["owner@bakery.test"]]
    assert "ORD-20260101-ABC123" in mailoutbox[0].subject
    assert "Truffle Cake (Eggless) x1 @ 680.00" in mailoutbox[0].body
    assert "Phone: 9876543210" in mailoutbox[1].body


def test_admin_mail_is_skipped_without_address(mailoutbox):
    handler = OrderDeliveredHandler(OrderNotifier(admin_email=""))
    handler.handle(
        OrderDelivered(
            aggregate_id=uuid4(),
            order_number="ORD-20260101-ABC123",
            customer_name="Priya",
            customer_email="priya@example.com",
            total_amount="760.00",
            history_id=str(uuid4()),
        )
    )

    assert len(mailoutbox) == 1
    assert mailoutbox[0].to == ["priya@example.com"]


def test_address_change_lists_old_and_new_values(mailoutbox):
    OrderNotifier(admin_email="owner@bakery.test").address_changed_to_admin(
        OrderAddressChanged(
            aggregate_id=uuid4(),
            order_number="ORD-20260101-ABC123",
            customer_name="Priya",
            old_address="12 MG Road, Pune",
            new_address="4 FC Road, Pune",
            old_phone="9876543210",
            new_phone="9123456780",
            new_latitude=18.52,
            new_longitude=73.85,
        )
    )

    body = mailoutbox[0].body
    assert "Old address: 12 MG Road, Pune" in body
    assert "New address: 4 FC Road, Pune" in body
    assert "New location: 18.52, 73.85" in body
