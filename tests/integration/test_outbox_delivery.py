"""Integration tests for outbox delivery after commit.

Order events are written in the business transaction and handed to the
notification handlers by ``deliver_outbox_event`` once it commits.
Delivery is at-most-once: a failing handler marks the row FAILED and the
business data stays committed.
"""

from __future__ import annotations

from smtplib import SMTPException
from unittest.mock import patch
from uuid import uuid4

import pytest

from modules.carts.models import CartLine
from modules.carts.repositories.django_repository import CartDjangoRepository
from modules.core.models import EventStatus, OutboxEvent
from modules.core.tasks import deliver_outbox_event
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.items.inventory import InventoryLedger
from modules.items.repositories.django_repository import ItemDjangoRepository
from modules.orders.models import Order
from modules.orders.payments import RazorpaySignatureVerifier
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderPlacementService

pytestmark = pytest.mark.integration


@pytest.fixture()
def placement():
    return OrderPlacementService(
        order_repository=OrderDjangoRepository(),
        cart_repository=CartDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        ledger=InventoryLedger(ItemDjangoRepository()),
        payment_gateway=RazorpaySignatureVerifier(),
    )


def test_placed_order_is_mailed_after_commit(
    placement, customer, item, place_dto, mailoutbox, django_capture_on_commit_callbacks
):
    CartLine.objects.create(cart=customer.cart, item=item, quantity=1)

    with django_capture_on_commit_callbacks(execute=True):
        order = placement.place_order(customer.id, place_dto())

    event = OutboxEvent.objects.get(event_type="OrderPlaced", aggregate_id=str(order.id))
    assert event.status == EventStatus.PUBLISHED
    assert event.processed_at is not None
    assert sorted(m.to[0] for m in mailoutbox) == ["owner@bakery.test", customer.email]


def test_nothing_is_sent_before_commit(placement, customer, item, place_dto, mailoutbox):
    CartLine.objects.create(cart=customer.cart, item=item, quantity=1)

    placement.place_order(customer.id, place_dto())

    assert mailoutbox == []
    assert OutboxEvent.objects.get(event_type="OrderPlaced").status == EventStatus.PENDING


def test_failing_mail_marks_event_and_keeps_order(
    placement, customer, item, place_dto, mailoutbox, django_capture_on_commit_callbacks
):
    CartLine.objects.create(cart=customer.cart, item=item, quantity=1)

    with patch("modules.orders.notifications.send_mail", side_effect=SMTPException("relay refused")):
        with django_capture_on_commit_callbacks(execute=True):
            order = placement.place_order(customer.id, place_dto())

    event = OutboxEvent.objects.get(event_type="OrderPlaced")
    assert event.status == EventStatus.FAILED
    assert "relay refused" in event.error_message
    assert event.retry_count == 1
    assert Order.objects.filter(id=order.id).exists()


def test_processed_event_is_not_delivered_twice(
    placement, customer, item, place_dto, mailoutbox, django_capture_on_commit_callbacks
):
    CartLine.objects.create(cart=customer.cart, item=item, quantity=1)
    with django_capture_on_commit_callbacks(execute=True):
        placement.place_order(customer.id, place_dto())
    sent = len(mailoutbox)

    event = OutboxEvent.objects.get(event_type="OrderPlaced")
    assert deliver_outbox_event(str(event.id)) == {"status": "skipped"}
    assert len(mailoutbox) == sent


def test_missing_event():
    assert deliver_outbox_event(str(uuid4())) == {"status": "missing"}
