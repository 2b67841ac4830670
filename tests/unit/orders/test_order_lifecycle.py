"""Unit tests for OrderLifecycleService.

Covers:
- update_status: forward moves, invalid moves, unknown statuses, delivery
  archives the order (including a re-sent Delivered).
- cancel: ownership, cancellable status only, variant-aware restore,
  lines whose item was deleted.
- update_address: ownership, delivered orders locked, partial updates.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.core.exceptions import InvalidTransition, Unauthorized, ValidationFailed
from modules.core.models import OutboxEvent
from modules.history.archive import OrderArchive
from modules.history.models import OrderHistory
from modules.items.constants import Variant
from modules.items.inventory import InventoryLedger
from modules.items.repositories.django_repository import ItemDjangoRepository
from modules.orders.constants import OrderStatus
from modules.orders.dtos import UpdateAddressDTO
from modules.orders.exceptions import OrderNotFound
from modules.orders.models import Order, OrderLine
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderLifecycleService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    order_repo = OrderDjangoRepository()
    return OrderLifecycleService(
        order_repository=order_repo,
        ledger=InventoryLedger(ItemDjangoRepository()),
        archive=OrderArchive(order_repository=order_repo),
    )


@pytest.fixture()
def order(customer, cake, make_order):
    return make_order(customer, [(cake, 2, None), (cake, 1, Variant.EGGLESS)])


class TestUpdateStatus:
    def test_out_for_delivery(self, service, order):
        updated = service.update_status(order.id, "Out for Delivery")

        assert updated.status == OrderStatus.OUT_FOR_DELIVERY
        order.refresh_from_db()
        assert order.status == OrderStatus.OUT_FOR_DELIVERY
        assert OutboxEvent.objects.filter(
            event_type="OrderOutForDelivery", aggregate_id=str(order.id)
        ).exists()

    def test_status_name_spelling_is_accepted(self, service, order):
        assert service.update_status(order.id, "OUT_FOR_DELIVERY").status == OrderStatus.OUT_FOR_DELIVERY

    def test_backwards_move_is_refused(self, service, customer, cake, make_order):
        order = make_order(customer, [(cake, 1, None)], status=OrderStatus.OUT_FOR_DELIVERY)
        with pytest.raises(InvalidTransition):
            service.update_status(order.id, "Confirmed")
        order.refresh_from_db()
        assert order.status == OrderStatus.OUT_FOR_DELIVERY

    def test_cancelled_goes_through_cancel(self, service, order):
        with pytest.raises(InvalidTransition):
            service.update_status(order.id, "Cancelled")

    def test_unknown_status(self, service, order):
        with pytest.raises(ValidationFailed):
            service.update_status(order.id, "Baking")

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.update_status(uuid4(), "Delivered")

    def test_delivered_archives_the_order(self, service, order):
        result = service.update_status(order.id, "Delivered")

        assert isinstance(result, OrderHistory)
        assert result.source_order_id == order.id
        assert result.status == OrderStatus.DELIVERED
        assert not Order.objects.filter(id=order.id).exists()
        assert OutboxEvent.objects.filter(event_type="OrderDelivered").count() == 1

    def test_resending_delivered_retries_archival(self, service, customer, cake, make_order):
        stuck = make_order(customer, [(cake, 1, None)], status=OrderStatus.DELIVERED)

        result = service.update_status(stuck.id, "Delivered")

        assert isinstance(result, OrderHistory)
        with pytest.raises(OrderNotFound):
            service.get_order(stuck.id)


class TestCancel:
    def test_restores_stock_per_variant_and_deletes(self, service, customer, cake, order):
        service.cancel(order.id, customer.id)

        cake.refresh_from_db()
        assert (cake.regular_stock, cake.eggless_stock) == (7, 4)
        assert not Order.objects.filter(id=order.id).exists()
        event = OutboxEvent.objects.get(event_type="OrderCancelled")
        assert event.payload["order_number"] == order.order_number
        assert event.payload["customer_email"] == customer.email

    def test_out_for_delivery_cannot_be_cancelled(self, service, customer, cake, make_order):
        order = make_order(customer, [(cake, 2, None)], status=OrderStatus.OUT_FOR_DELIVERY)

        with pytest.raises(InvalidTransition):
            service.cancel(order.id, customer.id)

        cake.refresh_from_db()
        order.refresh_from_db()
        assert cake.regular_stock == 5
        assert order.status == OrderStatus.OUT_FOR_DELIVERY

    def test_only_the_owner_may_cancel(self, service, make_customer, order):
        other = make_customer("arjun")
        with pytest.raises(Unauthorized):
            service.cancel(order.id, other.id)
        assert Order.objects.filter(id=order.id).exists()

    def test_lines_of_deleted_items_are_skipped(self, service, customer, item, cake, make_order):
        order = make_order(customer, [(item, 1, None), (cake, 1, None)])
        OrderLine.objects.filter(order=order, item=item).update(item=None)

        service.cancel(order.id, customer.id)

        cake.refresh_from_db()
        assert cake.regular_stock == 6


class TestUpdateAddress:
    def _dto(self, **overrides) -> UpdateAddressDTO:
        data = {
            "delivery_address": "Flat 4, Koregaon Park, Pune 411001",
            "delivery_phone": "9123456780",
        }
        data.update(overrides)
        return UpdateAddressDTO(**data)

    def test_overwrites_address_and_phone(self, service, customer, order):
        updated = service.update_address(order.id, customer.id, self._dto())

        assert updated.delivery_address == "Flat 4, Koregaon Park, Pune 411001"
        assert updated.delivery_phone == "9123456780"
        event = OutboxEvent.objects.get(event_type="OrderAddressChanged")
        assert event.payload["old_address"] == "12 MG Road, Camp, Pune 411001"

    def test_notes_and_coordinates_only_when_given(self, service, customer, order):
        Order.objects.filter(id=order.id).update(delivery_notes="Ring twice", latitude=1.0, longitude=2.0)

        updated = service.update_address(order.id, customer.id, self._dto(latitude=18.5))

        assert updated.delivery_notes == "Ring twice"
        assert (updated.latitude, updated.longitude) == (1.0, 2.0)

        updated = service.update_address(
            order.id, customer.id, self._dto(delivery_notes="", latitude=18.5, longitude=73.8)
        )
        assert updated.delivery_notes == ""
        assert (updated.latitude, updated.longitude) == (18.5, 73.8)

    def test_delivered_order_is_locked(self, service, customer, cake, make_order):
        order = make_order(customer, [(cake, 1, None)], status=OrderStatus.DELIVERED)
        with pytest.raises(InvalidTransition):
            service.update_address(order.id, customer.id, self._dto())

    def test_only_the_owner_may_update(self, service, make_customer, order):
        other = make_customer("arjun")
        with pytest.raises(Unauthorized):
            service.update_address(order.id, other.id, self._dto())
