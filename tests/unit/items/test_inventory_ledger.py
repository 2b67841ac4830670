"""Unit tests for the Inventory Ledger.

Covers:
- check_availability per variant (regular / eggless / unknown item).
- deduct: variant routing, clamping at zero, availability flag.
- restore: variant routing, availability comes back with stock.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.core.exceptions import ValidationFailed
from modules.items.constants import Variant
from modules.items.exceptions import InsufficientStock, ItemNotFound, ItemUnavailable
from modules.items.inventory import InventoryLedger
from modules.items.repositories.django_repository import ItemDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def ledger():
    return InventoryLedger(ItemDjangoRepository())


class TestCheckAvailability:
    def test_regular_stock_is_enough(self, ledger, cake):
        assert ledger.check_availability(cake.id, 5).id == cake.id

    def test_eggless_uses_its_own_counter(self, ledger, cake):
        ledger.check_availability(cake.id, 3, Variant.EGGLESS)
        with pytest.raises(InsufficientStock, match="Insufficient Eggless stock"):
            ledger.check_availability(cake.id, 4, Variant.EGGLESS)

    def test_message_reports_available_and_requested(self, ledger, item):
        with pytest.raises(InsufficientStock) as exc_info:
            ledger.check_availability(item.id, 11)
        assert "Available: 10, Requested: 11" in str(exc_info.value)

    def test_unavailable_item_is_refused(self, ledger, make_item):
        hidden = make_item(available=False)
        with pytest.raises(ItemUnavailable):
            ledger.check_availability(hidden.id, 1)

    def test_unknown_item(self, ledger):
        with pytest.raises(ItemNotFound):
            ledger.check_availability(uuid4(), 1)


class TestDeduct:
    def test_decrements_regular_counter(self, ledger, cake):
        ledger.deduct(cake.id, 2)
        cake.refresh_from_db()
        assert cake.regular_stock == 3
        assert cake.eggless_stock == 3

    def test_decrements_eggless_counter(self, ledger, cake):
        ledger.deduct(cake.id, 1, Variant.EGGLESS)
        cake.refresh_from_db()
        assert cake.eggless_stock == 2
        assert cake.regular_stock == 5

    def test_clamps_at_zero(self, ledger, item):
        ledger.deduct(item.id, 25)
        item.refresh_from_db()
        assert item.regular_stock == 0

    def test_item_sold_out_when_every_counter_is_zero(self, ledger, item):
        ledger.deduct(item.id, 10)
        item.refresh_from_db()
        assert item.available is False

    def test_item_stays_available_while_other_variant_has_stock(self, ledger, cake):
        ledger.deduct(cake.id, 5)
        cake.refresh_from_db()
        assert cake.regular_stock == 0
        assert cake.available is True

    def test_rejects_non_positive_quantity(self, ledger, item):
        with pytest.raises(ValidationFailed):
            ledger.deduct(item.id, 0)

    def test_unknown_item(self, ledger):
        with pytest.raises(ItemNotFound):
            ledger.deduct(uuid4(), 1)


class TestRestore:
    def test_increments_the_variant_counter(self, ledger, cake):
        ledger.restore(cake.id, 2, Variant.EGGLESS)
        cake.refresh_from_db()
        assert cake.eggless_stock == 5
        assert cake.regular_stock == 5

    def test_sold_out_item_becomes_available_again(self, ledger, item):
        ledger.deduct(item.id, 10)
        ledger.restore(item.id, 1)
        item.refresh_from_db()
        assert item.regular_stock == 1
        assert item.available is True

    def test_rejects_non_positive_quantity(self, ledger, item):
        with pytest.raises(ValidationFailed):
            ledger.restore(item.id, -1)
