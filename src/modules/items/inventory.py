"""Inventory Ledger: the only writer of item stock counters.

Every mutation runs on a row locked with ``SELECT ... FOR UPDATE`` inside
the caller's transaction; nothing is reconciled in the background.

Rules enforced:
- A ``None`` or ``REGULAR`` variant targets ``regular_stock``; ``EGGLESS``
  targets ``eggless_stock``.
- Deductions clamp at zero instead of failing (best-effort consistency);
  callers that must not oversell check availability first.
- ``available`` turns off once both counters are exhausted and turns back
  on only when a restore leaves positive stock.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Optional

import structlog
from django.db import transaction

from modules.core.exceptions import ValidationFailed
from modules.items.constants import Variant
from modules.items.exceptions import InsufficientStock, ItemNotFound, ItemUnavailable

if TYPE_CHECKING:
    from modules.items.models import Item
    from modules.items.repositories.interfaces import IItemRepository

logger = structlog.get_logger(__name__)


def _stock_field(variant: Optional[str]) -> str:
    return "eggless_stock" if variant == Variant.EGGLESS else "regular_stock"


def _require_positive(quantity: int) -> None:
    if quantity is None or quantity < 1:
        raise ValidationFailed("Quantity must be at least 1.")


class InventoryLedger:
    """Stock counters per item and variant."""

    def __init__(self, item_repository: IItemRepository) -> None:
        self._item_repo = item_repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def check_availability(self, item_id: str, quantity: int, variant: Optional[str] = None) -> Item:
        """Ensure *quantity* units of *variant* can be sold.

        Raises:
            ItemNotFound: the item does not exist.
            ItemUnavailable: the item is flagged unavailable.
            InsufficientStock: the variant's counter is below *quantity*.
        """
        item = self._item_repo.get_by_id(str(item_id))
        if item is None:
            raise ItemNotFound(f"Item {item_id} not found.")
        self.ensure_available(item, quantity, variant)
        return item

    @staticmethod
    def ensure_available(item: Item, quantity: int, variant: Optional[str] = None) -> None:
        """Availability rules applied to an already loaded item."""
        if not item.available:
            raise ItemUnavailable(f"Item '{item.name}' is currently unavailable.")
        in_stock = item.stock_for(variant)
        if in_stock < quantity:
            label = "Eggless" if variant == Variant.EGGLESS else "Regular"
            raise InsufficientStock(
                f"Insufficient {label} stock for item '{item.name}'. "
                f"Available: {in_stock}, Requested: {quantity}."
            )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def lock_items(self, item_ids: Iterable[str]) -> Dict[str, Item]:
        """Lock every referenced item (primary-key order) for this transaction."""
        return self._item_repo.lock_many(item_ids)

    @transaction.atomic
    def deduct(self, item_id: str, quantity: int, variant: Optional[str] = None) -> Item:
        """Decrease the variant's counter, clamping at zero.

        Raises:
            ItemNotFound: the item does not exist.
            ValidationFailed: *quantity* is not positive.
        """
        _require_positive(quantity)
        item = self._locked(item_id)

        field = _stock_field(variant)
        before = getattr(item, field)
        after = max(0, before - quantity)
        setattr(item, field, after)
        item.sync_availability()
        item.save(update_fields=[field, "available"])

        log = logger.bind(item_id=str(item.id), field=field, requested=quantity)
        if before < quantity:
            log.warning("inventory.deduction_clamped", before=before)
        log.info("inventory.deducted", remaining=after, available=item.available)
        return item

    @transaction.atomic
    def restore(self, item_id: str, quantity: int, variant: Optional[str] = None) -> Item:
        """Put *quantity* units back on the variant's counter.

        Raises:
            ItemNotFound: the item does not exist.
            ValidationFailed: *quantity* is not positive.
        """
        _require_positive(quantity)
        item = self._locked(item_id)

        field = _stock_field(variant)
        restored = getattr(item, field) + quantity
        setattr(item, field, restored)
        if restored > 0:
            item.available = True
        item.save(update_fields=[field, "available"])

        logger.info(
            "inventory.restored",
            item_id=str(item.id),
            field=field,
            quantity=quantity,
            stock=restored,
        )
        return item

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _locked(self, item_id: str) -> Item:
        item = self._item_repo.get_for_update(str(item_id))
        if item is None:
            raise ItemNotFound(f"Item {item_id} not found.")
        return item
