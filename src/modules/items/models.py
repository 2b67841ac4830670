"""Catalog item with per-variant stock counters.

Business rules implemented:
- Stock counters (``regular_stock``, ``eggless_stock``) are never negative
  (``PositiveIntegerField`` + check constraints).
- ``available`` is forced to ``False`` whenever both counters are exhausted
  (``sync_availability``); it is never forced ``True`` without stock.
- Variable-weight goods carry a weight → price mapping (``price_per_kg``)
  used to pin a cart line's price when the client did not send one.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.items.constants import Variant

logger = structlog.get_logger(__name__)


class Item(BaseModel):
    """Catalog item aggregate root."""

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    regular_stock = models.PositiveIntegerField(default=0)
    eggless_stock = models.PositiveIntegerField(default=0)
    has_eggless_option = models.BooleanField(default=False)
    available = models.BooleanField(default=True)
    featured = models.BooleanField(default=False)
    price_per_kg = models.JSONField(null=True, blank=True, default=None)

    class Meta:
        db_table = "items"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["available"], name="items_available_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(regular_stock__gte=0),
                name="items_regular_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(eggless_stock__gte=0),
                name="items_eggless_stock_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Stock helpers
    # ------------------------------------------------------------------

    def stock_for(self, variant: Optional[str]) -> int:
        """Counter backing *variant* (``None`` means the regular recipe)."""
        if variant == Variant.EGGLESS:
            return self.eggless_stock
        return self.regular_stock

    @property
    def is_sold_out(self) -> bool:
        return self.regular_stock <= 0 and self.eggless_stock <= 0

    def sync_availability(self) -> None:
        """Flip ``available`` off once every counter is exhausted."""
        if self.is_sold_out:
            self.available = False

    # ------------------------------------------------------------------
    # Pricing helpers
    # ------------------------------------------------------------------

    def weight_price(self, weight: Optional[Decimal]) -> Optional[Decimal]:
        """Price listed in ``price_per_kg`` for *weight*, if any.

        Keys are stored as strings (``"1"``, ``"1.5"``); they are compared
        numerically so ``"1.50"`` and ``Decimal("1.5")`` match.
        """
        if weight is None or not self.price_per_kg:
            return None
        for key, value in self.price_per_kg.items():
            try:
                if Decimal(str(key)) == Decimal(str(weight)):
                    return Decimal(str(value)).quantize(Decimal("0.01"))
            except InvalidOperation:
                logger.warning("item.invalid_weight_price", item_id=str(self.id), key=key)
        return None

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})
        if self.price_per_kg is not None and not isinstance(self.price_per_kg, dict):
            raise ValidationError({"price_per_kg": "Must be a weight to price mapping."})

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.name} (regular={self.regular_stock}, eggless={self.eggless_stock})"
