"""Unit price resolution for cart lines and order lines."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.conf import settings

from modules.items.constants import is_eggless

DEFAULT_EGGLESS_SURCHARGE = Decimal("30.00")
CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PricingPolicy:
    """Pinned price wins; otherwise catalog price plus the eggless surcharge."""

    eggless_surcharge: Decimal = DEFAULT_EGGLESS_SURCHARGE

    @classmethod
    def from_settings(cls) -> PricingPolicy:
        surcharge = getattr(settings, "ORDER_EGGLESS_SURCHARGE", DEFAULT_EGGLESS_SURCHARGE)
        return cls(eggless_surcharge=Decimal(str(surcharge)))

    def unit_price(
        self,
        base_price: Decimal,
        variant: Optional[str],
        pinned_price: Optional[Decimal] = None,
    ) -> Decimal:
        if pinned_price is not None and pinned_price > 0:
            return Decimal(pinned_price).quantize(CENTS)
        price = Decimal(base_price)
        if is_eggless(variant):
            price += self.eggless_surcharge
        return price.quantize(CENTS)
