"""Cart DTOs for the Service Layer.

- ``AddCartLineDTO``: input for adding (or merging) a cart line.
- ``UpdateCartLineDTO``: input for overwriting a line's quantity.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from modules.items.constants import normalize_variant

# Bounds of the ``CartLine`` decimal columns (two decimal places).
MAX_WEIGHT = Decimal("999.99")
MAX_PINNED_PRICE = Decimal("99999999.99")
CENT = Decimal("0.01")


def _fits_column(v: Optional[Decimal], maximum: Decimal, label: str) -> Optional[Decimal]:
    if v is None:
        return v
    if v > maximum:
        raise ValueError(f"{label} must not exceed {maximum}.")
    if v != v.quantize(CENT):
        raise ValueError(f"{label} allows at most 2 decimal places.")
    return v


class AddCartLineDTO(BaseModel):
    """Immutable DTO for cart additions.

    Validates:
    - ``quantity`` is at least 1.
    - ``variant`` is a known tag (``EGG`` is accepted for the regular recipe).
    - ``weight`` and ``pinned_price`` are positive when supplied and fit
      their columns (2 decimal places, at most 999.99 kg and 99999999.99).
    """

    model_config = ConfigDict(frozen=True)

    item_id: UUID
    quantity: int
    variant: Optional[str] = None
    weight: Optional[Decimal] = None
    pinned_price: Optional[Decimal] = None

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @field_validator("variant")
    @classmethod
    def variant_must_be_known(cls, v: Optional[str]) -> Optional[str]:
        return normalize_variant(v)

    @field_validator("weight")
    @classmethod
    def weight_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v <= 0:
            raise ValueError("Weight must be greater than zero.")
        return _fits_column(v, MAX_WEIGHT, "Weight")

    @field_validator("pinned_price")
    @classmethod
    def pinned_price_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v <= 0:
            raise ValueError("Price must be greater than zero.")
        return _fits_column(v, MAX_PINNED_PRICE, "Price")


class UpdateCartLineDTO(BaseModel):
    """Zero or a negative quantity removes the line."""

    model_config = ConfigDict(frozen=True)

    quantity: int
