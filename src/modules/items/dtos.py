"""Item DTOs for the Service Layer.

- ``CreateItemDTO``: input for catalog item creation (seeding, admin tooling).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class CreateItemDTO(BaseModel):
    """Immutable DTO for item creation.

    Validates:
    - ``name`` is not blank.
    - ``price`` is not negative.
    - stock counters are not negative.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal
    description: str = ""
    regular_stock: int = 0
    eggless_stock: int = 0
    has_eggless_option: bool = False
    featured: bool = False
    price_per_kg: Optional[Dict[str, Decimal]] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("regular_stock", "eggless_stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock cannot be negative.")
        return v

    def price_table(self) -> Optional[Dict[str, str]]:
        """``price_per_kg`` in its JSON form (string keys and values)."""
        if self.price_per_kg is None:
            return None
        return {str(weight): str(price) for weight, price in self.price_per_kg.items()}
