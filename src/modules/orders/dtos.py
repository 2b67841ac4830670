"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2; immutable
(``frozen=True``).

- ``PlaceOrderDTO``: delivery details plus the payment confirmation.
- ``UpdateAddressDTO``: new delivery details for a live order.
- ``UpdateStatusDTO``: requested status for the state machine.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator, model_validator

PHONE_PATTERN = re.compile(r"^[0-9]{10,15}$")

# Column widths of the payment fields on ``Order``.
PAYMENT_FIELD_MAX_LENGTH = {
    "payment_id": 100,
    "payment_order_id": 100,
    "payment_signature": 255,
}


def _phone(v: str) -> str:
    v = (v or "").strip()
    if not PHONE_PATTERN.match(v):
        raise ValueError("Phone number must be 10-15 digits.")
    return v


def _address(v: str) -> str:
    v = (v or "").strip()
    if not 10 <= len(v) <= 500:
        raise ValueError("Address must be between 10 and 500 characters.")
    return v


class PlaceOrderDTO(BaseModel):
    """Immutable DTO for order placement.

    Validates:
    - ``customer_name``: 2 to 100 characters.
    - ``delivery_address``: 10 to 500 characters.
    - ``delivery_phone``: 10 to 15 digits.
    - ``delivery_notes``: at most 500 characters.
    - payment ids and signature are not blank and fit their columns.
    """

    model_config = ConfigDict(frozen=True)

    customer_name: str
    delivery_address: str
    delivery_phone: str
    delivery_notes: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    payment_id: str
    payment_order_id: str
    payment_signature: str

    @field_validator("customer_name")
    @classmethod
    def name_length(cls, v: str) -> str:
        v = (v or "").strip()
        if not 2 <= len(v) <= 100:
            raise ValueError("Name must be between 2 and 100 characters.")
        return v

    @field_validator("delivery_address")
    @classmethod
    def address_length(cls, v: str) -> str:
        return _address(v)

    @field_validator("delivery_phone")
    @classmethod
    def phone_digits(cls, v: str) -> str:
        return _phone(v)

    @field_validator("delivery_notes")
    @classmethod
    def notes_length(cls, v: Optional[str]) -> str:
        v = v or ""
        if len(v) > 500:
            raise ValueError("Notes must not exceed 500 characters.")
        return v

    @field_validator("payment_id", "payment_order_id", "payment_signature")
    @classmethod
    def payment_field_required(cls, v: str, info: ValidationInfo) -> str:
        if not v or not v.strip():
            raise ValueError("Payment confirmation fields are required.")
        v = v.strip()
        limit = PAYMENT_FIELD_MAX_LENGTH[info.field_name]
        if len(v) > limit:
            raise ValueError(f"Must not exceed {limit} characters.")
        return v


class UpdateAddressDTO(BaseModel):
    """Coordinates are only applied when both are supplied."""

    model_config = ConfigDict(frozen=True)

    delivery_address: str
    delivery_phone: str
    delivery_notes: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("delivery_address")
    @classmethod
    def address_length(cls, v: str) -> str:
        return _address(v)

    @field_validator("delivery_phone")
    @classmethod
    def phone_digits(cls, v: str) -> str:
        return _phone(v)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class UpdateStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str

    @model_validator(mode="after")
    def status_not_blank(self) -> UpdateStatusDTO:
        if not self.status or not self.status.strip():
            raise ValueError("Field 'status' is required.")
        return self
