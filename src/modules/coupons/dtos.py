"""Coupon DTOs for the Service Layer."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator


class CouponRequestDTO(BaseModel):
    """Code and order amount for a discount preview or application."""

    model_config = ConfigDict(frozen=True)

    code: str
    order_amount: Decimal

    @field_validator("code")
    @classmethod
    def code_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Coupon code is required.")
        return v.strip().upper()

    @field_validator("order_amount")
    @classmethod
    def amount_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Order amount cannot be negative.")
        return v


class DiscountDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    order_amount: Decimal
    discount: Decimal

    @property
    def payable_amount(self) -> Decimal:
        return max(self.order_amount - self.discount, Decimal("0.00"))
