"""Coupon evaluation exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound, ValidationFailed


class InvalidCoupon(NotFound):
    """No coupon exists with the given code."""


class CouponError(ValidationFailed):
    """The coupon exists but cannot be applied to this order."""


class CouponInactive(CouponError):
    pass


class CouponExpired(CouponError):
    """Now is outside the coupon's validity window."""


class MinimumNotMet(CouponError):
    pass


class UsageLimitReached(CouponError):
    pass
