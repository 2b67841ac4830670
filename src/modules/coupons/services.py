"""Coupon Evaluator.

``calculate_discount`` is a read-only preview; ``apply_coupon`` runs the
same checks on a locked row, enforces the usage limit and records one use.

Discount rules:
- PERCENTAGE: amount × value / 100, capped at ``max_discount_amount``.
- FIXED: the coupon value.
- Results are rounded to two decimals (half up).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

import structlog
from django.db import transaction
from django.utils import timezone

from modules.coupons.constants import DiscountType
from modules.coupons.dtos import DiscountDTO
from modules.coupons.exceptions import (
    CouponExpired,
    CouponInactive,
    InvalidCoupon,
    MinimumNotMet,
    UsageLimitReached,
)

if TYPE_CHECKING:
    from modules.coupons.models import Coupon
    from modules.coupons.repositories.interfaces import ICouponRepository

logger = structlog.get_logger(__name__)

CENTS = Decimal("0.01")


class CouponService:
    def __init__(self, repository: ICouponRepository) -> None:
        self._repo = repository

    def calculate_discount(self, code: str, order_amount: Decimal) -> DiscountDTO:
        """Preview the discount without consuming a use.

        Raises:
            InvalidCoupon: unknown code.
            CouponInactive, CouponExpired, MinimumNotMet: the coupon does
                not apply to this order.
        """
        coupon = self._get(code)
        self._validate(coupon, order_amount)
        discount = self._discount(coupon, order_amount)
        logger.info("coupon.previewed", code=coupon.code, discount=str(discount))
        return DiscountDTO(code=coupon.code, order_amount=order_amount, discount=discount)

    @transaction.atomic
    def apply_coupon(self, code: str, order_amount: Decimal) -> DiscountDTO:
        """Consume one use of the coupon and return the discount.

        Raises:
            InvalidCoupon: unknown code.
            CouponInactive, CouponExpired, MinimumNotMet: the coupon does
                not apply to this order.
            UsageLimitReached: every allowed use is taken.
        """
        coupon = self._get(code, for_update=True)
        self._validate(coupon, order_amount)
        if coupon.is_exhausted:
            logger.warning("coupon.usage_limit_reached", code=coupon.code)
            raise UsageLimitReached("Coupon usage limit reached.")

        discount = self._discount(coupon, order_amount)
        self._repo.increment_usage(coupon)
        logger.info("coupon.applied", code=coupon.code, discount=str(discount))
        return DiscountDTO(code=coupon.code, order_amount=order_amount, discount=discount)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get(self, code: str, for_update: bool = False) -> Coupon:
        coupon = self._repo.get_by_code(code, for_update=for_update)
        if coupon is None:
            raise InvalidCoupon("Invalid coupon code.")
        return coupon

    @staticmethod
    def _validate(coupon: Coupon, order_amount: Decimal) -> None:
        if not coupon.active:
            raise CouponInactive("Coupon is not active.")
        if not coupon.is_valid_at(timezone.now()):
            raise CouponExpired("Coupon has expired or is not yet valid.")
        if order_amount < coupon.min_order_amount:
            raise MinimumNotMet(f"Minimum order amount: {coupon.min_order_amount}.")

    @staticmethod
    def _discount(coupon: Coupon, order_amount: Decimal) -> Decimal:
        if coupon.discount_type == DiscountType.PERCENTAGE:
            discount = order_amount * coupon.discount_value / Decimal("100")
            if coupon.max_discount_amount is not None:
                discount = min(discount, coupon.max_discount_amount)
        else:
            discount = coupon.discount_value
        return Decimal(discount).quantize(CENTS, rounding=ROUND_HALF_UP)
