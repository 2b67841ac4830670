"""Coupon repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.coupons.models import Coupon


class ICouponRepository(IRepository["Coupon"]):
    @abstractmethod
    def get_by_code(self, code: str, for_update: bool = False) -> Optional[Coupon]:
        """Coupon by (case-insensitive) code; optionally row-locked."""

    @abstractmethod
    def increment_usage(self, coupon: Coupon) -> Coupon:
        """Add exactly one use to a locked coupon."""
