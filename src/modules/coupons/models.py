"""Discount coupons.

Business rules implemented:
- ``code`` is unique and stored upper-case.
- ``usage_limit`` of 0 means unlimited; otherwise ``usage_count`` never
  exceeds it (check constraint plus the locked increment in the service).
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q

from modules.core.models import BaseModel
from modules.coupons.constants import DiscountType


class Coupon(BaseModel):
    code = models.CharField(max_length=50, unique=True)
    description = models.CharField(max_length=255, blank=True, default="")
    discount_type = models.CharField(max_length=10, choices=DiscountType.choices)
    discount_value = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    min_order_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    max_discount_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    valid_from = models.DateTimeField()
    valid_until = models.DateTimeField()
    active = models.BooleanField(default=True)
    usage_limit = models.PositiveIntegerField(default=0)
    usage_count = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "coupons"
        ordering = ["code"]
        constraints = [
            models.CheckConstraint(
                condition=Q(usage_limit=0) | Q(usage_count__lte=F("usage_limit")),
                name="coupons_usage_within_limit",
            ),
        ]

    @staticmethod
    def normalize_code(code: str) -> str:
        return (code or "").strip().upper()

    @property
    def is_exhausted(self) -> bool:
        return self.usage_limit > 0 and self.usage_count >= self.usage_limit

    def is_valid_at(self, moment) -> bool:
        return self.valid_from <= moment <= self.valid_until

    def save(self, *args, **kwargs) -> None:
        self.code = self.normalize_code(self.code)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.code
