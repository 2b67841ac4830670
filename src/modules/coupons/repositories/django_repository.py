"""Django ORM implementation of the Coupon repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from modules.coupons.models import Coupon
from modules.coupons.repositories.interfaces import ICouponRepository

logger = structlog.get_logger(__name__)


class CouponDjangoRepository(ICouponRepository):
    def get_by_id(self, id: str) -> Optional[Coupon]:
        try:
            return Coupon.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_code(self, code: str, for_update: bool = False) -> Optional[Coupon]:
        queryset = Coupon.objects.filter(code=Coupon.normalize_code(code))
        if for_update:
            queryset = queryset.select_for_update()
        return queryset.first()

    def increment_usage(self, coupon: Coupon) -> Coupon:
        Coupon.objects.filter(id=coupon.id).update(usage_count=F("usage_count") + 1)
        coupon.refresh_from_db(fields=["usage_count"])
        logger.info("coupon.usage_incremented", code=coupon.code, usage_count=coupon.usage_count)
        return coupon

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Coupon]:
        queryset = Coupon.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Coupon) -> Coupon:
        entity.save()
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Coupon.objects.filter(id=id).delete()
        return bool(deleted)
