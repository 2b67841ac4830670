"""Django ORM implementation of the order history repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError

from modules.history.models import OrderHistory, OrderHistoryLine
from modules.history.repositories.interfaces import IOrderHistoryRepository

logger = structlog.get_logger(__name__)


class OrderHistoryDjangoRepository(IOrderHistoryRepository):
    def create(self, data: Dict[str, Any], lines: List[Dict[str, Any]]) -> OrderHistory:
        history = OrderHistory.objects.create(**data)
        OrderHistoryLine.objects.bulk_create(
            [OrderHistoryLine(history=history, **line) for line in lines]
        )
        return history

    def get_by_id(self, id: str) -> Optional[OrderHistory]:
        try:
            return OrderHistory.objects.prefetch_related("lines").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[OrderHistory]:
        queryset = OrderHistory.objects.prefetch_related("lines")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_for_customer(self, customer_id: str) -> List[OrderHistory]:
        try:
            return self.list({"customer_id": customer_id})
        except (ValueError, ValidationError):
            return []

    def item_referenced(self, item_id: str) -> bool:
        return OrderHistoryLine.objects.filter(item_id=item_id).exists()

    def save(self, entity: OrderHistory) -> OrderHistory:
        # History is append-only; only new records are accepted.
        if not entity._state.adding:
            raise ValueError("Order history records are immutable.")
        entity.save()
        return entity

    def delete(self, id: str) -> bool:
        raise ValueError("Order history records cannot be deleted.")
