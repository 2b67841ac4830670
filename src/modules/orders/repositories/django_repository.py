"""Django ORM implementation of the Order repository.

Domain events collected on the aggregate are written to the outbox by
``save`` and ``remove``, inside the caller's transaction.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Prefetch

from modules.core.outbox import record_events
from modules.orders.constants import EVENT_TOPIC
from modules.orders.models import Order, OrderLine
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


def _with_relations(queryset):
    return queryset.select_related("customer").prefetch_related(
        Prefetch("lines", queryset=OrderLine.objects.order_by("created_at"))
    )


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        order = Order(**data)
        order.save()
        logger.info("order.header_created", order_id=str(order.id), order_number=order.order_number)
        return order

    def add_line(self, order: Order, data: Dict[str, Any]) -> OrderLine:
        return OrderLine.objects.create(order=order, **data)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Order with customer and lines loaded; ``None`` for unknown ids."""
        try:
            return _with_relations(Order.objects.filter(id=id)).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        try:
            return _with_relations(Order.objects.select_for_update().filter(id=id)).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        queryset = _with_relations(Order.objects.all())
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_for_customer(self, customer_id: str) -> List[Order]:
        return self.list({"customer_id": customer_id})

    # ------------------------------------------------------------------
    # Save / Delete
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()
        events = record_events(entity, topic=EVENT_TOPIC)
        logger.info("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity

    @transaction.atomic
    def remove(self, order: Order) -> None:
        order_id = str(order.id)
        events = record_events(order, topic=EVENT_TOPIC)
        order.delete()
        logger.info("order.deleted", order_id=order_id, event_count=len(events))

    @transaction.atomic
    def delete(self, id: str) -> bool:
        order = self.get_by_id(id)
        if not order:
            return False
        self.remove(order)
        return True
