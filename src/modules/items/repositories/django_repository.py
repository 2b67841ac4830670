"""Django ORM implementation of the Item repository.

Missing or malformed IDs resolve to ``None``; the Inventory Ledger
decides how to report a missing item.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.items.models import Item
from modules.items.repositories.interfaces import IItemRepository

logger = structlog.get_logger(__name__)


class ItemDjangoRepository(IItemRepository):
    """Concrete Item repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Item]:
        try:
            return Item.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Item]:
        """``SELECT ... FOR UPDATE`` on a single item row."""
        try:
            return Item.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def lock_many(self, ids: Iterable[str]) -> Dict[str, Item]:
        """Lock item rows sorted by primary key to avoid deadlocks."""
        unique_ids = sorted({str(i) for i in ids})
        if not unique_ids:
            return {}
        items = Item.objects.select_for_update().filter(id__in=unique_ids).order_by("id")
        return {str(item.id): item for item in items}

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Item]:
        queryset = Item.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Item) -> Item:
        entity.save()
        logger.info(
            "item.saved",
            item_id=str(entity.id),
            regular_stock=entity.regular_stock,
            eggless_stock=entity.eggless_stock,
            available=entity.available,
        )
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete an item.  Order lines keep their snapshot names."""
        deleted, _ = Item.objects.filter(id=id).delete()
        if deleted:
            logger.info("item.deleted", item_id=str(id))
        return bool(deleted)
