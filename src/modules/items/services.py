"""Item service layer (Use Cases).

Catalog CRUD lives outside the fulfillment core; this service only covers
what the core needs: creating items and deleting them safely.

Business rules enforced here:
- An item referenced by a live order cannot be deleted.
- Deleting an item removes it from every cart.  Order lines keep their
  snapshot and lose the link; history lines only ever held a copy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import transaction

from modules.items.exceptions import ItemInActiveOrders, ItemNotFound
from modules.items.models import Item

if TYPE_CHECKING:
    from modules.items.dtos import CreateItemDTO
    from modules.items.repositories.interfaces import IItemRepository

logger = structlog.get_logger(__name__)


class ItemService:
    """Application service for Item use-cases."""

    def __init__(self, repository: IItemRepository) -> None:
        self._repo = repository

    @transaction.atomic
    def create_item(self, dto: CreateItemDTO) -> Item:
        item = Item(
            name=dto.name,
            description=dto.description,
            price=dto.price,
            regular_stock=dto.regular_stock,
            eggless_stock=dto.eggless_stock,
            has_eggless_option=dto.has_eggless_option,
            featured=dto.featured,
            price_per_kg=dto.price_table(),
        )
        item.sync_availability()
        item = self._repo.save(item)
        logger.info("item.created", item_id=str(item.id), name=item.name)
        return item

    @transaction.atomic
    def delete_item(self, item_id: str) -> None:
        """Delete an item that no live order references.

        Raises:
            ItemNotFound: the item does not exist.
            ItemInActiveOrders: a live order still contains the item.
        """
        from modules.carts.models import CartLine
        from modules.history.archive import OrderArchive
        from modules.orders.models import OrderLine

        item = self._repo.get_for_update(str(item_id))
        if item is None:
            raise ItemNotFound(f"Item {item_id} not found.")

        log = logger.bind(item_id=str(item.id))

        live_orders = OrderLine.objects.filter(item_id=item.id).values("order_id").distinct().count()
        if live_orders:
            log.warning("item.delete_refused", live_orders=live_orders)
            raise ItemInActiveOrders(
                f"Item '{item.name}' is part of {live_orders} active order(s) and cannot be deleted."
            )

        if OrderArchive().is_item_referenced(item.id):
            log.info("item.referenced_by_history")

        removed_lines, _ = CartLine.objects.filter(item_id=item.id).delete()
        self._repo.delete(str(item.id))
        log.info("item.deleted_from_catalog", cart_lines_removed=removed_lines)
