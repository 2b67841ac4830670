"""Item repository interface.

Extends ``IRepository[Item]`` with the row-locking look-ups the
Inventory Ledger needs for its read-then-write stock updates.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.items.models import Item


class IItemRepository(IRepository["Item"]):
    """Repository contract for the Item aggregate."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Item]:
        """Retrieve an item with a row-level lock held until commit."""

    @abstractmethod
    def lock_many(self, ids: Iterable[str]) -> Dict[str, Item]:
        """Lock several items in primary-key order, keyed by ``str(id)``."""
