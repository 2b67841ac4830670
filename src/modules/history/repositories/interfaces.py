"""Order history repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.history.models import OrderHistory


class IOrderHistoryRepository(IRepository["OrderHistory"]):
    """Append-only store of delivered orders."""

    @abstractmethod
    def create(self, data: Dict[str, Any], lines: List[Dict[str, Any]]) -> OrderHistory:
        """Insert a history record with its lines."""

    @abstractmethod
    def list_for_customer(self, customer_id: str) -> List[OrderHistory]:
        """History of one customer, most recent delivery first."""

    @abstractmethod
    def item_referenced(self, item_id: str) -> bool:
        """Whether any history line carries *item_id*."""
