"""Order repository interface.

Extends ``IRepository[Order]`` with what the Order aggregate needs:
line creation, row locking and removal of a live order together with
its pending domain events.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderLine


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root (Order + OrderLines)."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Insert an order header (lines are added with ``add_line``)."""

    @abstractmethod
    def add_line(self, order: Order, data: Dict[str, Any]) -> OrderLine:
        """Insert one order line snapshot."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Order with a row-level lock (SELECT FOR UPDATE), lines loaded."""

    @abstractmethod
    def list_for_customer(self, customer_id: str) -> List[Order]:
        """Live orders of one customer, newest first."""

    @abstractmethod
    def remove(self, order: Order) -> None:
        """Store the order's pending events, then hard-delete it."""
