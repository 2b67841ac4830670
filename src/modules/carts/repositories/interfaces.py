"""Cart repository interface."""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.carts.models import Cart, CartLine


class ICartRepository(IRepository["Cart"]):
    """Repository contract for the Cart aggregate and its lines."""

    @abstractmethod
    def get_by_customer(self, customer_id: str, for_update: bool = False) -> Optional[Cart]:
        """Cart with lines and items prefetched; optionally row-locked."""

    @abstractmethod
    def get_line(self, cart: Cart, line_id: str) -> Optional[CartLine]:
        """Line *line_id* only if it belongs to *cart*."""

    @abstractmethod
    def find_line(
        self,
        cart: Cart,
        item_id: str,
        variant: Optional[str],
        weight: Optional[Decimal],
    ) -> Optional[CartLine]:
        """Exact null-safe match on (item, variant, weight)."""

    @abstractmethod
    def save_line(self, line: CartLine) -> CartLine:
        """Persist a cart line."""

    @abstractmethod
    def delete_line(self, line: CartLine) -> None:
        """Remove a cart line."""

    @abstractmethod
    def clear(self, cart: Cart) -> int:
        """Remove every line; returns how many were deleted."""
