"""Catalog and inventory exceptions.

Raised by the Inventory Ledger and the item service.  The API layer
translates them through ``modules.core.exceptions``.
"""

from __future__ import annotations

from modules.core.exceptions import Conflict, NotFound


class ItemNotFound(NotFound):
    """The requested catalog item does not exist."""


class InsufficientStock(Conflict):
    """The variant's stock counter is below the requested quantity."""


class ItemUnavailable(Conflict):
    """The item is flagged unavailable and cannot be sold."""


class ItemInActiveOrders(Conflict):
    """The item is still referenced by orders that have not been delivered."""
