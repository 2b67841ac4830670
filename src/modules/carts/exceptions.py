"""Cart domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class CartNotFound(NotFound):
    """The customer has no cart (carts are created at registration)."""


class CartLineNotFound(NotFound):
    """The line does not exist in the requesting customer's cart."""
