"""Cart service layer (Use Cases).

Business rules enforced here:
- Adding an (item, variant, weight) combination already in the cart merges
  quantities; a supplied pinned price overwrites the old one.
- Stock is checked for the prospective line total before anything is
  written, so a failed add leaves the cart untouched.
- A new weight-priced line without a client price pins the catalog's
  ``price_per_kg`` entry for that weight.
- Line operations only reach lines of the requesting customer's cart.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import transaction

from modules.carts.exceptions import CartLineNotFound, CartNotFound
from modules.carts.models import CartLine
from modules.items.exceptions import ItemNotFound

if TYPE_CHECKING:
    from modules.carts.dtos import AddCartLineDTO, UpdateCartLineDTO
    from modules.carts.models import Cart
    from modules.carts.repositories.interfaces import ICartRepository
    from modules.items.inventory import InventoryLedger
    from modules.items.repositories.interfaces import IItemRepository

logger = structlog.get_logger(__name__)


class CartService:
    """Application service for the customer's cart.

    Receives the cart repository, the item repository and the Inventory
    Ledger via constructor injection.
    """

    def __init__(
        self,
        cart_repository: ICartRepository,
        item_repository: IItemRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._cart_repo = cart_repository
        self._item_repo = item_repository
        self._ledger = ledger

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, customer_id: str) -> Cart:
        """Cart with lines and items loaded.

        Raises:
            CartNotFound: the customer has no cart.
        """
        return self._load(customer_id)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_line(self, customer_id: str, dto: AddCartLineDTO) -> Cart:
        """Add a line or merge it into the matching one.

        Raises:
            CartNotFound: the customer has no cart.
            ItemNotFound: the item does not exist.
            ItemUnavailable: the item is flagged unavailable.
            InsufficientStock: the merged quantity exceeds the variant's stock.
        """
        cart = self._load(customer_id, for_update=True)
        log = logger.bind(
            customer_id=str(customer_id),
            item_id=str(dto.item_id),
            variant=dto.variant,
            weight=str(dto.weight) if dto.weight is not None else None,
        )

        item = self._item_repo.get_by_id(str(dto.item_id))
        if item is None:
            raise ItemNotFound(f"Item {dto.item_id} not found.")

        existing = self._cart_repo.find_line(cart, str(item.id), dto.variant, dto.weight)
        prospective = dto.quantity + (existing.quantity if existing else 0)
        self._ledger.ensure_available(item, prospective, dto.variant)

        if existing:
            existing.quantity = prospective
            if dto.pinned_price is not None:
                existing.pinned_price = dto.pinned_price
            self._cart_repo.save_line(existing)
            log.info("cart.line_merged", line_id=str(existing.id), quantity=prospective)
        else:
            pinned = dto.pinned_price
            if pinned is None and dto.weight is not None:
                pinned = item.weight_price(dto.weight)
            line = CartLine(
                cart=cart,
                item=item,
                quantity=dto.quantity,
                variant=dto.variant,
                weight=dto.weight,
                pinned_price=pinned,
            )
            self._cart_repo.save_line(line)
            log.info("cart.line_added", line_id=str(line.id), quantity=dto.quantity)

        return self._load(customer_id)

    @transaction.atomic
    def update_line(self, customer_id: str, line_id: str, dto: UpdateCartLineDTO) -> Cart:
        """Overwrite a line's quantity; ``<= 0`` deletes the line.

        The new quantity is validated against the stock of the line's own
        variant.

        Raises:
            CartNotFound: the customer has no cart.
            CartLineNotFound: the line is not in this customer's cart.
            ItemUnavailable, InsufficientStock: stock rules rejected it.
        """
        cart = self._load(customer_id, for_update=True)
        line = self._line(cart, line_id)
        log = logger.bind(customer_id=str(customer_id), line_id=str(line.id))

        if dto.quantity <= 0:
            self._cart_repo.delete_line(line)
            log.info("cart.line_removed_by_update")
            return self._load(customer_id)

        self._ledger.ensure_available(line.item, dto.quantity, line.variant)
        line.quantity = dto.quantity
        self._cart_repo.save_line(line)
        log.info("cart.line_updated", quantity=dto.quantity)
        return self._load(customer_id)

    @transaction.atomic
    def remove_line(self, customer_id: str, line_id: str) -> Cart:
        """Delete a line unconditionally and return the reloaded cart.

        Raises:
            CartNotFound: the customer has no cart.
            CartLineNotFound: the line is not in this customer's cart.
        """
        cart = self._load(customer_id, for_update=True)
        line = self._line(cart, line_id)
        self._cart_repo.delete_line(line)
        logger.info("cart.line_removed", customer_id=str(customer_id), line_id=str(line_id))
        return self._load(customer_id)

    @transaction.atomic
    def clear(self, customer_id: str) -> Cart:
        """Delete every line of the customer's cart."""
        cart = self._load(customer_id, for_update=True)
        removed = self._cart_repo.clear(cart)
        logger.info("cart.cleared", customer_id=str(customer_id), lines_removed=removed)
        return self._load(customer_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load(self, customer_id: str, for_update: bool = False) -> Cart:
        cart = self._cart_repo.get_by_customer(str(customer_id), for_update=for_update)
        if cart is None:
            # Carts are created with the customer; a missing one is a data fault.
            logger.error("cart.missing", customer_id=str(customer_id))
            raise CartNotFound(f"Cart not found for customer {customer_id}.")
        return cart

    def _line(self, cart: Cart, line_id: str) -> CartLine:
        line = self._cart_repo.get_line(cart, str(line_id))
        if line is None:
            raise CartLineNotFound(f"Cart line {line_id} not found.")
        return line
