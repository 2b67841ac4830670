"""Django ORM implementation of the Cart repository."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Prefetch

from modules.carts.models import Cart, CartLine
from modules.carts.repositories.interfaces import ICartRepository

logger = structlog.get_logger(__name__)


def _with_lines(queryset):
    return queryset.prefetch_related(
        Prefetch("lines", queryset=CartLine.objects.select_related("item").order_by("created_at"))
    )


class CartDjangoRepository(ICartRepository):
    """Concrete Cart repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Cart]:
        try:
            return _with_lines(Cart.objects.filter(id=id)).first()
        except (ValueError, ValidationError):
            return None

    def get_by_customer(self, customer_id: str, for_update: bool = False) -> Optional[Cart]:
        queryset = Cart.objects.filter(customer_id=customer_id)
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return _with_lines(queryset).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Cart]:
        queryset = Cart.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(_with_lines(queryset))

    @transaction.atomic
    def save(self, entity: Cart) -> Cart:
        entity.save()
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Cart.objects.filter(id=id).delete()
        return bool(deleted)

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    def get_line(self, cart: Cart, line_id: str) -> Optional[CartLine]:
        try:
            return CartLine.objects.select_related("item").filter(id=line_id, cart=cart).first()
        except (ValueError, ValidationError):
            return None

    def find_line(
        self,
        cart: Cart,
        item_id: str,
        variant: Optional[str],
        weight: Optional[Decimal],
    ) -> Optional[CartLine]:
        # ``field=None`` compiles to ``IS NULL``, giving null-safe equality.
        return (
            CartLine.objects.filter(cart=cart, item_id=item_id, variant=variant, weight=weight)
            .order_by("created_at")
            .first()
        )

    def save_line(self, line: CartLine) -> CartLine:
        line.save()
        logger.info(
            "cart.line_saved",
            cart_id=str(line.cart_id),
            line_id=str(line.id),
            quantity=line.quantity,
        )
        return line

    def delete_line(self, line: CartLine) -> None:
        line_id = str(line.id)
        line.delete()
        logger.info("cart.line_deleted", line_id=line_id)

    def clear(self, cart: Cart) -> int:
        deleted, _ = CartLine.objects.filter(cart=cart).delete()
        return deleted
