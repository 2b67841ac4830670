"""Shopping cart: one per customer, created at registration.

Business rules implemented:
- A cart belongs to exactly one customer and disappears with it.
- A line is identified by (item, variant, weight); matching treats two
  ``NULL`` values as equal, so the service merges instead of duplicating.
- ``pinned_price`` freezes a client-quoted unit price (weight-priced cakes)
  and takes precedence over the catalog price at checkout.
"""

from __future__ import annotations

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.items.constants import Variant


class Cart(BaseModel):
    customer = models.OneToOneField(
        "customers.Customer",
        on_delete=models.CASCADE,
        related_name="cart",
    )

    class Meta:
        db_table = "carts"

    @property
    def is_empty(self) -> bool:
        return not self.lines.exists()

    def __str__(self) -> str:
        return f"Cart {self.id} (customer={self.customer_id})"


class CartLine(BaseModel):
    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="lines")
    item = models.ForeignKey(
        "items.Item",
        on_delete=models.CASCADE,
        related_name="cart_lines",
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    variant = models.CharField(
        max_length=10,
        choices=Variant.choices,
        null=True,
        blank=True,
    )
    weight = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    pinned_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "cart_lines"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="cart_lines_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.quantity}x {self.item_id} ({self.variant or 'default'})"
