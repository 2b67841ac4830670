"""Order and OrderLine models.

Business rules implemented:
- An order is only persisted once its payment was verified
  (``payment_verified`` check constraint).
- Order number auto-generated as a human-readable identifier.
- OrderLine snapshots name, unit price, variant and weight at placement;
  prices are never recalculated afterwards.
- Deleting a catalog item nulls ``OrderLine.item``; the snapshot stays.
- Live orders are hard-deleted when cancelled or archived.
"""

from __future__ import annotations

import secrets
from decimal import Decimal
from typing import Any

import structlog
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.items.constants import Variant
from modules.orders.constants import (
    ADDRESS_LOCKED_STATUSES,
    CANCELLABLE_STATUSES,
    ORDER_NUMBER_MAX_RETRIES,
    VALID_TRANSITIONS,
    OrderStatus,
)
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root.

    ``order_number`` is generated on first save (``ORD-YYYYMMDD-XXXXXX``);
    the UUIDv7 ``id`` is used for every internal reference and API lookup.
    """

    order_number = models.CharField(max_length=20, unique=True, editable=False)
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.CASCADE,
        related_name="orders",
    )
    ordered_at = models.DateTimeField(default=timezone.now)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.CONFIRMED,
    )
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    customer_name = models.CharField(max_length=100)
    delivery_address = models.CharField(max_length=500)
    delivery_phone = models.CharField(max_length=15)
    delivery_notes = models.TextField(blank=True, default="")
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    payment_id = models.CharField(max_length=100)
    payment_order_id = models.CharField(max_length=100)
    payment_signature = models.CharField(max_length=255)
    payment_verified = models.BooleanField(default=False)

    class Meta:
        db_table = "orders"
        ordering = ["-ordered_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-ordered_at"], name="orders_ordered_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(payment_verified=True),
                name="orders_payment_verified",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    @property
    def is_cancellable(self) -> bool:
        return self.status in CANCELLABLE_STATUSES

    @property
    def address_locked(self) -> bool:
        return self.status in ADDRESS_LOCKED_STATUSES

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    def calculate_total(self) -> Decimal:
        """Σ unit_price × quantity over the persisted lines."""
        return sum((line.subtotal for line in self.lines.all()), Decimal("0.00"))

    # ------------------------------------------------------------------
    # Order number generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_number() -> str:
        now = timezone.now()
        suffix = secrets.token_hex(3).upper()
        return f"ORD-{now:%Y%m%d}-{suffix}"

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.order_number:
            for _ in range(ORDER_NUMBER_MAX_RETRIES):
                candidate = self.generate_order_number()
                if not Order.objects.filter(order_number=candidate).exists():
                    self.order_number = candidate
                    break
            else:
                raise RuntimeError(
                    f"Failed to generate unique order_number after "
                    f"{ORDER_NUMBER_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderLine(BaseModel):
    """Snapshot of one cart line at placement time."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="lines")
    item = models.ForeignKey(
        "items.Item",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_lines",
    )
    item_name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    variant = models.CharField(max_length=10, choices=Variant.choices, null=True, blank=True)
    weight = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)

    class Meta:
        db_table = "order_lines"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_lines_quantity_positive",
            ),
        ]

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    def __str__(self) -> str:
        return f"{self.item_name} x{self.quantity} ({self.subtotal})"
