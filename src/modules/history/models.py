"""Archived (delivered) orders.

Business rules implemented:
- History is append-only: records are created by ``OrderArchive`` and
  never updated afterwards.
- Customer, order and item references are plain copies, not foreign
  keys, so deleting any of them leaves the history intact.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models

from modules.core.models import BaseModel
from modules.items.constants import Variant


class OrderHistory(BaseModel):
    source_order_id = models.UUIDField(unique=True)
    order_number = models.CharField(max_length=20)
    customer_id = models.UUIDField(db_index=True)
    customer_name = models.CharField(max_length=100)
    ordered_at = models.DateTimeField()
    delivered_at = models.DateTimeField()
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(max_length=20)
    delivery_address = models.CharField(max_length=500)
    delivery_phone = models.CharField(max_length=15)
    delivery_notes = models.TextField(blank=True, default="")
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    payment_id = models.CharField(max_length=100, blank=True, default="")

    class Meta:
        db_table = "order_history"
        ordering = ["-delivered_at"]
        verbose_name_plural = "order history"

    def __str__(self) -> str:
        return f"{self.order_number} delivered {self.delivered_at:%Y-%m-%d}"


class OrderHistoryLine(BaseModel):
    history = models.ForeignKey(OrderHistory, on_delete=models.CASCADE, related_name="lines")
    item_id = models.UUIDField(null=True, blank=True, db_index=True)
    item_name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=10, decimal_places=2)
    variant = models.CharField(max_length=10, choices=Variant.choices, null=True, blank=True)
    weight = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)

    class Meta:
        db_table = "order_history_lines"
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"{self.item_name} x{self.quantity}"
