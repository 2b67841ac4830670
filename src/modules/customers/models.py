"""Storefront customer.

Business rules implemented:
- Email is unique in the system.
- Every customer owns exactly one cart, created together with the
  customer (see ``CustomerService.register_customer``).
- Deleting a customer cascades to the cart and to live orders; the order
  history keeps plain copies and survives.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel


class Customer(BaseModel):
    """Customer aggregate root.

    ``user`` links the profile to the Django account that authenticates
    API calls; seeded or imported customers may have none.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="customer",
    )
    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254, unique=True)
    phone = models.CharField(max_length=20, blank=True, default="")
    address = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "customers"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="customers_created_idx"),
            models.Index(fields=["is_active"], name="customers_active_idx"),
        ]

    def save(self, *args, **kwargs) -> None:
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.name
