"""Base abstract model and the transactional outbox for the storefront core.

Provides:
- ``BaseModel``: UUIDv7 primary key + created_at / updated_at timestamps.
- ``OutboxEvent``: domain events persisted in the same transaction as the
  business data that produced them, delivered after commit by a Celery task.

Records in this system are hard-deleted: a delivered order leaves the live
tables once archived, a cancelled order is removed outright, and deleting a
catalog item nulls the references held by order lines.
"""

from __future__ import annotations

import uuid6
from django.db import models
from django.utils import timezone

# ---------------------------------------------------------------------------
# BaseModel
# ---------------------------------------------------------------------------


class BaseModel(models.Model):
    """Abstract base with UUIDv7 PK and timestamp bookkeeping."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        """Ensure ``updated_at`` is refreshed even when ``update_fields`` is passed."""
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)


# ---------------------------------------------------------------------------
# Transactional Outbox
# ---------------------------------------------------------------------------


class EventStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    PUBLISHED = "PUBLISHED", "Published"
    FAILED = "FAILED", "Failed"


class OutboxEventQuerySet(models.QuerySet):
    def pending(self) -> OutboxEventQuerySet:
        return self.filter(status=EventStatus.PENDING)


class OutboxEvent(BaseModel):
    """A domain event waiting to be handed to its subscribers.

    Workflow:
    1. A service records events inside its ``transaction.atomic()`` block
       (see ``modules.core.outbox.record_events``).
    2. After commit, ``deliver_outbox_event`` runs on a Celery worker.
    3. On success → ``mark_as_published()``.
    4. On failure → ``mark_as_failed(error)``.  Delivery is at-most-once:
       failed events are kept for inspection and never re-sent automatically.
    """

    event_type = models.CharField(max_length=100)
    payload = models.JSONField()
    aggregate_id = models.CharField(max_length=255)
    topic = models.CharField(max_length=100)
    status = models.CharField(
        max_length=20,
        choices=EventStatus.choices,
        default=EventStatus.PENDING,
    )
    processed_at = models.DateTimeField(null=True, blank=True, default=None)
    error_message = models.TextField(null=True, blank=True, default=None)  # noqa: DJ01
    retry_count = models.PositiveIntegerField(default=0)

    objects = OutboxEventQuerySet.as_manager()

    class Meta:
        db_table = "outbox_events"
        ordering = ["created_at"]
        indexes = [
            models.Index(
                fields=["event_type"],
                name="outbox_event_type_idx",
            ),
            models.Index(
                fields=["aggregate_id"],
                name="outbox_aggregate_id_idx",
            ),
            models.Index(
                fields=["status", "created_at"],
                name="outbox_status_created_idx",
            ),
        ]

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    @property
    def is_pending(self) -> bool:
        return self.status == EventStatus.PENDING

    def mark_as_published(self) -> None:
        """Mark event as delivered to every subscriber."""
        self.status = EventStatus.PUBLISHED
        self.processed_at = timezone.now()
        self.save(update_fields=["status", "processed_at", "updated_at"])

    def mark_as_failed(self, error: str) -> None:
        """Record a delivery failure.  ``retry_count`` counts attempts made."""
        self.status = EventStatus.FAILED
        self.error_message = error
        self.processed_at = timezone.now()
        self.retry_count += 1
        self.save(
            update_fields=[
                "status",
                "error_message",
                "processed_at",
                "retry_count",
                "updated_at",
            ]
        )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.event_type} [{self.status}] ({self.aggregate_id})"
