"""Asynchronous tasks of the core module."""

from __future__ import annotations

from typing import Any, Dict

import structlog
from celery import shared_task

from modules.core.models import OutboxEvent
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


@shared_task(name="core.deliver_outbox_event", ignore_result=True)
def deliver_outbox_event(outbox_event_id: str) -> Dict[str, Any]:
    """Hand one stored domain event to its in-process subscribers.

    Delivery is at-most-once: the task never retries, and a failure is
    recorded on the outbox row instead of being raised to the worker.
    Events that already left ``PENDING`` are skipped.
    """
    log = logger.bind(outbox_event_id=outbox_event_id)

    outbox_event = OutboxEvent.objects.filter(id=outbox_event_id).first()
    if outbox_event is None:
        log.warning("outbox.event_missing")
        return {"status": "missing"}
    if not outbox_event.is_pending:
        log.info("outbox.event_already_processed", status=outbox_event.status)
        return {"status": "skipped"}

    log = log.bind(event_type=outbox_event.event_type)
    try:
        event = DomainEvent.from_payload(outbox_event.event_type, outbox_event.payload)
        event_bus.publish(event)
    except Exception as exc:
        log.warning("outbox.delivery_failed", error=str(exc))
        outbox_event.mark_as_failed(str(exc))
        return {"status": "failed"}

    outbox_event.mark_as_published()
    log.info("outbox.delivered")
    return {"status": "published"}
