"""Writing domain events to the transactional outbox.

``record_events`` must be called inside the business transaction.  The
outbox rows commit (or roll back) together with the data that produced
them; delivery is scheduled with ``transaction.on_commit`` so nothing is
sent for a transaction that never commits.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List
from uuid import UUID

import structlog
from django.db import transaction

from modules.core.models import OutboxEvent
from shared.domain.events import DomainEvent, DomainEventMixin

logger = structlog.get_logger(__name__)


def record_events(source: DomainEventMixin | Iterable[DomainEvent], topic: str) -> List[OutboxEvent]:
    """Persist pending domain events and schedule their delivery.

    ``source`` is either an aggregate carrying ``domain_events`` (which are
    cleared once stored) or a plain iterable of events.
    """
    if isinstance(source, DomainEventMixin):
        events = source.domain_events
        source.clear_domain_events()
    else:
        events = list(source)

    stored: List[OutboxEvent] = []
    for event in events:
        outbox_event = OutboxEvent.objects.create(
            event_type=event.event_name,
            aggregate_id=str(event.aggregate_id),
            payload=serialize_event_payload(event),
            topic=topic,
        )
        transaction.on_commit(
            lambda event_id=str(outbox_event.id): _schedule_delivery(event_id),
            robust=True,
        )
        stored.append(outbox_event)

    if stored:
        logger.info(
            "outbox.events_recorded",
            topic=topic,
            event_types=[e.event_type for e in stored],
        )
    return stored


def _schedule_delivery(outbox_event_id: str) -> None:
    from modules.core.tasks import deliver_outbox_event

    deliver_outbox_event.delay(outbox_event_id)


def serialize_event_payload(event: DomainEvent) -> Dict[str, Any]:
    data = asdict(event)
    normalized = _normalize_for_json(data)
    return json.loads(json.dumps(normalized))


def _normalize_for_json(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_for_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize_for_json(val) for key, val in value.items()}
    return value
