"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Type

import structlog

from shared.domain.bus import EventDeliveryError, IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus.

    Every subscribed handler runs even when an earlier one fails; the
    failures are raised together afterwards as ``EventDeliveryError``.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def handlers_for(self, event_class: Type[DomainEvent]) -> List[IEventHandler]:
        return list(self._handlers.get(event_class, []))

    def publish(self, event: DomainEvent) -> None:
        failures: List[Exception] = []
        for handler in self.handlers_for(type(event)):
            try:
                handler.handle(event)
            except Exception as exc:
                logger.warning(
                    "event_bus.handler_failed",
                    event_name=event.event_name,
                    handler=type(handler).__name__,
                    error=str(exc),
                )
                failures.append(exc)
        if failures:
            raise EventDeliveryError(event, failures)


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
