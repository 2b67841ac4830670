"""Event handlers for Orders domain events (customer and admin emails)."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderAddressChanged,
    OrderCancelled,
    OrderDelivered,
    OrderOutForDelivery,
    OrderPlaced,
)
from modules.orders.notifications import OrderNotifier
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class _NotifierHandler:
    def __init__(self, notifier: OrderNotifier | None = None) -> None:
        self._notifier = notifier

    @property
    def notifier(self) -> OrderNotifier:
        # Built lazily so settings are read at delivery time.
        return self._notifier or OrderNotifier()


class OrderPlacedHandler(_NotifierHandler, IEventHandler[OrderPlaced]):
    def handle(self, event: OrderPlaced) -> None:
        logger.info("order.notify_placed", order_number=event.order_number)
        self.notifier.order_confirmed(event)
        self.notifier.new_order_to_admin(event)


class OrderOutForDeliveryHandler(_NotifierHandler, IEventHandler[OrderOutForDelivery]):
    def handle(self, event: OrderOutForDelivery) -> None:
        logger.info("order.notify_out_for_delivery", order_number=event.order_number)
        self.notifier.out_for_delivery(event)


class OrderDeliveredHandler(_NotifierHandler, IEventHandler[OrderDelivered]):
    def handle(self, event: OrderDelivered) -> None:
        logger.info("order.notify_delivered", order_number=event.order_number)
        self.notifier.delivered(event)
        self.notifier.delivered_to_admin(event)


class OrderCancelledHandler(_NotifierHandler, IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info("order.notify_cancelled", order_number=event.order_number)
        self.notifier.cancelled(event)


class OrderAddressChangedHandler(_NotifierHandler, IEventHandler[OrderAddressChanged]):
    def handle(self, event: OrderAddressChanged) -> None:
        logger.info("order.notify_address_changed", order_number=event.order_number)
        self.notifier.address_changed_to_admin(event)


order_placed_handler = OrderPlacedHandler()
order_out_for_delivery_handler = OrderOutForDeliveryHandler()
order_delivered_handler = OrderDeliveredHandler()
order_cancelled_handler = OrderCancelledHandler()
order_address_changed_handler = OrderAddressChangedHandler()
