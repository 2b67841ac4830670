"""Plain-text order emails sent by the notification handlers.

Sending is best-effort: errors propagate to the outbox worker, which
records them on the event row and moves on.
"""

from __future__ import annotations

from typing import Iterable, List

import structlog
from django.conf import settings
from django.core.mail import send_mail

from modules.orders.events import (
    OrderAddressChanged,
    OrderCancelled,
    OrderDelivered,
    OrderOutForDelivery,
    OrderPlaced,
)

logger = structlog.get_logger(__name__)


class OrderNotifier:
    def __init__(self, from_email: str | None = None, admin_email: str | None = None) -> None:
        self._from_email = from_email or settings.DEFAULT_FROM_EMAIL
        self._admin_email = (
            admin_email if admin_email is not None else settings.ORDER_NOTIFICATION_ADMIN_EMAIL
        )

    # ------------------------------------------------------------------
    # Customer
    # ------------------------------------------------------------------

    def order_confirmed(self, event: OrderPlaced) -> None:
        body = [
            f"Hi {event.customer_name},",
            "",
            f"Thank you for your order {event.order_number}.",
            "",
            *_line_summary(event.lines),
            f"Total: {event.total_amount}",
            "",
            f"Delivering to: {event.delivery_address}",
        ]
        self._send(f"Order {event.order_number} confirmed", body, [event.customer_email])

    def out_for_delivery(self, event: OrderOutForDelivery) -> None:
        body = [
            f"Hi {event.customer_name},",
            "",
            f"Your order {event.order_number} is out for delivery to:",
            event.delivery_address,
        ]
        self._send(f"Order {event.order_number} is on its way", body, [event.customer_email])

    def delivered(self, event: OrderDelivered) -> None:
        body = [
            f"Hi {event.customer_name},",
            "",
            f"Your order {event.order_number} ({event.total_amount}) has been delivered.",
        ]
        self._send(f"Order {event.order_number} delivered", body, [event.customer_email])

    def cancelled(self, event: OrderCancelled) -> None:
        body = [
            f"Hi {event.customer_name},",
            "",
            f"Your order {event.order_number} ({event.total_amount}) has been cancelled.",
        ]
        self._send(f"Order {event.order_number} cancelled", body, [event.customer_email])

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def new_order_to_admin(self, event: OrderPlaced) -> None:
        body = [
            f"New order {event.order_number} from {event.customer_name}.",
            "",
            *_line_summary(event.lines),
            f"Total: {event.total_amount}",
            f"Address: {event.delivery_address}",
            f"Phone: {event.delivery_phone}",
        ]
        self._send_admin(f"New order {event.order_number}", body)

    def delivered_to_admin(self, event: OrderDelivered) -> None:
        body = [f"Order {event.order_number} for {event.customer_name} was delivered and archived."]
        self._send_admin(f"Order {event.order_number} delivered", body)

    def address_changed_to_admin(self, event: OrderAddressChanged) -> None:
        body = [
            f"{event.customer_name} changed the delivery details of order {event.order_number}.",
            "",
            f"Old address: {event.old_address}",
            f"New address: {event.new_address}",
            f"Old phone: {event.old_phone}",
            f"New phone: {event.new_phone}",
        ]
        if event.new_latitude is not None and event.new_longitude is not None:
            body.append(f"New location: {event.new_latitude}, {event.new_longitude}")
        self._send_admin(f"Address changed for order {event.order_number}", body)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _send_admin(self, subject: str, body: List[str]) -> None:
        if not self._admin_email:
            logger.info("notification.admin_email_not_configured", subject=subject)
            return
        self._send(subject, body, [self._admin_email])

    def _send(self, subject: str, body: List[str], recipients: List[str]) -> None:
        send_mail(
            subject,
            "\n".join(body),
            self._from_email,
            recipients,
            fail_silently=False,
        )
        logger.info("notification.sent", subject=subject, recipients=len(recipients))


def _line_summary(lines: Iterable[dict]) -> List[str]:
    summary = []
    for line in lines:
        variant = f" ({line['variant'].title()})" if line.get("variant") else ""
        summary.append(f"- {line['item_name']}{variant} x{line['quantity']} @ {line['unit_price']}")
    if summary:
        summary.append("")
    return summary
