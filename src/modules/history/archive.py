"""Order History Archive.

Moves delivered orders out of the live tables.  Writing the snapshot and
deleting the live order form one atomic unit: either both happen or the
order stays live and untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

import structlog
from django.db import transaction
from django.utils import timezone

from modules.core.exceptions import InvalidState
from modules.history.exceptions import HistoryNotFound
from modules.history.repositories.django_repository import OrderHistoryDjangoRepository
from modules.orders.constants import OrderStatus
from modules.orders.events import OrderDelivered
from modules.orders.repositories.django_repository import OrderDjangoRepository

if TYPE_CHECKING:
    from modules.history.models import OrderHistory
    from modules.history.repositories.interfaces import IOrderHistoryRepository
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


@dataclass
class BulkArchiveResult:
    archived: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def archived_count(self) -> int:
        return len(self.archived)

    @property
    def failed_count(self) -> int:
        return len(self.failed)


class OrderArchive:
    def __init__(
        self,
        history_repository: Optional[IOrderHistoryRepository] = None,
        order_repository: Optional[IOrderRepository] = None,
    ) -> None:
        self._history_repo = history_repository or OrderHistoryDjangoRepository()
        self._order_repo = order_repository or OrderDjangoRepository()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def archive(self, order: Order) -> OrderHistory:
        """Snapshot a Delivered order into history and delete it.

        Runs in its own savepoint when called inside a transaction.

        Raises:
            InvalidState: the order is not Delivered.
        """
        if order.status != OrderStatus.DELIVERED:
            raise InvalidState(
                f"Only delivered orders can be archived; order {order.order_number} is {order.status}."
            )

        log = logger.bind(order_id=str(order.id), order_number=order.order_number)

        with transaction.atomic():
            history = self._history_repo.create(
                {
                    "source_order_id": order.id,
                    "order_number": order.order_number,
                    "customer_id": order.customer_id,
                    "customer_name": order.customer_name,
                    "ordered_at": order.ordered_at,
                    "delivered_at": timezone.now(),
                    "total_amount": order.total_amount,
                    "status": OrderStatus.DELIVERED,
                    "delivery_address": order.delivery_address,
                    "delivery_phone": order.delivery_phone,
                    "delivery_notes": order.delivery_notes,
                    "latitude": order.latitude,
                    "longitude": order.longitude,
                    "payment_id": order.payment_id,
                },
                [
                    {
                        "item_id": line.item_id,
                        "item_name": line.item_name,
                        "quantity": line.quantity,
                        "price": line.unit_price,
                        "variant": line.variant,
                        "weight": line.weight,
                    }
                    for line in order.lines.all()
                ],
            )
            order.add_domain_event(
                OrderDelivered(
                    aggregate_id=order.id,
                    order_number=order.order_number,
                    customer_name=order.customer_name,
                    customer_email=order.customer.email,
                    total_amount=str(order.total_amount),
                    history_id=str(history.id),
                )
            )
            self._order_repo.remove(order)

        log.info("history.order_archived", history_id=str(history.id))
        return history

    def bulk_archive(self) -> BulkArchiveResult:
        """Archive every live Delivered order, one transaction per order.

        A failing order is logged and skipped; the others still archive.
        """
        result = BulkArchiveResult()
        candidates = [str(order.id) for order in self._order_repo.list({"status": OrderStatus.DELIVERED})]

        for order_id in candidates:
            try:
                with transaction.atomic():
                    order = self._order_repo.get_for_update(order_id)
                    if order is None or order.status != OrderStatus.DELIVERED:
                        continue
                    self.archive(order)
            except Exception as exc:
                logger.error("history.archive_failed", order_id=order_id, error=str(exc))
                result.failed.append(order_id)
            else:
                result.archived.append(order_id)

        logger.info(
            "history.bulk_archive_completed",
            archived=result.archived_count,
            failed=result.failed_count,
        )
        return result

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_item_referenced(self, item_id) -> bool:
        return self._history_repo.item_referenced(str(item_id))

    def list_for_customer(self, customer_id) -> List[OrderHistory]:
        return self._history_repo.list_for_customer(str(customer_id))

    def list_all(self) -> List[OrderHistory]:
        return self._history_repo.list()

    def get(self, history_id) -> OrderHistory:
        history = self._history_repo.get_by_id(str(history_id))
        if history is None:
            raise HistoryNotFound(f"Order history {history_id} not found.")
        return history
