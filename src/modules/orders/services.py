"""Order service layer (Use Cases).

``OrderPlacementService`` turns a verified payment plus the customer's cart
into an order.  ``OrderLifecycleService`` drives the order state machine,
cancellation and delivery-address changes.  Every command is one
``transaction.atomic`` unit; domain events are written to the outbox in
the same transaction and delivered after commit.

Business rules enforced:
- No order is written before the payment signature verifies.
- Stock is re-checked per line (per variant) on rows locked in primary-key
  order; any shortfall rolls the whole placement back.
- Unit prices are resolved once at placement and never recalculated.
- Status transitions follow ``VALID_TRANSITIONS``; Delivered archives the
  order in the same transaction.
- Only the owner may cancel or re-address an order; cancelling restores
  stock for lines whose item still exists.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

import structlog
from django.db import transaction

from modules.carts.exceptions import CartNotFound
from modules.core.exceptions import InvalidTransition, Unauthorized, ValidationFailed
from modules.customers.exceptions import CustomerNotFound
from modules.items.exceptions import ItemNotFound
from modules.orders.constants import OrderStatus, parse_status
from modules.orders.events import (
    OrderAddressChanged,
    OrderCancelled,
    OrderOutForDelivery,
    OrderPlaced,
)
from modules.orders.exceptions import EmptyCart, OrderNotFound, PaymentVerificationFailed
from modules.orders.pricing import PricingPolicy

if TYPE_CHECKING:
    from modules.carts.repositories.interfaces import ICartRepository
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.history.archive import OrderArchive
    from modules.history.models import OrderHistory
    from modules.items.inventory import InventoryLedger
    from modules.orders.dtos import PlaceOrderDTO, UpdateAddressDTO
    from modules.orders.models import Order
    from modules.orders.payments import PaymentGateway
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderPlacementService:
    """Checkout: payment verification → order → stock deduction → empty cart."""

    def __init__(
        self,
        order_repository: IOrderRepository,
        cart_repository: ICartRepository,
        customer_repository: ICustomerRepository,
        ledger: InventoryLedger,
        payment_gateway: PaymentGateway,
        pricing: Optional[PricingPolicy] = None,
    ) -> None:
        self._order_repo = order_repository
        self._cart_repo = cart_repository
        self._customer_repo = customer_repository
        self._ledger = ledger
        self._payment_gateway = payment_gateway
        self._pricing = pricing or PricingPolicy.from_settings()

    @transaction.atomic
    def place_order(self, customer_id: str, dto: PlaceOrderDTO) -> Order:
        """Place an order from the customer's cart.

        Steps:
        1. Verify the payment confirmation.
        2. Load the cart; refuse an empty one.
        3. Lock every referenced item (sorted by PK).
        4. Create the order header (Confirmed, payment verified).
        5. Per cart line: re-check stock, snapshot the line, deduct stock.
        6. Clear the cart, persist the total, record ``OrderPlaced``.

        Raises:
            PaymentVerificationFailed: the signature did not verify.
            CustomerNotFound: the customer does not exist.
            CartNotFound: the customer has no cart.
            EmptyCart: the cart has no lines.
            ItemNotFound, ItemUnavailable, InsufficientStock: a line cannot
                be fulfilled; nothing is written.
        """
        log = logger.bind(customer_id=str(customer_id), payment_id=dto.payment_id)
        log.info("order.placement_started")

        # 1. Payment
        self._verify_payment(dto, log)

        # 2. Customer and cart
        customer = self._customer_repo.get_by_id(str(customer_id))
        if customer is None:
            raise CustomerNotFound(f"Customer {customer_id} not found.")

        cart = self._cart_repo.get_by_customer(str(customer_id), for_update=True)
        if cart is None:
            log.error("cart.missing")
            raise CartNotFound(f"Cart not found for customer {customer_id}.")
        cart_lines = list(cart.lines.all())
        if not cart_lines:
            raise EmptyCart("Cart is empty.")

        # 3. Lock items in PK order
        items = self._ledger.lock_items(line.item_id for line in cart_lines)

        # 4. Order header
        order = self._order_repo.create(
            {
                "customer": customer,
                "status": OrderStatus.CONFIRMED,
                "customer_name": dto.customer_name,
                "delivery_address": dto.delivery_address,
                "delivery_phone": dto.delivery_phone,
                "delivery_notes": dto.delivery_notes,
                "latitude": dto.latitude,
                "longitude": dto.longitude,
                "payment_id": dto.payment_id,
                "payment_order_id": dto.payment_order_id,
                "payment_signature": dto.payment_signature,
                "payment_verified": True,
            }
        )
        log = log.bind(order_id=str(order.id), order_number=order.order_number)

        # 5. Lines and stock
        line_summary: List[Dict[str, Any]] = []
        for cart_line in cart_lines:
            item = items.get(str(cart_line.item_id))
            if item is None:
                raise ItemNotFound(f"Item {cart_line.item_id} not found.")

            self._ledger.ensure_available(item, cart_line.quantity, cart_line.variant)
            unit_price = self._pricing.unit_price(item.price, cart_line.variant, cart_line.pinned_price)

            order_line = self._order_repo.add_line(
                order,
                {
                    "item": item,
                    "item_name": item.name,
                    "quantity": cart_line.quantity,
                    "unit_price": unit_price,
                    "variant": cart_line.variant,
                    "weight": cart_line.weight,
                },
            )
            # Keep the refreshed row so later lines of the same item see the new counters.
            items[str(item.id)] = self._ledger.deduct(item.id, cart_line.quantity, cart_line.variant)

            line_summary.append(
                {
                    "item_name": order_line.item_name,
                    "quantity": order_line.quantity,
                    "unit_price": str(order_line.unit_price),
                    "variant": order_line.variant,
                    "weight": str(order_line.weight) if order_line.weight is not None else None,
                }
            )

        # 6. Cart, total, event
        self._cart_repo.clear(cart)

        total = order.calculate_total()
        order.total_amount = total
        order.add_domain_event(
            OrderPlaced(
                aggregate_id=order.id,
                order_number=order.order_number,
                customer_name=order.customer_name,
                customer_email=customer.email,
                total_amount=str(total),
                delivery_address=order.delivery_address,
                delivery_phone=order.delivery_phone,
                lines=tuple(line_summary),
            )
        )
        self._order_repo.save(order)

        log.info("order.placed", total_amount=str(total), line_count=len(line_summary))
        return self._order_repo.get_by_id(str(order.id)) or order

    def _verify_payment(self, dto: PlaceOrderDTO, log) -> None:
        try:
            verified = self._payment_gateway.verify(
                dto.payment_order_id, dto.payment_id, dto.payment_signature
            )
        except Exception as exc:
            log.warning("order.payment_verification_error", error=str(exc))
            raise PaymentVerificationFailed(f"Payment verification failed: {exc}") from exc

        if not verified:
            log.warning("order.payment_signature_invalid")
            raise PaymentVerificationFailed(
                "Payment verification failed. Invalid signature. "
                f"Please contact support with payment ID: {dto.payment_id}"
            )
        log.info("order.payment_verified")


class OrderLifecycleService:
    """Status transitions, cancellation and address changes of live orders."""

    def __init__(
        self,
        order_repository: IOrderRepository,
        ledger: InventoryLedger,
        archive: OrderArchive,
    ) -> None:
        self._order_repo = order_repository
        self._ledger = ledger
        self._archive = archive

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_status(self, order_id: str, new_status: str) -> Union[Order, OrderHistory]:
        """Move an order along the state machine.

        Returns the updated order, or the history record when the order
        was delivered (and therefore archived).

        Raises:
            ValidationFailed: *new_status* is not a known status.
            OrderNotFound: the order does not exist.
            InvalidTransition: the transition is not allowed, or the target
                is Cancelled (use ``cancel``).
        """
        try:
            target = parse_status(new_status)
        except ValueError as exc:
            raise ValidationFailed(str(exc)) from exc

        if target == OrderStatus.CANCELLED:
            raise InvalidTransition("Use the cancel operation to cancel an order.")

        order = self._locked(order_id)
        log = logger.bind(order_id=str(order.id), current_status=order.status, new_status=target.value)

        if not order.can_transition_to(target):
            log.warning("order.invalid_transition")
            raise InvalidTransition(f"Cannot transition from {order.status} to {target.value}.")

        order.status = target

        if target == OrderStatus.DELIVERED:
            self._order_repo.save(order)
            history = self._archive.archive(order)
            log.info("order.delivered", history_id=str(history.id))
            return history

        if target == OrderStatus.OUT_FOR_DELIVERY:
            order.add_domain_event(
                OrderOutForDelivery(
                    aggregate_id=order.id,
                    order_number=order.order_number,
                    customer_name=order.customer_name,
                    customer_email=order.customer.email,
                    delivery_address=order.delivery_address,
                )
            )
        self._order_repo.save(order)
        log.info("order.status_updated")
        return order

    @transaction.atomic
    def cancel(self, order_id: str, customer_id: str) -> None:
        """Cancel the customer's own order, restore stock and delete it.

        Raises:
            OrderNotFound: the order does not exist.
            Unauthorized: the order belongs to another customer.
            InvalidTransition: the order is past the cancellable status.
        """
        order = self._locked(order_id)
        self._check_owner(order, customer_id, "cancel")
        log = logger.bind(order_id=str(order.id), current_status=order.status)

        if not order.is_cancellable:
            log.warning("order.cancel_not_allowed")
            raise InvalidTransition(
                f"Only {OrderStatus.CONFIRMED.value} orders can be cancelled; "
                f"order {order.order_number} is {order.status}."
            )

        lines = sorted(
            (line for line in order.lines.all() if line.item_id is not None),
            key=lambda line: str(line.item_id),
        )
        for line in lines:
            self._ledger.restore(line.item_id, line.quantity, line.variant)

        order.add_domain_event(
            OrderCancelled(
                aggregate_id=order.id,
                order_number=order.order_number,
                customer_name=order.customer_name,
                customer_email=order.customer.email,
                total_amount=str(order.total_amount),
            )
        )
        self._order_repo.remove(order)
        log.info("order.cancelled", lines_restored=len(lines))

    @transaction.atomic
    def update_address(self, order_id: str, customer_id: str, dto: UpdateAddressDTO) -> Order:
        """Change delivery details of a live order.

        Notes are replaced only when given; coordinates only when both are.

        Raises:
            OrderNotFound: the order does not exist.
            Unauthorized: the order belongs to another customer.
            InvalidTransition: the order is already delivered.
        """
        order = self._locked(order_id)
        self._check_owner(order, customer_id, "update")

        if order.address_locked:
            raise InvalidTransition("Cannot update address for delivered orders.")

        old_address, old_phone = order.delivery_address, order.delivery_phone
        old_latitude, old_longitude = order.latitude, order.longitude

        order.delivery_address = dto.delivery_address
        order.delivery_phone = dto.delivery_phone
        if dto.delivery_notes is not None:
            order.delivery_notes = dto.delivery_notes
        if dto.has_coordinates:
            order.latitude = dto.latitude
            order.longitude = dto.longitude

        order.add_domain_event(
            OrderAddressChanged(
                aggregate_id=order.id,
                order_number=order.order_number,
                customer_name=order.customer_name,
                old_address=old_address,
                new_address=order.delivery_address,
                old_phone=old_phone,
                new_phone=order.delivery_phone,
                old_latitude=old_latitude,
                old_longitude=old_longitude,
                new_latitude=order.latitude,
                new_longitude=order.longitude,
            )
        )
        self._order_repo.save(order)
        logger.info("order.address_updated", order_id=str(order.id))
        return order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Raises ``OrderNotFound`` when absent."""
        order = self._order_repo.get_by_id(str(order_id))
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def get_customer_order(self, order_id: str, customer_id: str) -> Order:
        order = self.get_order(order_id)
        self._check_owner(order, customer_id, "view")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        return self._order_repo.list(filters)

    def list_customer_orders(self, customer_id: str) -> List[Order]:
        return self._order_repo.list_for_customer(str(customer_id))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _locked(self, order_id: str) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    @staticmethod
    def _check_owner(order: Order, customer_id: str, verb: str) -> None:
        if str(order.customer_id) != str(customer_id):
            logger.warning(
                "order.ownership_violation",
                order_id=str(order.id),
                customer_id=str(customer_id),
            )
            raise Unauthorized(f"You can only {verb} your own orders.")
