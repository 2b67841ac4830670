"""Domain events for the Orders bounded context.

Events carry everything their notification needs: cancelled and archived
orders no longer exist by the time the worker delivers them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class OrderPlaced(DomainEvent):
    order_number: str
    customer_name: str
    customer_email: str
    total_amount: str
    delivery_address: str
    delivery_phone: str
    lines: Tuple[Dict[str, Any], ...] = ()


@dataclass(frozen=True, kw_only=True)
class OrderOutForDelivery(DomainEvent):
    order_number: str
    customer_name: str
    customer_email: str
    delivery_address: str


@dataclass(frozen=True, kw_only=True)
class OrderDelivered(DomainEvent):
    """Raised once the order has been archived; ``history_id`` is the record."""

    order_number: str
    customer_name: str
    customer_email: str
    total_amount: str
    history_id: str


@dataclass(frozen=True, kw_only=True)
class OrderCancelled(DomainEvent):
    order_number: str
    customer_name: str
    customer_email: str
    total_amount: str


@dataclass(frozen=True, kw_only=True)
class OrderAddressChanged(DomainEvent):
    order_number: str
    customer_name: str
    old_address: str
    new_address: str
    old_phone: str
    new_phone: str
    old_latitude: Optional[float] = None
    old_longitude: Optional[float] = None
    new_latitude: Optional[float] = None
    new_longitude: Optional[float] = None
