"""Django ORM implementation of the Customer repository.

Methods return ``None`` for missing rows; the Service Layer decides how
to report a missing customer.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Customer]:
        try:
            return Customer.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Customer]:
        queryset = Customer.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Customer) -> Customer:
        is_new = entity._state.adding
        entity.save()
        logger.info("customer.saved", customer_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete a customer; cart and live orders cascade."""
        customer = self.get_by_id(id)
        if not customer:
            return False
        customer.delete()
        logger.info("customer.deleted", customer_id=str(id))
        return True

    def get_by_email(self, email: str) -> Optional[Customer]:
        return Customer.objects.filter(email=email.strip().lower()).first()

    def get_by_user(self, user_id: int) -> Optional[Customer]:
        return Customer.objects.filter(user_id=user_id).first()
