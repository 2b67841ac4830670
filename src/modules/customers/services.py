"""Customer service layer (Use Cases).

Business rules enforced here:
- Email must be unique.
- A customer and its cart are created in the same transaction, so a
  customer without a cart never becomes visible.
- Deleting a customer removes the cart and live orders; archived
  history keeps its copies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.customers.exceptions import CustomerAlreadyExists, CustomerNotFound
from modules.customers.models import Customer

if TYPE_CHECKING:
    from modules.customers.dtos import RegisterCustomerDTO
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerService:
    """Application service for Customer use-cases.

    Receives an ``ICustomerRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICustomerRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def register_customer(self, dto: RegisterCustomerDTO) -> Customer:
        """Create a customer together with its empty cart.

        Raises:
            CustomerAlreadyExists: the email or the linked account is taken.
        """
        from modules.carts.models import Cart

        log = logger.bind(email=dto.email)

        if self._repo.get_by_email(dto.email):
            log.warning("customer.duplicate_email")
            raise CustomerAlreadyExists("Email already registered.")

        if dto.user_id is not None and self._repo.get_by_user(dto.user_id):
            log.warning("customer.duplicate_account", user_id=dto.user_id)
            raise CustomerAlreadyExists("Account already has a customer profile.")

        customer = Customer(
            name=dto.name,
            email=dto.email,
            phone=dto.phone,
            address=dto.address,
            user_id=dto.user_id,
        )
        customer = self._repo.save(customer)
        cart = Cart.objects.create(customer=customer)

        log.info("customer.registered", customer_id=str(customer.id), cart_id=str(cart.id))
        return customer

    @transaction.atomic
    def delete_customer(self, id: str) -> None:
        """Delete a customer with its cart and live orders.

        Raises:
            CustomerNotFound: the customer does not exist.
        """
        if not self._repo.delete(id):
            raise CustomerNotFound(f"Customer {id} not found.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_customer(self, id: str) -> Customer:
        """Raises ``CustomerNotFound`` when absent."""
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")
        return customer

    def get_for_user(self, user_id: int) -> Customer:
        """Customer profile behind an authenticated account."""
        customer = self._repo.get_by_user(user_id)
        if not customer:
            raise CustomerNotFound("No customer profile for this account.")
        return customer

    def list_customers(self, filters: Optional[Dict[str, Any]] = None) -> List[Customer]:
        return self._repo.list(filters)
