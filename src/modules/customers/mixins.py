"""View helpers shared by the customer-facing APIs (cart, orders, coupons)."""

from __future__ import annotations

from rest_framework.request import Request

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerService


class CurrentCustomerMixin:
    """Resolve the ``Customer`` behind ``request.user``.

    Raises ``CustomerNotFound`` (404) when the account never registered a
    customer profile.
    """

    def get_customer(self, request: Request) -> Customer:
        service = CustomerService(repository=CustomerDjangoRepository())
        return service.get_for_user(request.user.pk)
