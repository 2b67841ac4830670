"""Unit tests for CustomerService."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from modules.carts.models import Cart
from modules.customers.dtos import RegisterCustomerDTO
from modules.customers.exceptions import CustomerAlreadyExists, CustomerNotFound
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return CustomerService(repository=CustomerDjangoRepository())


class TestRegisterCustomer:
    def test_creates_customer_with_empty_cart(self, service):
        customer = service.register_customer(
            RegisterCustomerDTO(name="Meera Iyer", email="Meera@Example.com")
        )
        assert customer.email == "meera@example.com"
        assert Cart.objects.get(customer=customer).is_empty

    def test_duplicate_email(self, service, customer):
        with pytest.raises(CustomerAlreadyExists):
            service.register_customer(RegisterCustomerDTO(name="Copy", email=customer.email))
        assert Customer.objects.count() == 1

    def test_duplicate_account(self, service, customer):
        with pytest.raises(CustomerAlreadyExists):
            service.register_customer(
                RegisterCustomerDTO(name="Other", email="other@example.com", user_id=customer.user_id)
            )

    def test_duplicate_check_runs_before_save(self):
        mock_repo = MagicMock()
        mock_repo.get_by_email.return_value = Customer(name="x", email="x@example.com")
        with pytest.raises(CustomerAlreadyExists):
            CustomerService(repository=mock_repo).register_customer(
                RegisterCustomerDTO(name="x", email="x@example.com")
            )
        mock_repo.save.assert_not_called()

    def test_invalid_email_is_rejected_by_dto(self):
        with pytest.raises(ValueError):
            RegisterCustomerDTO(name="Meera", email="not-an-email")


class TestLookupAndDelete:
    def test_get_for_user(self, service, customer):
        assert service.get_for_user(customer.user_id).id == customer.id

    def test_get_for_user_without_profile(self, service):
        with pytest.raises(CustomerNotFound):
            service.get_for_user(999999)

    def test_delete_removes_cart(self, service, customer):
        service.delete_customer(customer.id)
        assert not Customer.objects.filter(id=customer.id).exists()
        assert not Cart.objects.filter(customer_id=customer.id).exists()

    def test_delete_unknown(self, service, customer):
        service.delete_customer(customer.id)
        with pytest.raises(CustomerNotFound):
            service.delete_customer(customer.id)
