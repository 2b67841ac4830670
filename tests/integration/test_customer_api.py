"""Integration tests for the customer endpoints."""

from __future__ import annotations

import pytest
from django.contrib.auth import get_user_model

from modules.carts.models import Cart
from modules.customers.models import Customer

pytestmark = pytest.mark.integration

User = get_user_model()


@pytest.fixture()
def account_client(api_client):
    user = User.objects.create_user(username="meera", password="testpass123")
    api_client.force_authenticate(user=user)
    return api_client, user


class TestRegister:
    def test_registers_own_profile_with_cart(self, account_client):
        client, user = account_client
        response = client.post(
            "/api/v1/customers/",
            {"name": "Meera Iyer", "email": "meera@example.com", "phone": "9000000001"},
            format="json",
        )

        assert response.status_code == 201
        customer = Customer.objects.get(user=user)
        assert response.json()["id"] == str(customer.id)
        assert Cart.objects.filter(customer=customer).exists()

    def test_second_profile_is_a_conflict(self, customer_client, customer):
        response = customer_client.post(
            "/api/v1/customers/",
            {"name": "Again", "email": "again@example.com"},
            format="json",
        )
        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "CustomerAlreadyExists"

    def test_invalid_email(self, account_client):
        client, _ = account_client
        response = client.post("/api/v1/customers/", {"name": "Meera", "email": "nope"}, format="json")
        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_anonymous_is_rejected(self, api_client):
        response = api_client.post("/api/v1/customers/", {"name": "x", "email": "x@example.com"}, format="json")
        assert response.status_code == 401


class TestMe:
    def test_returns_own_profile(self, customer_client, customer):
        response = customer_client.get("/api/v1/customers/me/")
        assert response.status_code == 200
        assert response.json()["email"] == customer.email

    def test_account_without_profile(self, account_client):
        client, _ = account_client
        response = client.get("/api/v1/customers/me/")
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "CustomerNotFound"


class TestStaff:
    def test_list_requires_staff(self, customer_client):
        assert customer_client.get("/api/v1/customers/").status_code == 403

    def test_staff_lists_and_deletes(self, staff_client, customer):
        response = staff_client.get("/api/v1/customers/")
        assert response.status_code == 200
        assert response.json()["count"] == 1

        response = staff_client.delete(f"/api/v1/customers/{customer.id}/")
        assert response.status_code == 204
        assert not Customer.objects.filter(id=customer.id).exists()


class TestStaffFilters:
    @pytest.fixture()
    def roster(self, make_customer, item, make_order):
        priya = make_customer("priya")
        arjun = make_customer("arjun")
        kavya = make_customer("kavya")
        Customer.objects.filter(id=kavya.id).update(is_active=False)
        make_order(arjun, [(item, 1, None)])
        return priya, arjun, kavya

    def _emails(self, client, query):
        response = client.get(f"/api/v1/customers/?{query}")
        assert response.status_code == 200
        return sorted(row["email"] for row in response.json()["results"])

    def test_name_is_a_case_insensitive_match(self, staff_client, roster):
        assert self._emails(staff_client, "name=ARJ") == ["arjun@example.com"]

    def test_active_flag(self, staff_client, roster):
        assert self._emails(staff_client, "active=false") == ["kavya@example.com"]
        assert self._emails(staff_client, "active=true") == ["arjun@example.com", "priya@example.com"]

    def test_email_is_exact(self, staff_client, roster):
        assert self._emails(staff_client, "email=PRIYA@example.com") == ["priya@example.com"]
        assert self._emails(staff_client, "email=priya") == []

    def test_customers_with_live_orders(self, staff_client, roster):
        assert self._emails(staff_client, "has_live_orders=true") == ["arjun@example.com"]
        assert self._emails(staff_client, "has_live_orders=false") == [
            "kavya@example.com",
            "priya@example.com",
        ]
