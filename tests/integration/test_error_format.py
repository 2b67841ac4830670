"""Integration tests for standardized error responses."""

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

pytestmark = pytest.mark.integration

User = get_user_model()


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = User.objects.create_user(username="errorformat", password="testpass123")
    client.force_authenticate(user=user)
    return client


class TestStandardizedErrors:
    def test_auth_error_has_standard_format(self, api_client):
        response = api_client.get("/api/v1/cart/")
        assert response.status_code == 401
        data = response.json()
        assert data["type"] == "not_authenticated"
        assert isinstance(data["errors"], list)
        assert "code" in data["errors"][0]
        assert "detail" in data["errors"][0]

    def test_parse_error_has_standard_format(self, auth_client):
        response = auth_client.post("/api/v1/customers/", data="{", content_type="application/json")
        assert response.status_code == 400
        data = response.json()
        assert data["type"] == "parse_error"
        assert isinstance(data["errors"], list)

    def test_serializer_error_names_the_field(self, auth_client):
        response = auth_client.post("/api/v1/coupons/preview/", {"code": "X"}, format="json")
        assert response.status_code == 400
        data = response.json()
        assert data["type"] == "validation_error"
        assert {"field": "order_amount", "code": "required"}.items() <= data["errors"][0].items()

    def test_domain_error_uses_exception_name_as_code(self, auth_client):
        response = auth_client.get("/api/v1/cart/")
        assert response.status_code == 404
        assert response.json() == {
            "type": "not_found",
            "errors": [{"code": "CustomerNotFound", "detail": "No customer profile for this account."}],
        }
