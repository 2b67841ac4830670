"""Integration tests for the order endpoints.

Covers placement, visibility rules (own orders vs staff), the staff-only
status endpoint, cancellation, address changes and bulk archival.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.carts.models import CartLine
from modules.history.models import OrderHistory
from modules.items.constants import Variant
from modules.orders.constants import OrderStatus
from modules.orders.models import Order

pytestmark = pytest.mark.integration


class TestPlaceOrderApi:
    def test_places_order_from_cart(self, customer_client, customer, cake, place_payload):
        CartLine.objects.create(cart=customer.cart, item=cake, quantity=1, variant=Variant.EGGLESS)

        response = customer_client.post("/api/v1/orders/", place_payload(), format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "Confirmed"
        assert data["total_amount"] == "680.00"
        assert data["lines"][0]["variant"] == "EGGLESS"
        assert "payment_signature" not in data
        cake.refresh_from_db()
        assert cake.eggless_stock == 2

    def test_forged_signature_is_402(self, customer_client, customer, item, place_payload):
        CartLine.objects.create(cart=customer.cart, item=item, quantity=1)

        response = customer_client.post(
            "/api/v1/orders/", place_payload(payment_signature="0" * 64), format="json"
        )

        assert response.status_code == 402
        assert response.json()["type"] == "payment_failed"
        assert not Order.objects.exists()

    def test_empty_cart_is_400(self, customer_client, place_payload):
        response = customer_client.post("/api/v1/orders/", place_payload(), format="json")
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "EmptyCart"

    def test_invalid_phone_is_400(self, customer_client, customer, item, place_payload):
        CartLine.objects.create(cart=customer.cart, item=item, quantity=1)
        response = customer_client.post(
            "/api/v1/orders/", place_payload(delivery_phone="12345"), format="json"
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "delivery_phone"

    def test_overlong_payment_id_is_400(self, customer_client, customer, item, place_payload):
        CartLine.objects.create(cart=customer.cart, item=item, quantity=1)
        response = customer_client.post(
            "/api/v1/orders/", place_payload(payment_id="pay_" + "9" * 120), format="json"
        )
        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "validation_error"
        assert body["errors"][0]["field"] == "payment_id"
        assert not Order.objects.exists()


class TestReadOrdersApi:
    def test_customers_see_only_their_orders(
        self, customer_client, customer, make_customer, item, make_order
    ):
        own = make_order(customer, [(item, 1, None)])
        other = make_order(make_customer("arjun"), [(item, 1, None)])

        response = customer_client.get("/api/v1/orders/")
        assert response.status_code == 200
        assert [o["id"] for o in response.json()["results"]] == [str(own.id)]

        assert customer_client.get(f"/api/v1/orders/{other.id}/").status_code == 403

    def test_staff_see_every_order(self, staff_client, customer, make_customer, item, make_order):
        make_order(customer, [(item, 1, None)])
        make_order(make_customer("arjun"), [(item, 1, None)])

        response = staff_client.get("/api/v1/orders/")
        assert response.json()["count"] == 2

    def test_filter_by_status(self, staff_client, customer, item, make_order):
        make_order(customer, [(item, 1, None)])
        make_order(customer, [(item, 1, None)], status=OrderStatus.OUT_FOR_DELIVERY)

        response = staff_client.get("/api/v1/orders/", {"status": "out for delivery"})
        assert response.json()["count"] == 1


class TestStatusApi:
    def test_customers_cannot_change_status(self, customer_client, customer, item, make_order):
        order = make_order(customer, [(item, 1, None)])
        response = customer_client.post(
            f"/api/v1/orders/{order.id}/status/", {"status": "Delivered"}, format="json"
        )
        assert response.status_code == 403

    def test_out_for_delivery(self, staff_client, customer, item, make_order):
        order = make_order(customer, [(item, 1, None)])
        response = staff_client.post(
            f"/api/v1/orders/{order.id}/status/", {"status": "Out for Delivery"}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["archived"] is False
        assert response.json()["order"]["status"] == "Out for Delivery"

    def test_delivered_returns_history(self, staff_client, customer, item, make_order):
        order = make_order(customer, [(item, 2, None)])
        response = staff_client.post(
            f"/api/v1/orders/{order.id}/status/", {"status": "Delivered"}, format="json"
        )
        assert response.status_code == 200
        body = response.json()
        assert body["archived"] is True
        assert body["history"]["source_order_id"] == str(order.id)
        assert staff_client.get(f"/api/v1/orders/{order.id}/").status_code == 404

    def test_invalid_transition_is_409(self, staff_client, customer, item, make_order):
        order = make_order(customer, [(item, 1, None)], status=OrderStatus.OUT_FOR_DELIVERY)
        response = staff_client.post(
            f"/api/v1/orders/{order.id}/status/", {"status": "Confirmed"}, format="json"
        )
        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "InvalidTransition"

    def test_archive_delivered(self, staff_client, customer, item, make_order):
        stuck = make_order(customer, [(item, 1, None)], status=OrderStatus.DELIVERED)
        response = staff_client.post("/api/v1/orders/archive-delivered/")
        assert response.status_code == 200
        assert response.json() == {"archived": [str(stuck.id)], "failed": []}
        assert OrderHistory.objects.filter(source_order_id=stuck.id).exists()


class TestCustomerActionsApi:
    def test_cancel_restores_stock(self, customer_client, customer, item, make_order):
        order = make_order(customer, [(item, 3, None)])
        response = customer_client.post(f"/api/v1/orders/{order.id}/cancel/")
        assert response.status_code == 204
        item.refresh_from_db()
        assert item.regular_stock == 13
        assert not Order.objects.filter(id=order.id).exists()

    def test_cancel_out_for_delivery_is_409(self, customer_client, customer, item, make_order):
        order = make_order(customer, [(item, 3, None)], status=OrderStatus.OUT_FOR_DELIVERY)
        response = customer_client.post(f"/api/v1/orders/{order.id}/cancel/")
        assert response.status_code == 409
        item.refresh_from_db()
        assert item.regular_stock == 10

    def test_change_address(self, customer_client, customer, item, make_order):
        order = make_order(customer, [(item, 1, None)])
        response = customer_client.post(
            f"/api/v1/orders/{order.id}/address/",
            {
                "delivery_address": "4 FC Road, Shivajinagar, Pune",
                "delivery_phone": "9123456780",
                "latitude": 18.52,
                "longitude": 73.85,
            },
            format="json",
        )
        assert response.status_code == 200
        assert response.json()["delivery_address"] == "4 FC Road, Shivajinagar, Pune"
        assert response.json()["latitude"] == 18.52
        order.refresh_from_db()
        assert order.total_amount == Decimal("80.00")
