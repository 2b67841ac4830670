"""Order DRF serializers for API input/output.

Serializers handle request parsing and response rendering; business rules
live in the Service Layer, which receives Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderLine

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class PlaceOrderSerializer(serializers.Serializer):
    customer_name = serializers.CharField()
    delivery_address = serializers.CharField()
    delivery_phone = serializers.CharField()
    delivery_notes = serializers.CharField(required=False, default="", allow_blank=True)
    latitude = serializers.FloatField(required=False, allow_null=True, default=None)
    longitude = serializers.FloatField(required=False, allow_null=True, default=None)
    payment_id = serializers.CharField(max_length=100)
    payment_order_id = serializers.CharField(max_length=100)
    payment_signature = serializers.CharField(max_length=255)


class UpdateAddressSerializer(serializers.Serializer):
    delivery_address = serializers.CharField()
    delivery_phone = serializers.CharField()
    delivery_notes = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    latitude = serializers.FloatField(required=False, allow_null=True, default=None)
    longitude = serializers.FloatField(required=False, allow_null=True, default=None)


class UpdateStatusSerializer(serializers.Serializer):
    status = serializers.CharField()


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderLineSerializer(serializers.ModelSerializer):
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderLine
        fields = [
            "id",
            "item_id",
            "item_name",
            "quantity",
            "unit_price",
            "variant",
            "weight",
            "subtotal",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Order with nested lines.  The payment signature is never rendered."""

    lines = OrderLineSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer_id",
            "status",
            "ordered_at",
            "total_amount",
            "customer_name",
            "delivery_address",
            "delivery_phone",
            "delivery_notes",
            "latitude",
            "longitude",
            "payment_id",
            "payment_verified",
            "lines",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer_id",
            "status",
            "total_amount",
            "ordered_at",
        ]
        read_only_fields = fields
