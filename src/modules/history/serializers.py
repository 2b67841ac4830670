"""Order history DRF serializers (read-only)."""

from __future__ import annotations

from rest_framework import serializers

from modules.history.models import OrderHistory, OrderHistoryLine


class OrderHistoryLineSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderHistoryLine
        fields = ["id", "item_id", "item_name", "quantity", "price", "variant", "weight"]
        read_only_fields = fields


class OrderHistorySerializer(serializers.ModelSerializer):
    lines = OrderHistoryLineSerializer(many=True, read_only=True)

    class Meta:
        model = OrderHistory
        fields = [
            "id",
            "source_order_id",
            "order_number",
            "customer_id",
            "customer_name",
            "ordered_at",
            "delivered_at",
            "total_amount",
            "status",
            "delivery_address",
            "delivery_phone",
            "delivery_notes",
            "latitude",
            "longitude",
            "payment_id",
            "lines",
        ]
        read_only_fields = fields
