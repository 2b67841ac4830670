"""Cart DRF serializers (output plus request parsing)."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from modules.carts.models import Cart, CartLine
from modules.orders.pricing import PricingPolicy


class CartLineSerializer(serializers.ModelSerializer):
    item_id = serializers.UUIDField(source="item.id", read_only=True)
    item_name = serializers.CharField(source="item.name", read_only=True)
    unit_price = serializers.SerializerMethodField()
    line_total = serializers.SerializerMethodField()

    class Meta:
        model = CartLine
        fields = [
            "id",
            "item_id",
            "item_name",
            "quantity",
            "variant",
            "weight",
            "pinned_price",
            "unit_price",
            "line_total",
        ]
        read_only_fields = fields

    def _unit_price(self, obj: CartLine) -> Decimal:
        return PricingPolicy.from_settings().unit_price(obj.item.price, obj.variant, obj.pinned_price)

    def get_unit_price(self, obj: CartLine) -> str:
        return str(self._unit_price(obj))

    def get_line_total(self, obj: CartLine) -> str:
        return str(self._unit_price(obj) * obj.quantity)


class CartSerializer(serializers.ModelSerializer):
    lines = CartLineSerializer(many=True, read_only=True)
    total = serializers.SerializerMethodField()

    class Meta:
        model = Cart
        fields = ["id", "lines", "total", "updated_at"]
        read_only_fields = fields

    def get_total(self, obj: Cart) -> str:
        policy = PricingPolicy.from_settings()
        total = sum(
            (policy.unit_price(line.item.price, line.variant, line.pinned_price) * line.quantity
             for line in obj.lines.all()),
            Decimal("0.00"),
        )
        return str(total)


class AddCartLineSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    quantity = serializers.IntegerField()
    variant = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    weight = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True, default=None)
    pinned_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True, default=None
    )


class UpdateCartLineSerializer(serializers.Serializer):
    quantity = serializers.IntegerField()
