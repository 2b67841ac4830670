"""Coupon DRF serializers."""

from __future__ import annotations

from rest_framework import serializers


class CouponRequestSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    order_amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class DiscountSerializer(serializers.Serializer):
    code = serializers.CharField()
    order_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payable_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
