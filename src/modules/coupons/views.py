"""Coupon API views: discount preview and application."""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.coupons.dtos import CouponRequestDTO
from modules.coupons.repositories.django_repository import CouponDjangoRepository
from modules.coupons.serializers import CouponRequestSerializer, DiscountSerializer
from modules.coupons.services import CouponService


class CouponViewSet(ViewSet):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CouponService(repository=CouponDjangoRepository())

    def _dto(self, request: Request) -> CouponRequestDTO:
        serializer = CouponRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return CouponRequestDTO(**serializer.validated_data)

    @action(detail=False, methods=["post"])
    def preview(self, request: Request) -> Response:
        """POST /api/v1/coupons/preview/"""
        dto = self._dto(request)
        result = self._service.calculate_discount(dto.code, dto.order_amount)
        return Response(DiscountSerializer(result).data)

    @action(detail=False, methods=["post"])
    def apply(self, request: Request) -> Response:
        """POST /api/v1/coupons/apply/"""
        dto = self._dto(request)
        result = self._service.apply_coupon(dto.code, dto.order_amount)
        return Response(DiscountSerializer(result).data)
