"""Order API views.

Exposes ``OrderPlacementService`` and ``OrderLifecycleService`` via HTTP.
Domain exceptions propagate to ``standard_exception_handler``.
Customers see and act on their own orders; staff see every order and
drive status changes.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.carts.repositories.django_repository import CartDjangoRepository
from modules.core.pagination import StandardResultsSetPagination
from modules.customers.mixins import CurrentCustomerMixin
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.history.archive import OrderArchive
from modules.history.models import OrderHistory
from modules.history.serializers import OrderHistorySerializer
from modules.items.inventory import InventoryLedger
from modules.items.repositories.django_repository import ItemDjangoRepository
from modules.orders.dtos import PlaceOrderDTO, UpdateAddressDTO, UpdateStatusDTO
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.payments import RazorpaySignatureVerifier
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    OrderListSerializer,
    OrderSerializer,
    PlaceOrderSerializer,
    UpdateAddressSerializer,
    UpdateStatusSerializer,
)
from modules.orders.services import OrderLifecycleService, OrderPlacementService


class OrderViewSet(CurrentCustomerMixin, GenericViewSet):
    """ViewSet for Order operations (placement, lookup, lifecycle)."""

    queryset = Order.objects.all()
    filterset_class = OrderFilter
    search_fields = ["order_number", "customer_name"]
    ordering_fields = ["ordered_at", "total_amount", "status"]
    ordering = ["-ordered_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        order_repo = OrderDjangoRepository()
        item_repo = ItemDjangoRepository()
        ledger = InventoryLedger(item_repo)
        self._placement = OrderPlacementService(
            order_repository=order_repo,
            cart_repository=CartDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            ledger=ledger,
            payment_gateway=RazorpaySignatureVerifier(),
        )
        self._lifecycle = OrderLifecycleService(
            order_repository=order_repo,
            ledger=ledger,
            archive=OrderArchive(order_repository=order_repo),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def get_queryset(self):
        queryset = Order.objects.select_related("customer").prefetch_related("lines")
        if self.request.user.is_staff:
            return queryset
        return queryset.filter(customer=self.get_customer(self.request))

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = PlaceOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = PlaceOrderDTO(**serializer.validated_data)
        order = self._placement.place_order(self.get_customer(request).id, dto)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/ (own orders; staff see all)"""
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        if request.user.is_staff:
            order = self._lifecycle.get_order(pk)
        else:
            order = self._lifecycle.get_customer_order(pk, self.get_customer(request).id)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"], url_path="status", permission_classes=[IsAdminUser])
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/status/

        Delivered orders are archived; the response is then the history
        record instead of the order.
        """
        serializer = UpdateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = UpdateStatusDTO(**serializer.validated_data)
        result = self._lifecycle.update_status(pk, dto.status)
        if isinstance(result, OrderHistory):
            return Response({"archived": True, "history": OrderHistorySerializer(result).data})
        return Response({"archived": False, "order": OrderSerializer(result).data})

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/"""
        self._lifecycle.cancel(pk, self.get_customer(request).id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def address(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/address/"""
        serializer = UpdateAddressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = UpdateAddressDTO(**serializer.validated_data)
        order = self._lifecycle.update_address(pk, self.get_customer(request).id, dto)
        return Response(OrderSerializer(order).data)

    @action(
        detail=False,
        methods=["post"],
        url_path="archive-delivered",
        permission_classes=[IsAdminUser],
    )
    def archive_delivered(self, request: Request) -> Response:
        """POST /api/v1/orders/archive-delivered/"""
        result = OrderArchive().bulk_archive()
        return Response({"archived": result.archived, "failed": result.failed})
