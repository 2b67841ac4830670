"""Cart API views.

The cart is always the authenticated customer's own; there is no cart id
in the URL.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.carts.dtos import AddCartLineDTO, UpdateCartLineDTO
from modules.carts.repositories.django_repository import CartDjangoRepository
from modules.carts.serializers import (
    AddCartLineSerializer,
    CartSerializer,
    UpdateCartLineSerializer,
)
from modules.carts.services import CartService
from modules.customers.mixins import CurrentCustomerMixin
from modules.items.inventory import InventoryLedger
from modules.items.repositories.django_repository import ItemDjangoRepository


class CartViewSet(CurrentCustomerMixin, ViewSet):
    """Read and edit the caller's cart through ``CartService``."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        item_repo = ItemDjangoRepository()
        self._service = CartService(
            cart_repository=CartDjangoRepository(),
            item_repository=item_repo,
            ledger=InventoryLedger(item_repo),
        )

    def retrieve(self, request: Request) -> Response:
        """GET /api/v1/cart/"""
        cart = self._service.get(self.get_customer(request).id)
        return Response(CartSerializer(cart).data)

    def clear(self, request: Request) -> Response:
        """DELETE /api/v1/cart/"""
        cart = self._service.clear(self.get_customer(request).id)
        return Response(CartSerializer(cart).data)

    def add_line(self, request: Request) -> Response:
        """POST /api/v1/cart/lines/"""
        serializer = AddCartLineSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = AddCartLineDTO(**serializer.validated_data)
        cart = self._service.add_line(self.get_customer(request).id, dto)
        return Response(CartSerializer(cart).data, status=status.HTTP_201_CREATED)

    def update_line(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/cart/lines/{pk}/"""
        serializer = UpdateCartLineSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = UpdateCartLineDTO(**serializer.validated_data)
        cart = self._service.update_line(self.get_customer(request).id, pk, dto)
        return Response(CartSerializer(cart).data)

    def remove_line(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/cart/lines/{pk}/"""
        cart = self._service.remove_line(self.get_customer(request).id, pk)
        return Response(CartSerializer(cart).data)
