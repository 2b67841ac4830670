"""Customer API views.

An authenticated account registers its own customer profile (which also
creates the cart); staff can list and delete customers.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.customers.dtos import RegisterCustomerDTO
from modules.customers.filters import CustomerFilter
from modules.customers.mixins import CurrentCustomerMixin
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import CustomerSerializer, RegisterCustomerSerializer
from modules.customers.services import CustomerService


class CustomerViewSet(CurrentCustomerMixin, ListModelMixin, GenericViewSet):
    """ViewSet for customer registration and staff administration."""

    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = CustomerFilter
    search_fields = ["name", "email"]
    ordering_fields = ["created_at", "name", "email"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(repository=CustomerDjangoRepository())

    def get_permissions(self):
        if self.action in {"list", "destroy"}:
            return [IsAdminUser()]
        return [IsAuthenticated()]

    def create(self, request: Request) -> Response:
        """POST /api/v1/customers/ (registers the caller's profile)"""
        serializer = RegisterCustomerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = RegisterCustomerDTO(**serializer.validated_data, user_id=request.user.pk)
        customer = self._service.register_customer(dto)
        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"])
    def me(self, request: Request) -> Response:
        """GET /api/v1/customers/me/"""
        return Response(CustomerSerializer(self.get_customer(request)).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/customers/{pk}/"""
        self._service.delete_customer(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
