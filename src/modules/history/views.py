"""Order history API views (read-only).

Customers read their own archive; staff read everything.
"""

from __future__ import annotations

from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.customers.mixins import CurrentCustomerMixin
from modules.history.archive import OrderArchive
from modules.history.exceptions import HistoryNotFound
from modules.history.serializers import OrderHistorySerializer


class OrderHistoryViewSet(CurrentCustomerMixin, ViewSet):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._archive = OrderArchive()

    def list(self, request: Request) -> Response:
        """GET /api/v1/order-history/"""
        if request.user.is_staff:
            records = self._archive.list_all()
        else:
            records = self._archive.list_for_customer(self.get_customer(request).id)

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(records, request, view=self)
        return paginator.get_paginated_response(OrderHistorySerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/order-history/{pk}/"""
        record = self._archive.get(pk)
        if not request.user.is_staff and record.customer_id != self.get_customer(request).id:
            raise HistoryNotFound(f"Order history {pk} not found.")
        return Response(OrderHistorySerializer(record).data)
