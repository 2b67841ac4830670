"""Order history URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.history.views import OrderHistoryViewSet

router = DefaultRouter(trailing_slash=True)
router.register("order-history", OrderHistoryViewSet, basename="order-history")

urlpatterns = router.urls
