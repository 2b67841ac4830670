"""Cart URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.carts.views import CartViewSet

cart_detail = CartViewSet.as_view({"get": "retrieve", "delete": "clear"})
cart_lines = CartViewSet.as_view({"post": "add_line"})
cart_line_detail = CartViewSet.as_view({"patch": "update_line", "delete": "remove_line"})

urlpatterns = [
    path("cart/", cart_detail, name="cart-detail"),
    path("cart/lines/", cart_lines, name="cart-lines"),
    path("cart/lines/<str:pk>/", cart_line_detail, name="cart-line-detail"),
]
