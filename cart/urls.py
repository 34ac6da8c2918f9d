"""Cart URL routes (v1)."""

from django.urls import path

from .views import CartAddItemView, CartDetailView, CartItemView, CartMergeView

app_name = "cart"

urlpatterns = [
    path("", CartDetailView.as_view(), name="cart-detail"),
    path("add/", CartAddItemView.as_view(), name="cart-add-item"),
    path("items/<str:product_ref>/", CartItemView.as_view(), name="cart-item"),
    path("merge/", CartMergeView.as_view(), name="cart-merge"),
]
