"""Wishlist URL routes (v1)."""

from django.urls import path

from .views import (
    WishlistAddItemView,
    WishlistCheckView,
    WishlistDetailView,
    WishlistItemView,
    WishlistMergeView,
    WishlistToggleView,
)

app_name = "wishlist"

urlpatterns = [
    path("", WishlistDetailView.as_view(), name="wishlist-detail"),
    path("add/", WishlistAddItemView.as_view(), name="wishlist-add-item"),
    path("toggle/", WishlistToggleView.as_view(), name="wishlist-toggle"),
    path("items/<str:product_ref>/", WishlistItemView.as_view(), name="wishlist-item"),
    path("merge/", WishlistMergeView.as_view(), name="wishlist-merge"),
    path("check/<str:product_ref>/", WishlistCheckView.as_view(), name="wishlist-check"),
]
