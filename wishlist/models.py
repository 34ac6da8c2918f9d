"""Wishlist app models.

A wishlist is a per-user set of saved products. Unlike the cart it carries
no quantities and never checks stock; each product appears at most once.
"""

import uuid

from common.choices import ItemSource
from common.models import TimeStampedModel
from django.conf import settings
from django.db import models
from django.utils import timezone


class Wishlist(TimeStampedModel):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, related_name="wishlist", on_delete=models.CASCADE)

    class Meta:
        ordering = ["-updated_at"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Wishlist#{self.id} ({self.user_id})"


class WishlistItem(TimeStampedModel):
    """Saved product snapshot. ``original_price`` is the list price when discounted."""

    entry_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    wishlist = models.ForeignKey(Wishlist, related_name="items", on_delete=models.CASCADE)
    product_ref = models.CharField(max_length=128)
    source = models.CharField(max_length=16, choices=ItemSource.choices, default=ItemSource.CATALOG)
    name = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    original_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    image = models.CharField(max_length=500, blank=True)
    category = models.CharField(max_length=120, blank=True)
    brand = models.CharField(max_length=120, blank=True)
    added_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["wishlist", "product_ref"], name="unique_product_ref_per_wishlist"),
            models.CheckConstraint(name="wishlist_item_price_non_negative", condition=models.Q(price__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"WishlistItem#{self.id} wishlist={self.wishlist_id} ref={self.product_ref}"
