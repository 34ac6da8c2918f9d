"""Cart app models.

Each user owns one cart: an ordered ledger of line items. Items store a
snapshot of the product they were added for (name, price, image) together
with the opaque ``product_ref`` the client used, which is either a catalog
product id or an ephemeral reference described inline by the client.
"""

import uuid
from decimal import Decimal

from common.choices import ItemSource
from common.models import TimeStampedModel
from django.conf import settings
from django.db import models
from django.utils import timezone

from .pricing import PricingSummary, line_total, summarize


class Cart(TimeStampedModel):
    """Shopping cart bound to exactly one user."""

    user = models.OneToOneField(settings.AUTH_USER_MODEL, related_name="cart", on_delete=models.CASCADE)

    class Meta:
        ordering = ["-updated_at"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Cart#{self.id} ({self.user_id})"

    def summary(self) -> PricingSummary:
        """Fresh pricing summary over the current items."""
        return summarize(self.items.all())

    def item_count(self) -> int:
        return int(self.items.aggregate(total=models.Sum("quantity"))["total"] or 0)


class CartItem(TimeStampedModel):
    """Line item in a cart. ``line_total`` is always derived, never stored."""

    entry_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    cart = models.ForeignKey(Cart, related_name="items", on_delete=models.CASCADE)
    product_ref = models.CharField(max_length=128)
    source = models.CharField(max_length=16, choices=ItemSource.choices, default=ItemSource.CATALOG)
    name = models.CharField(max_length=200)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    image = models.CharField(max_length=500, blank=True)
    quantity = models.PositiveIntegerField(default=1)
    added_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["cart", "product_ref"], name="unique_product_ref_per_cart"),
            models.CheckConstraint(
                name="cart_item_quantity_positive",
                condition=models.Q(quantity__gte=1),
            ),
            models.CheckConstraint(
                name="cart_item_price_non_negative",
                condition=models.Q(unit_price__gte=0),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"CartItem#{self.id} cart={self.cart_id} ref={self.product_ref} qty={self.quantity}"

    @property
    def line_total(self) -> Decimal:
        return line_total(self.unit_price, self.quantity)


class CartMergeReceipt(TimeStampedModel):
    """Fingerprint of a guest-cart payload already merged into a cart.

    Lets a retried merge with the same payload be recognised and skipped
    until the receipt expires.
    """

    cart = models.ForeignKey(Cart, related_name="merge_receipts", on_delete=models.CASCADE)
    fingerprint = models.CharField(max_length=64)
    expires_at = models.DateTimeField(db_index=True)

    class Meta:
        ordering = ["-created_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=["cart", "fingerprint"], name="unique_merge_fingerprint_per_cart"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"CartMergeReceipt<{self.cart_id}> {self.fingerprint[:12]}"
