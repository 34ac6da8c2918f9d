"""User model for the storefront.

The custom `User` extends Django's `AbstractUser` with a unique email and an
optional contact phone. Each user owns exactly one cart and one wishlist
(created by signals in those apps when the user is created).
"""

from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models


class User(AbstractUser):
    """Custom user with unique, normalized email."""

    email = models.EmailField(unique=True)
    phone = models.CharField(
        max_length=16,
        blank=True,
        validators=[RegexValidator(r"^\+?[1-9]\d{1,14}$", message="Use E.164 format (e.g., +919876543210)")],
        help_text="Primary contact number in E.164 format",
    )

    def save(self, *args, **kwargs):
        """Normalize email and phone before persisting."""
        if self.email:
            self.email = self.email.strip().lower()
        if self.phone:
            self.phone = self.phone.strip()
        super().save(*args, **kwargs)

    @property
    def cart_count(self) -> int:
        """Total units across the user's cart."""
        cart = getattr(self, "cart", None)
        return cart.item_count() if cart is not None else 0

    @property
    def wishlist_count(self) -> int:
        wishlist = getattr(self, "wishlist", None)
        return wishlist.items.count() if wishlist is not None else 0
