"""Shared enumerations and choices used across apps."""

from django.db import models


class DraftPublished(models.TextChoices):
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"


class ItemSource(models.TextChoices):
    """Where a ledger entry's product data came from."""

    CATALOG = "catalog", "Catalog"
    INLINE = "inline", "Inline"


class ToggleAction(models.TextChoices):
    """Outcome of a wishlist toggle."""

    ADDED = "added", "Added"
    REMOVED = "removed", "Removed"


class OrderStatus(models.TextChoices):
    """Lifecycle statuses for orders."""

    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    CANCELLED = "cancelled", "Cancelled"
