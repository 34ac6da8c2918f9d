"""Catalog app models.

Defines the catalog entities carts and wishlists resolve against:
categories and products with pricing and stock.
"""

from decimal import Decimal

from common.choices import DraftPublished
from common.models import TimeStampedModel
from django.db import models


class Category(TimeStampedModel):
    """Flat product categorization."""

    name = models.CharField(max_length=120)
    slug = models.SlugField(max_length=140, unique=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class Product(TimeStampedModel):
    """Sellable catalog entry. Its primary key is the canonical product reference."""

    STATUS_DRAFT = DraftPublished.DRAFT
    STATUS_PUBLISHED = DraftPublished.PUBLISHED
    STATUS_CHOICES = DraftPublished.choices

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True)
    description = models.TextField(blank=True)
    brand = models.CharField(max_length=120, blank=True)
    category = models.ForeignKey(
        Category,
        null=True,
        blank=True,
        related_name="products",
        on_delete=models.SET_NULL,
    )
    price = models.DecimalField(max_digits=12, decimal_places=2)
    discount_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    image = models.CharField(max_length=500, blank=True)
    stock = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                name="product_price_non_negative",
                condition=models.Q(price__gte=0),
            ),
            models.CheckConstraint(
                name="product_discount_le_price",
                condition=models.Q(discount_price__isnull=True) | models.Q(discount_price__lte=models.F("price")),
            ),
        ]
        indexes = [
            models.Index(fields=["category", "status"], name="catalog_product_cat_status"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.name

    @property
    def effective_price(self) -> Decimal:
        """Discounted price when set and not above the base price, else the base price."""

        if self.discount_price and self.discount_price <= self.price:
            return self.discount_price
        return self.price

    @property
    def in_stock(self) -> bool:
        return self.stock > 0
