"""Selectors for the catalog domain.

Expose read-only query helpers to keep views thin and allow reuse across
APIs and services. Selectors should return querysets or lightweight data
structures and avoid side effects.
"""

from typing import Iterable, Optional

from django.db.models import Q, QuerySet

from .models import Category, Product


def list_categories(ordering: Optional[Iterable[str]] = None) -> QuerySet[Category]:
    """Return active categories ordered by the provided fields.

    Defaults to sorting by ``sort_order`` then ``name``.
    """

    ordering = list(ordering or ("sort_order", "name"))
    return Category.objects.filter(is_active=True).order_by(*ordering)


def list_products(
    *,
    category_slug: Optional[str] = None,
    brand: Optional[str] = None,
    search: Optional[str] = None,
    ordering: Optional[Iterable[str]] = None,
) -> QuerySet[Product]:
    """Return published products with common filters applied."""

    qs = Product.objects.filter(status=Product.STATUS_PUBLISHED).select_related("category")

    if category_slug:
        qs = qs.filter(category__slug=category_slug)
    if brand:
        qs = qs.filter(brand__iexact=brand)
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(brand__icontains=search) | Q(description__icontains=search))

    ordering = list(ordering or ("name",))
    return qs.order_by(*ordering)


def lookup_product(product_id: int) -> Optional[Product]:
    """Return a published product by primary key, or None when it is not sellable."""

    return (
        Product.objects.select_related("category")
        .filter(id=product_id, status=Product.STATUS_PUBLISHED)
        .first()
    )
