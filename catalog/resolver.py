"""Product resolution for cart and wishlist mutations.

A client names a product by an opaque reference. Canonical references are
catalog primary keys; anything else is an ephemeral product the client
describes inline. This module is the only place that decides which source a
reference comes from and turns it into a priced ``ProductSnapshot``.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union

from common.choices import ItemSource
from common.exceptions import InsufficientStock, InvalidReference, ProductNotFound
from django.conf import settings

from .models import Product
from .selectors import lookup_product

CANONICAL_REF = re.compile(r"^[1-9][0-9]{0,18}$")
CENTS = Decimal("0.01")
# Bounds of the ledger columns snapshots are written to.
MAX_PRICE = Decimal("9999999999.99")
MAX_REF_LENGTH = 128
MAX_NAME_LENGTH = 200
MAX_LABEL_LENGTH = 120
MAX_IMAGE_LENGTH = 500


@dataclass(frozen=True)
class CatalogSource:
    product_id: int


@dataclass(frozen=True)
class InlineSource:
    descriptor: Mapping[str, Any]


ProductSource = Union[CatalogSource, InlineSource]


@dataclass(frozen=True)
class ProductSnapshot:
    """Priced view of a product at resolution time.

    ``available_stock`` is None for inline products, meaning unbounded.
    """

    product_ref: str
    name: str
    unit_price: Decimal
    effective_price: Decimal
    image: str
    available_stock: Optional[int] = None
    category: str = ""
    brand: str = ""
    source: str = ItemSource.INLINE

    @property
    def from_catalog(self) -> bool:
        return self.source == ItemSource.CATALOG

    def remaining(self, held: int = 0) -> Optional[int]:
        """Units still addable on top of ``held``; None when unbounded."""

        if self.available_stock is None:
            return None
        return max(0, self.available_stock - int(held))

    def clamp(self, quantity: int) -> int:
        if self.available_stock is None:
            return int(quantity)
        return min(int(quantity), self.available_stock)


def placeholder_image() -> str:
    return getattr(settings, "LEDGER_PLACEHOLDER_IMAGE", "/api/placeholder/150/150")


def is_canonical(product_ref) -> bool:
    return bool(CANONICAL_REF.match(str(product_ref)))


def _money(value) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount < 0 or amount > MAX_PRICE:
        return None
    return amount.quantize(CENTS)


def is_usable_descriptor(descriptor) -> bool:
    """A descriptor needs a non-empty name and a numeric price that fits a ledger row."""

    if not isinstance(descriptor, Mapping):
        return False
    name = descriptor.get("name")
    if not isinstance(name, str) or not name.strip():
        return False
    return _money(descriptor.get("price")) is not None


def source_for(product_ref, descriptor: Optional[Mapping[str, Any]] = None) -> ProductSource:
    """Decide where a reference is resolved from.

    A usable descriptor wins unless inline trust is disabled and the reference
    is canonical, in which case the catalog is authoritative.
    """

    ref = str(product_ref)
    canonical = is_canonical(ref)
    trust_inline = getattr(settings, "LEDGER_TRUST_INLINE_DESCRIPTORS", True)
    if is_usable_descriptor(descriptor) and (trust_inline or not canonical):
        return InlineSource(descriptor)
    if canonical:
        return CatalogSource(int(ref))
    raise InvalidReference(f"Invalid product reference: {ref!r}. Provide product data for non-catalog products.")


def _effective(price: Decimal, discount: Optional[Decimal]) -> Decimal:
    if discount and discount <= price:
        return discount
    return price


def _from_descriptor(ref: str, descriptor: Mapping[str, Any]) -> ProductSnapshot:
    price = _money(descriptor.get("price"))
    discount = _money(descriptor.get("discount_price"))
    image = str(descriptor.get("image") or "")
    return ProductSnapshot(
        product_ref=ref,
        name=descriptor["name"].strip()[:MAX_NAME_LENGTH],
        unit_price=price,
        effective_price=_effective(price, discount),
        image=image if image and len(image) <= MAX_IMAGE_LENGTH else placeholder_image(),
        available_stock=None,
        category=str(descriptor.get("category") or "")[:MAX_LABEL_LENGTH],
        brand=str(descriptor.get("brand") or "")[:MAX_LABEL_LENGTH],
    )


def _from_product(ref: str, product: Product) -> ProductSnapshot:
    price = product.price.quantize(CENTS)
    discount = product.discount_price.quantize(CENTS) if product.discount_price is not None else None
    return ProductSnapshot(
        product_ref=ref,
        name=product.name,
        unit_price=price,
        effective_price=_effective(price, discount),
        image=product.image or placeholder_image(),
        available_stock=int(product.stock),
        category=product.category.name if product.category_id else "",
        brand=product.brand,
        source=ItemSource.CATALOG,
    )


def resolve_product(
    product_ref,
    quantity: int = 1,
    descriptor: Optional[Mapping[str, Any]] = None,
    *,
    check_stock: bool = True,
) -> ProductSnapshot:
    """Resolve a reference into a ``ProductSnapshot``.

    Raises ``InvalidReference`` when the reference can be neither looked up
    nor described, ``ProductNotFound`` for unknown catalog ids, and
    ``InsufficientStock`` when ``check_stock`` is set and ``quantity`` exceeds
    the catalog stock.
    Inline prices above ``MAX_PRICE`` make a descriptor unusable.
    """

    ref = str(product_ref)
    if not ref:
        raise InvalidReference("Product reference is required.")
    if len(ref) > MAX_REF_LENGTH:
        raise InvalidReference(f"Product reference is longer than {MAX_REF_LENGTH} characters.")
    source = source_for(ref, descriptor)
    if isinstance(source, InlineSource):
        return _from_descriptor(ref, source.descriptor)

    product = lookup_product(source.product_id)
    if product is None:
        raise ProductNotFound(f"Product {ref} not found.")
    if check_stock and int(quantity) > int(product.stock):
        raise InsufficientStock(int(product.stock))
    return _from_product(ref, product)
