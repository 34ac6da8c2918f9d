"""Cart services: ledger mutations and guest-cart reconciliation.

Every mutation runs in one transaction with the cart row locked, resolves the
product through ``catalog.resolver`` and finds existing entries through
``common.matching`` so both addressing schemes (product reference or entry id)
are accepted everywhere.
"""

import hashlib
import json
import logging
from datetime import timedelta
from typing import Any, Iterable, Mapping, Optional

from catalog.resolver import is_canonical, resolve_product
from catalog.selectors import lookup_product
from common.choices import ItemSource
from common.exceptions import InsufficientStock, InvalidQuantity, InvalidReference, ItemNotFound, LedgerError
from common.matching import find_entry
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from .models import Cart, CartItem, CartMergeReceipt
from .selectors import get_cart_for_update

logger = logging.getLogger("storefront.cart")


def _touch(cart: Cart) -> None:
    cart.save(update_fields=["updated_at"])


def _parse_quantity(value, default: int = 1) -> int:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise InvalidQuantity("Quantity must be a whole number.")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidQuantity("Quantity must be a whole number.")


@transaction.atomic
def add_item(*, user, product_ref, quantity: int = 1, product_data: Optional[Mapping[str, Any]] = None) -> Cart:
    """Add ``quantity`` units of a product, merging into an existing entry.

    The increment must fit in the stock left after what the cart already
    holds; otherwise ``InsufficientStock`` reports how many more fit and the
    cart is left unchanged. A matched entry is repriced at the current
    effective price.
    """

    quantity = _parse_quantity(quantity)
    if quantity < 1:
        raise InvalidQuantity("Quantity must be at least 1.")
    cart = get_cart_for_update(user=user)
    snapshot = resolve_product(product_ref, quantity, product_data, check_stock=False)

    existing = find_entry(cart.items.all(), product_ref)
    held = existing.quantity if existing else 0
    remaining = snapshot.remaining(held)
    if remaining is not None and quantity > remaining:
        raise InsufficientStock(remaining)

    if existing:
        existing.quantity = snapshot.clamp(held + quantity)
        existing.unit_price = snapshot.effective_price
        existing.added_at = timezone.now()
        existing.save(update_fields=["quantity", "unit_price", "added_at", "updated_at"])
        event = "cart.item_updated"
        final_quantity = existing.quantity
    else:
        created = CartItem.objects.create(
            cart=cart,
            product_ref=snapshot.product_ref,
            source=snapshot.source,
            name=snapshot.name,
            unit_price=snapshot.effective_price,
            image=snapshot.image,
            quantity=snapshot.clamp(quantity),
        )
        event = "cart.item_added"
        final_quantity = created.quantity
    _touch(cart)
    logger.info(
        event,
        extra={
            "event": event,
            "cart_id": cart.id,
            "user_id": getattr(user, "id", None),
            "product_ref": str(product_ref),
            "quantity": final_quantity,
        },
    )
    return cart


@transaction.atomic
def set_item_quantity(*, user, product_ref, quantity: int) -> Cart:
    """Replace an entry's quantity. Zero removes the entry.

    Catalog entries are revalidated against current stock; the stored unit
    price is kept.
    """

    quantity = _parse_quantity(quantity, default=None)
    if quantity is None or quantity < 0:
        raise InvalidQuantity()
    if quantity == 0:
        return remove_item(user=user, product_ref=product_ref)

    cart = get_cart_for_update(user=user)
    item = find_entry(cart.items.all(), product_ref)
    if item is None:
        raise ItemNotFound("Product not found in cart.")
    if item.source == ItemSource.CATALOG and is_canonical(item.product_ref):
        product = lookup_product(int(item.product_ref))
        if product is not None and quantity > product.stock:
            raise InsufficientStock(product.stock, f"Only {product.stock} available.")

    item.quantity = quantity
    item.added_at = timezone.now()
    item.save(update_fields=["quantity", "added_at", "updated_at"])
    _touch(cart)
    logger.info(
        "cart.item_updated",
        extra={
            "event": "cart.item_updated",
            "cart_id": cart.id,
            "user_id": getattr(user, "id", None),
            "product_ref": str(product_ref),
            "quantity": quantity,
        },
    )
    return cart


@transaction.atomic
def remove_item(*, user, product_ref) -> Cart:
    """Remove the first entry matching ``product_ref`` or raise ``ItemNotFound``."""

    cart = get_cart_for_update(user=user)
    item = find_entry(cart.items.all(), product_ref)
    if item is None:
        raise ItemNotFound("Product not found in cart.")
    item.delete()
    _touch(cart)
    logger.info(
        "cart.item_removed",
        extra={
            "event": "cart.item_removed",
            "cart_id": cart.id,
            "user_id": getattr(user, "id", None),
            "product_ref": str(product_ref),
        },
    )
    return cart


@transaction.atomic
def clear_cart(*, user) -> Cart:
    """Delete every entry. Safe to call on an empty cart.

    Merge receipts go too, so a later guest cart with the same contents is
    merged instead of being taken for a replay.
    """

    cart = get_cart_for_update(user=user)
    CartItem.objects.filter(cart=cart).delete()
    CartMergeReceipt.objects.filter(cart=cart).delete()
    _touch(cart)
    logger.info(
        "cart.cleared",
        extra={"event": "cart.cleared", "cart_id": cart.id, "user_id": getattr(user, "id", None)},
    )
    return cart


def incoming_fields(item: Mapping[str, Any]) -> tuple:
    """Return ``(product_ref, raw_quantity, descriptor)`` from a guest entry.

    Guest entries may name the product as ``product_ref``, ``product_id`` or
    ``id``; when no ``product_data`` is attached the entry itself serves as
    the inline descriptor.
    """

    ref = item.get("product_ref") or item.get("product_id") or item.get("id")
    descriptor = item.get("product_data")
    if not isinstance(descriptor, Mapping):
        descriptor = item
    return ref, item.get("quantity"), descriptor


def merge_fingerprint(items: Iterable[Mapping[str, Any]]) -> Optional[str]:
    """Stable SHA256 over the ``(product_ref, quantity)`` pairs of a payload."""

    pairs = sorted((str(ref), str(qty if qty not in (None, "") else 1)) for ref, qty, _ in map(incoming_fields, items))
    if not pairs:
        return None
    payload = json.dumps(pairs, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _merge_one(cart: Cart, entries: list, item: Mapping[str, Any]) -> None:
    ref, raw_quantity, descriptor = incoming_fields(item)
    if ref in (None, ""):
        raise InvalidReference("Guest cart entry has no product reference.")
    quantity = _parse_quantity(raw_quantity)
    if quantity < 1:
        raise InvalidQuantity("Quantity must be at least 1.")

    snapshot = resolve_product(ref, quantity, descriptor, check_stock=False)
    existing = find_entry(entries, ref)
    held = existing.quantity if existing else 0
    target = snapshot.clamp(held + quantity)
    if target < 1:
        raise InsufficientStock(0, "Out of stock.")

    if existing:
        existing.quantity = target
        existing.unit_price = snapshot.effective_price
        existing.added_at = timezone.now()
        existing.save(update_fields=["quantity", "unit_price", "added_at", "updated_at"])
    else:
        entries.append(
            CartItem.objects.create(
                cart=cart,
                product_ref=snapshot.product_ref,
                source=snapshot.source,
                name=snapshot.name,
                unit_price=snapshot.effective_price,
                image=snapshot.image,
                quantity=target,
            )
        )


@transaction.atomic
def merge_items(*, user, items: Iterable[Mapping[str, Any]]) -> Cart:
    """Fold guest-cart entries into the user's cart at login.

    Matches increment (clamped to stock), new products are appended. An entry
    that fails to resolve is logged and skipped. A payload already merged
    within ``CART_MERGE_RECEIPT_TTL_HOURS`` is not applied again.
    """

    items = [item for item in items if isinstance(item, Mapping)]
    cart = get_cart_for_update(user=user)
    fingerprint = merge_fingerprint(items)
    if fingerprint is None:
        return cart

    now = timezone.now()
    if CartMergeReceipt.objects.filter(cart=cart, fingerprint=fingerprint, expires_at__gt=now).exists():
        logger.info(
            "cart.merge_replayed",
            extra={"event": "cart.merge_replayed", "cart_id": cart.id, "user_id": getattr(user, "id", None)},
        )
        return cart

    entries = list(cart.items.all())
    merged = 0
    skipped = 0
    for item in items:
        try:
            _merge_one(cart, entries, item)
            merged += 1
        except LedgerError as exc:
            skipped += 1
            logger.warning(
                "cart.merge_item_skipped",
                extra={
                    "event": "cart.merge_item_skipped",
                    "cart_id": cart.id,
                    "user_id": getattr(user, "id", None),
                    "product_ref": str(incoming_fields(item)[0]),
                    "reason": exc.code,
                },
            )

    ttl_hours = getattr(settings, "CART_MERGE_RECEIPT_TTL_HOURS", 24)
    CartMergeReceipt.objects.update_or_create(
        cart=cart,
        fingerprint=fingerprint,
        defaults={"expires_at": now + timedelta(hours=int(ttl_hours))},
    )
    _touch(cart)
    logger.info(
        "cart.merged",
        extra={
            "event": "cart.merged",
            "cart_id": cart.id,
            "user_id": getattr(user, "id", None),
            "merged": merged,
            "skipped": skipped,
        },
    )
    return cart
