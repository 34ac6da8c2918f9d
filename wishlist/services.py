"""Wishlist services.

Same addressing and resolution rules as the cart, without quantities or
stock checks. A product is saved at most once.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Tuple

from cart.services import incoming_fields
from catalog.resolver import ProductSnapshot, resolve_product
from common.choices import ToggleAction
from common.exceptions import DuplicateEntry, InvalidReference, ItemNotFound, LedgerError
from common.matching import find_entry
from django.db import transaction

from .models import Wishlist, WishlistItem
from .selectors import get_wishlist_for_update

logger = logging.getLogger("storefront.wishlist")


def _create_entry(wishlist: Wishlist, snapshot: ProductSnapshot) -> WishlistItem:
    discounted = snapshot.effective_price < snapshot.unit_price
    return WishlistItem.objects.create(
        wishlist=wishlist,
        product_ref=snapshot.product_ref,
        source=snapshot.source,
        name=snapshot.name,
        price=snapshot.effective_price,
        original_price=snapshot.unit_price if discounted else None,
        image=snapshot.image,
        category=snapshot.category,
        brand=snapshot.brand,
    )


def _log(event: str, wishlist: Wishlist, user, product_ref=None, level=logging.INFO, **fields) -> None:
    extra = {"event": event, "wishlist_id": wishlist.id, "user_id": getattr(user, "id", None), **fields}
    if product_ref is not None:
        extra["product_ref"] = str(product_ref)
    logger.log(level, event, extra=extra)


@transaction.atomic
def add_item(*, user, product_ref, product_data: Optional[Mapping[str, Any]] = None) -> Wishlist:
    """Save a product. Raises ``DuplicateEntry`` if it is already saved."""

    wishlist = get_wishlist_for_update(user=user)
    if find_entry(wishlist.items.all(), product_ref) is not None:
        raise DuplicateEntry("Product already in wishlist.")
    snapshot = resolve_product(product_ref, 1, product_data, check_stock=False)
    _create_entry(wishlist, snapshot)
    wishlist.save(update_fields=["updated_at"])
    _log("wishlist.item_added", wishlist, user, product_ref)
    return wishlist


@transaction.atomic
def toggle_item(*, user, product_ref, product_data: Optional[Mapping[str, Any]] = None) -> Tuple[Wishlist, str]:
    """Remove the product if saved, otherwise save it. Returns the action taken."""

    wishlist = get_wishlist_for_update(user=user)
    existing = find_entry(wishlist.items.all(), product_ref)
    if existing is not None:
        existing.delete()
        action = ToggleAction.REMOVED
    else:
        snapshot = resolve_product(product_ref, 1, product_data, check_stock=False)
        _create_entry(wishlist, snapshot)
        action = ToggleAction.ADDED
    wishlist.save(update_fields=["updated_at"])
    _log("wishlist.toggled", wishlist, user, product_ref, action=str(action))
    return wishlist, action


@transaction.atomic
def remove_item(*, user, product_ref) -> Wishlist:
    wishlist = get_wishlist_for_update(user=user)
    existing = find_entry(wishlist.items.all(), product_ref)
    if existing is None:
        raise ItemNotFound("Product not found in wishlist.")
    existing.delete()
    wishlist.save(update_fields=["updated_at"])
    _log("wishlist.item_removed", wishlist, user, product_ref)
    return wishlist


@transaction.atomic
def clear_wishlist(*, user) -> Wishlist:
    wishlist = get_wishlist_for_update(user=user)
    WishlistItem.objects.filter(wishlist=wishlist).delete()
    wishlist.save(update_fields=["updated_at"])
    _log("wishlist.cleared", wishlist, user)
    return wishlist


@transaction.atomic
def merge_items(*, user, items: Iterable[Mapping[str, Any]]) -> Wishlist:
    """Fold guest wishlist entries in, skipping products already saved.

    Entries that cannot be resolved are logged and skipped; merging the same
    payload again changes nothing.
    """

    wishlist = get_wishlist_for_update(user=user)
    entries = list(wishlist.items.all())
    added = 0
    for item in items:
        if not isinstance(item, Mapping):
            continue
        ref, _, descriptor = incoming_fields(item)
        try:
            if ref in (None, ""):
                raise InvalidReference("Guest wishlist entry has no product reference.")
            if find_entry(entries, ref) is not None:
                continue
            snapshot = resolve_product(ref, 1, descriptor, check_stock=False)
            entries.append(_create_entry(wishlist, snapshot))
            added += 1
        except LedgerError as exc:
            _log("wishlist.merge_item_skipped", wishlist, user, ref, level=logging.WARNING, reason=exc.code)

    wishlist.save(update_fields=["updated_at"])
    _log("wishlist.merged", wishlist, user, added=added)
    return wishlist
