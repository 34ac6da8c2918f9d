"""Selectors for read-only wishlist queries."""

from common.matching import contains

from .models import Wishlist


def get_wishlist_for_user(*, user) -> Wishlist:
    """Return the user's wishlist, creating it if missing."""

    wishlist, _ = Wishlist.objects.get_or_create(user=user)
    return wishlist


def get_wishlist_for_update(*, user) -> Wishlist:
    """Return the user's wishlist with its row locked; call inside ``transaction.atomic``."""

    get_wishlist_for_user(user=user)
    return Wishlist.objects.select_for_update().get(user=user)


def is_in_wishlist(*, user, product_ref) -> bool:
    """True when an entry matches ``product_ref`` by reference or entry id."""

    wishlist = get_wishlist_for_user(user=user)
    return contains(wishlist.items.all(), product_ref)
