"""Selectors for read-only cart queries."""

from .models import Cart


def get_cart_for_user(*, user) -> Cart:
    """Return the user's cart, creating it if missing."""

    cart, _ = Cart.objects.get_or_create(user=user)
    return cart


def get_cart_for_update(*, user) -> Cart:
    """Return the user's cart with its row locked for the current transaction.

    Must be called inside ``transaction.atomic``.
    """

    get_cart_for_user(user=user)
    return Cart.objects.select_for_update().get(user=user)


def list_items(*, cart: Cart) -> list:
    return list(cart.items.all())
