import threading
from decimal import Decimal
from typing import List

import pytest
from cart.models import CartItem
from cart.services import add_item, set_item_quantity
from catalog.tests.factories import ProductFactory
from common.exceptions import InsufficientStock
from django.db import close_old_connections, connection
from users.tests.factories import UserFactory


@pytest.mark.django_db
def test_failed_update_rolls_back_and_allows_later_updates():
    user = UserFactory()
    product = ProductFactory(price=Decimal("20.00"), stock=3)
    add_item(user=user, product_ref=str(product.id), quantity=2)

    with pytest.raises(InsufficientStock):
        set_item_quantity(user=user, product_ref=str(product.id), quantity=5)

    item = CartItem.objects.get(cart__user=user)
    assert item.quantity == 2

    cart = set_item_quantity(user=user, product_ref=str(product.id), quantity=1)
    assert cart.items.get().quantity == 1


def _add_worker(barrier: threading.Barrier, user, product_ref: str, qty: int, successes: List[int], errors: List[Exception]):
    close_old_connections()
    barrier.wait()
    try:
        add_item(user=user, product_ref=product_ref, quantity=qty)
        successes.append(qty)
    except InsufficientStock as exc:
        errors.append(exc)
    finally:
        connection.close()


@pytest.mark.django_db(transaction=True)
def test_threaded_adds_for_same_user_never_exceed_stock():
    if connection.vendor == "sqlite":
        pytest.skip("SQLite lacks real concurrent transactions; skipping threaded test.")
    user = UserFactory()
    product = ProductFactory(stock=5)

    barrier = threading.Barrier(2)
    successes: List[int] = []
    errors: List[Exception] = []
    threads = [
        threading.Thread(target=_add_worker, args=(barrier, user, str(product.id), 3, successes, errors))
        for _ in range(2)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    # The cart row lock serializes both writers: the second sees the first's line.
    item = CartItem.objects.get(cart__user=user)
    assert item.quantity == 3
    assert len(successes) == 1
    assert len(errors) == 1
    assert errors[0].remaining == 2
