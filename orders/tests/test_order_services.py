from datetime import timedelta
from decimal import Decimal

import pytest
from cart.models import CartMergeReceipt
from cart.services import add_item, merge_items
from catalog.tests.factories import ProductFactory
from common.exceptions import EmptyCart, InsufficientStock, ProductNotFound
from django.core.management import call_command
from django.utils import timezone
from orders.models import IdempotencyKey, Order
from orders.services import compute_request_hash, place_order_from_cart, with_idempotency
from users.tests.factories import UserFactory


@pytest.mark.django_db
def test_place_order_snapshots_cart_and_decrements_stock():
    user = UserFactory()
    product = ProductFactory(price=Decimal("100.00"), stock=30)
    add_item(user=user, product_ref=str(product.id), quantity=22)
    add_item(user=user, product_ref="mock-1", quantity=1, product_data={"name": "Gift wrap", "price": "0.00"})

    order = place_order_from_cart(user=user)

    assert order.number == f"ORD-{order.id:06d}"
    assert order.status == Order.STATUS_PENDING
    assert order.total_quantity == 23
    assert order.subtotal == Decimal("2200.00")
    assert order.bulk_discount_percent == 15
    assert order.final_total == Decimal("1870.00")
    assert [item.product_ref for item in order.items.all()] == [str(product.id), "mock-1"]

    product.refresh_from_db()
    assert product.stock == 8
    assert user.cart.items.count() == 0


@pytest.mark.django_db
def test_place_order_lets_the_same_guest_cart_merge_again():
    user = UserFactory()
    product = ProductFactory(stock=5)
    payload = [{"product_ref": str(product.id), "quantity": 1}]
    merge_items(user=user, items=payload)

    place_order_from_cart(user=user)
    assert not CartMergeReceipt.objects.filter(cart__user=user).exists()

    cart = merge_items(user=user, items=payload)
    assert [(item.product_ref, item.quantity) for item in cart.items.all()] == [(str(product.id), 1)]


@pytest.mark.django_db
def test_place_order_rejects_empty_cart():
    with pytest.raises(EmptyCart):
        place_order_from_cart(user=UserFactory())


@pytest.mark.django_db
def test_place_order_aborts_on_shortfall():
    user = UserFactory()
    plenty = ProductFactory(stock=10)
    scarce = ProductFactory(stock=5)
    add_item(user=user, product_ref=str(plenty.id), quantity=2)
    add_item(user=user, product_ref=str(scarce.id), quantity=5)
    scarce.stock = 3
    scarce.save(update_fields=["stock", "updated_at"])

    with pytest.raises(InsufficientStock) as exc:
        place_order_from_cart(user=user)
    assert exc.value.remaining == 3

    plenty.refresh_from_db()
    assert plenty.stock == 10
    assert user.cart.items.count() == 2
    assert not Order.objects.filter(user=user).exists()


@pytest.mark.django_db
def test_place_order_rejects_unlisted_product():
    user = UserFactory()
    product = ProductFactory()
    add_item(user=user, product_ref=str(product.id))
    product.status = "draft"
    product.save(update_fields=["status", "updated_at"])

    with pytest.raises(ProductNotFound):
        place_order_from_cart(user=user)


@pytest.mark.django_db
def test_with_idempotency_replays_stored_response():
    user = UserFactory()
    calls = []

    def handler():
        calls.append(1)
        return {"total": Decimal("1.50")}, 201

    first = with_idempotency(key="k1", user=user, path="/api/v1/orders/", method="post", handler=handler)
    second = with_idempotency(key="k1", user=user, path="/api/v1/orders/", method="POST", handler=handler)

    assert first == ({"total": Decimal("1.50")}, 201)
    assert second == ({"total": "1.50"}, 201)
    assert len(calls) == 1


@pytest.mark.django_db
def test_with_idempotency_conflicts_on_different_payload():
    user = UserFactory()
    handler = lambda: ({"ok": True}, 200)  # noqa: E731
    with_idempotency(key="k2", user=user, path="/p", method="POST", handler=handler, request_hash="a")

    body, code = with_idempotency(key="k2", user=user, path="/p", method="POST", handler=handler, request_hash="b")
    assert code == 409


@pytest.mark.django_db
def test_with_idempotency_runs_again_after_expiry():
    user = UserFactory()
    calls = []

    def handler():
        calls.append(1)
        return {"n": len(calls)}, 200

    with_idempotency(key="k3", user=user, path="/p", method="POST", handler=handler)
    IdempotencyKey.objects.update(expires_at=timezone.now() - timedelta(seconds=1))
    body, _ = with_idempotency(key="k3", user=user, path="/p", method="POST", handler=handler)

    assert body == {"n": 2}


def test_compute_request_hash_is_order_insensitive():
    assert compute_request_hash({"a": 1, "b": 2}) == compute_request_hash({"b": 2, "a": 1})
    assert compute_request_hash({}) is None
    assert compute_request_hash({"x": object()}) is None


@pytest.mark.django_db
def test_cleanup_idempotency_command():
    user = UserFactory()
    IdempotencyKey.objects.create(
        key="old", user=user, scope=f"user:{user.id}", path="/p", method="POST", expires_at=timezone.now()
    )
    IdempotencyKey.objects.create(
        key="new",
        user=user,
        scope=f"user:{user.id}",
        path="/p",
        method="POST",
        expires_at=timezone.now() + timedelta(hours=1),
    )

    call_command("cleanup_idempotency")

    assert list(IdempotencyKey.objects.values_list("key", flat=True)) == ["new"]
