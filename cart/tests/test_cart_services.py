from decimal import Decimal

import pytest
from cart.models import Cart, CartItem
from cart.services import add_item, clear_cart, remove_item, set_item_quantity
from catalog.tests.factories import ProductFactory
from common.choices import ItemSource
from common.exceptions import InsufficientStock, InvalidQuantity, InvalidReference, ItemNotFound, ProductNotFound
from users.tests.factories import UserFactory


@pytest.mark.django_db
def test_cart_is_created_with_user():
    user = UserFactory()
    assert Cart.objects.filter(user=user).exists()
    assert user.cart_count == 0


@pytest.mark.django_db
def test_add_then_overflow_keeps_quantity():
    user = UserFactory()
    product = ProductFactory(price=Decimal("100.00"), stock=10)

    cart = add_item(user=user, product_ref=str(product.id), quantity=3)
    item = cart.items.get()
    assert item.quantity == 3
    assert cart.summary().final_total == Decimal("300.00")

    with pytest.raises(InsufficientStock) as exc:
        add_item(user=user, product_ref=str(product.id), quantity=9)
    assert exc.value.remaining == 7
    assert exc.value.message == "Only 7 more available."

    item.refresh_from_db()
    assert item.quantity == 3


@pytest.mark.django_db
def test_add_beyond_total_stock_reports_what_is_left():
    user = UserFactory()
    product = ProductFactory(stock=10)
    add_item(user=user, product_ref=str(product.id), quantity=3)

    with pytest.raises(InsufficientStock) as exc:
        add_item(user=user, product_ref=str(product.id), quantity=11)
    assert exc.value.remaining == 7
    assert exc.value.message == "Only 7 more available."
    assert user.cart.items.get().quantity == 3


@pytest.mark.django_db
def test_add_existing_increments_and_refreshes_price():
    user = UserFactory()
    product = ProductFactory(price=Decimal("50.00"), stock=10)
    add_item(user=user, product_ref=str(product.id), quantity=2)

    product.discount_price = Decimal("40.00")
    product.save(update_fields=["discount_price", "updated_at"])
    cart = add_item(user=user, product_ref=str(product.id), quantity=3)

    item = cart.items.get()
    assert item.quantity == 5
    assert item.unit_price == Decimal("40.00")
    assert item.source == ItemSource.CATALOG
    assert cart.items.count() == 1


@pytest.mark.django_db
def test_add_uses_discount_price_only_when_not_above_price():
    user = UserFactory()
    product = ProductFactory(price=Decimal("80.00"), discount_price=Decimal("60.00"))
    cart = add_item(user=user, product_ref=str(product.id))
    assert cart.items.get().unit_price == Decimal("60.00")


@pytest.mark.django_db
def test_add_by_entry_id_matches_existing_line():
    user = UserFactory()
    product = ProductFactory(stock=10)
    cart = add_item(user=user, product_ref=str(product.id), quantity=1)
    entry_id = cart.items.get().entry_id

    cart = add_item(user=user, product_ref=str(entry_id), quantity=2, product_data={"name": "x", "price": "1"})
    assert cart.items.count() == 1
    assert cart.items.get().quantity == 3


@pytest.mark.django_db
def test_add_inline_product_has_no_stock_ceiling():
    user = UserFactory()
    descriptor = {"name": "Sample tee", "price": "19.99", "discount_price": "14.99", "brand": "Acme"}

    cart = add_item(user=user, product_ref="mock-tee", quantity=500, product_data=descriptor)
    item = cart.items.get()
    assert item.source == ItemSource.INLINE
    assert item.unit_price == Decimal("14.99")
    assert item.quantity == 500
    assert item.image == "/api/placeholder/150/150"


@pytest.mark.django_db
def test_add_rejects_bad_input():
    user = UserFactory()
    product = ProductFactory(stock=2)
    with pytest.raises(InvalidQuantity):
        add_item(user=user, product_ref=str(product.id), quantity=0)
    with pytest.raises(InvalidReference):
        add_item(user=user, product_ref="not-a-product")
    with pytest.raises(ProductNotFound):
        add_item(user=user, product_ref="999999")
    with pytest.raises(InsufficientStock):
        add_item(user=user, product_ref=str(product.id), quantity=3)
    assert not CartItem.objects.filter(cart__user=user).exists()


@pytest.mark.django_db
def test_draft_products_are_not_resolvable():
    user = UserFactory()
    product = ProductFactory(status="draft")
    with pytest.raises(ProductNotFound):
        add_item(user=user, product_ref=str(product.id))


@pytest.mark.django_db
def test_set_quantity_replaces_and_validates_stock():
    user = UserFactory()
    product = ProductFactory(price=Decimal("10.00"), stock=10)
    add_item(user=user, product_ref=str(product.id), quantity=2)

    cart = set_item_quantity(user=user, product_ref=str(product.id), quantity=7)
    assert cart.items.get().quantity == 7
    assert cart.summary().subtotal == Decimal("70.00")

    with pytest.raises(InsufficientStock) as exc:
        set_item_quantity(user=user, product_ref=str(product.id), quantity=11)
    assert exc.value.remaining == 10
    assert cart.items.get().quantity == 7


@pytest.mark.django_db
def test_set_quantity_keeps_stored_price():
    user = UserFactory()
    product = ProductFactory(price=Decimal("10.00"), stock=10)
    add_item(user=user, product_ref=str(product.id), quantity=1)
    product.price = Decimal("12.00")
    product.save(update_fields=["price", "updated_at"])

    cart = set_item_quantity(user=user, product_ref=str(product.id), quantity=2)
    assert cart.items.get().unit_price == Decimal("10.00")


@pytest.mark.django_db
def test_set_quantity_zero_removes_and_negative_is_rejected():
    user = UserFactory()
    product = ProductFactory()
    cart = add_item(user=user, product_ref=str(product.id), quantity=2)
    entry_id = str(cart.items.get().entry_id)

    with pytest.raises(InvalidQuantity):
        set_item_quantity(user=user, product_ref=entry_id, quantity=-1)

    cart = set_item_quantity(user=user, product_ref=entry_id, quantity=0)
    assert cart.items.count() == 0


@pytest.mark.django_db
def test_set_quantity_missing_item():
    user = UserFactory()
    with pytest.raises(ItemNotFound):
        set_item_quantity(user=user, product_ref="123", quantity=1)


@pytest.mark.django_db
def test_set_quantity_skips_stock_check_for_unlisted_product():
    user = UserFactory()
    product = ProductFactory(stock=3)
    add_item(user=user, product_ref=str(product.id), quantity=1)
    product.status = "draft"
    product.save(update_fields=["status", "updated_at"])

    cart = set_item_quantity(user=user, product_ref=str(product.id), quantity=8)
    assert cart.items.get().quantity == 8


@pytest.mark.django_db
def test_remove_and_clear():
    user = UserFactory()
    first = ProductFactory()
    second = ProductFactory()
    add_item(user=user, product_ref=str(first.id))
    add_item(user=user, product_ref=str(second.id), quantity=2)

    cart = remove_item(user=user, product_ref=str(first.id))
    assert [item.product_ref for item in cart.items.all()] == [str(second.id)]

    with pytest.raises(ItemNotFound):
        remove_item(user=user, product_ref=str(first.id))

    cart = clear_cart(user=user)
    assert cart.items.count() == 0
    # clearing an empty cart is fine
    clear_cart(user=user)
    assert user.cart_count == 0


@pytest.mark.django_db
def test_line_total_is_derived():
    user = UserFactory()
    product = ProductFactory(price=Decimal("19.99"), stock=10)
    cart = add_item(user=user, product_ref=str(product.id), quantity=3)
    item = cart.items.get()
    assert item.line_total == Decimal("59.97")
    assert cart.summary().subtotal == item.line_total


@pytest.mark.django_db
def test_catalog_is_authoritative_when_inline_trust_disabled(settings):
    settings.LEDGER_TRUST_INLINE_DESCRIPTORS = False
    user = UserFactory()
    product = ProductFactory(price=Decimal("100.00"), stock=5)

    cart = add_item(
        user=user, product_ref=str(product.id), product_data={"name": "Cheap copy", "price": "1.00"}
    )
    item = cart.items.get()
    assert item.unit_price == Decimal("100.00")
    assert item.name == product.name
    assert item.source == ItemSource.CATALOG
