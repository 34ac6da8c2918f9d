import pytest
from cart.models import Cart, CartItem, CartMergeReceipt
from catalog.models import Category, Product
from common.models import TimeStampedModel
from orders.models import IdempotencyKey, Order, OrderItem
from users.tests.factories import UserFactory
from wishlist.models import Wishlist, WishlistItem


@pytest.mark.parametrize(
    "model",
    [Category, Product, Cart, CartItem, CartMergeReceipt, Wishlist, WishlistItem, Order, OrderItem, IdempotencyKey],
)
def test_models_share_timestamp_base(model):
    assert issubclass(model, TimeStampedModel)
    fields = {field.name for field in model._meta.get_fields()}
    assert {"created_at", "updated_at"} <= fields


@pytest.mark.django_db
def test_timestamps_are_set_on_save():
    cart = UserFactory().cart
    created, updated = cart.created_at, cart.updated_at
    assert created is not None
    cart.save()
    cart.refresh_from_db()
    assert cart.created_at == created
    assert cart.updated_at >= updated
