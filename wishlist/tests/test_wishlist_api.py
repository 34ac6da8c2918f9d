import pytest
from catalog.tests.factories import ProductFactory
from rest_framework.test import APIClient
from users.tests.factories import UserFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.mark.django_db
def test_wishlist_detail_initial_empty():
    resp = _client(UserFactory()).get("/api/v1/wishlist/")
    assert resp.status_code == 200
    assert resp.json()["items"] == []
    assert resp.json()["wishlist_items_count"] == 0


@pytest.mark.django_db
def test_wishlist_requires_authentication():
    assert APIClient().get("/api/v1/wishlist/").status_code in {401, 403}


@pytest.mark.django_db
def test_add_duplicate_and_check():
    product = ProductFactory()
    client = _client(UserFactory())

    r_add = client.post("/api/v1/wishlist/add/", {"product_ref": str(product.id)}, format="json")
    assert r_add.status_code == 200
    assert r_add.json()["wishlist_items_count"] == 1

    r_dup = client.post("/api/v1/wishlist/add/", {"product_ref": str(product.id)}, format="json")
    assert r_dup.status_code == 400
    assert r_dup.json()["code"] == "duplicate_entry"

    r_check = client.get(f"/api/v1/wishlist/check/{product.id}/")
    assert r_check.json() == {"product_ref": str(product.id), "is_in_wishlist": True}
    assert client.get("/api/v1/wishlist/check/mock-1/").json()["is_in_wishlist"] is False


@pytest.mark.django_db
def test_toggle_endpoint_reports_action():
    product = ProductFactory()
    client = _client(UserFactory())

    first = client.post("/api/v1/wishlist/toggle/", {"product_ref": str(product.id)}, format="json")
    assert first.status_code == 200
    assert first.json()["action"] == "added"
    assert first.json()["wishlist"]["wishlist_items_count"] == 1

    second = client.post("/api/v1/wishlist/toggle/", {"product_ref": str(product.id)}, format="json")
    assert second.json()["action"] == "removed"
    assert second.json()["wishlist"]["items"] == []


@pytest.mark.django_db
def test_remove_clear_and_missing():
    product = ProductFactory()
    client = _client(UserFactory())
    client.post("/api/v1/wishlist/add/", {"product_ref": str(product.id)}, format="json")

    assert client.delete(f"/api/v1/wishlist/items/{product.id}/").status_code == 200
    r_missing = client.delete(f"/api/v1/wishlist/items/{product.id}/")
    assert r_missing.status_code == 404
    assert r_missing.json()["code"] == "item_not_found"
    assert client.delete("/api/v1/wishlist/").status_code == 200


@pytest.mark.django_db
def test_merge_endpoint():
    product = ProductFactory()
    client = _client(UserFactory())
    payload = {"items": [{"product_ref": str(product.id)}, {"id": "mock-z", "name": "Cap", "price": 9}]}

    client.post("/api/v1/wishlist/merge/", payload, format="json")
    resp = client.post("/api/v1/wishlist/merge/", payload, format="json")

    assert resp.status_code == 200
    assert resp.json()["wishlist_items_count"] == 2
