from decimal import Decimal

import pytest
from catalog.tests.factories import CategoryFactory, ProductFactory
from rest_framework.test import APIClient


@pytest.mark.django_db
def test_categories_list_only_active_in_sort_order():
    CategoryFactory(name="Zeta", sort_order=0)
    CategoryFactory(name="Alpha", sort_order=1)
    CategoryFactory(name="Hidden", is_active=False)

    r = APIClient().get("/api/v1/catalog/categories/")
    assert r.status_code == 200
    assert [c["name"] for c in r.json()["results"]] == ["Zeta", "Alpha"]


@pytest.mark.django_db
def test_category_detail_by_slug():
    category = CategoryFactory(name="Shoes")
    r = APIClient().get(f"/api/v1/catalog/categories/{category.slug}/")
    assert r.status_code == 200
    assert r.json()["name"] == "Shoes"


@pytest.mark.django_db
def test_products_list_hides_drafts():
    visible = ProductFactory()
    ProductFactory(status="draft")

    r = APIClient().get("/api/v1/catalog/products/")
    assert r.status_code == 200
    assert [p["id"] for p in r.json()["results"]] == [visible.id]


@pytest.mark.django_db
def test_products_filter_and_search():
    shoes = CategoryFactory(name="Shoes")
    runner = ProductFactory(name="Trail runner", brand="Stride", category=shoes, stock=0)
    ProductFactory(name="Desk lamp", brand="Glow")
    client = APIClient()

    by_category = client.get("/api/v1/catalog/products/?category=shoes").json()["results"]
    assert [p["id"] for p in by_category] == [runner.id]

    by_brand = client.get("/api/v1/catalog/products/?brand=stride").json()["results"]
    assert [p["id"] for p in by_brand] == [runner.id]

    in_stock = client.get("/api/v1/catalog/products/?in_stock=true").json()["results"]
    assert runner.id not in [p["id"] for p in in_stock]

    searched = client.get("/api/v1/catalog/products/?search=lamp").json()["results"]
    assert [p["name"] for p in searched] == ["Desk lamp"]


@pytest.mark.django_db
def test_product_detail_exposes_effective_price():
    product = ProductFactory(price=Decimal("100.00"), discount_price=Decimal("80.00"), stock=3)

    r = APIClient().get(f"/api/v1/catalog/products/{product.id}/")
    assert r.status_code == 200
    body = r.json()
    assert body["effective_price"] == "80.00"
    assert body["in_stock"] is True
    assert body["category"]["slug"] == product.category.slug
