from decimal import Decimal

import factory
from catalog.models import Category, Product
from common.choices import DraftPublished
from factory import Faker
from factory.django import DjangoModelFactory


class CategoryFactory(DjangoModelFactory):
    class Meta:
        model = Category

    name = factory.Sequence(lambda n: f"Category {n}")
    slug = factory.LazyAttribute(lambda o: o.name.lower().replace(" ", "-"))
    description = Faker("sentence")
    is_active = True
    sort_order = 0


class ProductFactory(DjangoModelFactory):
    class Meta:
        model = Product

    name = factory.Sequence(lambda n: f"Product {n}")
    slug = factory.LazyAttribute(lambda o: o.name.lower().replace(" ", "-"))
    description = Faker("paragraph")
    brand = Faker("company")
    category = factory.SubFactory(CategoryFactory)
    price = Decimal("100.00")
    discount_price = None
    image = "/media/products/sample.jpg"
    stock = 10
    status = DraftPublished.PUBLISHED
