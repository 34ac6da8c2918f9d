"""Read-only viewsets for catalog resources."""

from common.throttling import DEFAULT_THROTTLES
from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import filters as drf_filters
from rest_framework import viewsets

from . import selectors
from .models import Product
from .serializers import CategorySerializer, ProductSerializer


@extend_schema_view(
    list=extend_schema(
        summary="List categories",
        description="Returns active categories ordered by sort_order then name",
        tags=["Catalog Endpoints"],
    ),
    retrieve=extend_schema(
        summary="Get category by slug",
        description="Returns a single category by its slug",
        tags=["Catalog Endpoints"],
    ),
)
class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = CategorySerializer
    lookup_field = "slug"
    throttle_scope = "catalog"
    throttle_classes = DEFAULT_THROTTLES

    def get_queryset(self):
        return selectors.list_categories()


class ProductFilterSet(filters.FilterSet):
    category = filters.CharFilter(field_name="category__slug")
    brand = filters.CharFilter(field_name="brand", lookup_expr="iexact")
    in_stock = filters.BooleanFilter(method="filter_in_stock")

    class Meta:
        model = Product
        fields = ["category", "brand", "in_stock"]

    def filter_in_stock(self, queryset, name, value):
        return queryset.filter(stock__gt=0) if value else queryset.filter(stock=0)


@extend_schema_view(
    list=extend_schema(
        summary="List products",
        description=(
            "Returns published products. Supports filtering by `category`, `brand` and `in_stock`, "
            "ordering by `name`, `price` or `created_at`, and search via `search`."
        ),
        tags=["Catalog Endpoints"],
        parameters=[
            OpenApiParameter("category", OpenApiTypes.STR, location="query", description="Filter by category slug"),
            OpenApiParameter("brand", OpenApiTypes.STR, location="query", description="Filter by brand"),
            OpenApiParameter("search", OpenApiTypes.STR, location="query", description="Search products by text"),
        ],
    ),
    retrieve=extend_schema(
        summary="Get product",
        description="Returns a published product by id. The id is the canonical reference used by cart and wishlist.",
        tags=["Catalog Endpoints"],
        examples=[
            OpenApiExample(
                "Product detail",
                value={
                    "id": 12,
                    "name": "Linen shirt",
                    "slug": "linen-shirt",
                    "description": "",
                    "brand": "Weave",
                    "category": {"name": "Shirts", "slug": "shirts"},
                    "price": "100.00",
                    "discount_price": "80.00",
                    "effective_price": "80.00",
                    "image": "/media/products/linen-shirt.jpg",
                    "stock": 40,
                    "in_stock": True,
                },
                response_only=True,
            )
        ],
    ),
)
class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ProductSerializer
    filterset_class = ProductFilterSet
    throttle_scope = "catalog"
    throttle_classes = DEFAULT_THROTTLES
    filter_backends = [
        filters.DjangoFilterBackend,
        drf_filters.OrderingFilter,
        drf_filters.SearchFilter,
    ]
    ordering_fields = ["name", "price", "created_at"]
    search_fields = ["name", "brand", "description"]

    def get_queryset(self):
        return selectors.list_products()
