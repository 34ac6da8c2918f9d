"""Serializers for the catalog app (read-only)."""

from rest_framework import serializers

from .models import Category, Product


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "slug", "description", "sort_order"]


class ProductSerializer(serializers.ModelSerializer):
    category = serializers.SerializerMethodField()
    effective_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "brand",
            "category",
            "price",
            "discount_price",
            "effective_price",
            "image",
            "stock",
            "in_stock",
        ]

    def get_category(self, obj):
        if not obj.category_id:
            return None
        return {"name": obj.category.name, "slug": obj.category.slug}
