"""Admin registration for catalog models."""

from django.contrib import admin

from .models import Category, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "is_active", "sort_order")
    search_fields = ("name", "slug")
    list_filter = ("is_active",)
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "brand", "category", "price", "discount_price", "stock", "status")
    search_fields = ("name", "slug", "brand")
    list_filter = ("status", "category")
    list_editable = ("stock",)
    list_select_related = ("category",)
    prepopulated_fields = {"slug": ("name",)}
