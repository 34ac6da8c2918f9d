"""Admin registration for wishlist models."""

from django.contrib import admin

from .models import Wishlist, WishlistItem


class WishlistItemInline(admin.TabularInline):
    model = WishlistItem
    extra = 0
    fields = ("entry_id", "product_ref", "source", "name", "price", "original_price", "added_at")
    readonly_fields = ("entry_id", "added_at")


@admin.register(Wishlist)
class WishlistAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "items_count", "updated_at")
    search_fields = ("user__username", "user__email")
    readonly_fields = ("created_at", "updated_at")
    inlines = [WishlistItemInline]
    list_select_related = ("user",)

    @admin.display(description="Items")
    def items_count(self, obj):
        return obj.items.count()


@admin.register(WishlistItem)
class WishlistItemAdmin(admin.ModelAdmin):
    list_display = ("id", "wishlist", "product_ref", "source", "name", "price", "added_at")
    list_filter = ("source", "brand")
    search_fields = ("product_ref", "name", "brand", "wishlist__user__email")
    readonly_fields = ("entry_id", "created_at", "updated_at")
    raw_id_fields = ("wishlist",)
