"""Admin registration for cart models.

Carts are shown with their items inline so support can inspect what a user
holds; clearing goes through the cart services so it is logged like any
other mutation.
"""

from django.contrib import admin, messages

from .models import Cart, CartItem, CartMergeReceipt
from .services import clear_cart


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    fields = ("entry_id", "product_ref", "source", "name", "unit_price", "quantity", "added_at")
    readonly_fields = ("entry_id", "added_at")


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "items_count", "updated_at", "created_at")
    search_fields = ("user__username", "user__email")
    ordering = ("-updated_at",)
    readonly_fields = ("created_at", "updated_at")
    inlines = [CartItemInline]
    list_select_related = ("user",)
    actions = ["action_clear_cart"]

    @admin.display(description="Units")
    def items_count(self, obj):
        return obj.item_count()

    @admin.action(description="Clear selected carts")
    def action_clear_cart(self, request, queryset):
        count = 0
        for cart in queryset.select_related("user"):
            clear_cart(user=cart.user)
            count += 1
        messages.success(request, f"Cleared {count} cart(s).")


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("id", "cart", "product_ref", "source", "name", "quantity", "unit_price", "added_at")
    list_filter = ("source",)
    search_fields = ("product_ref", "name", "cart__user__email")
    ordering = ("id",)
    readonly_fields = ("entry_id", "created_at", "updated_at")
    raw_id_fields = ("cart",)


@admin.register(CartMergeReceipt)
class CartMergeReceiptAdmin(admin.ModelAdmin):
    list_display = ("id", "cart", "fingerprint", "expires_at", "created_at")
    search_fields = ("fingerprint", "cart__user__email")
    readonly_fields = ("fingerprint", "created_at", "updated_at")
    raw_id_fields = ("cart",)
