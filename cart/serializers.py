"""Cart serializers for read and write operations."""

from rest_framework import serializers

from .models import CartItem


class CartItemReadSerializer(serializers.ModelSerializer):
    """Read serializer for a cart line item."""

    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "entry_id",
            "product_ref",
            "source",
            "name",
            "unit_price",
            "image",
            "quantity",
            "line_total",
            "added_at",
        ]


class CartReadSerializer(serializers.Serializer):
    """Read serializer for the cart, its items and pricing summary."""

    id = serializers.IntegerField()
    items = CartItemReadSerializer(many=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_quantity = serializers.IntegerField()
    cart_items_count = serializers.IntegerField()
    bulk_discount_percent = serializers.IntegerField()
    bulk_discount_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    final_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    cart_total = serializers.DecimalField(max_digits=12, decimal_places=2)

    @classmethod
    def from_cart(cls, *, cart):
        items = list(cart.items.all())
        summary = cart.summary()
        return cls(
            {
                "id": cart.id,
                "items": items,
                **summary.as_dict(),
                "cart_items_count": summary.total_quantity,
                "cart_total": summary.final_total,
            }
        )


class AddItemSerializer(serializers.Serializer):
    """Write serializer for adding a product to the cart.

    ``product_data`` is the inline descriptor for products outside the
    catalog; its shape is validated by the resolver, not here.
    """

    product_ref = serializers.CharField(max_length=128)
    quantity = serializers.IntegerField(default=1)
    product_data = serializers.DictField(required=False, allow_null=True)


class UpdateItemQuantitySerializer(serializers.Serializer):
    """Write serializer for replacing a line item's quantity."""

    quantity = serializers.IntegerField()


class MergeItemsSerializer(serializers.Serializer):
    """Guest ledger entries to fold into the user's cart or wishlist."""

    items = serializers.ListField(child=serializers.DictField(), allow_empty=True)
