"""Wishlist serializers."""

from rest_framework import serializers

from .models import WishlistItem


class WishlistItemReadSerializer(serializers.ModelSerializer):
    class Meta:
        model = WishlistItem
        fields = [
            "entry_id",
            "product_ref",
            "source",
            "name",
            "price",
            "original_price",
            "image",
            "category",
            "brand",
            "added_at",
        ]


class WishlistReadSerializer(serializers.Serializer):
    """Read serializer for the wishlist and its entries."""

    id = serializers.IntegerField()
    items = WishlistItemReadSerializer(many=True)
    wishlist_items_count = serializers.IntegerField()

    @classmethod
    def from_wishlist(cls, *, wishlist):
        items = list(wishlist.items.all())
        return cls({"id": wishlist.id, "items": items, "wishlist_items_count": len(items)})


class WishlistItemWriteSerializer(serializers.Serializer):
    """Product to save; ``product_data`` describes products outside the catalog."""

    product_ref = serializers.CharField(max_length=128)
    product_data = serializers.DictField(required=False, allow_null=True)
