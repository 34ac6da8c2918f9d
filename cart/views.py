"""DRF views for cart operations."""

from common.exceptions import LedgerError, error_response
from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .selectors import get_cart_for_user
from .serializers import AddItemSerializer, CartReadSerializer, MergeItemsSerializer, UpdateItemQuantitySerializer
from .services import add_item, clear_cart, merge_items, remove_item, set_item_quantity

CART_EXAMPLE = {
    "id": 1,
    "items": [
        {
            "entry_id": "0f8c8f0e-1f43-4a61-9a51-2a3f8f7d6d11",
            "product_ref": "42",
            "source": "catalog",
            "name": "Linen shirt",
            "unit_price": "45.00",
            "image": "/media/products/linen-shirt.jpg",
            "quantity": 2,
            "line_total": "90.00",
            "added_at": "2025-01-01T10:00:00Z",
        }
    ],
    "subtotal": "90.00",
    "total_quantity": 2,
    "cart_items_count": 2,
    "bulk_discount_percent": 0,
    "bulk_discount_amount": "0.00",
    "final_total": "90.00",
    "cart_total": "90.00",
}

LEDGER_ERROR = inline_serializer(
    name="LedgerError",
    fields={
        "detail": rf_serializers.CharField(),
        "code": rf_serializers.CharField(),
        "remaining": rf_serializers.IntegerField(required=False),
    },
)


def _cart_response(cart, code=status.HTTP_200_OK):
    return Response(CartReadSerializer.from_cart(cart=cart).data, status=code)


class CartDetailView(APIView):
    """Read or clear the authenticated user's cart."""

    permission_classes = [IsAuthenticated]

    def get_throttles(self):
        self.throttle_scope = "cart" if self.request.method == "GET" else "cart_write"
        return super().get_throttles()

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description="Returns the cart items with subtotal, bulk discount and final total.",
        responses={200: CartReadSerializer},
        examples=[OpenApiExample("Cart", value=CART_EXAMPLE)],
    )
    def get(self, request):
        cart = get_cart_for_user(user=request.user)
        return _cart_response(cart)

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Clear cart",
        description="Deletes every item. Clearing an empty cart succeeds.",
        responses={200: CartReadSerializer},
    )
    def delete(self, request):
        cart = clear_cart(user=request.user)
        return _cart_response(cart)


class CartAddItemView(APIView):
    """Add a product to the cart, merging with an existing line."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Add item to cart",
        description=(
            "Adds a catalog product by id, or an ephemeral product described in `product_data`. "
            "Adding an existing product increments its quantity up to the available stock."
        ),
        request=AddItemSerializer,
        responses={200: CartReadSerializer, 400: LEDGER_ERROR, 404: LEDGER_ERROR},
        examples=[
            OpenApiExample("Catalog product", value={"product_ref": "42", "quantity": 2}, request_only=True),
            OpenApiExample(
                "Ephemeral product",
                value={"product_ref": "mock-7", "quantity": 1, "product_data": {"name": "Sample", "price": "9.99"}},
                request_only=True,
            ),
            OpenApiExample(
                "Insufficient stock",
                value={"detail": "Only 7 more available.", "code": "insufficient_stock", "remaining": 7},
                response_only=True,
                status_codes=["400"],
            ),
        ],
    )
    def post(self, request):
        serializer = AddItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            cart = add_item(user=request.user, **serializer.validated_data)
        except LedgerError as exc:
            return error_response(exc)
        return _cart_response(cart)


class CartItemView(APIView):
    """Update or remove a cart line addressed by product reference or entry id."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Update cart item quantity",
        description="Replaces the quantity. Zero removes the item; catalog items are checked against stock.",
        request=UpdateItemQuantitySerializer,
        responses={200: CartReadSerializer, 400: LEDGER_ERROR, 404: LEDGER_ERROR},
        examples=[OpenApiExample("Set quantity", value={"quantity": 3}, request_only=True)],
    )
    def put(self, request, product_ref: str):
        serializer = UpdateItemQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            cart = set_item_quantity(
                user=request.user, product_ref=product_ref, quantity=serializer.validated_data["quantity"]
            )
        except LedgerError as exc:
            return error_response(exc)
        return _cart_response(cart)

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Remove cart item",
        responses={200: CartReadSerializer, 404: LEDGER_ERROR},
    )
    def delete(self, request, product_ref: str):
        try:
            cart = remove_item(user=request.user, product_ref=product_ref)
        except LedgerError as exc:
            return error_response(exc)
        return _cart_response(cart)


class CartMergeView(APIView):
    """Merge a guest cart held by the client into the user's cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Merge guest cart",
        description=(
            "Folds guest entries into the cart. Entries that cannot be resolved are skipped; "
            "resending the same payload does not add quantities twice."
        ),
        request=MergeItemsSerializer,
        responses={200: CartReadSerializer},
        examples=[
            OpenApiExample(
                "Guest cart",
                value={"items": [{"product_ref": "42", "quantity": 1}, {"id": "mock-7", "name": "Sample", "price": 5}]},
                request_only=True,
            )
        ],
    )
    def post(self, request):
        serializer = MergeItemsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = merge_items(user=request.user, items=serializer.validated_data["items"])
        return _cart_response(cart)
