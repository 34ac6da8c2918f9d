"""DRF views for wishlist operations."""

from cart.serializers import MergeItemsSerializer
from common.exceptions import LedgerError, error_response
from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .selectors import get_wishlist_for_user, is_in_wishlist
from .serializers import WishlistItemWriteSerializer, WishlistReadSerializer
from .services import add_item, clear_wishlist, merge_items, remove_item, toggle_item

LEDGER_ERROR = inline_serializer(
    name="WishlistError",
    fields={"detail": rf_serializers.CharField(), "code": rf_serializers.CharField()},
)

TOGGLE_RESPONSE = inline_serializer(
    name="WishlistToggleResponse",
    fields={
        "action": rf_serializers.ChoiceField(choices=["added", "removed"]),
        "wishlist": WishlistReadSerializer(),
    },
)


def _wishlist_response(wishlist, code=status.HTTP_200_OK):
    return Response(WishlistReadSerializer.from_wishlist(wishlist=wishlist).data, status=code)


class WishlistDetailView(APIView):
    """Read or clear the authenticated user's wishlist."""

    permission_classes = [IsAuthenticated]

    def get_throttles(self):
        self.throttle_scope = "wishlist" if self.request.method == "GET" else "wishlist_write"
        return super().get_throttles()

    @extend_schema(tags=["Wishlist Endpoints"], summary="Get wishlist", responses={200: WishlistReadSerializer})
    def get(self, request):
        return _wishlist_response(get_wishlist_for_user(user=request.user))

    @extend_schema(tags=["Wishlist Endpoints"], summary="Clear wishlist", responses={200: WishlistReadSerializer})
    def delete(self, request):
        return _wishlist_response(clear_wishlist(user=request.user))


class WishlistAddItemView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "wishlist_write"

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Add to wishlist",
        description="Saves a product. Saving a product twice is rejected with `duplicate_entry`.",
        request=WishlistItemWriteSerializer,
        responses={200: WishlistReadSerializer, 400: LEDGER_ERROR, 404: LEDGER_ERROR},
        examples=[OpenApiExample("Catalog product", value={"product_ref": "42"}, request_only=True)],
    )
    def post(self, request):
        serializer = WishlistItemWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            wishlist = add_item(user=request.user, **serializer.validated_data)
        except LedgerError as exc:
            return error_response(exc)
        return _wishlist_response(wishlist)


class WishlistToggleView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "wishlist_write"

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Toggle wishlist item",
        description="Removes the product when saved, otherwise saves it.",
        request=WishlistItemWriteSerializer,
        responses={200: TOGGLE_RESPONSE, 400: LEDGER_ERROR, 404: LEDGER_ERROR},
        examples=[
            OpenApiExample(
                "Added",
                value={"action": "added", "wishlist": {"id": 1, "items": [], "wishlist_items_count": 1}},
                response_only=True,
            )
        ],
    )
    def post(self, request):
        serializer = WishlistItemWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            wishlist, action = toggle_item(user=request.user, **serializer.validated_data)
        except LedgerError as exc:
            return error_response(exc)
        data = WishlistReadSerializer.from_wishlist(wishlist=wishlist).data
        return Response({"action": str(action), "wishlist": data}, status=status.HTTP_200_OK)


class WishlistItemView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "wishlist_write"

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Remove wishlist item",
        responses={200: WishlistReadSerializer, 404: LEDGER_ERROR},
    )
    def delete(self, request, product_ref: str):
        try:
            wishlist = remove_item(user=request.user, product_ref=product_ref)
        except LedgerError as exc:
            return error_response(exc)
        return _wishlist_response(wishlist)


class WishlistMergeView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "wishlist_write"

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Merge guest wishlist",
        description="Saves guest entries not already present; unresolvable entries are skipped.",
        request=MergeItemsSerializer,
        responses={200: WishlistReadSerializer},
    )
    def post(self, request):
        serializer = MergeItemsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        wishlist = merge_items(user=request.user, items=serializer.validated_data["items"])
        return _wishlist_response(wishlist)


class WishlistCheckView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "wishlist"

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Check wishlist membership",
        responses={
            200: inline_serializer(
                name="WishlistCheckResponse",
                fields={"product_ref": rf_serializers.CharField(), "is_in_wishlist": rf_serializers.BooleanField()},
            )
        },
        examples=[OpenApiExample("Saved", value={"product_ref": "42", "is_in_wishlist": True})],
    )
    def get(self, request, product_ref: str):
        present = is_in_wishlist(user=request.user, product_ref=product_ref)
        return Response({"product_ref": product_ref, "is_in_wishlist": present}, status=status.HTTP_200_OK)
