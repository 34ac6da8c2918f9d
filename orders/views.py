"""Orders API endpoints: list own orders and place an order from the cart."""

from common.exceptions import LedgerError
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import generics
from rest_framework import serializers as rf_serializers
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import Order
from .serializers import OrderSerializer
from .services import compute_request_hash, place_order_from_cart, with_idempotency

ORDER_EXAMPLE = {
    "id": 12,
    "number": "ORD-000012",
    "status": "pending",
    "email": "user@example.com",
    "created_at": "2025-01-01T12:00:00Z",
    "items": [
        {
            "id": 30,
            "product_ref": "42",
            "source": "catalog",
            "name": "Linen shirt",
            "image": "/media/products/linen-shirt.jpg",
            "quantity": 6,
            "unit_price": "45.00",
            "line_total": "270.00",
        }
    ],
    "subtotal": "270.00",
    "total_quantity": 6,
    "bulk_discount_percent": 5,
    "bulk_discount_amount": "13.50",
    "final_total": "256.50",
}


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"


class OrderListCreateView(generics.ListAPIView):
    """List the user's orders, or place a new one from the cart.

    Filters:
    - `status`: one of the OrderStatus values
    - `number`: exact match of order number
    """

    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    pagination_class = DefaultPagination

    def get_throttles(self):
        self.throttle_scope = "orders" if self.request.method == "GET" else "orders_write"
        return super().get_throttles()

    def get_queryset(self):
        qs = Order.objects.filter(user_id=self.request.user.id).order_by("-id").prefetch_related("items")
        status = self.request.query_params.get("status")
        if status:
            qs = qs.filter(status=status)
        number = self.request.query_params.get("number")
        if number:
            qs = qs.filter(number=number)
        return qs

    @extend_schema(
        tags=["Orders"],
        summary="List orders",
        description="List current user's orders with optional filters and pagination.",
        parameters=[
            OpenApiParameter(name="status", description="Order status filter", required=False, type=str),
            OpenApiParameter(name="number", description="Order number exact match", required=False, type=str),
            OpenApiParameter(name="page", description="Page number", required=False, type=int),
            OpenApiParameter(name="page_size", description="Items per page", required=False, type=int),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Orders"],
        summary="Place order",
        description=(
            "Creates a pending order from the cart, decrements catalog stock and empties the cart. "
            "Idempotent when the Idempotency-Key header is set."
        ),
        request=None,
        parameters=[
            OpenApiParameter(
                name="Idempotency-Key",
                location=OpenApiParameter.HEADER,
                required=False,
                description="Makes the request idempotent within scope+path+method",
                type=str,
            )
        ],
        responses={
            201: OrderSerializer,
            400: inline_serializer(
                name="OrderPlacementError",
                fields={"detail": rf_serializers.CharField(), "code": rf_serializers.CharField()},
            ),
            409: inline_serializer(name="IdempotencyConflict", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[
            OpenApiExample("Placed", value=ORDER_EXAMPLE, response_only=True, status_codes=["201"]),
            OpenApiExample(
                "Empty cart",
                value={"detail": "Cannot place an order from an empty cart.", "code": "empty_cart"},
                response_only=True,
                status_codes=["400"],
            ),
        ],
    )
    def post(self, request, *args, **kwargs):
        def _handler():
            try:
                order = place_order_from_cart(user=request.user)
            except LedgerError as exc:
                return exc.as_payload(), exc.status_code
            return OrderSerializer(order, context={"request": request}).data, 201

        idem_key = request.headers.get("Idempotency-Key")
        if idem_key:
            body, code = with_idempotency(
                key=idem_key,
                user=request.user,
                path=str(request.path),
                method=str(request.method),
                request_hash=compute_request_hash(getattr(request, "data", None)),
                handler=_handler,
            )
            return Response(body, status=code)

        body, code = _handler()
        return Response(body, status=code)
