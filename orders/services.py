import hashlib
import json
import logging
from datetime import timedelta
from decimal import Decimal
from typing import Callable, Optional, Tuple

from cart.models import CartItem, CartMergeReceipt
from cart.pricing import summarize
from cart.selectors import get_cart_for_update
from catalog.models import Product
from catalog.resolver import is_canonical
from common.choices import ItemSource
from common.exceptions import EmptyCart, InsufficientStock, ProductNotFound
from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from .models import IdempotencyKey, Order, OrderItem

logger = logging.getLogger("storefront.orders")


def _lock_catalog_products(items) -> dict:
    ids = {int(item.product_ref) for item in items if item.source == ItemSource.CATALOG and is_canonical(item.product_ref)}
    if not ids:
        return {}
    products = Product.objects.select_for_update().filter(id__in=ids, status=Product.STATUS_PUBLISHED)
    return {str(product.id): product for product in products}


@transaction.atomic
def place_order_from_cart(*, user) -> Order:
    """Create an Order from the user's cart and empty the cart.

    Catalog lines decrement stock on rows locked for the transaction; a line
    whose product is gone or short on stock aborts the whole placement.
    Lines keep the unit price stored in the cart.
    """

    cart = get_cart_for_update(user=user)
    items = list(cart.items.all())
    if not items:
        raise EmptyCart("Cannot place an order from an empty cart.")

    products = _lock_catalog_products(items)
    for item in items:
        if item.source != ItemSource.CATALOG or not is_canonical(item.product_ref):
            continue
        product = products.get(item.product_ref)
        if product is None:
            raise ProductNotFound(f"Product {item.product_ref} is no longer available.")
        if item.quantity > product.stock:
            raise InsufficientStock(product.stock, f"Only {product.stock} of {product.name} available.")
        product.stock -= item.quantity
        product.save(update_fields=["stock", "updated_at"])

    summary = summarize(items)
    order = Order.objects.create(
        user=user,
        email=getattr(user, "email", None) or None,
        subtotal=summary.subtotal,
        total_quantity=summary.total_quantity,
        bulk_discount_percent=summary.bulk_discount_percent,
        bulk_discount_amount=summary.bulk_discount_amount,
        final_total=summary.final_total,
    )
    OrderItem.objects.bulk_create(
        [
            OrderItem(
                order=order,
                product_ref=item.product_ref,
                source=item.source,
                name=item.name,
                image=item.image,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in items
        ]
    )
    # Generate user-friendly order number (unique)
    order.number = f"ORD-{int(order.id):06d}"
    order.save(update_fields=["number"])

    CartItem.objects.filter(cart=cart).delete()
    CartMergeReceipt.objects.filter(cart=cart).delete()
    cart.save(update_fields=["updated_at"])
    logger.info(
        "order.placed",
        extra={
            "event": "order.placed",
            "order_id": order.id,
            "user_id": user.id,
            "cart_id": cart.id,
            "total_quantity": summary.total_quantity,
            "final_total": str(summary.final_total),
        },
    )
    return order


def _json_safe(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


def with_idempotency(
    *,
    key: str,
    user,
    path: str,
    method: str,
    handler: Callable[[], Tuple[dict, int]],
    request_hash: Optional[str] = None,
) -> Tuple[dict, int]:
    """Run handler idempotently and persist its response for the given key and scope.

    - Scope is derived from the caller: for authenticated users, "user:<id>"; otherwise "anon".
    - If a live record exists and the stored `request_hash` differs from the provided one, returns 409.
    - If a live record exists but response is not yet stored, returns 409 to indicate in-progress.
    - Expired records are discarded and the request runs again.
    """

    scope = f"user:{getattr(user, 'id', None)}" if getattr(user, "id", None) else "anon"
    method = str(method).upper()
    path = str(path)
    now = timezone.now()
    ttl_hours = int(getattr(settings, "ORDER_IDEMPOTENCY_TTL_HOURS", 24))

    IdempotencyKey.objects.filter(key=key, scope=scope, path=path, method=method, expires_at__lte=now).delete()
    try:
        with transaction.atomic():
            idem = IdempotencyKey.objects.create(
                key=key,
                user=user if getattr(user, "id", None) else None,
                scope=scope,
                path=path,
                method=method,
                request_hash=request_hash,
                expires_at=now + timedelta(hours=ttl_hours),
            )
    except IntegrityError:
        idem = IdempotencyKey.objects.get(key=key, scope=scope, path=path, method=method)
        # Guard against key reuse with different fingerprints
        if idem.request_hash and request_hash and idem.request_hash != request_hash:
            return {"detail": "Idempotency key reused with different request payload"}, 409
        if idem.response_json is not None and idem.response_code is not None:
            logger.info(
                "order.idempotent_replay",
                extra={"event": "order.idempotent_replay", "user_id": getattr(user, "id", None), "path": path},
            )
            return idem.response_json, int(idem.response_code)
        return {"detail": "Request in progress"}, 409

    body, code = handler()
    IdempotencyKey.objects.filter(id=idem.id).update(response_json=_json_safe(body), response_code=code)
    return body, code


def compute_request_hash(data: Optional[dict]) -> Optional[str]:
    """Compute a canonical SHA256 hash of the request body.

    Uses sorted keys JSON representation to stabilize the hash across equivalent payloads.
    Returns None when data is falsy or not JSON serializable.
    """
    if not data:
        return None
    try:
        payload = json.dumps(data, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError):
        return None
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
