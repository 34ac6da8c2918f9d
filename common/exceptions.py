"""Domain errors raised by cart, wishlist and order services.

Each error carries a machine-readable ``code`` and the HTTP status views use
when translating it into a response.
"""

from rest_framework import status
from rest_framework.response import Response


class LedgerError(Exception):
    """Base class for rejected ledger operations."""

    code = "ledger_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Unable to update ledger."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_payload(self) -> dict:
        return {"detail": self.message, "code": self.code}


class InvalidReference(LedgerError):
    code = "invalid_reference"
    default_message = "Invalid product reference. Provide product data for non-catalog products."


class ProductNotFound(LedgerError):
    code = "product_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Product not found."


class InsufficientStock(LedgerError):
    """Requested quantity exceeds what is left; ``remaining`` is the usable amount."""

    code = "insufficient_stock"

    def __init__(self, remaining: int, message: str | None = None):
        self.remaining = max(0, int(remaining))
        super().__init__(message or f"Only {self.remaining} more available.")

    def as_payload(self) -> dict:
        return {**super().as_payload(), "remaining": self.remaining}


class ItemNotFound(LedgerError):
    code = "item_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Item not found."


class DuplicateEntry(LedgerError):
    code = "duplicate_entry"
    default_message = "Item already present."


class InvalidQuantity(LedgerError):
    code = "invalid_quantity"
    default_message = "Quantity must not be negative."


class EmptyCart(LedgerError):
    code = "empty_cart"
    default_message = "Cart is empty."


def error_response(exc: LedgerError):
    """Translate a domain error into a DRF response."""

    return Response(exc.as_payload(), status=exc.status_code)
