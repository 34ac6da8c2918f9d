"""Cart pricing: subtotal, unit count and the tiered bulk discount.

Pure functions over line items; nothing here touches the database beyond
reading the items it is given.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

ZERO = Decimal("0.00")
CENTS = Decimal("0.01")

# (minimum total quantity, discount percent), highest tier first
BULK_DISCOUNT_TIERS = (
    (50, 20),
    (20, 15),
    (10, 10),
    (5, 5),
)


@dataclass(frozen=True)
class PricingSummary:
    subtotal: Decimal
    total_quantity: int
    bulk_discount_percent: int
    bulk_discount_amount: Decimal
    final_total: Decimal

    def as_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "total_quantity": self.total_quantity,
            "bulk_discount_percent": self.bulk_discount_percent,
            "bulk_discount_amount": self.bulk_discount_amount,
            "final_total": self.final_total,
        }


def bulk_discount_percent(total_quantity: int) -> int:
    for threshold, percent in BULK_DISCOUNT_TIERS:
        if total_quantity >= threshold:
            return percent
    return 0


def line_total(unit_price, quantity) -> Decimal:
    return ((unit_price or ZERO) * Decimal(int(quantity))).quantize(CENTS)


def summarize(items: Iterable) -> PricingSummary:
    """Summarize line items exposing ``unit_price`` and ``quantity``."""

    subtotal = ZERO
    total_quantity = 0
    for item in items:
        subtotal += line_total(item.unit_price, item.quantity)
        total_quantity += int(item.quantity)

    percent = bulk_discount_percent(total_quantity)
    discount = (subtotal * Decimal(percent) / Decimal(100)).quantize(CENTS, rounding=ROUND_HALF_UP)
    final_total = max(ZERO, subtotal - discount)
    return PricingSummary(
        subtotal=subtotal.quantize(CENTS),
        total_quantity=total_quantity,
        bulk_discount_percent=percent,
        bulk_discount_amount=discount,
        final_total=final_total.quantize(CENTS),
    )
