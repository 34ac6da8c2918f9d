from decimal import Decimal
from types import SimpleNamespace

import pytest
from cart.pricing import bulk_discount_percent, line_total, summarize


def _line(price, quantity):
    return SimpleNamespace(unit_price=Decimal(price), quantity=quantity)


@pytest.mark.parametrize(
    "total_quantity,percent",
    [(0, 0), (4, 0), (5, 5), (9, 5), (10, 10), (19, 10), (20, 15), (49, 15), (50, 20), (51, 20)],
)
def test_bulk_discount_tiers(total_quantity, percent):
    assert bulk_discount_percent(total_quantity) == percent


def test_empty_summary_is_zero():
    summary = summarize([])
    assert summary.subtotal == Decimal("0.00")
    assert summary.total_quantity == 0
    assert summary.bulk_discount_percent == 0
    assert summary.bulk_discount_amount == Decimal("0.00")
    assert summary.final_total == Decimal("0.00")


def test_subtotal_is_sum_of_line_totals():
    lines = [_line("19.99", 2), _line("5.00", 1)]
    summary = summarize(lines)
    assert summary.subtotal == sum(line_total(item.unit_price, item.quantity) for item in lines)
    assert summary.subtotal == Decimal("44.98")
    assert summary.total_quantity == 3
    assert summary.final_total == summary.subtotal


def test_twenty_two_units_get_fifteen_percent():
    summary = summarize([_line("100.00", 22)])
    assert summary.bulk_discount_percent == 15
    assert summary.subtotal == Decimal("2200.00")
    assert summary.bulk_discount_amount == Decimal("330.00")
    assert summary.final_total == summary.subtotal * Decimal("0.85")


def test_discount_amount_is_rounded_to_cents():
    summary = summarize([_line("0.33", 5)])
    # 1.65 * 5% = 0.0825
    assert summary.bulk_discount_amount == Decimal("0.08")
    assert summary.final_total == Decimal("1.57")


def test_as_dict_exposes_all_fields():
    data = summarize([_line("10.00", 10)]).as_dict()
    assert data == {
        "subtotal": Decimal("100.00"),
        "total_quantity": 10,
        "bulk_discount_percent": 10,
        "bulk_discount_amount": Decimal("10.00"),
        "final_total": Decimal("90.00"),
    }
