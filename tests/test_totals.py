from decimal import Decimal
import pytest
from agentix.checkout.models import LineItem, ShippingOption
from agentix.checkout.totals import build_totals, summarize_totals
from agentix.common.money import cents_to_dollars, dollars_to_cents, to_decimal


def _li(cents: int, quantity: int = 1, discount: int = 0, tax: int = 0) -> LineItem:
    base = cents * quantity
    return LineItem(
        id="li_1", product_id="p_1", title="Stoneware Mug", unit_price=cents_to_dollars(cents),
        quantity=quantity, base_amount=base, discount=discount, subtotal=base, tax=tax,
        total=base - discount + tax,
    )


STANDARD = ShippingOption(id="standard", title="Standard Shipping", subtotal=500, total=500)


def test_totals_with_shipping():
    totals = build_totals([_li(1999)], STANDARD)
    assert [(t.type, t.amount) for t in totals] == [
        ("subtotal", 1999), ("fulfillment", 500), ("total", 2499),
    ]
    assert totals[1].display_text == "Standard Shipping"


def test_totals_without_shipping_only_subtotal_and_total():
    totals = build_totals([_li(1000)])
    assert [(t.type, t.amount) for t in totals] == [("subtotal", 1000), ("total", 1000)]


def test_discount_is_negative_and_tax_listed_last():
    totals = build_totals([_li(2000, discount=300, tax=150)], STANDARD)
    assert [t.type for t in totals] == ["subtotal", "discount", "fulfillment", "tax", "total"]
    by_type = {t.type: t.amount for t in totals}
    assert by_type["discount"] == -300
    assert by_type["total"] == 2000 - 300 + 150 + 500


def test_summary_sums_quantities():
    summary = summarize_totals([_li(1999, quantity=3), _li(500)], STANDARD)
    assert summary.subtotal == 1999 * 3 + 500
    assert summary.fulfillment == 500
    assert summary.total == summary.subtotal + 500


def test_empty_line_items_are_zero():
    summary = summarize_totals([])
    assert summary.total == 0


@pytest.mark.parametrize("dollars,cents", [
    ("19.99", 1999), (19.99, 1999), (Decimal("0.005"), 1), (10, 1000), ("0", 0), ("24.985", 2499),
])
def test_dollars_to_cents(dollars, cents):
    assert dollars_to_cents(dollars) == cents


def test_cents_to_dollars_keeps_two_places():
    assert cents_to_dollars(2499) == Decimal("24.99")
    assert str(cents_to_dollars(1000)) == "10.00"


def test_to_decimal_avoids_float_noise():
    assert to_decimal(0.1) == Decimal("0.1")
