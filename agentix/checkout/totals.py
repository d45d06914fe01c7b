from typing import List, Optional, Sequence
from agentix.checkout.models import LineItem, ShippingOption, Total, TotalsSummary


def summarize_totals(line_items: Sequence[LineItem], selected_option: Optional[ShippingOption] = None) -> TotalsSummary:
    subtotal = sum(li.subtotal for li in line_items)
    discount = sum(li.discount for li in line_items)
    tax = sum(li.tax for li in line_items)
    fulfillment = selected_option.total if selected_option else 0
    return TotalsSummary(
        subtotal=subtotal,
        discount=discount,
        tax=tax,
        fulfillment=fulfillment,
        total=subtotal - discount + tax + fulfillment,
    )


def build_totals(line_items: Sequence[LineItem], selected_option: Optional[ShippingOption] = None) -> List[Total]:
    """Ordered totals list: subtotal first, total last, zero-valued middle entries omitted."""
    summary = summarize_totals(line_items, selected_option)

    totals = [Total(type="subtotal", display_text="Subtotal", amount=summary.subtotal)]
    if summary.discount > 0:
        totals.append(Total(type="discount", display_text="Discount", amount=-summary.discount))
    if summary.fulfillment > 0:
        title = selected_option.title if selected_option and selected_option.title else "Shipping"
        totals.append(Total(type="fulfillment", display_text=title, amount=summary.fulfillment))
    if summary.tax > 0:
        totals.append(Total(type="tax", display_text="Tax", amount=summary.tax))
    totals.append(Total(type="total", display_text="Total", amount=summary.total))
    return totals
