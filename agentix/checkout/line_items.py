from typing import List, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from agentix.checkout.constants import logger
from agentix.checkout.models import ItemRef, LineItem
from agentix.common.money import cents_to_dollars, dollars_to_cents, to_decimal
from agentix.common.utils import generate_id
from agentix.products.repository import find_active_product
from agentix.schema.full_schema import CheckoutItem


async def build_line_items(session: AsyncSession, tenant_id: str, refs: Sequence[ItemRef]) -> List[LineItem]:
    """Resolve item references against the tenant catalog.

    Price, title and sku always come from the catalog row. References that do not
    resolve to an ACTIVE product are dropped; an empty result is the caller's problem.
    """
    line_items: List[LineItem] = []
    for ref in refs:
        product = await find_active_product(session, tenant_id, product_id=ref.id, sku=ref.sku)
        if product is None:
            logger.info("line_items.reference.dropped", extra={"ref_id": ref.id, "ref_sku": ref.sku})
            continue

        base_amount = dollars_to_cents(product.price) * ref.quantity
        line_items.append(LineItem(
            id=generate_id("li"),
            product_id=product.id,
            sku=product.sku,
            title=product.title,
            unit_price=to_decimal(product.price),
            quantity=ref.quantity,
            variant_id=ref.variant_id,
            base_amount=base_amount,
            subtotal=base_amount,
            total=base_amount,
        ))
    return line_items


def line_items_from_stored(items: Sequence[CheckoutItem]) -> List[LineItem]:
    """Rebuild line items from persisted rows, keeping the stored item ids."""
    out = []
    for item in items:
        base_amount = dollars_to_cents(item.price) * item.quantity
        out.append(LineItem(
            id=item.id,
            product_id=item.product_id,
            sku=item.sku,
            title=item.title,
            unit_price=to_decimal(item.price),
            quantity=item.quantity,
            variant_id=item.variant_id,
            base_amount=base_amount,
            subtotal=base_amount,
            total=base_amount,
        ))
    return out


def to_checkout_items(checkout_id: str, line_items: Sequence[LineItem]) -> List[CheckoutItem]:
    return [
        CheckoutItem(
            id=li.id,
            checkout_id=checkout_id,
            position=idx,
            product_id=li.product_id,
            sku=li.sku,
            title=li.title,
            price=li.unit_price,
            quantity=li.quantity,
            variant_id=li.variant_id,
            line_total=cents_to_dollars(li.total),
        )
        for idx, li in enumerate(line_items)
    ]
