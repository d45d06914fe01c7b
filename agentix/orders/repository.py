from typing import List, Optional, Sequence, Tuple
from sqlalchemy import select
from agentix.common.utils import generate_id
from agentix.orders.utils import order_number_for
from agentix.schema.full_schema import (
    Checkout, CheckoutItem, FulfillmentStatus, OrderItem, OrderStatus, Orders,
)


async def create_order_from_checkout(session, checkout: Checkout, items: Sequence[CheckoutItem]) -> Orders:
    """Snapshot a completed checkout into an order and its items. Caller commits."""
    order = Orders(
        tenant_id=checkout.tenant_id,
        checkout_id=checkout.id,
        external_id=generate_id("ord"),
        order_number=order_number_for(checkout.id),
        status=OrderStatus.CONFIRMED.value,
        fulfillment_status=FulfillmentStatus.UNFULFILLED.value,
        email=checkout.email,
        shipping_address=dict(checkout.shipping_address) if checkout.shipping_address else None,
        shipping_method=checkout.shipping_method,
        shipping_cost=checkout.shipping_cost,
        subtotal=checkout.subtotal,
        tax_amount=checkout.tax_amount,
        total_amount=checkout.total_amount,
        currency=checkout.currency,
        payment_method=checkout.payment_method,
        payment_reference=checkout.payment_token,
        source=checkout.protocol.lower(),
        protocol=checkout.protocol,
    )
    session.add(order)
    await session.flush()

    session.add_all([
        OrderItem(
            order_id=order.id,
            position=idx,
            product_id=item.product_id,
            sku=item.sku,
            title=item.title,
            price=item.price,
            quantity=item.quantity,
            variant_id=item.variant_id,
            line_total=item.line_total,
        )
        for idx, item in enumerate(items)
    ])
    return order


async def order_for_tenant(session, order_id, tenant_id, protocol: Optional[str] = None) -> Optional[Orders]:
    stmt=select(Orders).where(Orders.id==order_id,Orders.tenant_id==tenant_id)
    if protocol:
        stmt=stmt.where(Orders.protocol==protocol)
    res=await session.execute(stmt)
    return res.scalar_one_or_none()


async def order_for_checkout(session, checkout_id) -> Optional[Orders]:
    stmt=select(Orders).where(Orders.checkout_id==checkout_id).order_by(Orders.created_at.desc()).limit(1)
    res=await session.execute(stmt)
    return res.scalars().first()


async def order_items(session, order_id) -> List[OrderItem]:
    stmt=select(OrderItem).where(OrderItem.order_id==order_id).order_by(OrderItem.position)
    res=await session.execute(stmt)
    return list(res.scalars().all())


async def get_order_with_items(session, order_id, tenant_id, protocol: Optional[str] = None) -> Optional[Tuple[Orders, List[OrderItem]]]:
    order = await order_for_tenant(session, order_id, tenant_id, protocol)
    if order is None:
        return None
    return order, await order_items(session, order.id)
