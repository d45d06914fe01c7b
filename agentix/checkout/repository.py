from typing import List, Optional, Sequence
from sqlalchemy import delete, select
from agentix.schema.full_schema import Checkout, CheckoutEvent, CheckoutItem


async def checkout_for_tenant(session, checkout_id, tenant_id, protocol: Optional[str] = None) -> Optional[Checkout]:
    stmt=select(Checkout).where(Checkout.id==checkout_id,Checkout.tenant_id==tenant_id)
    if protocol:
        stmt=stmt.where(Checkout.protocol==protocol)
    res=await session.execute(stmt)
    return res.scalar_one_or_none()


async def checkout_items(session, checkout_id) -> List[CheckoutItem]:
    stmt=select(CheckoutItem).where(CheckoutItem.checkout_id==checkout_id).order_by(CheckoutItem.position)
    res=await session.execute(stmt)
    return list(res.scalars().all())


async def replace_checkout_items(session, checkout_id, items: Sequence[CheckoutItem]):
    # items are owned by the checkout and replaced wholesale, caller commits
    await session.execute(delete(CheckoutItem).where(CheckoutItem.checkout_id==checkout_id))
    session.add_all(items)


async def checkout_events(session, checkout_id) -> List[CheckoutEvent]:
    stmt=select(CheckoutEvent).where(CheckoutEvent.checkout_id==checkout_id).order_by(CheckoutEvent.created_at)
    res=await session.execute(stmt)
    return list(res.scalars().all())
