# seed_demo_catalog.py
import asyncio
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from agentix.adapters.mock_data import MOCK_PRODUCTS
from agentix.adapters.models import CatalogProduct
from agentix.common.utils import generate_api_key
from agentix.db.connection import async_session, create_db_and_tables
from agentix.schema.full_schema import Platform, Product, Tenant, TenantStatus


def product_row(tenant_id: str, p: CatalogProduct) -> Product:
    return Product(
        tenant_id=tenant_id,
        external_id=p.external_id or p.id,
        sku=p.sku,
        title=p.title,
        description=p.description,
        price=p.price,
        compare_at_price=p.compare_at_price,
        currency=p.currency,
        images=[img.model_dump() for img in p.images],
        inventory_quantity=p.inventory_quantity,
        inventory_policy=p.inventory_policy,
        product_type=p.product_type,
        vendor=p.vendor,
        tags=list(p.tags),
        variants=[v.model_dump(mode="json") for v in p.variants] if p.variants else None,
        status=p.status,
    )


async def seed_tenant_catalog(session: AsyncSession, name: str = "Demo Store",
                              api_key: Optional[str] = None,
                              products: Optional[List[CatalogProduct]] = None) -> Tenant:
    """Create an ACTIVE mock-backed tenant and copy the demo catalog into its product table. Caller commits."""
    tenant = Tenant(
        name=name,
        company_name=name,
        api_key=api_key or generate_api_key(),
        platform=Platform.CUSTOM.value,
        status=TenantStatus.ACTIVE.value,
    )
    session.add(tenant)
    await session.flush()

    session.add_all([product_row(tenant.id, p) for p in (products if products is not None else MOCK_PRODUCTS)])
    await session.flush()
    return tenant


async def main(api_key: Optional[str] = None):
    await create_db_and_tables()

    async with async_session() as session:
        if api_key:
            res = await session.execute(select(Tenant.id).where(Tenant.api_key == api_key))
            if res.scalar_one_or_none():
                print(f"Tenant with api key {api_key} already exists, nothing to do")
                return

        tenant = await seed_tenant_catalog(session, api_key=api_key)
        await session.commit()

    print(f"Seeded tenant {tenant.id} with {len(MOCK_PRODUCTS)} products")
    print(f"X-API-Key: {tenant.api_key}")


if __name__ == "__main__":
    asyncio.run(main())
