from typing import List, Optional, Tuple
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from agentix.common.money import cents_to_dollars
from agentix.products.models import CatalogQuery
from agentix.schema.full_schema import Product, ProductStatus


def _active_products(tenant_id: str):
    return select(Product).where(Product.tenant_id == tenant_id, Product.status == ProductStatus.ACTIVE.value)


async def find_active_product(session: AsyncSession, tenant_id: str, *,
                              product_id: Optional[str] = None, sku: Optional[str] = None) -> Optional[Product]:
    """Look up one ACTIVE product of the tenant by sku first, then by id."""
    if sku:
        res = await session.execute(_active_products(tenant_id).where(Product.sku == sku).limit(1))
        product = res.scalars().first()
        if product is not None:
            return product
    if product_id:
        res = await session.execute(_active_products(tenant_id).where(Product.id == product_id))
        return res.scalars().first()
    return None


def _apply_filters(stmt, params: CatalogQuery):
    if params.query:
        pattern = f"%{params.query}%"
        # tags live in a JSON array, match the quoted element inside its text form
        tag_pattern = f'%"{params.query}"%'
        stmt = stmt.where(or_(
            Product.title.ilike(pattern),
            Product.description.ilike(pattern),
            cast(Product.tags, String).ilike(tag_pattern),
        ))
    if params.category:
        stmt = stmt.where(func.lower(Product.product_type) == params.category.lower())
    if params.min_price is not None:
        stmt = stmt.where(Product.price >= cents_to_dollars(params.min_price))
    if params.max_price is not None:
        stmt = stmt.where(Product.price <= cents_to_dollars(params.max_price))
    return stmt


async def search_products(session: AsyncSession, tenant_id: str, params: CatalogQuery) -> Tuple[List[Product], int]:
    stmt = _apply_filters(_active_products(tenant_id), params)

    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = (await session.execute(count_stmt)).scalar_one()

    page_stmt = stmt.order_by(Product.title.asc(), Product.id.asc()).offset(params.offset).limit(params.limit)
    rows = (await session.execute(page_stmt)).scalars().all()
    return list(rows), int(total)
