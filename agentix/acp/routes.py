from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from agentix.acp.models import ACPCompleteCheckout, ACPCreateCheckout, ACPUpdateCheckout
from agentix.acp.serializers import acp_checkout, acp_products_page
from agentix.cache.tenant_cache import cache_get_or_set
from agentix.checkout.dependencies import acp_engine
from agentix.checkout.services import CheckoutEngine, PaymentTokenRejected
from agentix.common.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from agentix.common.utils import json_error, json_ok
from agentix.config.settings import config_settings
from agentix.db.dependencies import get_session
from agentix.products.constants import CATALOG_CACHE_NAMESPACE
from agentix.products.models import CatalogQuery
from agentix.products.repository import search_products
from agentix.products.utils import make_params_key
from agentix.schema.full_schema import Tenant
from agentix.tenants.dependencies import authenticate_tenant

acp_router=APIRouter()


@acp_router.post("/checkouts")
async def create_checkout(payload: ACPCreateCheckout, engine: CheckoutEngine = Depends(acp_engine)):
    view = await engine.create(payload.to_draft())
    return json_ok(acp_checkout(view), status_code=status.HTTP_201_CREATED)


@acp_router.get("/checkouts/{checkout_id}")
async def get_checkout(checkout_id: str, engine: CheckoutEngine = Depends(acp_engine)):
    view = await engine.get(checkout_id)
    return json_ok(acp_checkout(view))


@acp_router.put("/checkouts/{checkout_id}")
async def update_checkout(checkout_id: str, payload: ACPUpdateCheckout, engine: CheckoutEngine = Depends(acp_engine)):
    view = await engine.update(checkout_id, payload.to_changes())
    return json_ok(acp_checkout(view))


@acp_router.post("/checkouts/{checkout_id}/complete")
async def complete_checkout(checkout_id: str, payload: ACPCompleteCheckout, engine: CheckoutEngine = Depends(acp_engine)):
    try:
        view = await engine.complete(checkout_id, payload.payment_token.token)
    except PaymentTokenRejected as exc:
        # ACP answers a declined token with the unchanged checkout and an inline message
        return json_error(acp_checkout(exc.view), status_code=status.HTTP_400_BAD_REQUEST)
    return json_ok(acp_checkout(view))


@acp_router.delete("/checkouts/{checkout_id}")
async def cancel_checkout(checkout_id: str, engine: CheckoutEngine = Depends(acp_engine)):
    view = await engine.cancel(checkout_id)
    return json_ok(acp_checkout(view))


@acp_router.get("/products")
async def list_products(
    query: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    min_price: Optional[int] = Query(None, ge=0, description="cents"),
    max_price: Optional[int] = Query(None, ge=0, description="cents"),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
    tenant: Tenant = Depends(authenticate_tenant),
    session: AsyncSession = Depends(get_session)):

    params = CatalogQuery(query=query, category=category, min_price=min_price, max_price=max_price,
                          limit=limit, offset=offset)

    async def loader():
        rows, total = await search_products(session, tenant.id, params)
        return acp_products_page(rows, total, params.limit, params.offset)

    results = await cache_get_or_set(tenant.id, f"acp:{CATALOG_CACHE_NAMESPACE}", make_params_key(params),
                                     config_settings.CATALOG_CACHE_TTL, loader)
    return json_ok(results)
