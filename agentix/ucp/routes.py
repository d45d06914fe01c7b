from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from agentix.cache.tenant_cache import cache_get_or_set
from agentix.checkout.dependencies import ucp_engine
from agentix.checkout.services import CheckoutEngine
from agentix.common.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, logger
from agentix.common.custom_exceptions import APIError, NotFoundError
from agentix.common.utils import json_ok
from agentix.config.settings import config_settings
from agentix.db.dependencies import get_session
from agentix.orders.repository import get_order_with_items, order_items
from agentix.products.constants import CATALOG_CACHE_NAMESPACE
from agentix.products.models import CatalogQuery
from agentix.products.repository import search_products
from agentix.products.utils import decode_page_token, make_params_key
from agentix.schema.full_schema import Protocol, Tenant
from agentix.tenants.dependencies import authenticate_tenant
from agentix.ucp.models import UCPCreateCart, UCPCreateOrder, UCPUpdateCart
from agentix.ucp.serializers import capabilities, catalog_page, ucp_cart, ucp_order

ucp_router=APIRouter()


@ucp_router.get("/capabilities")
async def get_capabilities(tenant: Tenant = Depends(authenticate_tenant)):
    return json_ok(capabilities(tenant))


@ucp_router.get("/catalog")
async def get_catalog(
    query: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    min_price: Optional[int] = Query(None, ge=0, description="cents"),
    max_price: Optional[int] = Query(None, ge=0, description="cents"),
    page_size: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    page_token: Optional[str] = Query(None, description="Opaque token from a previous page"),
    tenant: Tenant = Depends(authenticate_tenant),
    session: AsyncSession = Depends(get_session)):

    params = CatalogQuery(query=query, category=category, min_price=min_price, max_price=max_price,
                          limit=page_size, offset=decode_page_token(page_token))

    async def loader():
        rows, total = await search_products(session, tenant.id, params)
        return catalog_page(rows, total, params.offset, params.limit)

    results = await cache_get_or_set(tenant.id, f"ucp:{CATALOG_CACHE_NAMESPACE}", make_params_key(params),
                                     config_settings.CATALOG_CACHE_TTL, loader)
    return json_ok(results)


@ucp_router.post("/carts")
async def create_cart(payload: UCPCreateCart, engine: CheckoutEngine = Depends(ucp_engine)):
    view = await engine.create(payload.to_draft())
    return json_ok(ucp_cart(view), status_code=status.HTTP_201_CREATED)


@ucp_router.get("/carts/{cart_id}")
async def get_cart(cart_id: str, engine: CheckoutEngine = Depends(ucp_engine)):
    view = await engine.get(cart_id)
    return json_ok(ucp_cart(view))


@ucp_router.put("/carts/{cart_id}")
async def update_cart(cart_id: str, payload: UCPUpdateCart, engine: CheckoutEngine = Depends(ucp_engine)):
    view = await engine.update(cart_id, payload.to_changes())
    return json_ok(ucp_cart(view))


@ucp_router.post("/orders")
async def create_order(payload: UCPCreateOrder, engine: CheckoutEngine = Depends(ucp_engine)):
    view = await engine.complete(payload.cart_id, payload.payment_token)

    if view.order is None:
        # the cart is already completed at this point, only the order snapshot is missing
        logger.error("ucp.order.missing", extra={"tenant_id": engine.tenant_id, "cart_id": payload.cart_id})
        raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "Failed to create order")

    items = await order_items(engine.session, view.order.id)
    logger.info("ucp.order.created", extra={"tenant_id": engine.tenant_id, "order_id": view.order.id})
    return json_ok(ucp_order(view.order, items), status_code=status.HTTP_201_CREATED)


@ucp_router.get("/orders/{order_id}")
async def get_order(order_id: str,
                    tenant: Tenant = Depends(authenticate_tenant),
                    session: AsyncSession = Depends(get_session)):
    found = await get_order_with_items(session, order_id, tenant.id, Protocol.UCP.value)
    if found is None:
        raise NotFoundError("Order", order_id)
    order, items = found
    return json_ok(ucp_order(order, items))
