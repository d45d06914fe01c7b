from typing import Optional
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession
from agentix.adapters.base import ISVAdapter
from agentix.adapters.registry import resolve_tenant_adapter
from agentix.common.constants import API_KEY_HEADER
from agentix.common.context import tenant_id_ctx
from agentix.common.custom_exceptions import AuthenticationError
from agentix.db.dependencies import get_session
from agentix.schema.full_schema import Tenant, TenantStatus
from agentix.tenants.constants import logger
from agentix.tenants.repository import tenant_by_api_key


async def authenticate_tenant(request: Request,
                              api_key: Optional[str] = Header(None, alias=API_KEY_HEADER),
                              session: AsyncSession = Depends(get_session)) -> Tenant:

    if not api_key:
        raise AuthenticationError("Missing X-API-Key header")

    tenant = await tenant_by_api_key(session, api_key)
    if tenant is None:
        logger.info("tenant.auth.invalid_key", extra={"path": request.url.path})
        raise AuthenticationError("Invalid API key")

    if tenant.status == TenantStatus.SUSPENDED.value:
        raise AuthenticationError("Account is suspended")
    if tenant.status == TenantStatus.DISCONNECTED.value:
        raise AuthenticationError("Account is disconnected")

    request.state.tenant_id = tenant.id
    tenant_id_ctx.set(tenant.id)
    return tenant


async def get_tenant_adapter(tenant: Tenant = Depends(authenticate_tenant)) -> ISVAdapter:
    # built per request, adapters hold connection state and in-memory ledgers
    return await resolve_tenant_adapter(tenant)
