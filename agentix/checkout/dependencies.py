from fastapi import BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from agentix.adapters.base import ISVAdapter
from agentix.checkout.events import AuditTrail
from agentix.checkout.services import CheckoutEngine
from agentix.db.dependencies import get_session, get_session_factory
from agentix.schema.full_schema import Protocol, Tenant
from agentix.tenants.dependencies import authenticate_tenant, get_tenant_adapter


def checkout_engine(protocol: Protocol):
    async def _engine(background_tasks: BackgroundTasks,
                      session: AsyncSession = Depends(get_session),
                      session_factory: async_sessionmaker = Depends(get_session_factory),
                      tenant: Tenant = Depends(authenticate_tenant),
                      adapter: ISVAdapter = Depends(get_tenant_adapter)) -> CheckoutEngine:
        return CheckoutEngine(session, tenant, adapter, protocol, AuditTrail(session_factory, background_tasks))

    return _engine


acp_engine = checkout_engine(Protocol.ACP)
ucp_engine = checkout_engine(Protocol.UCP)
