from sqlalchemy import select
from agentix.schema.full_schema import Tenant


async def tenant_by_api_key(session, api_key):
    stmt=select(Tenant).where(Tenant.api_key==api_key)
    res=await session.execute(stmt)
    return res.scalar_one_or_none()
