from fastapi import APIRouter
from agentix.api import acp_prefix, ucp_prefix
from agentix.acp.routes import acp_router
from agentix.common.routes import home_router
from agentix.ucp.routes import ucp_router


acp_routers = APIRouter(prefix=acp_prefix)
acp_routers.include_router(acp_router, tags=["acp"])

#--------------------------------------------------------------------------------------------------------

ucp_routers = APIRouter(prefix=ucp_prefix)
ucp_routers.include_router(ucp_router, tags=["ucp"])

#--------------------------------------------------------------------------------------------------------

public_routers = APIRouter()
public_routers.include_router(home_router, tags=["home"])
