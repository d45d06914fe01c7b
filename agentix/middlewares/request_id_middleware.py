import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from agentix.common.context import request_id_ctx, tenant_id_ctx

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):

        req_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        token = request_id_ctx.set(req_id)
        tenant_token = tenant_id_ctx.set(None)
        try:
            response = await call_next(request)
        finally:
            tenant_id_ctx.reset(tenant_token)
            request_id_ctx.reset(token)

        response.headers[REQUEST_ID_HEADER] = req_id
        return response
