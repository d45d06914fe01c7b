from typing import Any, Optional
from fastapi import FastAPI, HTTPException, Request, status
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from agentix.common.constants import logger
from agentix.common.context import request_id_ctx
from agentix.common.utils import build_error, json_error


class APIError(HTTPException):
    """HTTP error carrying a machine readable code for the error envelope."""

    def __init__(self, status_code: int, code: str, message: str, details: Optional[Any] = None):
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message
        self.details = details


class ValidationError(APIError):
    def __init__(self, message: str, details: Optional[Any] = None, code: str = "VALIDATION_ERROR"):
        super().__init__(status.HTTP_400_BAD_REQUEST, code, message, details)


class InvalidItemsError(ValidationError):
    def __init__(self, message: str = "None of the requested items could be found in the catalog"):
        super().__init__(message, code="INVALID_ITEMS")


class AuthenticationError(APIError):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, "AUTHENTICATION_ERROR", message)


class NotFoundError(APIError):
    def __init__(self, resource: str, identifier: Optional[str] = None):
        message = f"{resource} '{identifier}' not found" if identifier else f"{resource} not found"
        super().__init__(status.HTTP_404_NOT_FOUND, "NOT_FOUND", message)


class ConflictError(APIError):
    def __init__(self, code: str, message: str, details: Optional[Any] = None):
        super().__init__(status.HTTP_409_CONFLICT, code, message, details)


async def fallback_handler(request: Request, exc: Exception):

    rid = request_id_ctx.get(None)

    logger.error(
        "unexpected.exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "tenant_id": getattr(request.state, "tenant_id", None),
        },
        exc_info=exc,
    )

    payload = build_error(code="INTERNAL_ERROR", message="Internal server error", request_id=rid)
    return json_error(payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _validation_details(exc: RequestValidationError):
    details = []
    for err in exc.errors():
        loc = list(err.get("loc", ()))
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        details.append({"path": ".".join(str(p) for p in loc), "message": err.get("msg", "")})
    return details


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    rid = request_id_ctx.get(None)
    details = _validation_details(exc)
    logger.warning(
        "request.validation_failed",
        extra={
            "errors": details,
            "path": request.url.path,
        },
    )

    payload = build_error(code="VALIDATION_ERROR", message="Invalid request", details=details, request_id=rid)
    return json_error(payload, status_code=status.HTTP_400_BAD_REQUEST)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):

    rid = request_id_ctx.get(None)

    code = getattr(exc, "code", None) or f"HTTP_{exc.status_code}"
    message = getattr(exc, "message", None) or str(exc.detail)
    details = getattr(exc, "details", None)

    if exc.status_code >= 500:
        logger.error("request.failed", extra={"path": request.url.path, "code": code})
    else:
        logger.info("request.rejected", extra={"path": request.url.path, "code": code, "status": exc.status_code})

    payload = build_error(code=code, message=message, details=details, request_id=rid)
    return json_error(payload, status_code=exc.status_code, headers=getattr(exc, "headers", None))


def register_all_exceptions(app: FastAPI):

    app.add_exception_handler(
        Exception, # catch all unidentified/unhandled exceptions
        fallback_handler
    )

    app.add_exception_handler(
        RequestValidationError,
        validation_exception_handler
    )

    app.add_exception_handler(
        StarletteHTTPException,
        http_exception_handler
    )
