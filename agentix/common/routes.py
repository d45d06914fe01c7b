from fastapi import APIRouter, Depends, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from agentix import __version__
from agentix.common.constants import logger
from agentix.common.custom_exceptions import APIError
from agentix.common.utils import isoformat, json_ok, now
from agentix.config.admin_config import admin_config
from agentix.db.dependencies import get_session

home_router = APIRouter()


@home_router.get("/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("health.database.unreachable", extra={"reason": str(exc)})
        raise APIError(status.HTTP_503_SERVICE_UNAVAILABLE, "SERVICE_UNAVAILABLE", "Database connection error")

    return json_ok({
        "status": "healthy",
        "service": admin_config.SERVICE_NAME,
        "version": __version__,
        "timestamp": isoformat(now()),
    })
