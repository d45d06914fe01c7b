from contextlib import asynccontextmanager
from fastapi import FastAPI
from agentix import __version__
from agentix.api.routers import acp_routers, public_routers, ucp_routers
from agentix.cache._cache import close_redis_client
from agentix.common.custom_exceptions import register_all_exceptions
from agentix.common.logging_setup import setup_logging, shutdown_logging
from agentix.config.admin_config import admin_config
from agentix.config.settings import config_settings
from agentix.db.connection import async_engine, create_db_and_tables
from agentix.middlewares.request_id_middleware import RequestIdMiddleware


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    logger = setup_logging()
    if config_settings.DB_AUTO_CREATE:
        await create_db_and_tables()
    logger.info("app.startup", extra={"service": admin_config.SERVICE_NAME, "env": admin_config.ENV})

    try:
        yield
    finally:
        await close_redis_client()
        await async_engine.dispose()
        logger.info("app.shutdown")
        shutdown_logging()


def create_app():
    app=FastAPI(
        title="Agentix",
        description="ACP and UCP commerce gateway for AI agents",
        version=__version__,
        lifespan=app_lifespan)

    app.include_router(public_routers)
    app.include_router(acp_routers)
    app.include_router(ucp_routers)

    app.add_middleware(RequestIdMiddleware)
    register_all_exceptions(app)

    return app

app=create_app()
