import os

# settings are read once at import time, point them at throwaway backends first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENCRYPTION_KEY"] = "agentix-test-encryption-key"
os.environ["DB_AUTO_CREATE"] = "false"
os.environ.pop("REDIS_URL", None)

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from agentix.db.connection import create_db_and_tables
from agentix.db.dependencies import get_session, get_session_factory
from agentix.db.seed_demo_catalog import seed_tenant_catalog
from agentix.main import app
from agentix.schema.full_schema import Product
from tests.helpers import TEST_API_KEY


@pytest.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'agentix_test.db'}")
    await create_db_and_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def tenant(session_factory):
    async with session_factory() as session:
        t = await seed_tenant_catalog(session, name="Test Store", api_key=TEST_API_KEY)
        await session.commit()
    return t


@pytest.fixture
async def products(session_factory, tenant):
    """Seeded catalog rows keyed by sku."""
    async with session_factory() as session:
        res = await session.execute(select(Product).where(Product.tenant_id == tenant.id))
        return {p.sku: p for p in res.scalars().all()}


@pytest.fixture
async def app_client(session_factory):

    async def override_get_session():
        async with session_factory() as session:
            yield session

    async def override_get_session_factory():
        yield session_factory

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_session_factory] = override_get_session_factory

    try:
        async with LifespanManager(app):
            # unhandled errors come back as the 500 envelope instead of propagating into the test
            transport = ASGITransport(app=app, raise_app_exceptions=False)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def ac_client(app_client, tenant):
    app_client.headers["X-API-Key"] = TEST_API_KEY
    yield app_client
