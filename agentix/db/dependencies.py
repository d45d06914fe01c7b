from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from agentix.db.connection import async_session

async def get_session() -> AsyncGenerator[AsyncSession,None]:
    async with async_session() as session:
        yield session


async def get_session_factory() -> AsyncGenerator[async_sessionmaker,None]:
    # background writers open their own sessions after the request session is closed
    yield async_session
