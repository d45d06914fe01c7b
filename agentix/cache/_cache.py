from typing import Optional
import redis.asyncio as redis
from agentix.config.settings import config_settings

REDIS_LOCK_TIMEOUT = 5   # seconds

_redis_client: Optional[redis.Redis] = None


def get_redis_client() -> Optional[redis.Redis]:
    """Shared client, or None when REDIS_URL is unset and caching is disabled."""
    global _redis_client
    if not config_settings.REDIS_URL:
        return None
    if _redis_client is None:
        _redis_client = redis.Redis.from_url(config_settings.REDIS_URL, decode_responses=False)
    return _redis_client


def set_redis_client(client: Optional[redis.Redis]) -> None:
    global _redis_client
    _redis_client = client


async def close_redis_client() -> None:
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
