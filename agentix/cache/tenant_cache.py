import uuid
from typing import Any, Awaitable, Callable
from redis.exceptions import RedisError
from agentix.cache._cache import REDIS_LOCK_TIMEOUT, get_redis_client
from agentix.cache.constants import KEY_PREFIX, logger
from agentix.cache.utils import build_key, deserialize, release_lock, serialize


async def cache_get_or_set(tenant_id: str,
                           namespace: str,
                           key_suffix: str,
                           ttl: int,
                           loader: Callable[[], Awaitable[Any]]) -> Any:
    """Read-through cache scoped to one tenant.

    Redis is optional: with no client configured, or on any Redis failure,
    the loader result is returned directly. Keys never cross tenants.
    """
    client = get_redis_client()
    if client is None:
        return await loader()

    key = build_key(KEY_PREFIX, tenant_id, namespace, key_suffix)
    try:
        raw = await client.get(key)
    except RedisError as exc:
        logger.warning("cache.get.failed", extra={"key": key, "reason": str(exc)})
        return await loader()

    if raw is not None:
        try:
            return deserialize(raw)
        except ValueError:
            logger.warning("cache.entry.corrupt", extra={"key": key})

    # miss, one caller fills the entry while others compute without writing
    lock_key = key + ":lock"
    token = uuid.uuid4().hex
    try:
        locked = await client.set(lock_key, token, nx=True, ex=REDIS_LOCK_TIMEOUT)
    except RedisError as exc:
        logger.warning("cache.lock.failed", extra={"key": key, "reason": str(exc)})
        return await loader()

    if not locked:
        return await loader()

    try:
        value = await loader()
        try:
            await client.set(key, serialize(value), ex=ttl)
        except RedisError as exc:
            logger.warning("cache.set.failed", extra={"key": key, "reason": str(exc)})
        return value
    finally:
        await release_lock(client, lock_key, token)
