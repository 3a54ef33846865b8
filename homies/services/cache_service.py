"""
Redis caching service for the event listing.

CACHING STRATEGY
================

What we cache:
  - The "All" listing response (JSON-serialized short views)
  - Single key: "events:list:all"

Invalidation strategy:
  - Delete the key after every add and edit, since both change rows shown
    in the listing
  - Join/leave don't touch listed fields, so they leave the cache alone
  - TTL-based expiry as safety net (REDIS_CACHE_TTL)

Redis is optional: when disabled or unreachable every function degrades to
a no-op and callers fall through to the database. Cache errors are logged,
never raised.
"""

import json
from typing import Optional

import redis.asyncio as redis

from homies.core.config import get_settings
from homies.core.logging import get_logger
from homies.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

EVENT_LIST_KEY = "events:list:all"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        try:
            await client.ping()
        except redis.RedisError as e:
            logger.error("redis_connection_failed", error=str(e))
            await client.aclose()
            return None
        _redis_client = client
        logger.info("redis_connected", url=settings.REDIS_URL)

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


async def get_cached_events() -> Optional[list[dict]]:
    """Retrieve the cached listing, or None on miss."""
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(EVENT_LIST_KEY)
    except redis.RedisError as e:
        logger.error("cache_get_error", key=EVENT_LIST_KEY, error=str(e))
        return None

    record_cache_operation("get", hit=data is not None)
    if data:
        logger.debug("cache_hit", key=EVENT_LIST_KEY)
        return json.loads(data)
    logger.debug("cache_miss", key=EVENT_LIST_KEY)
    return None


async def set_cached_events(data: list[dict]) -> None:
    """Cache the listing with TTL."""
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(EVENT_LIST_KEY, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        logger.debug("cache_set", key=EVENT_LIST_KEY, ttl=settings.REDIS_CACHE_TTL)
    except redis.RedisError as e:
        logger.error("cache_set_error", key=EVENT_LIST_KEY, error=str(e))


async def invalidate_event_cache() -> None:
    """Drop the cached listing after a write."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = await client.delete(EVENT_LIST_KEY)
        logger.info("cache_invalidated", keys_deleted=deleted)
    except redis.RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
    except redis.RedisError as e:
        return {"status": "error", "error": str(e)}

    hits = info.get("keyspace_hits", 0)
    misses = info.get("keyspace_misses", 0)
    return {
        "status": "connected",
        "hits": hits,
        "misses": misses,
        "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
    }
