"""
Redis cache for user views.

Caches single user profiles and the first page of the admin user listing.
Running without Redis is supported: every operation becomes a miss/no-op.
"""
import json
import logging
from typing import Any, Optional
from redis import asyncio as aioredis
from redis.exceptions import RedisError
from app.config import settings

logger = logging.getLogger(__name__)

ADMIN_USER_LIST_KEY = "admin:users"


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


class RedisCache:
    """JSON values in Redis, optional at runtime."""

    def __init__(self):
        self.redis: Optional[aioredis.Redis] = None

    @property
    def enabled(self) -> bool:
        return self.redis is not None

    async def connect(self) -> None:
        """Connect when a Redis URL is configured; fall back to no cache on failure."""
        if not settings.redis_url:
            logger.info("No Redis URL provided - running without Redis cache")
            return

        client = aioredis.from_url(
            settings.redis_url,
            password=settings.redis_password or None,
            encoding="utf-8",
            decode_responses=True,
            max_connections=50,
        )
        try:
            await client.ping()
        except RedisError as e:
            logger.warning(f"Could not connect to Redis: {e}. Running without Redis cache")
            await client.aclose()
            return

        self.redis = client
        logger.info("Connected to Redis successfully")

    async def disconnect(self) -> None:
        if self.redis:
            await self.redis.aclose()
            self.redis = None

    async def get_json(self, key: str) -> Optional[Any]:
        """Cached value for key, or None on a miss."""
        if not self.enabled:
            return None

        raw = await self.redis.get(key)
        return json.loads(raw) if raw else None

    async def set_json(self, key: str, value: Any, ttl: int) -> bool:
        """
        Store a JSON-serializable value.

        Args:
            key: Cache key
            value: Value to cache (dates are stored as strings)
            ttl: Time to live in seconds
        """
        if not self.enabled:
            return False

        return bool(await self.redis.setex(key, ttl, json.dumps(value, default=str)))

    async def delete(self, *keys: str) -> int:
        """Drop keys; returns how many existed."""
        if not self.enabled or not keys:
            return 0

        return await self.redis.delete(*keys)


# Global cache instance
cache = RedisCache()


async def cache_user_data(user_id: str, user_data: dict) -> bool:
    """Cache a user's public profile."""
    return await cache.set_json(user_key(user_id), user_data, ttl=settings.cache_user_ttl)


async def get_cached_user_data(user_id: str) -> Optional[dict]:
    return await cache.get_json(user_key(user_id))


async def invalidate_user_cache(user_id: str) -> None:
    await cache.delete(user_key(user_id))


async def cache_admin_user_list(users: list) -> bool:
    """Cache the first page of the admin user listing."""
    return await cache.set_json(ADMIN_USER_LIST_KEY, users, ttl=settings.cache_user_ttl)


async def get_cached_admin_user_list() -> Optional[list]:
    return await cache.get_json(ADMIN_USER_LIST_KEY)


async def invalidate_admin_user_list() -> None:
    await cache.delete(ADMIN_USER_LIST_KEY)


async def evict_removed_user(user_id: str) -> None:
    """
    Removal listener: drop every cached view that still contains the user.

    Registered with the cascade removal service and called only after a
    removal completed.
    """
    removed = await cache.delete(user_key(user_id), ADMIN_USER_LIST_KEY)
    logger.debug(f"Evicted {removed} cached views of removed user {user_id}")
