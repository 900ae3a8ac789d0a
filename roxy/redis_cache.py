"""Redis-backed cache with per-key expiry."""

from __future__ import annotations

from datetime import timedelta

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from roxy.cache import Cache, CacheError


class RedisCache(Cache):
    """A distributed cache stored in Redis, using SETEX for expiry.

    Expiry is kept in whole seconds, with a minimum of one second.
    """

    def __init__(self, url: str) -> None:
        try:
            self._client = aioredis.Redis.from_url(url)
        except (ValueError, RedisError) as exc:
            raise CacheError(f"failed to create client: {exc}") from exc
        self._url = url

    def __repr__(self) -> str:
        return f"RedisCache(url={self._url!r})"

    async def get(self, key: str) -> bytes | None:
        try:
            value = await self._client.get(key)
        except (RedisError, OSError) as exc:
            raise CacheError(f"get error: {exc}") from exc
        return None if value is None else bytes(value)

    async def put(self, key: str, value: bytes, ttl: timedelta) -> None:
        ttl_secs = max(int(ttl.total_seconds()), 1)
        try:
            await self._client.setex(key, ttl_secs, bytes(value))
        except (RedisError, OSError) as exc:
            raise CacheError(f"put error: {exc}") from exc

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except (RedisError, OSError) as exc:
            raise CacheError(f"delete error: {exc}") from exc