"""Cache wrapper that reads from a primary cache and falls back to a secondary."""

from __future__ import annotations

from datetime import timedelta

from roxy.cache import Cache, CacheError


class FallbackCache(Cache):
    """Reads from the primary first, then the fallback; writes to both.

    A miss or an error in the primary is answered from the fallback. Writes
    and deletes are attempted on both caches; if either fails, the primary's
    error is raised in preference to the fallback's.
    """

    def __init__(self, primary: Cache, fallback: Cache) -> None:
        self._primary = primary
        self._fallback = fallback

    def __repr__(self) -> str:
        return f"FallbackCache(primary={self._primary!r}, fallback={self._fallback!r})"

    @property
    def primary(self) -> Cache:
        """The cache consulted first."""
        return self._primary

    @property
    def fallback(self) -> Cache:
        """The cache consulted on a primary miss or error."""
        return self._fallback

    async def get(self, key: str) -> bytes | None:
        try:
            value = await self._primary.get(key)
        except CacheError:
            value = None
        if value is not None:
            return value
        return await self._fallback.get(key)

    async def put(self, key: str, value: bytes, ttl: timedelta) -> None:
        primary_error: CacheError | None = None
        try:
            await self._primary.put(key, value, ttl)
        except CacheError as exc:
            primary_error = exc
        try:
            await self._fallback.put(key, value, ttl)
        except CacheError:
            if primary_error is None:
                raise
        if primary_error is not None:
            raise primary_error

    async def delete(self, key: str) -> None:
        primary_error: CacheError | None = None
        try:
            await self._primary.delete(key)
        except CacheError as exc:
            primary_error = exc
        try:
            await self._fallback.delete(key)
        except CacheError:
            if primary_error is None:
                raise
        if primary_error is not None:
            raise primary_error