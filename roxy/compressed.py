"""Cache wrapper that stores values brotli-compressed."""

from __future__ import annotations

from datetime import timedelta

import brotli

from roxy.cache import Cache, CacheError

DEFAULT_QUALITY = 4
MAX_QUALITY = 11
DEFAULT_LG_WINDOW_SIZE = 22


class CompressedCache(Cache):
    """Compresses values before handing them to an inner cache.

    Quality ranges from 0 to 11; larger values are clamped to 11.
    """

    def __init__(self, inner: Cache, quality: int = DEFAULT_QUALITY) -> None:
        self._inner = inner
        self._quality = max(0, min(quality, MAX_QUALITY))

    def __repr__(self) -> str:
        return f"CompressedCache(inner={self._inner!r}, quality={self._quality})"

    @property
    def quality(self) -> int:
        """The brotli quality in use."""
        return self._quality

    def _compress(self, data: bytes) -> bytes:
        try:
            return brotli.compress(
                bytes(data), quality=self._quality, lgwin=DEFAULT_LG_WINDOW_SIZE
            )
        except brotli.error as exc:
            raise CacheError(f"compression failed: {exc}") from exc

    @staticmethod
    def _decompress(data: bytes) -> bytes:
        try:
            return brotli.decompress(data)
        except brotli.error as exc:
            raise CacheError(f"decompression failed: {exc}") from exc

    async def get(self, key: str) -> bytes | None:
        compressed = await self._inner.get(key)
        if compressed is None:
            return None
        return self._decompress(compressed)

    async def put(self, key: str, value: bytes, ttl: timedelta) -> None:
        await self._inner.put(key, self._compress(value), ttl)

    async def delete(self, key: str) -> None:
        await self._inner.delete(key)