"""Cache interface and an in-memory LRU cache with per-entry expiry."""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from datetime import timedelta

_DEFAULT_CAPACITY = 1000


class CacheError(Exception):
    """Raised when a cache operation fails."""


class Cache(ABC):
    """An asynchronous key-value store whose entries expire."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the value stored under ``key``, or None on a miss."""

    @abstractmethod
    async def put(self, key: str, value: bytes, ttl: timedelta) -> None:
        """Store ``value`` under ``key`` for ``ttl``."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""


@dataclass
class _Entry:
    value: bytes
    expires_at: float


class MemoryCache(Cache):
    """A bounded least-recently-used cache held in process memory.

    A capacity of zero falls back to the default of 1000 entries.
    """

    def __init__(self, capacity: int = _DEFAULT_CAPACITY) -> None:
        self._capacity = capacity if capacity > 0 else _DEFAULT_CAPACITY
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"MemoryCache(capacity={self._capacity}, ...)"

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    async def get(self, key: str) -> bytes | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at > time.monotonic():
                self._entries.move_to_end(key)
                return entry.value
            del self._entries[key]
            return None

    async def put(self, key: str, value: bytes, ttl: timedelta) -> None:
        entry = _Entry(bytes(value), time.monotonic() + ttl.total_seconds())
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            self._entries[key] = entry
            while len(self._entries) > self._capacity:
                self._entries.popitem(last=False)

    async def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)