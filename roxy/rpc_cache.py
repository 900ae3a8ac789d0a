"""RPC-aware cache that applies caching policies per method."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from roxy.cache import Cache

IMMUTABLE_TTL = timedelta(days=100 * 365)


@dataclass(frozen=True)
class CachePolicy:
    """How responses of an RPC method are cached."""


@dataclass(frozen=True)
class NoCache(CachePolicy):
    """Never cache this method."""


@dataclass(frozen=True)
class Ttl(CachePolicy):
    """Cache for a fixed duration."""

    duration: timedelta


@dataclass(frozen=True)
class Immutable(CachePolicy):
    """Cache until evicted."""


class RpcCache:
    """Caches RPC responses according to per-method policies."""

    def __init__(self, inner: Cache) -> None:
        self._inner = inner
        self._policies: dict[str, CachePolicy] = {
            "eth_chainId": Immutable(),
            "eth_getBlockByHash": Immutable(),
            "eth_getTransactionByHash": Immutable(),
            "eth_getTransactionReceipt": Immutable(),
            "eth_blockNumber": Ttl(timedelta(seconds=1)),
            "eth_gasPrice": Ttl(timedelta(seconds=5)),
            "eth_sendRawTransaction": NoCache(),
            "eth_call": NoCache(),
            "eth_estimateGas": NoCache(),
        }
        self._default_policy: CachePolicy = NoCache()

    def __repr__(self) -> str:
        return (
            f"RpcCache(inner={self._inner!r}, policies={self._policies!r}, "
            f"default_policy={self._default_policy!r})"
        )

    def with_policy(self, method: str, policy: CachePolicy) -> RpcCache:
        """Set the policy for ``method`` and return this cache."""
        self._policies[method] = policy
        return self

    def with_default_policy(self, policy: CachePolicy) -> RpcCache:
        """Set the policy for unconfigured methods and return this cache."""
        self._default_policy = policy
        return self

    def get_policy(self, method: str) -> CachePolicy:
        """Return the policy that applies to ``method``."""
        return self._policies.get(method, self._default_policy)

    async def get_response(self, method: str, params: Sequence[Any]) -> bytes | None:
        """Return a cached response, or None if uncacheable or missing."""
        if isinstance(self.get_policy(method), NoCache):
            return None
        return await self._inner.get(self.cache_key(method, params))

    async def put_response(self, method: str, params: Sequence[Any], response: bytes) -> None:
        """Cache a response unless the method's policy forbids it."""
        policy = self.get_policy(method)
        if isinstance(policy, Ttl):
            ttl = policy.duration
        elif isinstance(policy, Immutable):
            ttl = IMMUTABLE_TTL
        else:
            return
        await self._inner.put(self.cache_key(method, params), response, ttl)

    @staticmethod
    def cache_key(method: str, params: Sequence[Any]) -> str:
        """Build ``{method}:{compact JSON of params}``."""
        try:
            params_json = json.dumps(
                list(params), separators=(",", ":"), sort_keys=True, ensure_ascii=False
            )
        except (TypeError, ValueError):
            params_json = "[]"
        return f"{method}:{params_json}"