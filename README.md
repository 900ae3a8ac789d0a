# roxy

Asyncio components for an Ethereum JSON-RPC proxy: HTTP backends with
retries and health tracking, load balancers, failover groups, a
Byzantine-safe chain tip tracker, block range tracking and a family of
caches.

## Install

```
pip install .
pip install ".[test]"   # with pytest and pytest-asyncio
```

## Backends and groups

```python
import asyncio

from roxy.group import BackendGroup
from roxy.http import BackendConfig, HttpBackend
from roxy.load_balancer import EmaLoadBalancer


async def main():
    primary = HttpBackend("primary", "http://localhost:8545", BackendConfig())
    secondary = HttpBackend("secondary", "http://localhost:8546", BackendConfig())
    group = BackendGroup("main", [primary, secondary], EmaLoadBalancer())

    request = {"jsonrpc": "2.0", "method": "eth_blockNumber", "params": [], "id": 1}
    reply = await group.forward(request)
    print(reply.served_by, reply.response)

    await primary.aclose()
    await secondary.aclose()


asyncio.run(main())
```

- `roxy.http.HttpBackend` posts the request as JSON with `httpx` and returns
  the decoded JSON reply. A failed connection or a non-success status raises
  `BackendOffline`; an unparsable body raises `InternalError`. Failed
  attempts are retried up to `BackendConfig.max_retries` times (default 3)
  with a backoff of 100 ms, 200 ms, 400 ms … capped at 3 s. The client
  timeout is `BackendConfig.timeout` (default 30 s). `HttpBackend` can also
  be used as an `async with` context manager, which closes its client.
- `roxy.load_balancer.Backend` is the abstract interface a backend
  implements: `name()`, `rpc_url()`, `forward(request)`, `health_status()`,
  `latency_ema()`; `is_healthy()` is true unless the status is `Unhealthy`.
- `EmaLoadBalancer` orders healthy backends by latency average, then the
  unhealthy ones by latency average. `RoundRobinBalancer` rotates through the
  healthy backends only.
- `roxy.group.BackendGroup.forward` tries backends in the balancer's order
  and returns a `BackendResponse` (`response`, `served_by`). An error whose
  `should_failover()` is true (`BackendOffline`) moves on to the next backend;
  any other `RoxyError` is raised at once. `NoHealthyBackends` is raised when
  the balancer returns nothing or every backend failed over.

## Health and connection state

- `roxy.health.EmaHealthTracker` keeps a latency average updated as
  `(old + new) / 2` and an error rate, which reads 0.0 until
  `HealthConfig.min_requests` (default 10) requests were recorded. `status()`
  returns `Unhealthy(error_rate)` at or above `unhealthy_error_rate`
  (default 0.5), else `Degraded(latency_ema)` at or above `degraded_latency`
  (default 500 ms), else `Healthy()`.
- `roxy.connection.ConnectionStateMachine` starts in `Connecting(0)` and moves
  between `Connecting`, `Connected`, `Disconnected` and `Banned`. Reaching
  `ConnectionConfig.max_retries` failures (default 5) bans the backend for
  `ban_duration` (default 60 s). `backoff_duration()` is
  `base_delay * 2**attempts` capped at `max_delay`, or the time left on a ban.
  `try_reconnect()` returns to `Connecting(0)` when disconnected or when a ban
  has run out; `reset()` always does.
- `roxy.safe_tip.SafeTip(f)` takes each backend's reported height through
  `update(backend, height)`. `get()` returns the highest height among the
  lowest `n - f` reports, `latest()` the highest height reported; both are 0
  when nothing is known.

```python
from roxy.safe_tip import SafeTip

tip = SafeTip(1)
tip.update("a", 100)
tip.update("b", 100)
tip.update("c", 200)
assert tip.get() == 100
assert tip.latest() == 200
```

## Block ranges

`roxy.rmap.RMap` holds inclusive block ranges, merging any that overlap or
touch. `insert(start, end)` raises `ValueError` when `start > end`.

```python
from roxy.rmap import RMap

rmap = RMap()
rmap.insert(100, 200)
rmap.insert(300, 400)
assert 150 in rmap
assert rmap.gaps_in(50, 450) == [(50, 99), (201, 299), (401, 450)]
assert list(rmap) == [(100, 200), (300, 400)]
assert rmap.covered_blocks() == 202
```

It also offers `contains_range`, `len()`, `is_empty`, `clear`, `min_block`,
`max_block` and `copy`.

## Caches

Every cache implements the async interface of `roxy.cache.Cache`:
`get(key)` returns bytes or `None`, `put(key, value, ttl)` takes a
`datetime.timedelta`, `delete(key)`. Failures raise `CacheError`.

- `roxy.cache.MemoryCache(capacity)` — in-process LRU with per-entry expiry;
  a capacity of 0 means 1000.
- `roxy.compressed.CompressedCache(inner, quality)` — brotli-compresses values
  for an inner cache; quality defaults to 4 and is clamped to 0–11.
- `roxy.fallback.FallbackCache(primary, fallback)` — reads the primary, and on
  a miss or error the fallback; writes and deletes go to both, raising the
  primary's error first if either fails.
- `roxy.redis_cache.RedisCache(url)` — Redis storage using `SETEX`, with TTLs
  in whole seconds and at least one second. An invalid URL raises
  `CacheError`; the connection is made on first use.
- `roxy.rpc_cache.RpcCache(inner)` — applies per-method policies: `Immutable()`
  for `eth_chainId`, `eth_getBlockByHash`, `eth_getTransactionByHash` and
  `eth_getTransactionReceipt`; `Ttl(1 s)` for `eth_blockNumber`; `Ttl(5 s)`
  for `eth_gasPrice`; `NoCache()` for `eth_sendRawTransaction`, `eth_call`,
  `eth_estimateGas` and, by default, every other method. `with_policy` and
  `with_default_policy` change them and return the cache. Keys are
  `method:` followed by the parameters as compact JSON with sorted keys.

```python
import asyncio
from datetime import timedelta

from roxy.cache import MemoryCache
from roxy.rpc_cache import RpcCache, Ttl


async def main():
    cache = RpcCache(MemoryCache(1000)).with_policy("eth_getBalance", Ttl(timedelta(seconds=2)))
    await cache.put_response("eth_chainId", [], b'"0x1"')
    print(await cache.get_response("eth_chainId", []))


asyncio.run(main())
```

## What it does not do

The package has no command-line program, no HTTP server that listens for
clients, and no configuration file loading. It does not route methods to
groups, block methods or rate-limit clients. It supplies the backends,
balancers, groups, trackers and caches from which such a proxy can be put
together.

## Tests

```
pytest
```