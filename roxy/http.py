"""HTTP backend for forwarding JSON-RPC requests."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

import httpx

from roxy.health import EmaHealthTracker, HealthConfig, HealthStatus
from roxy.load_balancer import Backend, BackendOffline, InternalError, RoxyError

_MAX_BACKOFF_MS = 3000


@dataclass
class BackendConfig:
    """Settings for an HTTP backend."""

    timeout: timedelta = field(default_factory=lambda: timedelta(seconds=30))
    max_retries: int = 3
    max_batch_size: int = 100


class HttpBackend(Backend):
    """Forwards JSON-RPC requests over HTTP and tracks the endpoint's health."""

    def __init__(self, name: str, rpc_url: str, config: BackendConfig | None = None) -> None:
        self._name = name
        self._rpc_url = rpc_url
        self._config = config if config is not None else BackendConfig()
        self._client = httpx.AsyncClient(timeout=self._config.timeout.total_seconds())
        self._health = EmaHealthTracker(HealthConfig())

    def __repr__(self) -> str:
        return f"HttpBackend(name={self._name!r}, rpc_url={self._rpc_url!r})"

    async def __aenter__(self) -> HttpBackend:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def name(self) -> str:
        return self._name

    def rpc_url(self) -> str:
        return self._rpc_url

    async def _do_forward(self, request: Any) -> Any:
        start = time.monotonic()
        try:
            response = await self._client.post(self._rpc_url, json=request)
        except httpx.HTTPError as exc:
            raise BackendOffline(self._name) from exc

        duration = timedelta(seconds=time.monotonic() - start)
        success = response.is_success
        self._health.record(duration, success)

        if not success:
            raise BackendOffline(self._name)

        try:
            return response.json()
        except ValueError as exc:
            raise InternalError(f"failed to parse response: {exc}") from exc

    async def forward(self, request: Any) -> Any:
        """Send the request, retrying with exponential backoff on failure."""
        max_retries = self._config.max_retries
        last_error: RoxyError | None = None
        for attempt in range(max_retries + 1):
            try:
                return await self._do_forward(request)
            except RoxyError as exc:
                last_error = exc
                if attempt < max_retries:
                    backoff_ms = min(2**attempt * 100, _MAX_BACKOFF_MS)
                    await asyncio.sleep(backoff_ms / 1000)
        assert last_error is not None
        raise last_error

    def health_status(self) -> HealthStatus:
        return self._health.status()

    def latency_ema(self) -> timedelta:
        return self._health.latency_ema()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()