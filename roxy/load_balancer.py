"""Backend interface, proxy errors and load balancer implementations."""

from __future__ import annotations

import itertools
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import timedelta
from typing import Any

from roxy.health import HealthStatus, Unhealthy


class RoxyError(Exception):
    """Base class for errors raised while proxying a request."""

    def should_failover(self) -> bool:
        """Whether another backend should be tried after this error."""
        return False


class NoHealthyBackends(RoxyError):
    """No backend could serve the request."""

    def __init__(self) -> None:
        super().__init__("no healthy backends available")


class BackendOffline(RoxyError):
    """A backend could not be reached or answered with an error status."""

    def __init__(self, backend: str) -> None:
        super().__init__(f"backend {backend} is offline")
        self.backend = backend

    def should_failover(self) -> bool:
        return True


class InternalError(RoxyError):
    """An unexpected failure inside the proxy."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Backend(ABC):
    """An upstream JSON-RPC endpoint that requests can be forwarded to."""

    @abstractmethod
    def name(self) -> str:
        """Return the backend's name."""

    @abstractmethod
    def rpc_url(self) -> str:
        """Return the URL requests are sent to."""

    @abstractmethod
    async def forward(self, request: Any) -> Any:
        """Forward a JSON-RPC request and return the decoded response."""

    @abstractmethod
    def health_status(self) -> HealthStatus:
        """Return the backend's current health."""

    @abstractmethod
    def latency_ema(self) -> timedelta:
        """Return the backend's average latency."""

    def is_healthy(self) -> bool:
        """Whether the backend is fit to receive requests."""
        return not isinstance(self.health_status(), Unhealthy)


class LoadBalancer(ABC):
    """Chooses which backends serve a request and in what order."""

    @abstractmethod
    def select(self, backends: Sequence[Backend]) -> Backend | None:
        """Return the preferred backend, or None if there is none."""

    @abstractmethod
    def select_ordered(self, backends: Sequence[Backend]) -> list[Backend]:
        """Return backends in the order they should be tried."""


class EmaLoadBalancer(LoadBalancer):
    """Prefers healthy backends, then lower average latency."""

    def __repr__(self) -> str:
        return "EmaLoadBalancer()"

    def select(self, backends: Sequence[Backend]) -> Backend | None:
        return next(iter(self.select_ordered(backends)), None)

    def select_ordered(self, backends: Sequence[Backend]) -> list[Backend]:
        healthy = [b for b in backends if b.is_healthy()]
        unhealthy = [b for b in backends if not b.is_healthy()]
        healthy.sort(key=lambda b: b.latency_ema())
        unhealthy.sort(key=lambda b: b.latency_ema())
        return healthy + unhealthy


class RoundRobinBalancer(LoadBalancer):
    """Rotates through the healthy backends."""

    def __init__(self) -> None:
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return "RoundRobinBalancer()"

    def _next_index(self) -> int:
        with self._lock:
            return next(self._counter)

    def select(self, backends: Sequence[Backend]) -> Backend | None:
        healthy = [b for b in backends if b.is_healthy()]
        if not healthy:
            return None
        return healthy[self._next_index() % len(healthy)]

    def select_ordered(self, backends: Sequence[Backend]) -> list[Backend]:
        healthy = [b for b in backends if b.is_healthy()]
        if not healthy:
            return []
        offset = self._next_index() % len(healthy)
        return healthy[offset:] + healthy[:offset]