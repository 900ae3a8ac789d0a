"""EMA-based health tracking."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import timedelta


@dataclass(frozen=True)
class HealthStatus:
    """Health of a backend."""


@dataclass(frozen=True)
class Healthy(HealthStatus):
    """Backend is operating normally."""


@dataclass(frozen=True)
class Degraded(HealthStatus):
    """Backend latency is above the degraded threshold."""

    latency_ema: timedelta


@dataclass(frozen=True)
class Unhealthy(HealthStatus):
    """Backend error rate is above the unhealthy threshold."""

    error_rate: float


@dataclass
class HealthConfig:
    """Thresholds for health tracking."""

    degraded_latency: timedelta = field(default_factory=lambda: timedelta(milliseconds=500))
    unhealthy_error_rate: float = 0.5
    min_requests: int = 10


class EmaHealthTracker:
    """Tracks latency as a running average and counts errors."""

    def __init__(self, config: HealthConfig | None = None) -> None:
        self._config = config if config is not None else HealthConfig()
        self._latency_ema = timedelta(0)
        self._error_count = 0
        self._request_count = 0
        self.last_success: float | None = None

    def __repr__(self) -> str:
        return (
            f"EmaHealthTracker(latency_ema={self._latency_ema!r}, "
            f"errors={self._error_count}, requests={self._request_count})"
        )

    def record(self, duration: timedelta, success: bool) -> None:
        """Record the outcome and duration of one request."""
        self._request_count += 1
        if success:
            self.last_success = time.monotonic()
        else:
            self._error_count += 1
        self._latency_ema = (self._latency_ema + duration) / 2

    def latency_ema(self) -> timedelta:
        """Return the current latency average."""
        return self._latency_ema

    def error_rate(self) -> float:
        """Return the error rate, or 0.0 below the minimum request count."""
        if self._request_count < self._config.min_requests or self._request_count == 0:
            return 0.0
        return self._error_count / self._request_count

    def status(self) -> HealthStatus:
        """Classify the backend from error rate and latency."""
        error_rate = self.error_rate()
        if error_rate >= self._config.unhealthy_error_rate:
            return Unhealthy(error_rate=error_rate)
        if self._latency_ema >= self._config.degraded_latency:
            return Degraded(latency_ema=self._latency_ema)
        return Healthy()