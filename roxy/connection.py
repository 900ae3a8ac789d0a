"""Connection state machine for backend lifecycle management."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import timedelta

_ZERO = timedelta(0)


@dataclass(frozen=True)
class ConnectionState:
    """Connection state of a backend."""

    def is_available(self) -> bool:
        """Whether the backend should accept requests."""
        return isinstance(self, Connected)

    def should_reconnect(self) -> bool:
        """Whether the backend should attempt reconnection."""
        if isinstance(self, Disconnected):
            return True
        if isinstance(self, Banned):
            return time.monotonic() >= self.until
        return False


@dataclass(frozen=True)
class Connected(ConnectionState):
    """Backend is connected and healthy."""


@dataclass(frozen=True)
class Connecting(ConnectionState):
    """Backend is connecting, initially or after a disconnect."""

    attempts: int = 0


@dataclass(frozen=True)
class Disconnected(ConnectionState):
    """Backend is disconnected due to errors."""

    since: float
    failures: int


@dataclass(frozen=True)
class Banned(ConnectionState):
    """Backend is temporarily banned until a monotonic timestamp."""

    until: float
    failures: int


@dataclass
class ConnectionConfig:
    """Settings for the connection state machine."""

    base_delay: timedelta = field(default_factory=lambda: timedelta(milliseconds=100))
    max_delay: timedelta = field(default_factory=lambda: timedelta(seconds=30))
    max_retries: int = 5
    ban_duration: timedelta = field(default_factory=lambda: timedelta(seconds=60))


class ConnectionStateMachine:
    """Tracks a backend's connection state and retry backoff."""

    def __init__(self, config: ConnectionConfig | None = None) -> None:
        self._config = config if config is not None else ConnectionConfig()
        self._state: ConnectionState = Connecting(0)

    def __repr__(self) -> str:
        return f"ConnectionStateMachine(state={self._state!r}, config={self._config!r})"

    def state(self) -> ConnectionState:
        """Return the current state."""
        return self._state

    def is_available(self) -> bool:
        """Whether the backend is available for requests."""
        return self._state.is_available()

    def on_success(self) -> None:
        """Record a successful connection or request."""
        self._state = Connected()

    def _ban(self, failures: int) -> Banned:
        until = time.monotonic() + self._config.ban_duration.total_seconds()
        return Banned(until=until, failures=failures)

    def on_failure(self) -> None:
        """Record a connection or request failure."""
        state = self._state
        max_retries = self._config.max_retries
        if isinstance(state, Connected):
            self._state = Disconnected(since=time.monotonic(), failures=1)
        elif isinstance(state, Connecting):
            attempts = state.attempts + 1
            self._state = self._ban(attempts) if attempts >= max_retries else Connecting(attempts)
        elif isinstance(state, Disconnected):
            failures = state.failures + 1
            if failures >= max_retries:
                self._state = self._ban(failures)
            else:
                self._state = Disconnected(since=time.monotonic(), failures=failures)
        elif isinstance(state, Banned):
            self._state = self._ban(state.failures + 1)

    def backoff_duration(self) -> timedelta:
        """Return how long to wait before the next retry."""
        state = self._state
        if isinstance(state, (Connecting, Disconnected)):
            attempts = state.attempts if isinstance(state, Connecting) else state.failures
            base_us = self._config.base_delay // timedelta(microseconds=1)
            max_us = self._config.max_delay // timedelta(microseconds=1)
            return timedelta(microseconds=min(base_us * 2**attempts, max_us))
        if isinstance(state, Banned):
            remaining = state.until - time.monotonic()
            return timedelta(seconds=remaining) if remaining > 0 else _ZERO
        return _ZERO

    def try_reconnect(self) -> bool:
        """Move from banned or disconnected to connecting, if allowed."""
        if self._state.should_reconnect():
            self._state = Connecting(0)
            return True
        return False

    def reset(self) -> None:
        """Return to the initial connecting state."""
        self._state = Connecting(0)