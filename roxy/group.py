"""Backend groups with load balancing and failover."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from roxy.load_balancer import Backend, LoadBalancer, NoHealthyBackends, RoxyError


@dataclass
class BackendResponse:
    """A response together with the name of the backend that produced it."""

    response: Any
    served_by: str


class BackendGroup:
    """A named set of backends tried in load-balancer order."""

    def __init__(
        self,
        name: str,
        backends: Sequence[Backend],
        load_balancer: LoadBalancer,
    ) -> None:
        self._name = name
        self._backends = list(backends)
        self._load_balancer = load_balancer

    def __repr__(self) -> str:
        return f"BackendGroup(name={self._name!r}, backends={len(self._backends)} backends)"

    def name(self) -> str:
        """Return the group name."""
        return self._name

    async def forward(self, request: Any) -> BackendResponse:
        """Forward a request, moving on to the next backend on failover errors.

        Raises NoHealthyBackends when no backend could serve the request, and
        re-raises any error that does not call for failover.
        """
        ordered = self._load_balancer.select_ordered(self._backends)
        if not ordered:
            raise NoHealthyBackends()

        for backend in ordered:
            try:
                response = await backend.forward(request)
            except RoxyError as exc:
                if exc.should_failover():
                    continue
                raise
            return BackendResponse(response=response, served_by=backend.name())

        raise NoHealthyBackends()