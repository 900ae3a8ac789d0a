"""Byzantine-safe chain tip tracking."""

from __future__ import annotations


class SafeTip:
    """Tracks the tip that enough honest backends agree on.

    Reported heights are split into a low set holding ``n - f`` reports and a
    high set holding the ``f`` highest reports, which may be faulty.
    """

    def __init__(self, f: int) -> None:
        self._f = f
        self._tips: dict[str, int] = {}
        self._hi: dict[int, int] = {}
        self._lo: dict[int, int] = {}

    def __repr__(self) -> str:
        return f"SafeTip(f={self._f}, tips={self._tips!r})"

    def update(self, backend: str, height: int) -> None:
        """Record a backend's reported block height."""
        old = self._tips.get(backend)
        if old is not None:
            self._remove(old)
        self._tips[backend] = height
        self._lo[height] = self._lo.get(height, 0) + 1
        self._rebalance()

    def get(self) -> int:
        """Return the Byzantine-safe tip, or 0 when nothing is known."""
        return max(self._lo, default=0)

    def latest(self) -> int:
        """Return the highest reported tip, or 0 when nothing is known."""
        if self._hi:
            return max(self._hi)
        return max(self._lo, default=0)

    def _remove(self, height: int) -> None:
        for heap in (self._hi, self._lo):
            count = heap.get(height)
            if count is not None:
                if count <= 1:
                    del heap[height]
                else:
                    heap[height] = count - 1
                return

    def _rebalance(self) -> None:
        target = max(len(self._tips) - self._f, 0)

        for height, count in self._hi.items():
            self._lo[height] = self._lo.get(height, 0) + count
        self._hi = {}

        excess = sum(self._lo.values()) - target
        while excess > 0 and self._lo:
            height = max(self._lo)
            count = self._lo[height]
            moved = min(count, excess)
            if moved == count:
                del self._lo[height]
            else:
                self._lo[height] = count - moved
            self._hi[height] = self._hi.get(height, 0) + moved
            excess -= moved