"""Gap-aware tracking of cached block ranges."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Iterator


class RMap:
    """A set of inclusive block ranges that are kept disjoint and non-adjacent.

    Inserting a range merges it with every range it overlaps or touches, so
    the stored ranges always describe the covered blocks minimally.
    """

    def __init__(self) -> None:
        self._starts: list[int] = []
        self._ends: list[int] = []

    def __repr__(self) -> str:
        return f"RMap(ranges={list(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RMap):
            return NotImplemented
        return self._starts == other._starts and self._ends == other._ends

    def insert(self, start: int, end: int) -> None:
        """Add the inclusive range ``start..=end``, merging neighbours.

        Raises ValueError if ``start > end``.
        """
        if start > end:
            raise ValueError("start must be <= end")

        # Ranges touching or overlapping [start, end] form one contiguous run.
        first = bisect_left(self._ends, start - 1)
        last = bisect_right(self._starts, end + 1)

        if first < last:
            start = min(start, self._starts[first])
            end = max(end, self._ends[last - 1])

        self._starts[first:last] = [start]
        self._ends[first:last] = [end]

    def __contains__(self, block: int) -> bool:
        """Whether ``block`` lies inside any stored range."""
        idx = bisect_right(self._starts, block) - 1
        return idx >= 0 and block <= self._ends[idx]

    def contains_range(self, start: int, end: int) -> bool:
        """Whether every block in ``start..=end`` is covered."""
        if start > end:
            return False
        return not self.gaps_in(start, end)

    def gaps_in(self, start: int, end: int) -> list[tuple[int, int]]:
        """Return the uncovered inclusive ranges inside ``start..=end``."""
        if start > end:
            return []

        gaps: list[tuple[int, int]] = []
        cursor = start
        first = bisect_left(self._ends, start)

        for range_start, range_end in zip(self._starts[first:], self._ends[first:]):
            if range_start > end:
                break
            if cursor < range_start:
                gaps.append((cursor, min(range_start - 1, end)))
            cursor = max(cursor, range_end + 1)
            if cursor > end:
                break

        if cursor <= end:
            gaps.append((cursor, end))
        return gaps

    def __len__(self) -> int:
        return len(self._starts)

    def is_empty(self) -> bool:
        """Whether no ranges are stored."""
        return not self._starts

    def covered_blocks(self) -> int:
        """Total number of blocks covered by all ranges."""
        return sum(end - start + 1 for start, end in zip(self._starts, self._ends))

    def clear(self) -> None:
        """Remove every range."""
        self._starts.clear()
        self._ends.clear()

    def __iter__(self) -> Iterator[tuple[int, int]]:
        """Yield ``(start, end)`` ranges in ascending order."""
        return iter(list(zip(self._starts, self._ends)))

    def min_block(self) -> int | None:
        """Lowest covered block, or None when empty."""
        return self._starts[0] if self._starts else None

    def max_block(self) -> int | None:
        """Highest covered block, or None when empty."""
        return self._ends[-1] if self._ends else None

    def copy(self) -> RMap:
        """Return an independent copy."""
        clone = RMap()
        clone._starts = list(self._starts)
        clone._ends = list(self._ends)
        return clone

    __copy__ = copy