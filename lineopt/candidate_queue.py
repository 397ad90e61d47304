"""Priority queue of improving adjacent swaps, keyed by position.

Candidates are ranked by delta (most negative first) but identified by their
position only, so besides ``pop_best`` the queue must drop the entry at an
arbitrary position without knowing its delta. A plain binary heap (heapq)
is paired with a position -> entry map; ``invalidate`` marks the entry dead
and ``pop_best`` discards dead entries as it meets them.

Complexity: insert O(log k), pop_best O(log k) amortized, invalidate O(1).
"""

from __future__ import annotations

import heapq
from typing import Dict, List, Optional

from lineopt.models import SwapCandidate

# heap entry layout: [delta, position, alive]
_DELTA, _POSITION, _ALIVE = 0, 1, 2


class CandidateQueue:
    """Live improving swap candidates, at most one per position.

    Args:
        size: Number of valid swap positions (sequence length - 1). When
            given, positions outside ``[0, size)`` are rejected.
    """

    def __init__(self, size: Optional[int] = None):
        self.size = size
        self._heap: List[list] = []
        self._live: Dict[int, list] = {}
        self._dead = 0

    def __len__(self) -> int:
        return len(self._live)

    def __contains__(self, position: object) -> bool:
        return position in self._live

    def _check_position(self, position: int) -> None:
        if position < 0 or (self.size is not None and position >= self.size):
            raise IndexError(f"swap position {position} outside [0, {self.size})")

    def is_empty(self) -> bool:
        return not self._live

    def insert(self, position: int, delta: int) -> None:
        """Add an improving candidate.

        Raises:
            IndexError: If ``position`` is out of range.
            ValueError: If ``delta`` is not negative or a live candidate
                already exists at ``position``.
        """
        self._check_position(position)
        if delta >= 0:
            raise ValueError(f"only improving swaps are queued (position {position}, delta {delta})")
        if position in self._live:
            raise ValueError(f"live candidate already queued at position {position}")
        entry = [delta, position, True]
        self._live[position] = entry
        heapq.heappush(self._heap, entry)

    def invalidate(self, position: int) -> bool:
        """Drop the live candidate at ``position`` if there is one.

        Returns:
            True if a candidate was removed.
        """
        self._check_position(position)
        entry = self._live.pop(position, None)
        if entry is None:
            return False
        entry[_ALIVE] = False
        self._dead += 1
        if self._dead > 64 and self._dead > len(self._live):
            self._compact()
        return True

    def _compact(self) -> None:
        self._heap = [e for e in self._heap if e[_ALIVE]]
        heapq.heapify(self._heap)
        self._dead = 0

    def _discard_dead_top(self) -> None:
        while self._heap and not self._heap[0][_ALIVE]:
            heapq.heappop(self._heap)
            self._dead -= 1

    def peek_best(self) -> Optional[SwapCandidate]:
        self._discard_dead_top()
        if not self._heap:
            return None
        delta, position, _ = self._heap[0]
        return SwapCandidate(position=position, delta=delta)

    def pop_best(self) -> Optional[SwapCandidate]:
        """Remove and return the candidate with the most negative delta."""
        self._discard_dead_top()
        if not self._heap:
            return None
        delta, position, _ = heapq.heappop(self._heap)
        del self._live[position]
        return SwapCandidate(position=position, delta=delta)

    def ranked(self) -> List[SwapCandidate]:
        """Snapshot of live candidates in pop order. The queue is not modified."""
        entries = sorted((e[_DELTA], e[_POSITION]) for e in self._live.values())
        return [SwapCandidate(position=p, delta=d) for d, p in entries]

    def clear(self) -> None:
        self._heap.clear()
        self._live.clear()
        self._dead = 0
