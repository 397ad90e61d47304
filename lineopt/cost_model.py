"""Cost evaluation for production sequences.

Total cost of a sequence = sum of processing durations + sum of changeover
(setup) costs between consecutive jobs. Durations do not depend on position,
so the effect of an adjacent swap is fully described by the (at most three)
changeover pairs it touches:

    ... p | a b | q ...   ->   ... p | b a | q ...

    base  = c[b][a] - c[a][b]
    left  = c[p][b] - c[p][a]   (only if a has a predecessor p)
    right = c[a][q] - c[b][q]   (only if b has a successor q)

Complexity: total_cost O(n), swap_delta O(1).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from lineopt.models import ProblemInstance

Matrix = Sequence[Sequence[int]]


def total_cost(sequence: Sequence[int], changeover: Matrix, durations: Sequence[int]) -> int:
    """Compute the total production time of ``sequence``.

    Args:
        sequence: Job indices in production order.
        changeover: J x J changeover matrix.
        durations: Processing time per job.

    Returns:
        Sum of durations plus changeover costs of every consecutive pair.
    """
    total = 0
    n = len(sequence)
    for k in range(n):
        total += durations[sequence[k]]
        if k + 1 < n:
            total += changeover[sequence[k]][sequence[k + 1]]
    return total


def swap_delta(sequence: Sequence[int], changeover: Matrix, i: int) -> int:
    """Change of total cost if ``sequence[i]`` and ``sequence[i + 1]`` were swapped.

    Negative means the swap shortens the schedule.

    Raises:
        IndexError: If ``i`` is outside ``[0, n - 2]``.
    """
    n = len(sequence)
    if not (0 <= i < n - 1):
        raise IndexError(f"swap position {i} out of range for sequence of length {n}")
    a = sequence[i]
    b = sequence[i + 1]
    delta = changeover[b][a] - changeover[a][b]
    if i > 0:
        p = sequence[i - 1]
        delta += changeover[p][b] - changeover[p][a]
    if i + 2 < n:
        q = sequence[i + 2]
        delta += changeover[a][q] - changeover[b][q]
    return delta


def apply_swap(sequence: List[int], i: int) -> None:
    """Exchange ``sequence[i]`` and ``sequence[i + 1]`` in place."""
    sequence[i], sequence[i + 1] = sequence[i + 1], sequence[i]


@dataclass(frozen=True)
class CostModel:
    """Changeover matrix and durations bundled for the optimizer."""

    changeover: Matrix
    durations: Sequence[int]

    @classmethod
    def from_instance(cls, instance: ProblemInstance) -> "CostModel":
        return cls(changeover=instance.changeover, durations=instance.durations)

    @property
    def job_count(self) -> int:
        return len(self.durations)

    def total_cost(self, sequence: Sequence[int]) -> int:
        return total_cost(sequence, self.changeover, self.durations)

    def swap_delta(self, sequence: Sequence[int], i: int) -> int:
        return swap_delta(sequence, self.changeover, i)
