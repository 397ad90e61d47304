"""Core data structures for production sequencing instances.

This module defines:
    ProblemInstance    -- immutable container with the changeover matrix,
                          durations and the initial production queue.
    SwapCandidate      -- a potential exchange of two adjacent positions.
    OptimizationResult -- outcome of one optimizer run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lineopt.lookup import JobLookup

JobSequence = list[int]  # job indices in production order


@dataclass(frozen=True)
class ProblemInstance:
    """Immutable representation of one production line instance.

    Attributes:
        lookup: Bijection between job identifiers and indices 0..J-1.
        changeover: J x J matrix; changeover[a][b] is the setup cost when
            job a is immediately followed by job b.
        durations: Processing time of each job (length J).
        sequence: Initial production queue as job indices (length N).
        name: Label used in reports and output file names.
    """

    lookup: JobLookup
    changeover: tuple[tuple[int, ...], ...]
    durations: tuple[int, ...]
    sequence: tuple[int, ...]
    name: str = "instance"

    @property
    def job_count(self) -> int:
        return len(self.durations)

    @property
    def sequence_length(self) -> int:
        return len(self.sequence)

    def validate(self) -> bool:
        """Check dimensions and value ranges.

        Returns:
            True if the instance is consistent.

        Raises:
            ValueError: If the matrix is not J x J, the lookup size differs
                from J, any cost is negative or a queued job index is out of
                range.
        """
        j = self.job_count
        if len(self.lookup) != j:
            raise ValueError(f"Lookup has {len(self.lookup)} jobs, durations have {j}")
        if len(self.changeover) != j:
            raise ValueError(f"Changeover matrix has {len(self.changeover)} rows, expected {j}")
        for row_idx, row in enumerate(self.changeover):
            if len(row) != j:
                raise ValueError(
                    f"Changeover row {row_idx} has {len(row)} columns, expected {j}"
                )
            if any(v < 0 for v in row):
                raise ValueError(f"Negative changeover cost in row {row_idx}")
        if any(d < 0 for d in self.durations):
            raise ValueError("Negative processing duration")
        for pos, job in enumerate(self.sequence):
            if not (0 <= job < j):
                raise ValueError(f"Job index out of range at position {pos}: {job}")
        return True


@dataclass(frozen=True, eq=False)
class SwapCandidate:
    """Exchange of ``sequence[position]`` and ``sequence[position + 1]``.

    Identity is positional: two candidates are equal iff their positions
    are equal, whatever delta they carry.
    """

    position: int
    delta: int

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SwapCandidate):
            return NotImplemented
        return self.position == other.position

    def __hash__(self) -> int:
        return hash(self.position)


@dataclass
class OptimizationResult:
    """Outcome of a local search run.

    Fields:
        sequence: Final job order (indices).
        initial_cost: Total cost of the starting sequence.
        final_cost: Total cost of ``sequence``.
        passes: Number of accepted swaps.
        converged: False when an external pass/time limit stopped the run
            before the candidate queue emptied.
        elapsed_ms: Wall time of the run.
        cost_history: Cost before the first pass followed by the cost after
            every pass.
        swap_trace: Position of every accepted swap, in order.
    """

    sequence: JobSequence
    initial_cost: int
    final_cost: int
    passes: int
    converged: bool
    elapsed_ms: float = 0.0
    cost_history: list[int] = field(default_factory=list)
    swap_trace: list[int] = field(default_factory=list)

    @property
    def improvement(self) -> int:
        return self.initial_cost - self.final_cost
