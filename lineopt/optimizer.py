"""Best-improvement adjacent swap local search.

The optimizer scans the sequence once to queue every improving swap, then
repeatedly applies the best queued swap. A swap at position i only changes
the changeover pairs around i, so only the candidates at i-2, i-1, i+1 and
i+2 are re-scored afterwards:

    position:   i-2   i-1    i    i+1   i+2
    pairs:     (x,p) (p,a) (a,b) (b,q) (q,y)
                         swap ^

The run ends when the queue is empty; the sequence is then a local optimum
for single adjacent swaps.
"""

from __future__ import annotations

import enum
import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from lineopt.candidate_queue import CandidateQueue
from lineopt.cost_model import CostModel, apply_swap
from lineopt.models import OptimizationResult, ProblemInstance, SwapCandidate
from lineopt.reporting import format_candidates

logger = logging.getLogger("lineopt.optimizer")

NEIGHBOR_OFFSETS = (-2, -1, 1, 2)


class OptimizerState(enum.Enum):
    INITIALIZING = "initializing"
    SEEKING = "seeking"
    CONVERGED = "converged"
    STOPPED = "stopped"  # pass or time limit hit before convergence


@contextmanager
def open_trace_file(path: Optional[str]) -> Iterator[Any]:
    """Context manager for the optional per-pass CSV trace."""
    trace = None
    if path:
        try:
            trace = open(path, "w", encoding="utf-8")
            trace.write("pass,elapsed_ms,position,delta,cost,sequence\n")
        except OSError as e:
            logger.warning("Failed to open trace file %s: %s", path, e)
            trace = None
    try:
        yield trace
    finally:
        if trace:
            trace.close()


class LocalSearchOptimizer:
    """Drive a production sequence to a local optimum under adjacent swaps.

    Args:
        sequence: Job indices; mutated in place by :meth:`run`.
        cost_model: Changeover matrix and durations.
        diagnostics: Log the ranked candidate queue (INFO) after seeding and
            after every pass.
        max_passes: Optional cap on accepted swaps.
        time_limit_ms: Optional wall-clock budget, checked between passes.
        trace_path: Optional CSV file receiving one line per pass. Each line
            carries the whole sequence, so tracing costs O(n) per pass.
    """

    def __init__(
        self,
        sequence: List[int],
        cost_model: CostModel,
        diagnostics: bool = False,
        max_passes: Optional[int] = None,
        time_limit_ms: Optional[int] = None,
        trace_path: Optional[str] = None,
    ):
        job_count = cost_model.job_count
        for pos, job in enumerate(sequence):
            if not (0 <= job < job_count):
                raise ValueError(f"Job index out of range at position {pos}: {job}")
        self.sequence = sequence
        self.cost_model = cost_model
        self.diagnostics = diagnostics
        self.max_passes = max_passes
        self.time_limit_ms = time_limit_ms
        self.trace_path = trace_path
        self.queue = CandidateQueue(size=max(len(sequence) - 1, 0))
        self.passes = 0
        self.state = OptimizerState.INITIALIZING

    def _rescore(self, position: int) -> None:
        self.queue.invalidate(position)
        delta = self.cost_model.swap_delta(self.sequence, position)
        if delta < 0:
            self.queue.insert(position, delta)

    def _seed(self) -> None:
        self.queue.clear()
        for i in range(len(self.sequence) - 1):
            delta = self.cost_model.swap_delta(self.sequence, i)
            if delta < 0:
                self.queue.insert(i, delta)
        self.state = OptimizerState.SEEKING
        if self._dump_enabled():
            logger.info("Initial swap queue:\n%s", format_candidates(self.queue.ranked()))

    def _dump_enabled(self) -> bool:
        return self.diagnostics and logger.isEnabledFor(logging.INFO)

    def _limit_reached(self, t0: float) -> bool:
        if self.max_passes is not None and self.passes >= self.max_passes:
            return True
        if self.time_limit_ms is not None:
            return (time.perf_counter() - t0) * 1000.0 >= self.time_limit_ms
        return False

    def step(self) -> Optional[SwapCandidate]:
        """Apply the best queued swap and re-score its neighborhood.

        Returns:
            The applied candidate, or None if the queue was empty (the
            optimizer is then converged).
        """
        if self.state is OptimizerState.INITIALIZING:
            self._seed()
        candidate = self.queue.pop_best()
        if candidate is None:
            self.state = OptimizerState.CONVERGED
            return None
        i = candidate.position
        apply_swap(self.sequence, i)
        last = len(self.sequence) - 2
        # each neighbor is range-checked on its own; near either end only some exist
        for offset in NEIGHBOR_OFFSETS:
            position = i + offset
            if 0 <= position <= last:
                self._rescore(position)
        self.passes += 1
        if self._dump_enabled():
            logger.info(
                "Pass %d: swapped positions %d and %d (delta %d)\n%s",
                self.passes,
                i,
                i + 1,
                candidate.delta,
                format_candidates(self.queue.ranked()),
            )
        return candidate

    def run(self) -> OptimizationResult:
        """Run until convergence or until an external limit stops the search."""
        t0 = time.perf_counter()
        self.state = OptimizerState.INITIALIZING
        self.passes = 0
        initial_cost = self.cost_model.total_cost(self.sequence)
        cost = initial_cost
        cost_history = [initial_cost]
        swap_trace: List[int] = []
        self._seed()
        logger.info(
            "Start: n=%d cost=%d improving candidates=%d",
            len(self.sequence),
            initial_cost,
            len(self.queue),
        )
        with open_trace_file(self.trace_path) as trace:
            while True:
                if self._limit_reached(t0):
                    if not self.queue.is_empty():
                        self.state = OptimizerState.STOPPED
                        logger.info(
                            "Stopped by limit after %d passes, %d candidates left",
                            self.passes,
                            len(self.queue),
                        )
                        break
                applied = self.step()
                if applied is None:
                    break
                cost += applied.delta
                cost_history.append(cost)
                swap_trace.append(applied.position)
                if trace:
                    elapsed = int((time.perf_counter() - t0) * 1000)
                    seq_str = " ".join(map(str, self.sequence))
                    trace.write(
                        f"{self.passes},{elapsed},{applied.position},{applied.delta},"
                        f'{cost},"{seq_str}"\n'
                    )

        final_cost = self.cost_model.total_cost(self.sequence)
        assert final_cost == cost, f"incremental cost {cost} != recomputed {final_cost}"
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        logger.info(
            "Done: state=%s passes=%d cost %d -> %d (%.2f ms)",
            self.state.value,
            self.passes,
            initial_cost,
            final_cost,
            elapsed_ms,
        )
        return OptimizationResult(
            sequence=list(self.sequence),
            initial_cost=initial_cost,
            final_cost=final_cost,
            passes=self.passes,
            converged=self.state is OptimizerState.CONVERGED,
            elapsed_ms=elapsed_ms,
            cost_history=cost_history,
            swap_trace=swap_trace,
        )


def optimize_sequence(
    instance: ProblemInstance,
    sequence: Optional[List[int]] = None,
    **kwargs: Any,
) -> OptimizationResult:
    """Optimize a copy of ``sequence`` (default: the instance's queue).

    Extra keyword arguments are forwarded to :class:`LocalSearchOptimizer`.
    """
    start = list(instance.sequence if sequence is None else sequence)
    optimizer = LocalSearchOptimizer(start, CostModel.from_instance(instance), **kwargs)
    return optimizer.run()
