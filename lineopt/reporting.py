"""Human readable and JSON reports of optimizer runs."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Iterable, List, Sequence

from lineopt.lookup import JobLookup
from lineopt.models import OptimizationResult, ProblemInstance, SwapCandidate


def format_sequence(indices: Iterable[int], lookup: JobLookup) -> str:
    return ", ".join(lookup.decode(indices))


def format_candidates(candidates: Sequence[SwapCandidate]) -> str:
    """Ranked listing of swap candidates, one per line."""
    if not candidates:
        return "The queue is empty!"
    lines: List[str] = []
    for rank, cand in enumerate(candidates, start=1):
        lines.append(
            f"{rank}.  Swap at positions {cand.position} and {cand.position + 1}"
            f"   Delta: {cand.delta}"
        )
    return "\n".join(lines)


def summarize(result: OptimizationResult, instance: ProblemInstance) -> str:
    """Multi-line summary printed by the CLI at the end of a run."""
    lookup = instance.lookup
    status = "converged" if result.converged else "stopped before convergence"
    return "\n".join(
        [
            f"Instance: {instance.name} (jobs={instance.job_count}, "
            f"queue length={instance.sequence_length})",
            f"Initial production sequence: {format_sequence(instance.sequence, lookup)}",
            f"The initial total production time is {result.initial_cost}",
            f"Completed with {result.passes} passes in {result.elapsed_ms:.2f} msec ({status})",
            f"The final sequence is {format_sequence(result.sequence, lookup)}",
            f"The final total production time is {result.final_cost}",
        ]
    )


def write_result_json(
    result: OptimizationResult,
    instance: ProblemInstance,
    path: str,
) -> str:
    """Persist a run as JSON and return the path written."""
    lookup = instance.lookup
    payload = {
        "instance": instance.name,
        "timestamp": datetime.now().strftime("%Y%m%d_%H%M%S"),
        "jobs": instance.job_count,
        "sequence_length": instance.sequence_length,
        "initial": {
            "cost": result.initial_cost,
            "sequence": lookup.decode(instance.sequence),
        },
        "final": {
            "cost": result.final_cost,
            "sequence": lookup.decode(result.sequence),
        },
        "passes": result.passes,
        "converged": result.converged,
        "elapsed_ms": result.elapsed_ms,
        "cost_history": result.cost_history,
        "swap_trace": result.swap_trace,
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    return path
