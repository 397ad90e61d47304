"""Production line sequence optimizer.

Exports the data structures, the cost model, the candidate queue and the
local search driver.
"""

from lineopt.candidate_queue import CandidateQueue  # noqa: F401
from lineopt.cost_model import CostModel, apply_swap, swap_delta, total_cost  # noqa: F401
from lineopt.lookup import JobLookup  # noqa: F401
from lineopt.models import OptimizationResult, ProblemInstance, SwapCandidate  # noqa: F401
from lineopt.optimizer import (  # noqa: F401
    LocalSearchOptimizer,
    OptimizerState,
    optimize_sequence,
)
from lineopt.parser import load_instance  # noqa: F401

__all__ = [
    "CandidateQueue",
    "CostModel",
    "JobLookup",
    "LocalSearchOptimizer",
    "OptimizationResult",
    "OptimizerState",
    "ProblemInstance",
    "SwapCandidate",
    "apply_swap",
    "load_instance",
    "optimize_sequence",
    "swap_delta",
    "total_cost",
]
