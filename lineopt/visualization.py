import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402

from lineopt.models import ProblemInstance  # noqa: E402

logger = logging.getLogger("lineopt.visualization")


def _ensure_dir(path: str):
    if path:
        os.makedirs(path, exist_ok=True)


def next_unique_path(path: str | Path) -> str:
    """Return ``path`` or, if taken, the first free ``stem_1``, ``stem_2``... variant."""
    p = Path(path)
    if not p.exists():
        return str(p)
    counter = 1
    while True:
        candidate = p.parent / f"{p.stem}_{counter}{p.suffix}"
        if not candidate.exists():
            return str(candidate)
        counter += 1


def calculate_timeline(sequence: Sequence[int], instance: ProblemInstance):
    """Start/end of every processing block and changeover gap.

    Returns:
        (blocks, changeovers): lists of ``(start, length, job)`` tuples and
        ``(start, length)`` tuples in production order.
    """
    blocks: List[tuple] = []
    changeovers: List[tuple] = []
    t = 0
    for k, job in enumerate(sequence):
        if k > 0:
            setup = instance.changeover[sequence[k - 1]][job]
            if setup:
                changeovers.append((t, setup))
            t += setup
        blocks.append((t, instance.durations[job], job))
        t += instance.durations[job]
    return blocks, changeovers


def save_convergence_plot(cost_history: List[int], filepath: str):
    """Plot total cost after each accepted swap."""
    fig, ax = plt.subplots(figsize=(10, 6))
    passes = list(range(len(cost_history)))
    ax.plot(
        passes,
        cost_history,
        "b-o",
        linewidth=2,
        markersize=4,
        markerfacecolor="white",
        markeredgecolor="blue",
        markeredgewidth=1.5,
    )
    ax.set_xlabel("Pass", fontsize=12)
    ax.set_ylabel("Total production time", fontsize=12)
    ax.set_title("Convergence", fontsize=14, fontweight="bold")
    ax.grid(True, alpha=0.3)

    if len(cost_history) > 1:
        ax.annotate(
            f"Start: {cost_history[0]}",
            xy=(passes[0], cost_history[0]),
            xytext=(10, 10),
            textcoords="offset points",
            bbox=dict(boxstyle="round,pad=0.3", facecolor="yellow", alpha=0.7),
            arrowprops=dict(arrowstyle="->", connectionstyle="arc3,rad=0"),
        )
        ax.annotate(
            f"Final: {cost_history[-1]}",
            xy=(passes[-1], cost_history[-1]),
            xytext=(-60, 20),
            textcoords="offset points",
            bbox=dict(boxstyle="round,pad=0.3", facecolor="lightgreen", alpha=0.7),
            arrowprops=dict(arrowstyle="->", connectionstyle="arc3,rad=0"),
        )

    fig.tight_layout()
    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=150, bbox_inches="tight")
    plt.close(fig)
    logger.info("Convergence plot saved as: %s", filepath)


def save_sequence_timeline(
    sequence: Sequence[int],
    instance: ProblemInstance,
    cost: int,
    filepath: str,
    title: Optional[str] = None,
    show_labels: Optional[bool] = None,
):
    """Draw the production order as a single-line Gantt bar.

    Processing blocks are colored per job; changeovers are hatched grey.
    Labels are dropped automatically for long sequences unless forced.
    """
    blocks, changeovers = calculate_timeline(sequence, instance)
    n = len(sequence)
    if show_labels is None:
        show_labels = n <= 60
    fig, ax = plt.subplots(figsize=(min(10 + n * 0.1, 24), 2.8), constrained_layout=True)
    cmap = plt.get_cmap("tab20")
    for start, length, job in blocks:
        ax.barh(
            0,
            length,
            left=start,
            height=0.6,
            color=cmap(job % 20),
            edgecolor="black",
            linewidth=0.6,
        )
        if show_labels and length:
            ax.text(
                start + length / 2,
                0,
                instance.lookup.to_identifier(job),
                ha="center",
                va="center",
                fontsize=8,
            )
    for start, length in changeovers:
        ax.barh(
            0,
            length,
            left=start,
            height=0.3,
            color="lightgrey",
            hatch="//",
            edgecolor="grey",
            linewidth=0.4,
        )
    ax.set_yticks([])
    ax.set_xlabel("Time", fontsize=11)
    ax.set_title(title or f"Production timeline - total = {cost}", fontsize=13, fontweight="bold")
    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    logger.info("Timeline chart saved as: %s", filepath)
