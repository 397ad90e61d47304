"""Loader for production line instances stored as four CSV tables.

Directory layout (file names overridable):

    JobToIndex.csv                row 0: job identifiers, row 1: indices
    ProductChangeOverMatrix.csv   J rows x J columns of setup costs
    ProductionTime.csv            one row of J processing durations
    ProductionQueue.csv           one row of job identifiers (the queue)

All tables are headerless; cells are stripped and empty cells ignored.
"""

from __future__ import annotations

import csv
import logging
import os
from typing import List

from lineopt.lookup import JobLookup
from lineopt.models import ProblemInstance

logger = logging.getLogger("lineopt.parser")

LOOKUP_FILE = "JobToIndex.csv"
CHANGEOVER_FILE = "ProductChangeOverMatrix.csv"
DURATION_FILE = "ProductionTime.csv"
QUEUE_FILE = "ProductionQueue.csv"


def read_csv_rows(path: str) -> List[List[str]]:
    """Read a headerless CSV file into stripped, non-empty rows."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Input file not found: {path}")
    rows: List[List[str]] = []
    with open(path, "r", newline="", encoding="utf-8-sig") as f:
        for raw in csv.reader(f):
            cells = [c.strip() for c in raw if c.strip()]
            if cells:
                rows.append(cells)
    return rows


def _parse_int(cell: str, path: str) -> int:
    try:
        value = int(cell)
    except ValueError:
        raise ValueError(f"{path}: not an integer: {cell!r}") from None
    if value < 0:
        raise ValueError(f"{path}: negative value: {value}")
    return value


def parse_lookup(path: str) -> JobLookup:
    rows = read_csv_rows(path)
    if len(rows) != 2:
        raise ValueError(f"{path}: expected 2 rows (identifiers, indices), got {len(rows)}")
    identifiers, indices = rows
    if len(identifiers) != len(indices):
        raise ValueError(
            f"{path}: {len(identifiers)} identifiers but {len(indices)} indices"
        )
    pairs = [(ident, _parse_int(idx, path)) for ident, idx in zip(identifiers, indices)]
    try:
        return JobLookup.from_pairs(pairs)
    except ValueError as e:
        raise ValueError(f"{path}: {e}") from e


def parse_changeover(path: str, job_count: int) -> tuple[tuple[int, ...], ...]:
    rows = read_csv_rows(path)
    if len(rows) != job_count:
        raise ValueError(f"{path}: expected {job_count} rows, got {len(rows)}")
    matrix = []
    for r_idx, row in enumerate(rows):
        if len(row) != job_count:
            raise ValueError(
                f"{path}: row {r_idx} has {len(row)} columns, expected {job_count}"
            )
        matrix.append(tuple(_parse_int(c, path) for c in row))
    return tuple(matrix)


def parse_durations(path: str, job_count: int) -> tuple[int, ...]:
    rows = read_csv_rows(path)
    if len(rows) != 1:
        raise ValueError(f"{path}: expected a single row, got {len(rows)}")
    if len(rows[0]) != job_count:
        raise ValueError(f"{path}: expected {job_count} durations, got {len(rows[0])}")
    return tuple(_parse_int(c, path) for c in rows[0])


def parse_queue(path: str, lookup: JobLookup) -> tuple[int, ...]:
    rows = read_csv_rows(path)
    if len(rows) != 1:
        raise ValueError(f"{path}: expected a single row, got {len(rows)}")
    unknown = sorted({x for x in rows[0] if x not in lookup})
    if unknown:
        raise ValueError(f"{path}: unknown job identifiers: {', '.join(unknown)}")
    return tuple(lookup.encode(rows[0]))


def load_instance(
    directory: str,
    lookup_file: str = LOOKUP_FILE,
    changeover_file: str = CHANGEOVER_FILE,
    duration_file: str = DURATION_FILE,
    queue_file: str = QUEUE_FILE,
    name: str | None = None,
) -> ProblemInstance:
    """Load and validate an instance from ``directory``.

    Raises:
        FileNotFoundError: If one of the tables is missing.
        ValueError: On malformed or inconsistent tables.
    """
    lookup = parse_lookup(os.path.join(directory, lookup_file))
    job_count = len(lookup)
    changeover = parse_changeover(os.path.join(directory, changeover_file), job_count)
    durations = parse_durations(os.path.join(directory, duration_file), job_count)
    sequence = parse_queue(os.path.join(directory, queue_file), lookup)
    instance = ProblemInstance(
        lookup=lookup,
        changeover=changeover,
        durations=durations,
        sequence=sequence,
        name=name or os.path.basename(os.path.normpath(directory)),
    )
    instance.validate()
    logger.info(
        "Loaded instance %s: jobs=%d queue length=%d",
        instance.name,
        instance.job_count,
        instance.sequence_length,
    )
    return instance
