import pytest

from lineopt.candidate_queue import CandidateQueue
from lineopt.models import SwapCandidate


def test_pop_best_returns_most_negative_first() -> None:
    q = CandidateQueue(size=10)
    q.insert(3, -2)
    q.insert(7, -9)
    q.insert(1, -5)
    assert len(q) == 3
    assert [q.pop_best().position for _ in range(3)] == [7, 1, 3]
    assert q.is_empty()
    assert q.pop_best() is None


def test_invalidate_removes_by_position_only() -> None:
    q = CandidateQueue(size=10)
    q.insert(2, -4)
    q.insert(5, -1)
    assert q.invalidate(2) is True
    assert 2 not in q
    assert q.invalidate(2) is False
    assert q.invalidate(9) is False
    best = q.pop_best()
    assert best == SwapCandidate(5, -1)
    assert q.is_empty()


def test_reinsert_after_invalidate_uses_new_delta() -> None:
    q = CandidateQueue(size=4)
    q.insert(0, -10)
    q.insert(1, -3)
    q.invalidate(0)
    q.insert(0, -1)
    first = q.pop_best()
    assert (first.position, first.delta) == (1, -3)
    second = q.pop_best()
    assert (second.position, second.delta) == (0, -1)
    assert q.pop_best() is None


def test_duplicate_live_position_rejected() -> None:
    q = CandidateQueue(size=4)
    q.insert(1, -2)
    with pytest.raises(ValueError):
        q.insert(1, -7)


@pytest.mark.parametrize("delta", [0, 3])
def test_non_improving_delta_rejected(delta: int) -> None:
    q = CandidateQueue(size=4)
    with pytest.raises(ValueError):
        q.insert(0, delta)


@pytest.mark.parametrize("position", [-1, 4, 10])
def test_position_out_of_range(position: int) -> None:
    q = CandidateQueue(size=4)
    with pytest.raises(IndexError):
        q.insert(position, -1)
    with pytest.raises(IndexError):
        q.invalidate(position)


def test_ranked_snapshot_does_not_mutate() -> None:
    q = CandidateQueue(size=6)
    for pos, delta in [(0, -1), (2, -8), (4, -3)]:
        q.insert(pos, delta)
    q.invalidate(4)
    ranked = q.ranked()
    assert [(c.position, c.delta) for c in ranked] == [(2, -8), (0, -1)]
    assert len(q) == 2
    assert q.peek_best() == SwapCandidate(2, -8)
    assert q.pop_best().delta == -8


def test_candidate_equality_is_positional() -> None:
    assert SwapCandidate(3, -1) == SwapCandidate(3, -100)
    assert SwapCandidate(3, -1) != SwapCandidate(4, -1)
    assert len({SwapCandidate(3, -1), SwapCandidate(3, -2)}) == 1


def test_many_invalidations_keep_order() -> None:
    size = 500
    q = CandidateQueue(size=size)
    for pos in range(size):
        q.insert(pos, -(pos % 17) - 1)
    # drop every position but multiples of 7
    for pos in range(size):
        if pos % 7:
            q.invalidate(pos)
    expected = sorted(((-(p % 17) - 1, p) for p in range(0, size, 7)))
    popped = []
    while not q.is_empty():
        c = q.pop_best()
        popped.append((c.delta, c.position))
    assert sorted(popped) == expected
    assert [d for d, _ in popped] == sorted(d for d, _ in popped)
