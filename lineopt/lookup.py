"""Bijective job identifier <-> index lookup."""

from __future__ import annotations

from typing import Iterable, List, Tuple


class JobLookup:
    """Translate between human readable job identifiers and matrix indices.

    The index of an identifier is its position in ``identifiers``. Both
    directions are total over the job set fixed at construction.
    """

    def __init__(self, identifiers: Iterable[str]):
        self._identifiers: Tuple[str, ...] = tuple(identifiers)
        self._index = {ident: i for i, ident in enumerate(self._identifiers)}
        if len(self._index) != len(self._identifiers):
            dupes = sorted({x for x in self._identifiers if self._identifiers.count(x) > 1})
            raise ValueError(f"Duplicate job identifiers: {', '.join(dupes)}")

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, int]]) -> "JobLookup":
        """Build from ``(identifier, index)`` pairs covering 0..J-1 exactly.

        Raises:
            ValueError: If indices repeat or leave gaps.
        """
        by_index: dict[int, str] = {}
        for ident, idx in pairs:
            if idx in by_index:
                raise ValueError(f"Index {idx} assigned to both {by_index[idx]} and {ident}")
            by_index[idx] = ident
        expected = set(range(len(by_index)))
        if set(by_index) != expected:
            raise ValueError(
                f"Job indices must cover 0..{len(by_index) - 1} without gaps, "
                f"got {sorted(by_index)}"
            )
        return cls(by_index[i] for i in range(len(by_index)))

    @property
    def identifiers(self) -> Tuple[str, ...]:
        return self._identifiers

    def __len__(self) -> int:
        return len(self._identifiers)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JobLookup):
            return NotImplemented
        return self._identifiers == other._identifiers

    def __hash__(self) -> int:
        return hash(self._identifiers)

    def __repr__(self) -> str:
        return f"JobLookup({list(self._identifiers)!r})"

    def to_index(self, identifier: str) -> int:
        try:
            return self._index[identifier]
        except KeyError:
            raise KeyError(f"Unknown job identifier: {identifier!r}") from None

    def to_identifier(self, index: int) -> str:
        if not (0 <= index < len(self._identifiers)):
            raise KeyError(f"Unknown job index: {index}")
        return self._identifiers[index]

    def encode(self, identifiers: Iterable[str]) -> List[int]:
        return [self.to_index(x) for x in identifiers]

    def decode(self, indices: Iterable[int]) -> List[str]:
        return [self.to_identifier(i) for i in indices]
