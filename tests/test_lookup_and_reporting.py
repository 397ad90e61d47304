import json

import pytest

from lineopt.generator import generate_instance
from lineopt.lookup import JobLookup
from lineopt.models import ProblemInstance, SwapCandidate
from lineopt.optimizer import optimize_sequence
from lineopt.parser import load_instance
from lineopt.reporting import format_candidates, format_sequence, summarize, write_result_json


def test_lookup_round_trip() -> None:
    lookup = JobLookup(["Ab", "B", "C"])
    assert lookup.to_index("Ab") == 0
    assert lookup.to_identifier(2) == "C"
    assert lookup.encode(["C", "Ab", "C"]) == [2, 0, 2]
    assert lookup.decode([1, 1, 0]) == ["B", "B", "Ab"]
    assert "B" in lookup and "Z" not in lookup
    assert len(lookup) == 3


def test_lookup_unknown_keys() -> None:
    lookup = JobLookup(["A", "B"])
    with pytest.raises(KeyError):
        lookup.to_index("Z")
    with pytest.raises(KeyError):
        lookup.to_identifier(2)
    with pytest.raises(KeyError):
        lookup.to_identifier(-1)


def test_lookup_from_pairs_orders_by_index() -> None:
    lookup = JobLookup.from_pairs([("C", 2), ("A", 0), ("B", 1)])
    assert lookup.identifiers == ("A", "B", "C")
    assert lookup == JobLookup("ABC")


def test_lookup_rejects_duplicates() -> None:
    with pytest.raises(ValueError):
        JobLookup(["A", "B", "A"])


def test_format_candidates() -> None:
    text = format_candidates([SwapCandidate(4, -9), SwapCandidate(0, -2)])
    assert text.splitlines() == [
        "1.  Swap at positions 4 and 5   Delta: -9",
        "2.  Swap at positions 0 and 1   Delta: -2",
    ]
    assert format_candidates([]) == "The queue is empty!"


def test_summary_and_json(example_dir, tmp_path) -> None:
    inst = load_instance(str(example_dir))
    result = optimize_sequence(inst)
    text = summarize(result, inst)
    assert "Initial production sequence: A, B, C" in text
    assert "The initial total production time is 26" in text
    assert "The final sequence is A, C, B" in text
    assert "The final total production time is 19" in text
    assert format_sequence(result.sequence, inst.lookup) == "A, C, B"

    path = write_result_json(result, inst, str(tmp_path / "result.json"))
    data = json.loads((tmp_path / "result.json").read_text(encoding="utf-8"))
    assert path.endswith("result.json")
    assert data["initial"] == {"cost": 26, "sequence": ["A", "B", "C"]}
    assert data["final"] == {"cost": 19, "sequence": ["A", "C", "B"]}
    assert data["passes"] == 1
    assert data["converged"] is True
    assert data["cost_history"] == [26, 19]


def test_generator_is_deterministic_and_valid() -> None:
    a = generate_instance(4, 12, seed=9)
    b = generate_instance(4, 12, seed=9)
    assert a == b
    assert a.validate()
    assert all(a.changeover[j][j] == 0 for j in range(4))
    assert a.sequence_length == 12
    assert a.lookup.identifiers == ("J0", "J1", "J2", "J3")


def test_instance_validate_rejects_bad_dimensions() -> None:
    inst = ProblemInstance(
        lookup=JobLookup(["A", "B"]),
        changeover=((0, 1), (1,)),
        durations=(1, 1),
        sequence=(0, 1),
    )
    with pytest.raises(ValueError):
        inst.validate()
    bad_seq = ProblemInstance(
        lookup=JobLookup(["A", "B"]),
        changeover=((0, 1), (1, 0)),
        durations=(1, 1),
        sequence=(0, 2),
    )
    with pytest.raises(ValueError):
        bad_seq.validate()
