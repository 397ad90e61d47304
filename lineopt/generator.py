import random

from lineopt.lookup import JobLookup
from lineopt.models import ProblemInstance


def generate_instance(
    job_count: int,
    sequence_length: int,
    seed: int = 0,
    max_changeover: int = 20,
    max_duration: int = 50,
) -> ProblemInstance:
    """Generate a random production line instance.

    Changeover costs are drawn independently per direction (asymmetric) with
    a zero diagonal; the queue draws jobs with repetition.
    """
    if job_count < 1:
        raise ValueError("job_count must be positive")
    rng = random.Random(seed)
    changeover = tuple(
        tuple(0 if a == b else rng.randint(0, max_changeover) for b in range(job_count))
        for a in range(job_count)
    )
    durations = tuple(rng.randint(1, max_duration) for _ in range(job_count))
    sequence = tuple(rng.randrange(job_count) for _ in range(sequence_length))
    return ProblemInstance(
        lookup=JobLookup(f"J{i}" for i in range(job_count)),
        changeover=changeover,
        durations=durations,
        sequence=sequence,
        name=f"generated_j{job_count}_n{sequence_length}_seed{seed}",
    )
