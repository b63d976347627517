"""Correctness Engine

Folds a match score into a study record's running correctness ratio and
decides when the item has become well known.
"""
from dataclasses import dataclass, replace
from datetime import datetime

from engines.matching import MAX_DISTANCE
from stores.base import StudyRecord, utcnow

# Correctness above this marks the item well known.
WELL_KNOWN_THRESHOLD = 0.98


@dataclass(frozen=True, slots=True)
class CorrectnessUpdate:
    """Outcome of folding one score into a previous correctness."""
    correctness: float
    last_change: float
    well_known: bool


def update_correctness(previous: float | None, score: int) -> float:
    """New correctness ratio after an attempt scored `score`.

    A perfect answer counts as two perfect observations averaged with the
    history, so the ratio climbs quickly; anything else is a plain average of
    the attempt's normalized closeness and the previous ratio. A record
    never graded before has no ratio; it counts as 0.0.
    """
    previous = previous or 0.0
    if score == 0:
        return (2.0 + previous) / 3.0
    return ((MAX_DISTANCE - score) / MAX_DISTANCE + previous) / 2.0


def is_well_known(correctness: float | None) -> bool:
    return correctness is not None and correctness > WELL_KNOWN_THRESHOLD


def fold_score(previous: float | None, score: int) -> CorrectnessUpdate:
    """Compute correctness, its change and the well-known flag together."""
    prior = previous or 0.0
    correctness = update_correctness(prior, score)
    return CorrectnessUpdate(
        correctness=correctness,
        last_change=correctness - prior,
        well_known=is_well_known(correctness),
    )


def apply_attempt(
    record: StudyRecord,
    score: int,
    now: datetime | None = None,
) -> StudyRecord:
    """Return the record as it stands after one graded attempt."""
    update = fold_score(record.correctness, score)
    return replace(
        record,
        correctness=update.correctness,
        last_change=update.last_change,
        well_known=update.well_known,
        last_tested=now or utcnow(),
        attempts=record.attempts + 1,
        correct_attempts=record.correct_attempts + (1 if score == 0 else 0),
    )
