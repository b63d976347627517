"""Answer Matching Engine

Scores a free-text guess against an item's target phrase and its accepted
alternatives as a bounded, case-insensitive Levenshtein distance.
"""
from core.logging import study_logger

log = study_logger()

# Worst possible answer; also the ceiling for every score.
MAX_DISTANCE = 10


def levenshtein_distance(s1: str, s2: str) -> int:
    """Edit distance between two strings (insertions, deletions, substitutions)."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def candidate_answers(target: str, alternatives: str | None) -> list[str]:
    """Normalized accepted answers: the target plus every comma-separated alternative.

    Empty tokens are kept, so a blank alternatives list contributes an empty
    candidate one edit away from any single-character guess.
    """
    candidates = [target.lower().strip()]
    candidates.extend(a.strip() for a in (alternatives or "").lower().split(","))
    return candidates


def score(target: str, alternatives: str | None, guess: str) -> int:
    """Match score of `guess`: 0 is perfect, MAX_DISTANCE is the worst.

    An empty (or whitespace-only) guess is always MAX_DISTANCE.
    """
    normalized_guess = guess.lower().strip()
    if not normalized_guess:
        return MAX_DISTANCE

    distance = MAX_DISTANCE
    for candidate in candidate_answers(target, alternatives):
        distance = min(distance, levenshtein_distance(candidate, normalized_guess))
        if distance == 0:
            break

    log.debug("guess_scored", target=target, distance=distance)
    return distance
