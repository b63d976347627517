from engines.matching import MAX_DISTANCE, score, levenshtein_distance
from engines.correctness import WELL_KNOWN_THRESHOLD, update_correctness, apply_attempt
from engines.selection import select_batch
from engines.progress import ProgressAggregator, apply_outcome
from engines.prompts import build_prompt, match_message
from engines.study import StudyService, Challenge, GradedAttempt

__all__ = [
    "MAX_DISTANCE",
    "WELL_KNOWN_THRESHOLD",
    "score",
    "levenshtein_distance",
    "update_correctness",
    "apply_attempt",
    "select_batch",
    "ProgressAggregator",
    "apply_outcome",
    "build_prompt",
    "match_message",
    "StudyService",
    "Challenge",
    "GradedAttempt",
]
