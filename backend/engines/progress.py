"""Progress Aggregation Engine

Maintains a learner's cumulative correct/incorrect counts, overall percentage
and known-items counter, updated once per graded answer.
"""
from dataclasses import replace
from datetime import datetime

from core.errors import AppError, Err, Ok, Result
from core.logging import study_logger
from stores.base import UserProgress, UserProgressStore, utcnow

log = study_logger()


def overall_percentage(num_correct: int, num_incorrect: int) -> float | None:
    """Share of correct answers, or None before any answer was recorded."""
    total = num_correct + num_incorrect
    if total == 0:
        return None
    return num_correct / total


def apply_outcome(
    progress: UserProgress,
    was_correct: bool,
    item_now_well_known: bool,
    now: datetime | None = None,
) -> UserProgress:
    """Return the learner's progress after one graded answer.

    `num_known` grows on every answer to an item that is currently well known,
    not only when the item first crosses the threshold.
    """
    num_correct = progress.num_correct + (1 if was_correct else 0)
    num_incorrect = progress.num_incorrect + (0 if was_correct else 1)
    return replace(
        progress,
        num_known=progress.num_known + (1 if item_now_well_known else 0),
        num_correct=num_correct,
        num_incorrect=num_incorrect,
        total_percentage=overall_percentage(num_correct, num_incorrect),
        updated=now or utcnow(),
    )


class ProgressAggregator:
    """Read-modify-write of a learner's progress through the progress store."""

    __slots__ = ("_learners",)

    def __init__(self, learners: UserProgressStore):
        self._learners = learners

    async def record_outcome(
        self,
        user_id: int,
        was_correct: bool,
        item_now_well_known: bool,
    ) -> Result[UserProgress, AppError]:
        match await self._learners.get_by_id(user_id):
            case Err(error):
                log.warning("progress_lookup_failed", user_id=user_id, error_code=error.code.name)
                return Err(error.with_metadata(operation="record_outcome", user_id=user_id))
            case Ok(current):
                pass

        updated = apply_outcome(current, was_correct, item_now_well_known)
        saved = await self._learners.save(updated)
        if saved.is_err():
            error = saved.unwrap_err()
            log.error("progress_save_failed", user_id=user_id, error_code=error.code.name)
            return Err(error.with_metadata(operation="record_outcome", user_id=user_id))

        log.info(
            "progress_recorded",
            user_id=user_id,
            was_correct=was_correct,
            num_known=updated.num_known,
            total_percentage=updated.total_percentage,
        )
        return saved
