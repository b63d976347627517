"""Study Service

Grades answers and selects study batches for a learner. The service holds
the store handles it is given and nothing else: every call re-reads current
state, computes the new state, and writes it back.
"""
from dataclasses import dataclass, replace

from core.errors import (
    AppError,
    Err,
    Ok,
    Result,
    invariant_violated,
)
from core.logging import study_logger
from engines import correctness, matching, prompts, selection
from engines.progress import ProgressAggregator
from stores.base import (
    Item,
    ItemStore,
    StudyPair,
    StudyRecord,
    StudyRecordStore,
    UserProgress,
    UserProgressStore,
)

log = study_logger()


@dataclass(frozen=True, slots=True)
class Challenge:
    """One item as presented to the learner."""
    item_id: int
    study_record_id: int
    prompt: str


@dataclass(frozen=True, slots=True)
class GradedAttempt:
    """Everything a grading produced, for callers that want more than the message."""
    score: int
    message: str
    record: StudyRecord
    progress: UserProgress


class StudyService:
    """Answer evaluation and study selection over injected stores."""

    __slots__ = ("_items", "_records", "_learners", "_progress")

    def __init__(
        self,
        items: ItemStore,
        records: StudyRecordStore,
        learners: UserProgressStore,
    ):
        self._items = items
        self._records = records
        self._learners = learners
        self._progress = ProgressAggregator(learners)

    async def get_batch(self, user_id: int, limit: int) -> Result[list[StudyPair], AppError]:
        """Next batch of (record, item) pairs for the learner, in presentation order."""
        pairs = await self._records.get_all_for_user(user_id)
        if pairs.is_err():
            return Err(pairs.unwrap_err().with_metadata(operation="get_batch", user_id=user_id))
        batch = selection.select_batch(pairs.unwrap(), limit)
        log.info("batch_ready", user_id=user_id, limit=limit, size=len(batch))
        return Ok(batch)

    async def get_challenges(self, user_id: int, limit: int) -> Result[list[Challenge], AppError]:
        """The next batch rendered as prompts."""
        return (await self.get_batch(user_id, limit)).map(
            lambda batch: [
                Challenge(
                    item_id=item.id,
                    study_record_id=record.id,
                    prompt=self.build_prompt(item, record.user_notes),
                )
                for record, item in batch
            ]
        )

    def build_prompt(self, item: Item, user_notes: str | None = None) -> str:
        return prompts.build_prompt(item, user_notes)

    async def grade_attempt(
        self,
        item_id: int,
        study_record_id: int,
        raw_answer: str,
    ) -> Result[str, AppError]:
        """Grade an answer and return the outcome message.

        The study record is written before the learner's progress. If the
        progress write fails, the record update stands and the error is
        returned.
        """
        return (await self.grade(item_id, study_record_id, raw_answer)).map(
            lambda graded: graded.message
        )

    async def grade(
        self,
        item_id: int,
        study_record_id: int,
        raw_answer: str,
    ) -> Result[GradedAttempt, AppError]:
        context = {"operation": "grade_attempt", "item_id": item_id, "study_record_id": study_record_id}

        match await self._items.get_by_id(item_id):
            case Err(error):
                return Err(error.with_metadata(**context))
            case Ok(item):
                pass

        match await self._records.get_by_id(study_record_id):
            case Err(error):
                return Err(error.with_metadata(**context))
            case Ok(current):
                pass

        if current.item_id != item.id:
            log.warning("attempt_item_mismatch", record_item_id=current.item_id, **context)
            return invariant_violated(
                "study record belongs to the graded item",
                origin="study.grade_attempt",
                record_item_id=current.item_id,
                **context,
            )

        score = matching.score(item.target, item.alternatives, raw_answer)
        updated = correctness.apply_attempt(current, score)

        saved = await self._records.save(updated)
        if saved.is_err():
            log.error("study_record_save_failed", error_code=saved.unwrap_err().code.name, **context)
            return Err(saved.unwrap_err().with_metadata(**context))
        record = saved.unwrap()

        log.info(
            "attempt_graded",
            score=score,
            correctness=round(record.correctness, 4),
            last_change=round(record.last_change, 4),
            well_known=record.well_known,
            **context,
        )

        progress = await self._progress.record_outcome(
            record.user_id,
            was_correct=score == 0,
            item_now_well_known=record.well_known,
        )
        if progress.is_err():
            return Err(progress.unwrap_err().with_metadata(**context))

        return Ok(GradedAttempt(
            score=score,
            message=prompts.match_message(item.target, raw_answer, score),
            record=record,
            progress=progress.unwrap(),
        ))

    async def get_learner(self, user_id: int) -> Result[UserProgress, AppError]:
        """The learner's progress with the access code blanked."""
        return (await self._learners.get_by_id(user_id)).map(
            lambda learner: replace(learner, code="")
        )

    async def get_study_stats(self, study_record_id: int) -> Result[StudyPair, AppError]:
        """One study record together with its item."""
        match await self._records.get_by_id(study_record_id):
            case Err(error):
                return Err(error)
            case Ok(record):
                pass
        return (await self._items.get_by_id(record.item_id)).map(lambda item: (record, item))
