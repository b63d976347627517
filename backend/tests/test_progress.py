import pytest

from core.errors import ErrorCode
from engines.progress import ProgressAggregator, apply_outcome, overall_percentage
from stores.base import UserProgress
from stores.memory import InMemoryUserProgressStore


def test_overall_percentage():
    assert overall_percentage(3, 1) == pytest.approx(0.75)
    assert overall_percentage(0, 4) == 0.0
    assert overall_percentage(0, 0) is None


def test_apply_outcome_counts(clock):
    progress = UserProgress(id=1)
    progress = apply_outcome(progress, was_correct=True, item_now_well_known=False, now=clock(1))
    progress = apply_outcome(progress, was_correct=False, item_now_well_known=False, now=clock(2))
    progress = apply_outcome(progress, was_correct=True, item_now_well_known=False, now=clock(3))

    assert progress.num_correct == 2
    assert progress.num_incorrect == 1
    assert progress.total_percentage == pytest.approx(2 / 3)
    assert progress.updated == clock(3)


def test_known_counter_grows_on_every_well_known_answer():
    progress = UserProgress(id=1, num_known=4)
    for _ in range(3):
        progress = apply_outcome(progress, was_correct=True, item_now_well_known=True)
    assert progress.num_known == 7


def test_apply_outcome_keeps_identity_fields():
    progress = UserProgress(id=1, name="Ana", code="secret", smallest_vocab=3)
    updated = apply_outcome(progress, was_correct=False, item_now_well_known=False)
    assert (updated.id, updated.name, updated.code, updated.smallest_vocab) == (1, "Ana", "secret", 3)


async def test_record_outcome_persists():
    store = InMemoryUserProgressStore([UserProgress(id=1)])
    result = await ProgressAggregator(store).record_outcome(1, was_correct=True, item_now_well_known=False)

    assert result.is_ok()
    assert store.learners[1].num_correct == 1
    assert store.learners[1].total_percentage == 1.0


async def test_record_outcome_unknown_learner_is_not_created():
    store = InMemoryUserProgressStore()
    result = await ProgressAggregator(store).record_outcome(7, was_correct=True, item_now_well_known=False)

    assert result.is_err()
    assert result.unwrap_err().code is ErrorCode.E4010_NOT_FOUND
    assert store.learners == {}


async def test_record_outcome_save_failure():
    store = InMemoryUserProgressStore([UserProgress(id=1)])
    store.fail_saves = True
    result = await ProgressAggregator(store).record_outcome(1, was_correct=False, item_now_well_known=False)

    assert result.is_err()
    assert result.unwrap_err().code is ErrorCode.E4003_TRANSACTION_FAILED
    assert store.learners[1].num_incorrect == 0
