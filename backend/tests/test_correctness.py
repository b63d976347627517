import pytest

from engines.correctness import (
    WELL_KNOWN_THRESHOLD,
    apply_attempt,
    fold_score,
    is_well_known,
    update_correctness,
)
from stores.base import StudyRecord


@pytest.mark.parametrize("previous, score, expected", [
    (0.5, 0, 0.8333333),
    (0.5, 2, 0.65),
    (0.4, 6, 0.4),
    (1.0, 10, 0.5),
    (None, 0, 0.6666667),
    (None, 10, 0.0),
])
def test_update_correctness(previous, score, expected):
    assert update_correctness(previous, score) == pytest.approx(expected, abs=1e-6)


@pytest.mark.parametrize("previous", [0.0, 0.3, 0.5, 0.9, 1.0])
def test_better_scores_never_lower_correctness(previous):
    results = [update_correctness(previous, s) for s in range(11)]
    assert results == sorted(results, reverse=True)


@pytest.mark.parametrize("previous", [0.0, 0.25, 0.75, 1.0])
def test_stays_in_unit_interval(previous):
    for s in range(11):
        assert 0.0 <= update_correctness(previous, s) <= 1.0


def test_threshold_is_strict():
    assert not is_well_known(WELL_KNOWN_THRESHOLD)
    assert is_well_known(0.981)
    assert not is_well_known(None)


def test_fold_score_reports_change():
    update = fold_score(0.5, 2)
    assert update.correctness == pytest.approx(0.65)
    assert update.last_change == pytest.approx(0.15)
    assert update.well_known is False


def test_four_perfect_answers_make_an_item_well_known():
    record = StudyRecord(id=1, item_id=1, user_id=1)
    flags = []
    for _ in range(4):
        record = apply_attempt(record, 0)
        flags.append(record.well_known)
        assert record.well_known == (record.correctness > WELL_KNOWN_THRESHOLD)
    assert flags == [False, False, False, True]


def test_poor_answer_drops_well_known():
    record = StudyRecord(id=1, item_id=1, user_id=1, correctness=0.99, well_known=True)
    updated = apply_attempt(record, 2)
    assert updated.correctness == pytest.approx(0.895)
    assert updated.well_known is False
    assert updated.last_change < 0


def test_apply_attempt_counters(clock):
    record = StudyRecord(id=1, item_id=1, user_id=1, attempts=3, correct_attempts=1)

    correct = apply_attempt(record, 0, now=clock(9))
    assert correct.attempts == 4
    assert correct.correct_attempts == 2
    assert correct.last_tested == clock(9)

    wrong = apply_attempt(correct, 5, now=clock(10))
    assert wrong.attempts == 5
    assert wrong.correct_attempts == 2
    assert wrong.last_tested == clock(10)


def test_apply_attempt_leaves_input_untouched():
    record = StudyRecord(id=1, item_id=1, user_id=1)
    apply_attempt(record, 0)
    assert record.attempts == 0
    assert record.correctness is None
    assert not record.tested
