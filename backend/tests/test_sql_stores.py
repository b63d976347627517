from dataclasses import replace

import pytest
from sqlalchemy import select

from core.errors import ErrorCode
from engines.study import StudyService
from models.study import Learner, VocabStudy
from stores.sql import SqlItemStore, SqlStudyRecordStore, SqlUserProgressStore

from conftest import LEARNER_ID


@pytest.fixture
def sql_service(db_session):
    return StudyService(
        items=SqlItemStore(db_session),
        records=SqlStudyRecordStore(db_session),
        learners=SqlUserProgressStore(db_session),
    )


async def test_item_lookup(db_session):
    item = (await SqlItemStore(db_session).get_by_id(1)).unwrap()
    assert item.target == "comprendimos"
    assert item.prompt_text == "we understood"
    assert item.alternatives == "entendemos, intiendemos"


async def test_item_not_found(db_session):
    error = (await SqlItemStore(db_session).get_by_id(404)).unwrap_err()
    assert error.code is ErrorCode.E4010_NOT_FOUND
    assert error.context.origin == "item_store.get_by_id"


async def test_study_set_joined_and_ordered(db_session):
    pairs = (await SqlStudyRecordStore(db_session).get_all_for_user(LEARNER_ID)).unwrap()

    assert [record.id for record, _ in pairs] == [10, 11, 12]
    assert [item.target for _, item in pairs] == ["comprendimos", "palabra", "libro"]
    assert all(record.user_id == LEARNER_ID for record, _ in pairs)


async def test_study_set_for_unknown_learner(db_session):
    assert (await SqlStudyRecordStore(db_session).get_all_for_user(42)).unwrap() == []


async def test_save_study_record(db_session, session_factory, clock):
    store = SqlStudyRecordStore(db_session)
    record = (await store.get_by_id(11)).unwrap()
    updated = replace(
        record, correctness=0.45, last_change=0.45, last_tested=clock(8), attempts=1, well_known=False,
    )

    saved = (await store.save(updated)).unwrap()
    assert saved.correctness == pytest.approx(0.45)

    async with session_factory() as other:
        row = await other.get(VocabStudy, 11)
        assert row.attempts == 1
        assert row.percentage_correct == pytest.approx(0.45)
        assert row.last_tested is not None


async def test_save_missing_record(db_session):
    store = SqlStudyRecordStore(db_session)
    record = (await store.get_by_id(10)).unwrap()
    error = (await store.save(replace(record, id=999))).unwrap_err()
    assert error.is_not_found


async def test_save_progress_does_not_touch_code(db_session, session_factory):
    store = SqlUserProgressStore(db_session)
    progress = (await store.get_by_id(LEARNER_ID)).unwrap()
    await store.save(replace(progress, num_correct=3, total_percentage=1.0, code=""))

    async with session_factory() as other:
        row = (await other.execute(select(Learner).where(Learner.id == LEARNER_ID))).scalar_one()
        assert row.num_correct == 3
        assert row.code == "secret"


async def test_grading_through_sql_stores(sql_service, session_factory):
    result = await sql_service.grade_attempt(1, 10, "entendemos")
    assert result.unwrap() == "Perfect Match!"

    async with session_factory() as other:
        study = await other.get(VocabStudy, 10)
        learner = await other.get(Learner, LEARNER_ID)
        assert study.attempts == 1
        assert study.correct_attempts == 1
        assert study.percentage_correct == pytest.approx(2 / 3)
        assert learner.num_correct == 1
        assert learner.total_percentage == 1.0


async def test_batch_through_sql_stores(sql_service):
    await sql_service.grade_attempt(2, 11, "palabre")
    batch = (await sql_service.get_batch(LEARNER_ID, 2)).unwrap()
    assert [record.id for record, _ in batch] == [10, 11]
