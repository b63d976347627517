"""SQLAlchemy-backed stores.

Each store wraps one `AsyncSession`. SQLAlchemy failures are mapped to
`AppError` values at this boundary by `map_db_errors`.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import fetch_one, update_entity
from core.errors import AppError, Err, Ok, Result, map_db_errors
from core.logging import db_logger
from models.study import Learner, Vocab, VocabStudy
from stores.base import (
    Item,
    ItemStore,
    StudyPair,
    StudyRecord,
    StudyRecordStore,
    UserProgress,
    UserProgressStore,
)

log = db_logger()


def to_item(row: Vocab) -> Item:
    return Item(
        id=row.id,
        target=row.learning_lang,
        prompt_text=row.first_lang or "",
        alternatives=row.alternatives,
        hint=row.hint,
        pos=row.pos,
        skill=row.skill,
        infinitive=row.infinitive,
        created=row.created,
    )


def to_study_record(row: VocabStudy) -> StudyRecord:
    return StudyRecord(
        id=row.id,
        item_id=row.vocab_id,
        user_id=row.learner_id,
        correctness=row.percentage_correct,
        last_change=row.last_change,
        last_tested=row.last_tested,
        attempts=row.attempts or 0,
        correct_attempts=row.correct_attempts or 0,
        well_known=bool(row.well_known),
        user_notes=row.user_notes,
        created=row.created,
    )


def to_user_progress(row: Learner) -> UserProgress:
    return UserProgress(
        id=row.id,
        num_known=row.num_known or 0,
        num_correct=row.num_correct or 0,
        num_incorrect=row.num_incorrect or 0,
        total_percentage=row.total_percentage,
        updated=row.updated,
        name=row.name,
        code=row.code,
        smallest_vocab=row.smallest_vocab,
    )


class SqlItemStore(ItemStore):
    __slots__ = ("_db",)

    def __init__(self, db: AsyncSession):
        self._db = db

    @map_db_errors("item_store.get_by_id")
    async def get_by_id(self, item_id: int) -> Result[Item, AppError]:
        found = await fetch_one(self._db, Vocab, item_id, "Item", origin="item_store.get_by_id")
        return found.map(to_item)


class SqlStudyRecordStore(StudyRecordStore):
    __slots__ = ("_db",)

    def __init__(self, db: AsyncSession):
        self._db = db

    @map_db_errors("study_record_store.get_by_id")
    async def get_by_id(self, record_id: int) -> Result[StudyRecord, AppError]:
        found = await fetch_one(
            self._db, VocabStudy, record_id, "StudyRecord", origin="study_record_store.get_by_id"
        )
        return found.map(to_study_record)

    @map_db_errors("study_record_store.get_all_for_user")
    async def get_all_for_user(self, user_id: int) -> Result[list[StudyPair], AppError]:
        result = await self._db.execute(
            select(VocabStudy, Vocab)
            .join(Vocab, VocabStudy.vocab_id == Vocab.id)
            .where(VocabStudy.learner_id == user_id)
            .order_by(VocabStudy.id)
        )
        pairs = [(to_study_record(study), to_item(vocab)) for study, vocab in result.all()]
        log.debug("study_set_loaded", user_id=user_id, count=len(pairs))
        return Ok(pairs)

    @map_db_errors("study_record_store.save")
    async def save(self, record: StudyRecord) -> Result[StudyRecord, AppError]:
        origin = "study_record_store.save"
        match await fetch_one(self._db, VocabStudy, record.id, "StudyRecord", origin=origin):
            case Err(error):
                return Err(error)
            case Ok(row):
                pass

        row.percentage_correct = record.correctness
        row.last_change = record.last_change
        row.last_tested = record.last_tested
        row.attempts = record.attempts
        row.correct_attempts = record.correct_attempts
        row.well_known = record.well_known
        row.user_notes = record.user_notes

        return (await update_entity(self._db, row, origin=origin)).map(to_study_record)


class SqlUserProgressStore(UserProgressStore):
    __slots__ = ("_db",)

    def __init__(self, db: AsyncSession):
        self._db = db

    @map_db_errors("user_progress_store.get_by_id")
    async def get_by_id(self, user_id: int) -> Result[UserProgress, AppError]:
        found = await fetch_one(
            self._db, Learner, user_id, "UserProgress", origin="user_progress_store.get_by_id"
        )
        return found.map(to_user_progress)

    @map_db_errors("user_progress_store.save")
    async def save(self, progress: UserProgress) -> Result[UserProgress, AppError]:
        origin = "user_progress_store.save"
        match await fetch_one(self._db, Learner, progress.id, "UserProgress", origin=origin):
            case Err(error):
                return Err(error)
            case Ok(row):
                pass

        row.num_known = progress.num_known
        row.num_correct = progress.num_correct
        row.num_incorrect = progress.num_incorrect
        row.total_percentage = progress.total_percentage
        row.updated = progress.updated
        row.name = progress.name
        row.smallest_vocab = progress.smallest_vocab

        return (await update_entity(self._db, row, origin=origin)).map(to_user_progress)
