from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from core.database import Base
from engines.study import StudyService
from models.study import Learner, Vocab, VocabStudy
from stores.base import Item, StudyRecord, UserProgress
from stores.memory import InMemoryItemStore, InMemoryStudyRecordStore, InMemoryUserProgressStore


LEARNER_ID = 1

ITEMS = [
    Item(id=1, target="comprendimos", prompt_text="we understood",
         alternatives="entendemos, intiendemos", pos="verb"),
    Item(id=2, target="palabra", prompt_text="word", pos="noun"),
    Item(id=3, target="libro", prompt_text="book"),
]


@pytest.fixture
def item_store():
    return InMemoryItemStore(ITEMS)


@pytest.fixture
def record_store(item_store):
    return InMemoryStudyRecordStore(item_store, [
        StudyRecord(id=10, item_id=1, user_id=LEARNER_ID),
        StudyRecord(id=11, item_id=2, user_id=LEARNER_ID),
        StudyRecord(id=12, item_id=3, user_id=LEARNER_ID, user_notes="something you read"),
    ])


@pytest.fixture
def learner_store():
    return InMemoryUserProgressStore([
        UserProgress(id=LEARNER_ID, name="Ana", code="secret"),
    ])


@pytest.fixture
def service(item_store, record_store, learner_store):
    return StudyService(items=item_store, records=record_store, learners=learner_store)


@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def seeded(session_factory):
    """Same learner and vocabulary as the in-memory fixtures, stored in SQLite."""
    async with session_factory() as session:
        session.add(Learner(id=LEARNER_ID, name="Ana", code="secret"))
        for item in ITEMS:
            session.add(Vocab(
                id=item.id,
                learning_lang=item.target,
                first_lang=item.prompt_text,
                alternatives=item.alternatives,
                pos=item.pos,
            ))
        await session.flush()
        session.add_all([
            VocabStudy(id=10, vocab_id=1, learner_id=LEARNER_ID),
            VocabStudy(id=11, vocab_id=2, learner_id=LEARNER_ID),
            VocabStudy(id=12, vocab_id=3, learner_id=LEARNER_ID, user_notes="something you read"),
        ])
        await session.commit()
    return session_factory


@pytest.fixture
async def db_session(seeded):
    async with seeded() as session:
        yield session


def at(hour: int) -> datetime:
    return datetime(2024, 3, 1, hour, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return at
