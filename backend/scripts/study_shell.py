#!/usr/bin/env python3
"""Study one batch of vocabulary from the terminal.

Prints each prompt, reads an answer, grades it, and prints the outcome.

Run with: python3 -m scripts.study_shell --learner 1 --limit 10
"""
import argparse
import asyncio
from typing import Callable

from core.config import settings
from core.database import get_db_session, engine, Base
from core.logging import configure_logging
from engines.study import StudyService
from stores.sql import SqlItemStore, SqlStudyRecordStore, SqlUserProgressStore
import models  # noqa: F401


async def run_session(
    service: StudyService,
    learner_id: int,
    limit: int,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> int:
    """Run one batch. Returns the number of answers graded."""
    batch = await service.get_batch(learner_id, limit)
    if batch.is_err():
        write(f"Could not load study set: {batch.unwrap_err().message}")
        return 0

    graded = 0
    for record, item in batch.unwrap():
        write("")
        answer = read(service.build_prompt(item, record.user_notes) + "\n> ")
        outcome = await service.grade_attempt(item.id, record.id, answer.strip())
        if outcome.is_err():
            write(f"Could not grade answer: {outcome.unwrap_err().message}")
            continue
        write(outcome.unwrap())
        graded += 1

    if graded == 0 and not batch.unwrap():
        write("Nothing to study.")
    return graded


async def main(learner_id: int, limit: int):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with get_db_session() as session:
        service = StudyService(
            items=SqlItemStore(session),
            records=SqlStudyRecordStore(session),
            learners=SqlUserProgressStore(session),
        )
        await run_session(service, learner_id, limit)

    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Study a batch of vocabulary")
    parser.add_argument("--learner", type=int, default=1, help="Learner id")
    parser.add_argument("--limit", type=int, default=settings.STUDY_BATCH_LIMIT, help="Batch size")
    args = parser.parse_args()

    configure_logging(level="WARNING", json_logs=settings.LOG_JSON)
    asyncio.run(main(args.learner, args.limit))
