"""Study API

Thin HTTP glue over `StudyService`: fetch the next challenges, submit an
answer, and read a learner's progress or a single study record.
"""
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_db
from core.errors import raise_result
from engines.study import StudyService
from stores.sql import SqlItemStore, SqlStudyRecordStore, SqlUserProgressStore

router = APIRouter()


def get_study_service(db: AsyncSession = Depends(get_db)) -> StudyService:
    """One service per request, bound to that request's session."""
    return StudyService(
        items=SqlItemStore(db),
        records=SqlStudyRecordStore(db),
        learners=SqlUserProgressStore(db),
    )


class ChallengeResponse(BaseModel):
    item_id: int
    study_record_id: int
    prompt: str


class AttemptRequest(BaseModel):
    item_id: int
    study_record_id: int
    answer: str = ""


class AttemptResponse(BaseModel):
    message: str


class LearnerResponse(BaseModel):
    id: int
    name: str | None
    num_known: int
    num_correct: int
    num_incorrect: int
    total_percentage: float | None
    smallest_vocab: int
    updated: datetime


class ItemResponse(BaseModel):
    id: int
    target: str
    prompt_text: str
    alternatives: str | None
    hint: str | None
    pos: str | None


class StudyRecordResponse(BaseModel):
    id: int
    item_id: int
    user_id: int
    correctness: float | None
    last_change: float | None
    last_tested: datetime | None
    attempts: int
    correct_attempts: int
    well_known: bool
    user_notes: str | None


class StudyStatsResponse(BaseModel):
    record: StudyRecordResponse
    item: ItemResponse


@router.get("/challenges", response_model=list[ChallengeResponse])
async def get_challenges(
    user_id: int = Query(...),
    limit: int = Query(settings.STUDY_BATCH_LIMIT, ge=0, le=settings.MAX_BATCH_LIMIT),
    service: StudyService = Depends(get_study_service),
):
    """Next batch of items to translate, in presentation order."""
    result = await service.get_challenges(user_id, limit)
    raise_result(result)
    return [
        ChallengeResponse(item_id=c.item_id, study_record_id=c.study_record_id, prompt=c.prompt)
        for c in result.unwrap()
    ]


@router.post("/attempts", response_model=AttemptResponse)
async def submit_attempt(
    attempt: AttemptRequest,
    service: StudyService = Depends(get_study_service),
):
    """Grade an answer; the response carries the outcome message."""
    result = await service.grade_attempt(attempt.item_id, attempt.study_record_id, attempt.answer)
    raise_result(result)
    return AttemptResponse(message=result.unwrap())


@router.get("/learners/{user_id}", response_model=LearnerResponse)
async def get_learner(user_id: int, service: StudyService = Depends(get_study_service)):
    result = await service.get_learner(user_id)
    raise_result(result)
    learner = result.unwrap()
    return LearnerResponse(
        id=learner.id,
        name=learner.name,
        num_known=learner.num_known,
        num_correct=learner.num_correct,
        num_incorrect=learner.num_incorrect,
        total_percentage=learner.total_percentage,
        smallest_vocab=learner.smallest_vocab,
        updated=learner.updated,
    )


@router.get("/records/{study_record_id}", response_model=StudyStatsResponse)
async def get_study_stats(study_record_id: int, service: StudyService = Depends(get_study_service)):
    result = await service.get_study_stats(study_record_id)
    raise_result(result)
    record, item = result.unwrap()
    return StudyStatsResponse(
        record=StudyRecordResponse(
            id=record.id,
            item_id=record.item_id,
            user_id=record.user_id,
            correctness=record.correctness,
            last_change=record.last_change,
            last_tested=record.last_tested,
            attempts=record.attempts,
            correct_attempts=record.correct_attempts,
            well_known=record.well_known,
            user_notes=record.user_notes,
        ),
        item=ItemResponse(
            id=item.id,
            target=item.target,
            prompt_text=item.prompt_text,
            alternatives=item.alternatives,
            hint=item.hint,
            pos=item.pos,
        ),
    )
