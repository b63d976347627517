"""Domain values and the store interfaces the study engine depends on."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone

from core.errors import AppError, Result


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Item:
    """A vocabulary entry: the phrase to produce and the text that prompts for it."""
    id: int
    target: str                     # learning-language phrase the user must produce
    prompt_text: str                # first-language text shown to the user
    alternatives: str | None = None  # comma separated accepted answers
    hint: str | None = None
    pos: str | None = None          # part of speech
    skill: str | None = None
    infinitive: str | None = None
    created: datetime = field(default_factory=utcnow)


@dataclass(frozen=True, slots=True)
class StudyRecord:
    """Per-(user, item) learning state. Updated as a new value per attempt."""
    id: int
    item_id: int
    user_id: int
    correctness: float | None = None
    last_change: float | None = None
    last_tested: datetime | None = None
    attempts: int = 0
    correct_attempts: int = 0
    well_known: bool = False
    user_notes: str | None = None
    created: datetime = field(default_factory=utcnow)

    @property
    def tested(self) -> bool:
        return self.last_tested is not None


@dataclass(frozen=True, slots=True)
class UserProgress:
    """A learner and their aggregate counters."""
    id: int
    num_known: int = 0
    num_correct: int = 0
    num_incorrect: int = 0
    total_percentage: float | None = None
    updated: datetime = field(default_factory=utcnow)
    name: str | None = None
    code: str | None = None          # access code; never leaves the service
    smallest_vocab: int = 1


StudyPair = tuple[StudyRecord, Item]


class ItemStore(ABC):
    """Read access to vocabulary items."""

    @abstractmethod
    async def get_by_id(self, item_id: int) -> Result[Item, AppError]:
        """Return the item, or Err(NotFound)."""
        ...


class StudyRecordStore(ABC):
    """Read/write access to per-user study records."""

    @abstractmethod
    async def get_by_id(self, record_id: int) -> Result[StudyRecord, AppError]:
        """Return the record, or Err(NotFound)."""
        ...

    @abstractmethod
    async def get_all_for_user(self, user_id: int) -> Result[list[StudyPair], AppError]:
        """Return every (record, item) pair assigned to the user."""
        ...

    @abstractmethod
    async def save(self, record: StudyRecord) -> Result[StudyRecord, AppError]:
        """Persist the record as given and return the stored value."""
        ...


class UserProgressStore(ABC):
    """Read/write access to learner progress."""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Result[UserProgress, AppError]:
        """Return the learner, or Err(NotFound). Never creates one."""
        ...

    @abstractmethod
    async def save(self, progress: UserProgress) -> Result[UserProgress, AppError]:
        """Persist the progress as given and return the stored value."""
        ...
