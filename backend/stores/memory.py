"""Dict-backed stores for tests and local experiments.

`fail_saves` makes every `save` return a persistence failure, to exercise
the error paths of the study service without a database.
"""
from core.errors import AppError, Ok, Result, invariant_violated, not_found, transaction_failed
from stores.base import (
    Item,
    ItemStore,
    StudyPair,
    StudyRecord,
    StudyRecordStore,
    UserProgress,
    UserProgressStore,
)


class InMemoryItemStore(ItemStore):
    def __init__(self, items: list[Item] | None = None):
        self.items: dict[int, Item] = {item.id: item for item in items or []}

    def add(self, item: Item) -> Item:
        self.items[item.id] = item
        return item

    async def get_by_id(self, item_id: int) -> Result[Item, AppError]:
        item = self.items.get(item_id)
        if item is None:
            return not_found("Item", item_id, origin="item_store.get_by_id")
        return Ok(item)


class InMemoryStudyRecordStore(StudyRecordStore):
    def __init__(self, items: InMemoryItemStore, records: list[StudyRecord] | None = None):
        self._items = items
        self.records: dict[int, StudyRecord] = {r.id: r for r in records or []}
        self.fail_saves = False
        self.saves = 0

    def add(self, record: StudyRecord) -> StudyRecord:
        self.records[record.id] = record
        return record

    async def get_by_id(self, record_id: int) -> Result[StudyRecord, AppError]:
        record = self.records.get(record_id)
        if record is None:
            return not_found("StudyRecord", record_id, origin="study_record_store.get_by_id")
        return Ok(record)

    async def get_all_for_user(self, user_id: int) -> Result[list[StudyPair], AppError]:
        pairs = []
        for record in sorted(self.records.values(), key=lambda r: r.id):
            item = self._items.items.get(record.item_id)
            if record.user_id == user_id and item is not None:
                pairs.append((record, item))
        return Ok(pairs)

    async def save(self, record: StudyRecord) -> Result[StudyRecord, AppError]:
        origin = "study_record_store.save"
        if self.fail_saves:
            return transaction_failed("simulated write failure", origin=origin, study_record_id=record.id)
        if record.id not in self.records:
            return not_found("StudyRecord", record.id, origin=origin)
        if record.correctness is not None and not 0.0 <= record.correctness <= 1.0:
            return invariant_violated(
                "correctness within [0, 1]", origin=origin, correctness=record.correctness
            )
        self.records[record.id] = record
        self.saves += 1
        return Ok(record)


class InMemoryUserProgressStore(UserProgressStore):
    def __init__(self, learners: list[UserProgress] | None = None):
        self.learners: dict[int, UserProgress] = {p.id: p for p in learners or []}
        self.fail_saves = False

    def add(self, progress: UserProgress) -> UserProgress:
        self.learners[progress.id] = progress
        return progress

    async def get_by_id(self, user_id: int) -> Result[UserProgress, AppError]:
        progress = self.learners.get(user_id)
        if progress is None:
            return not_found("UserProgress", user_id, origin="user_progress_store.get_by_id")
        return Ok(progress)

    async def save(self, progress: UserProgress) -> Result[UserProgress, AppError]:
        origin = "user_progress_store.save"
        if self.fail_saves:
            return transaction_failed("simulated write failure", origin=origin, user_id=progress.id)
        if progress.id not in self.learners:
            return not_found("UserProgress", progress.id, origin=origin)
        self.learners[progress.id] = progress
        return Ok(progress)
