from stores.base import (
    Item,
    StudyRecord,
    UserProgress,
    StudyPair,
    ItemStore,
    StudyRecordStore,
    UserProgressStore,
)

__all__ = [
    "Item",
    "StudyRecord",
    "UserProgress",
    "StudyPair",
    "ItemStore",
    "StudyRecordStore",
    "UserProgressStore",
]
