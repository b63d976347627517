"""Study Selection Engine

Chooses and orders the next batch of items for a learner. Items that have
been practiced but are not yet well known come first; untested and well-known
items fill any remaining room.
"""
from dataclasses import dataclass
from datetime import datetime, timezone

from core.logging import study_logger
from stores.base import StudyPair

log = study_logger()

_NEVER = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(slots=True)
class StudyGroups:
    """Presentable pairs split by priority."""
    primary: list[StudyPair]    # tested before and not yet well known
    secondary: list[StudyPair]  # untested, or already well known


def _last_tested_key(pair: StudyPair) -> datetime:
    last_tested = pair[0].last_tested
    if last_tested is None:
        return _NEVER
    if last_tested.tzinfo is None:
        return last_tested.replace(tzinfo=timezone.utc)
    return last_tested


def is_presentable(pair: StudyPair) -> bool:
    """An item can only be shown if it has prompt text."""
    return bool(pair[1].prompt_text)


def partition(pairs: list[StudyPair]) -> StudyGroups:
    primary, secondary = [], []
    for pair in pairs:
        if not is_presentable(pair):
            continue
        record = pair[0]
        if record.tested and not record.well_known:
            primary.append(pair)
        else:
            secondary.append(pair)
    return StudyGroups(primary=primary, secondary=secondary)


def select_batch(pairs: list[StudyPair], limit: int) -> list[StudyPair]:
    """Return at most `limit` pairs in presentation order.

    Primary pairs are taken most recently tested first, topped up with
    secondary pairs in their given order, and the batch is then reversed so
    the freshest item is presented last.
    """
    if limit <= 0:
        return []

    groups = partition(pairs)
    batch = sorted(groups.primary, key=_last_tested_key, reverse=True)

    if len(batch) < limit:
        batch.extend(groups.secondary[:limit - len(batch)])
    else:
        del batch[limit:]

    batch.reverse()

    log.debug(
        "batch_selected",
        available=len(pairs),
        primary=len(groups.primary),
        secondary=len(groups.secondary),
        selected=len(batch),
        limit=limit,
    )
    return batch
