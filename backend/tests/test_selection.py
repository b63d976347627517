from datetime import datetime

from engines.selection import partition, select_batch
from stores.base import Item, StudyRecord


def pair(id, last_tested=None, well_known=False, prompt_text="text"):
    record = StudyRecord(
        id=id,
        item_id=id,
        user_id=1,
        last_tested=last_tested,
        well_known=well_known,
        correctness=0.5 if last_tested else None,
    )
    return record, Item(id=id, target=f"target{id}", prompt_text=prompt_text)


def ids(batch):
    return [record.id for record, _ in batch]


def test_primary_presented_oldest_first(clock):
    pairs = [pair(2, clock(2)), pair(1, clock(1)), pair(3, clock(3))]
    assert ids(select_batch(pairs, 3)) == [1, 2, 3]


def test_primary_truncated_to_most_recent(clock):
    pairs = [pair(i, clock(i)) for i in range(1, 6)]
    assert ids(select_batch(pairs, 3)) == [3, 4, 5]


def test_secondary_pads_in_given_order(clock):
    pairs = [pair(10), pair(11), pair(12), pair(1, clock(1))]
    # primary first, then secondary in order, then the whole batch reversed
    assert ids(select_batch(pairs, 3)) == [11, 10, 1]


def test_exact_size_when_enough_items(clock):
    pairs = [pair(i, clock(i) if i % 2 else None) for i in range(1, 9)]
    for limit in range(1, 9):
        assert len(select_batch(pairs, limit)) == limit


def test_short_when_not_enough_items():
    assert len(select_batch([pair(1), pair(2)], 5)) == 2


def test_non_positive_limit():
    pairs = [pair(1), pair(2)]
    assert select_batch(pairs, 0) == []
    assert select_batch(pairs, -3) == []


def test_items_without_prompt_never_selected(clock):
    pairs = [pair(1, clock(1), prompt_text=""), pair(2, prompt_text=""), pair(3)]
    assert ids(select_batch(pairs, 5)) == [3]


def test_well_known_items_are_secondary(clock):
    groups = partition([pair(1, clock(1), well_known=True), pair(2, clock(2)), pair(3)])
    assert ids(groups.primary) == [2]
    assert ids(groups.secondary) == [1, 3]


def test_mixed_naive_and_aware_timestamps(clock):
    naive = datetime(2024, 3, 1, 5)
    pairs = [pair(1, clock(1)), pair(2, naive), pair(3, clock(9))]
    assert ids(select_batch(pairs, 3)) == [1, 2, 3]
