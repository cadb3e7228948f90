from datetime import datetime, timezone

import pytest

from murajaah.exceptions import InvalidInput
from murajaah.scheduler import (
    apply_review,
    create_item,
    days_overdue,
    is_due,
    optimal_session_size,
    record_review,
    select_due_items,
)
from murajaah.sm2 import MINIMUM_EASE_FACTOR, Priority
from tests.utils import T0, days, make_item


def test_create_item_defaults():
    item = create_item("word-rahman", T0, user_id="u1")

    assert item.subject_id == "word-rahman"
    assert item.user_id == "u1"
    assert item.ease_factor == 2.5
    assert item.interval == 1
    assert item.repetitions == 0
    assert item.next_review_at == T0 + days(1)
    assert item.last_reviewed_at is None
    assert item.last_quality is None
    assert item.priority == Priority.NEW


def test_create_item_ids_are_unique_unless_given():
    first = create_item("word-rahim", T0)
    second = create_item("word-rahim", T0)
    assert first.id != second.id
    assert create_item("word-rahim", T0, item_id="fixed").id == "fixed"


def test_record_review_does_not_mutate_item():
    item = create_item("word-rabb", T0)
    before = item.model_dump()

    update = record_review(item, 5, T0 + days(1))

    assert item.model_dump() == before
    assert update.repetitions == 1
    assert update.last_quality == 5
    assert update.last_reviewed_at == T0 + days(1)
    assert update.next_review_at == T0 + days(2)
    assert update.priority == Priority.LEARNING


def test_record_review_is_deterministic():
    item = create_item("word-malik", T0, item_id="a")
    assert record_review(item, 3, T0 + days(1)) == record_review(item, 3, T0 + days(1))


def test_end_to_end_schedule():
    item = create_item("word-ilm", T0)
    assert item.next_review_at == T0 + days(1)

    item = apply_review(item, record_review(item, 4, T0 + days(1)))
    assert (item.repetitions, item.interval) == (1, 1)
    assert item.next_review_at == T0 + days(2)

    item = apply_review(item, record_review(item, 4, T0 + days(2)))
    assert (item.repetitions, item.interval) == (2, 6)
    assert item.next_review_at == T0 + days(8)

    item = apply_review(item, record_review(item, 5, T0 + days(8)))
    assert item.repetitions == 3
    assert item.ease_factor == pytest.approx(2.6)
    assert item.interval == round(6 * 2.6)
    assert item.next_review_at == T0 + days(8 + item.interval)
    assert item.last_reviewed_at == T0 + days(8)
    assert item.last_quality == 5


def test_intervals_grow_strictly_after_second_success():
    item = create_item("word-sabr", T0)
    now = T0
    intervals = []
    for _ in range(8):
        now = item.next_review_at
        item = apply_review(item, record_review(item, 5, now))
        intervals.append(item.interval)

    assert intervals[:2] == [1, 6]
    assert all(later > earlier for earlier, later in zip(intervals[1:], intervals[2:]))


@pytest.mark.parametrize("quality", [0, 1, 2])
def test_failure_resets_regardless_of_prior_state(quality):
    item = make_item("x", T0, repetitions=6, interval=90, ease_factor=2.9, last_quality=5)

    update = record_review(item, quality, T0)

    assert update.repetitions == 0
    assert update.interval == 1
    assert update.priority == Priority.RELEARNING


def test_ease_floor_holds_under_repeated_failures():
    item = create_item("word-dhikr", T0)
    for n in range(15):
        item = apply_review(item, record_review(item, 0, T0 + days(n)))
        assert item.ease_factor >= MINIMUM_EASE_FACTOR


def test_priority_reaches_review_after_four_successes():
    item = create_item("word-huda", T0)
    for _ in range(4):
        item = apply_review(item, record_review(item, 4, item.next_review_at))
    assert item.priority == Priority.REVIEW


@pytest.mark.parametrize("quality", [-1, 6, 2.5])
def test_record_review_rejects_out_of_range_quality(quality):
    item = create_item("word-nur", T0)
    with pytest.raises(InvalidInput):
        record_review(item, quality, T0)


def test_is_due_boundaries():
    item = make_item("x", T0 + days(1))
    assert not is_due(item, T0)
    assert is_due(item, T0 + days(1))
    assert is_due(item, T0 + days(3))


def test_is_due_treats_naive_now_as_utc():
    item = make_item("x", T0)
    assert is_due(item, datetime(2024, 3, 1, 8, 0))
    assert not is_due(item, datetime(2024, 3, 1, 7, 59))


def test_naive_item_timestamps_are_treated_as_utc():
    item = make_item("x", datetime(2024, 3, 1, 8, 0))
    assert item.next_review_at == T0
    assert item.next_review_at.tzinfo == timezone.utc


def test_select_due_items_orders_by_priority_then_due_time():
    items = [
        make_item("new-old", T0 - days(5)),
        make_item("review", T0 - days(1), repetitions=5, last_quality=4),
        make_item("learning-late", T0 - days(1), repetitions=2, last_quality=4),
        make_item("relearning", T0 - days(1), repetitions=0, last_quality=1),
        make_item("learning-early", T0 - days(3), repetitions=1, last_quality=3),
        make_item("not-due", T0 + days(1), repetitions=0, last_quality=0),
    ]

    queue = select_due_items(items, T0)

    assert [item.id for item in queue] == [
        "relearning",
        "learning-early",
        "learning-late",
        "review",
        "new-old",
    ]


def test_select_due_items_is_idempotent_and_leaves_input_alone():
    items = [
        make_item("b", T0 - days(1)),
        make_item("a", T0 - days(1)),
        make_item("c", T0 - days(2), repetitions=1, last_quality=4),
    ]
    original_order = [item.id for item in items]

    first = select_due_items(items, T0)
    second = select_due_items(items, T0)

    assert [i.id for i in first] == [i.id for i in second] == ["c", "b", "a"]
    assert [item.id for item in items] == original_order


def test_select_due_items_empty():
    assert select_due_items([], T0) == []


@pytest.mark.parametrize("due_count, expected", [
    (0, 0),
    (8, 8),
    (10, 10),
    (11, 11),
    (18, 15),
    (20, 15),
    (35, 25),
    (50, 25),
    (51, 30),
    (120, 30),
    (-4, 0),
])
def test_optimal_session_size(due_count, expected):
    assert optimal_session_size(due_count) == expected


def test_days_overdue(calendar):
    item = make_item("x", T0)
    assert days_overdue(item, T0 - days(1), calendar) == 0
    assert days_overdue(item, T0, calendar) == 0
    assert days_overdue(item, T0 + days(3), calendar) == 3
