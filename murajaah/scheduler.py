"""Pure review scheduling operations over ``ReviewItem`` records.

Every function here takes the current time explicitly and returns new values
instead of mutating its inputs, so callers own persistence and concurrency.
"""

from datetime import datetime
from typing import Iterable, List, Optional
from uuid import uuid4

from murajaah.schemas import ReviewItem, ReviewUpdate
from murajaah.sm2 import PRIORITY_RANK, SM2Algorithm, derive_priority, validate_quality
from murajaah.study_calendar import StudyCalendar, as_utc


def create_item(
    subject_id: str,
    now: datetime,
    item_id: Optional[str] = None,
    user_id: Optional[str] = None
) -> ReviewItem:
    """Create a fresh item for a subject the learner has just encountered"""
    ef, interval, reps, next_review_at = SM2Algorithm.initialize_item(as_utc(now))
    return ReviewItem(
        id=item_id or f"srs-{subject_id}-{uuid4().hex[:12]}",
        subject_id=subject_id,
        user_id=user_id,
        ease_factor=ef,
        interval=interval,
        repetitions=reps,
        next_review_at=next_review_at,
    )


def record_review(item: ReviewItem, quality: int, now: datetime) -> ReviewUpdate:
    """
    Compute the state of an item after a review graded ``quality``.

    The item itself is left untouched; apply the returned update with
    ``apply_review`` or write its fields to the store.

    Raises:
        InvalidInput: quality is not an integer between 0 and 5
    """
    quality = validate_quality(quality)
    reviewed_at = as_utc(now)
    new_ef, new_interval, new_reps, next_review_at = SM2Algorithm.calculate_next_review(
        item.ease_factor,
        item.interval,
        item.repetitions,
        quality,
        reviewed_at=reviewed_at
    )
    return ReviewUpdate(
        ease_factor=new_ef,
        interval=new_interval,
        repetitions=new_reps,
        next_review_at=next_review_at,
        last_reviewed_at=reviewed_at,
        last_quality=quality,
        priority=derive_priority(new_reps, quality),
    )


def apply_review(item: ReviewItem, update: ReviewUpdate) -> ReviewItem:
    """Return a copy of ``item`` with a review update applied"""
    return item.model_copy(update=update.model_dump(exclude={"priority"}))


def is_due(item: ReviewItem, now: datetime) -> bool:
    return as_utc(now) >= item.next_review_at


def days_overdue(item: ReviewItem, now: datetime, calendar: Optional[StudyCalendar] = None) -> int:
    """Calculate how many calendar days overdue a review is"""
    calendar = calendar or StudyCalendar()
    if not is_due(item, now):
        return 0
    return (calendar.today(now) - calendar.local_date(item.next_review_at)).days


def select_due_items(items: Iterable[ReviewItem], now: datetime) -> List[ReviewItem]:
    """
    Due items in study order.

    Relearning items come first, then learning, review and finally new items.
    Within a tier the most overdue item comes first. The sort is stable, so
    equal keys keep their input order and repeated calls give the same queue.
    """
    due = [item for item in items if is_due(item, now)]
    return sorted(due, key=lambda item: (PRIORITY_RANK[item.priority], item.next_review_at))


def optimal_session_size(due_count: int) -> int:
    """Cap a session so a large backlog does not overload one sitting"""
    due_count = max(0, due_count)
    if due_count <= 10:
        return due_count
    if due_count <= 20:
        return min(due_count, 15)
    if due_count <= 50:
        return min(due_count, 25)
    return min(due_count, 30)
