"""Shared test helpers."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from murajaah.schemas import ReviewItem

T0 = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)


def days(n: float) -> timedelta:
    return timedelta(days=n)


def make_item(
    item_id: str,
    next_review_at: datetime,
    repetitions: int = 0,
    last_quality: Optional[int] = None,
    last_reviewed_at: Optional[datetime] = None,
    subject_id: Optional[str] = None,
    user_id: Optional[str] = None,
    interval: int = 1,
    ease_factor: float = 2.5,
) -> ReviewItem:
    return ReviewItem(
        id=item_id,
        subject_id=subject_id or f"subject-{item_id}",
        user_id=user_id,
        ease_factor=ease_factor,
        interval=interval,
        repetitions=repetitions,
        next_review_at=next_review_at,
        last_reviewed_at=last_reviewed_at,
        last_quality=last_quality,
    )
