import math
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from murajaah.schemas import DueForecastEntry, ReviewItem, StudyStats
from murajaah.scheduler import is_due
from murajaah.sm2 import PASSING_QUALITY
from murajaah.study_calendar import StudyCalendar, as_utc

LEARNED_REPETITIONS = 3
SECONDS_PER_DAY = timedelta(days=1).total_seconds()


def calculate_streak_days(
    review_times: Iterable[datetime],
    today: date,
    calendar: StudyCalendar
) -> int:
    """
    Count consecutive study days ending today.

    Starting from ``today`` the streak grows by one for every preceding
    calendar day with at least one review and stops at the first day without
    one. No review today means no streak. Timestamps after today are ignored.
    """
    review_days = {calendar.local_date(moment) for moment in review_times}
    streak = 0
    day = today
    while day in review_days:
        streak += 1
        day = calendar.previous_day(day)
    return streak


def retention_rate(items: Iterable[ReviewItem]) -> float:
    """Percentage of reviewed items whose last review passed"""
    qualities = [item.last_quality for item in items if item.last_quality is not None]
    if not qualities:
        return 0.0
    passed = sum(1 for quality in qualities if quality >= PASSING_QUALITY)
    return passed / len(qualities) * 100


def compute_study_stats(
    items: Iterable[ReviewItem],
    now: datetime,
    calendar: Optional[StudyCalendar] = None
) -> StudyStats:
    """
    Dashboard statistics for a collection of items.

    Without a calendar the streak is counted in UTC days. ReviewService
    passes the calendar built from STUDY_TIMEZONE.
    """
    calendar = calendar or StudyCalendar()
    items = list(items)

    return StudyStats(
        total_items=len(items),
        due_items=sum(1 for item in items if is_due(item, now)),
        learned_items=sum(1 for item in items if item.repetitions >= LEARNED_REPETITIONS),
        new_items=sum(1 for item in items if item.repetitions == 0),
        average_retention=retention_rate(items),
        streak_days=calculate_streak_days(
            (item.last_reviewed_at for item in items if item.last_reviewed_at is not None),
            calendar.today(now),
            calendar,
        ),
    )


def forecast_due_counts(
    items: Iterable[ReviewItem],
    days_ahead: int,
    now: datetime,
    calendar: Optional[StudyCalendar] = None
) -> List[DueForecastEntry]:
    """
    Predict how many items fall due on each upcoming calendar date.

    An item is counted when it falls due within ``days_ahead`` whole days of
    ``now`` (partial days round up). Items already overdue by a day or more
    are left out. Only dates with at least one item are returned, earliest
    first.

    Dates are UTC dates unless a calendar is given. ReviewService passes the
    calendar built from STUDY_TIMEZONE.
    """
    calendar = calendar or StudyCalendar()
    now = as_utc(now)
    counts = Counter()

    for item in items:
        days_until_due = math.ceil((item.next_review_at - now).total_seconds() / SECONDS_PER_DAY)
        if 0 <= days_until_due <= days_ahead:
            counts[calendar.local_date(item.next_review_at)] += 1

    return [
        DueForecastEntry(date=day, count=count)
        for day, count in sorted(counts.items())
    ]
