from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from murajaah.exceptions import InvalidInput, ItemNotFound
from murajaah.logging import logger
from murajaah.repositories import ReviewItemRepository
from murajaah.schemas import DueForecastEntry, ReviewItem, ReviewLogEntry, StudyStats
from murajaah.scheduler import (
    apply_review,
    create_item,
    optimal_session_size,
    record_review,
    select_due_items,
)
from murajaah.stats import calculate_streak_days, compute_study_stats, forecast_due_counts
from murajaah.study_calendar import StudyCalendar, as_utc, default_calendar
from murajaah.study_session import ReviewResult, SessionTally, StudyProfile, plan_session


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReviewService:
    """
    Caller-side orchestration of the review scheduler.

    Reads items from an injected repository, runs the pure scheduling
    functions and writes the results back. This is the only layer that reads
    the wall clock; every method also accepts an explicit ``now``.
    """

    def __init__(
        self,
        repository: ReviewItemRepository,
        calendar: Optional[StudyCalendar] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.repository = repository
        self.calendar = calendar or default_calendar()
        self.clock = clock

    def _now(self, now: Optional[datetime]) -> datetime:
        return as_utc(now) if now is not None else as_utc(self.clock())

    def enroll(self, subject_id: str, user_id: Optional[str] = None, now: Optional[datetime] = None) -> ReviewItem:
        """Start tracking a subject, returning the existing item if there is one"""
        existing = self.repository.list_by_subjects([subject_id], user_id=user_id)
        existing = [item for item in existing if item.user_id == user_id]
        if existing:
            return existing[0]

        item = self.repository.save(create_item(subject_id, self._now(now), user_id=user_id))
        logger.info("review_item_enrolled", item_id=item.id, subject_id=subject_id, user_id=user_id)
        return item

    def get(self, item_id: str) -> ReviewItem:
        item = self.repository.get(item_id)
        if item is None:
            raise ItemNotFound(item_id)
        return item

    def review(
        self,
        item_id: str,
        quality: int,
        now: Optional[datetime] = None,
        response_time_ms: Optional[int] = None
    ) -> ReviewItem:
        """
        Record a graded review and persist the new schedule.

        Args:
            item_id: Item being reviewed
            quality: Response quality (0-5)
            now: Review time (defaults to the service clock)
            response_time_ms: Optional answer latency, kept in the review log

        Returns:
            The updated item as stored

        Raises:
            ItemNotFound: no item with this id
            InvalidInput: quality outside 0-5; nothing is written
        """
        item = self.get(item_id)
        now = self._now(now)
        try:
            update = record_review(item, quality, now)
        except InvalidInput:
            logger.warning("review_rejected", item_id=item_id, quality=quality)
            raise

        saved = self.repository.save_review(apply_review(item, update), ReviewLogEntry(
            item_id=item.id,
            quality=update.last_quality,
            reviewed_at=update.last_reviewed_at,
            response_time_ms=response_time_ms,
            ease_factor=update.ease_factor,
            interval=update.interval
        ))
        logger.info(
            "review_recorded",
            item_id=saved.id,
            quality=update.last_quality,
            interval=update.interval,
            repetitions=update.repetitions,
            ease_factor=round(update.ease_factor, 3),
            priority=update.priority.value,
            next_review_at=update.next_review_at.isoformat()
        )
        return saved

    def record_answer(
        self,
        tally: SessionTally,
        item_id: str,
        quality: int,
        now: Optional[datetime] = None,
        response_time_ms: int = 0
    ) -> Tuple[ReviewItem, SessionTally]:
        """
        Review an item as part of a study session.

        The review is stored exactly like ``review`` and the answer is added
        to the session tally. The tally is left as it was if the review is
        rejected.

        Returns:
            Tuple of (updated item, new tally)
        """
        item = self.review(item_id, quality, now=now, response_time_ms=response_time_ms)
        result = ReviewResult(item_id=item.id, quality=quality, response_time_ms=response_time_ms)
        return item, tally.record(result)

    def due_queue(self, now: Optional[datetime] = None, user_id: Optional[str] = None, capped: bool = True) -> List[ReviewItem]:
        """Due items in study order, capped to the optimal session size by default"""
        due = select_due_items(self.repository.list_all(user_id), self._now(now))
        if capped:
            return due[:optimal_session_size(len(due))]
        return due

    def plan(
        self,
        profile: Optional[StudyProfile] = None,
        now: Optional[datetime] = None,
        user_id: Optional[str] = None
    ) -> List[ReviewItem]:
        return plan_session(self.repository.list_all(user_id), self._now(now), profile)

    def stats(self, now: Optional[datetime] = None, user_id: Optional[str] = None) -> StudyStats:
        return compute_study_stats(self.repository.list_all(user_id), self._now(now), self.calendar)

    def forecast(self, days_ahead: int, now: Optional[datetime] = None, user_id: Optional[str] = None) -> List[DueForecastEntry]:
        return forecast_due_counts(self.repository.list_all(user_id), days_ahead, self._now(now), self.calendar)

    def activity_streak(self, now: Optional[datetime] = None) -> int:
        """Study streak computed from the full review log rather than last reviews only"""
        now = self._now(now)
        logs = self.repository.list_review_logs()
        return calculate_streak_days((entry.reviewed_at for entry in logs), self.calendar.today(now), self.calendar)
