"""SQLAlchemy implementation of ReviewItemRepository."""

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from murajaah.logging import logger
from murajaah.models import ReviewItemRecord, ReviewLog
from murajaah.schemas import ReviewItem, ReviewLogEntry
from murajaah.study_calendar import as_utc


def _stored_utc(value: Optional[datetime]) -> Optional[datetime]:
    return as_utc(value).astimezone(timezone.utc) if value is not None else None


class SqlAlchemyReviewRepository:
    """Concrete ReviewItemRepository backed by a SQLAlchemy session.

    Every write method commits its own transaction and rolls the session back
    if the commit fails. ``save_review`` writes the item and its log row in
    one transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _commit(self) -> None:
        try:
            self._session.commit()
        except Exception as exc:
            self._session.rollback()
            logger.error("repository_commit_failed", error=str(exc))
            raise

    def _stage_item(self, item: ReviewItem) -> ReviewItemRecord:
        record = self._session.get(ReviewItemRecord, item.id)
        if record is None:
            record = ReviewItemRecord(id=item.id)
            self._session.add(record)
            logger.debug("review_item_created", item_id=item.id, subject_id=item.subject_id)

        record.user_id = item.user_id
        record.subject_id = item.subject_id
        record.ease_factor = item.ease_factor
        record.interval = item.interval
        record.repetitions = item.repetitions
        record.next_review_at = _stored_utc(item.next_review_at)
        record.last_reviewed_at = _stored_utc(item.last_reviewed_at)
        record.last_quality = item.last_quality
        return record

    def _stage_log(self, entry: ReviewLogEntry) -> None:
        self._session.add(ReviewLog(
            item_id=entry.item_id,
            quality=entry.quality,
            reviewed_at=_stored_utc(entry.reviewed_at),
            response_time_ms=entry.response_time_ms,
            ease_factor=entry.ease_factor,
            interval=entry.interval
        ))

    def get(self, item_id: str) -> Optional[ReviewItem]:
        record = self._session.get(ReviewItemRecord, item_id)
        return ReviewItem.model_validate(record) if record is not None else None

    def save(self, item: ReviewItem) -> ReviewItem:
        record = self._stage_item(item)
        self._commit()
        self._session.refresh(record)
        return ReviewItem.model_validate(record)

    def save_review(self, item: ReviewItem, entry: ReviewLogEntry) -> ReviewItem:
        record = self._stage_item(item)
        self._stage_log(entry)
        self._commit()
        self._session.refresh(record)
        return ReviewItem.model_validate(record)

    def list_by_subjects(self, subject_ids: Iterable[str], user_id: Optional[str] = None) -> List[ReviewItem]:
        subject_ids = list(subject_ids)
        if not subject_ids:
            return []
        query = select(ReviewItemRecord).where(ReviewItemRecord.subject_id.in_(subject_ids))
        if user_id is not None:
            query = query.where(ReviewItemRecord.user_id == user_id)
        return [ReviewItem.model_validate(r) for r in self._session.scalars(query.order_by(ReviewItemRecord.id))]

    def list_all(self, user_id: Optional[str] = None) -> List[ReviewItem]:
        query = select(ReviewItemRecord)
        if user_id is not None:
            query = query.where(ReviewItemRecord.user_id == user_id)
        return [ReviewItem.model_validate(r) for r in self._session.scalars(query.order_by(ReviewItemRecord.id))]

    def add_review_log(self, entry: ReviewLogEntry) -> None:
        self._stage_log(entry)
        self._commit()

    def list_review_logs(self, item_id: Optional[str] = None, limit: Optional[int] = None) -> List[ReviewLogEntry]:
        query = select(ReviewLog)
        if item_id is not None:
            query = query.where(ReviewLog.item_id == item_id)
        query = query.order_by(ReviewLog.reviewed_at.desc(), ReviewLog.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return [ReviewLogEntry.model_validate(r) for r in self._session.scalars(query)]
