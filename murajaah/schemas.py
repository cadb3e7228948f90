from pydantic import BaseModel, Field, computed_field, field_validator
from typing import Optional
from datetime import date, datetime

from murajaah.sm2 import (
    DEFAULT_EASE_FACTOR,
    INITIAL_INTERVAL,
    MINIMUM_EASE_FACTOR,
    Priority,
    derive_priority,
)
from murajaah.study_calendar import as_utc


class ReviewItem(BaseModel):
    """Scheduling state of one memorisation item"""
    id: str
    subject_id: str
    user_id: Optional[str] = None
    ease_factor: float = Field(default=DEFAULT_EASE_FACTOR, ge=MINIMUM_EASE_FACTOR)
    interval: int = Field(default=INITIAL_INTERVAL, ge=1)
    repetitions: int = Field(default=0, ge=0)
    next_review_at: datetime
    last_reviewed_at: Optional[datetime] = None
    last_quality: Optional[int] = Field(default=None, ge=0, le=5)

    @field_validator("next_review_at", "last_reviewed_at")
    @classmethod
    def _aware(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None

    @computed_field
    @property
    def priority(self) -> Priority:
        return derive_priority(self.repetitions, self.last_quality)

    class Config:
        from_attributes = True


class ReviewUpdate(BaseModel):
    """Field values produced by recording one review"""
    ease_factor: float
    interval: int
    repetitions: int
    next_review_at: datetime
    last_reviewed_at: datetime
    last_quality: int
    priority: Priority


class ReviewLogEntry(BaseModel):
    """One recorded answer for an item"""
    item_id: str
    quality: int = Field(ge=0, le=5)
    reviewed_at: datetime
    response_time_ms: Optional[int] = None
    ease_factor: float
    interval: int

    @field_validator("reviewed_at")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        return as_utc(value)

    class Config:
        from_attributes = True


class StudyStats(BaseModel):
    """Aggregate study statistics for a set of items"""
    total_items: int
    due_items: int
    learned_items: int
    new_items: int
    average_retention: float  # percentage 0-100
    streak_days: int


class DueForecastEntry(BaseModel):
    """Number of items falling due on one calendar date"""
    date: date
    count: int
