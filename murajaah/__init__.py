from murajaah.exceptions import InvalidInput, ItemNotFound, SchedulerError
from murajaah.schemas import DueForecastEntry, ReviewItem, ReviewUpdate, StudyStats
from murajaah.scheduler import (
    apply_review,
    create_item,
    days_overdue,
    is_due,
    optimal_session_size,
    record_review,
    select_due_items
)
from murajaah.sm2 import Priority, Quality
from murajaah.stats import compute_study_stats, forecast_due_counts
from murajaah.study_calendar import StudyCalendar

__version__ = "0.1.0"

__all__ = [
    "InvalidInput",
    "ItemNotFound",
    "SchedulerError",
    "DueForecastEntry",
    "ReviewItem",
    "ReviewUpdate",
    "StudyStats",
    "apply_review",
    "create_item",
    "days_overdue",
    "is_due",
    "optimal_session_size",
    "record_review",
    "select_due_items",
    "Priority",
    "Quality",
    "compute_study_stats",
    "forecast_due_counts",
    "StudyCalendar"
]
