from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from murajaah.config import settings


def as_utc(value: datetime) -> datetime:
    """Return an aware datetime, treating naive values as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class StudyCalendar:
    """
    Calendar policy for turning review timestamps into study days.
    
    Streaks and forecasts are counted in whole calendar days, and which day a
    timestamp falls on depends on the learner's timezone. The policy is always
    passed in explicitly so nothing reads the host's local timezone.
    """
    
    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz or timezone.utc
    
    @classmethod
    def from_name(cls, name: str) -> "StudyCalendar":
        """Build a calendar from an IANA timezone name (e.g. "Asia/Kuala_Lumpur")"""
        if name.upper() == "UTC":
            return cls(timezone.utc)
        return cls(ZoneInfo(name))
    
    def local_date(self, moment: datetime) -> date:
        """Calendar date of a timestamp in this calendar's timezone"""
        return as_utc(moment).astimezone(self.tz).date()
    
    def today(self, now: datetime) -> date:
        return self.local_date(now)
    
    def previous_day(self, day: date) -> date:
        return day - timedelta(days=1)
    
    def __repr__(self) -> str:
        return f"StudyCalendar(tz={self.tz!r})"


def default_calendar() -> StudyCalendar:
    """Calendar configured by the ``STUDY_TIMEZONE`` setting"""
    return StudyCalendar.from_name(settings.study_timezone)
