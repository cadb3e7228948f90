from datetime import datetime
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field, computed_field

from murajaah.exceptions import InvalidInput
from murajaah.schemas import ReviewItem
from murajaah.scheduler import optimal_session_size, select_due_items
from murajaah.sm2 import PASSING_QUALITY, Priority


class StudyProfile(BaseModel):
    """Daily workload a learner has signed up for"""
    name: str
    daily_goal: int = Field(description="Maximum reviews per day")
    session_duration_minutes: int
    max_new_items: int = Field(description="Maximum never-reviewed items per session")


STUDY_PROFILES: Dict[str, StudyProfile] = {
    "new_user": StudyProfile(name="new_user", daily_goal=10, session_duration_minutes=15, max_new_items=5),
    "casual": StudyProfile(name="casual", daily_goal=20, session_duration_minutes=20, max_new_items=10),
    "serious": StudyProfile(name="serious", daily_goal=50, session_duration_minutes=30, max_new_items=20),
    "intensive": StudyProfile(name="intensive", daily_goal=100, session_duration_minutes=45, max_new_items=30),
}


def get_profile(name: str) -> StudyProfile:
    """Look up a built-in study profile by name"""
    try:
        return STUDY_PROFILES[name.lower()]
    except KeyError:
        raise InvalidInput(
            "profile", name, f"Unknown study profile {name!r}, expected one of {', '.join(STUDY_PROFILES)}"
        ) from None


def plan_session(
    items: Iterable[ReviewItem],
    now: datetime,
    profile: Optional[StudyProfile] = None
) -> List[ReviewItem]:
    """
    Pick the items for one study session.

    Takes the due queue in study order and truncates it to the optimal
    session size. With a profile, new items beyond the profile's allowance are
    skipped and the session never exceeds the daily goal.
    """
    due = select_due_items(items, now)
    limit = optimal_session_size(len(due))
    if profile is not None:
        limit = min(limit, profile.daily_goal)

    session = []
    new_taken = 0
    for item in due:
        if len(session) >= limit:
            break
        if item.priority == Priority.NEW and profile is not None:
            if new_taken >= profile.max_new_items:
                continue
            new_taken += 1
        session.append(item)
    return session


class ReviewResult(BaseModel):
    """Outcome of a single answer within a session"""
    item_id: str
    quality: int = Field(ge=0, le=5)
    response_time_ms: int = Field(default=0, ge=0)

    @computed_field
    @property
    def was_correct(self) -> bool:
        return self.quality >= PASSING_QUALITY


class SessionTally(BaseModel):
    """Running totals for the answers given in one study session"""
    items_studied: int = 0
    correct_answers: int = 0
    average_response_time_ms: float = 0.0
    current_streak: int = 0
    best_streak: int = 0

    @computed_field
    @property
    def accuracy(self) -> float:
        if self.items_studied == 0:
            return 0.0
        return self.correct_answers / self.items_studied * 100

    def record(self, result: ReviewResult) -> "SessionTally":
        """Return a new tally including ``result``"""
        studied = self.items_studied + 1
        streak = self.current_streak + 1 if result.was_correct else 0
        return SessionTally(
            items_studied=studied,
            correct_answers=self.correct_answers + (1 if result.was_correct else 0),
            average_response_time_ms=(
                self.average_response_time_ms * self.items_studied + result.response_time_ms
            ) / studied,
            current_streak=streak,
            best_streak=max(self.best_streak, streak),
        )
