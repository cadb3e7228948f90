import math
from datetime import datetime, timedelta
from enum import Enum, IntEnum
from typing import Optional, Tuple

from murajaah.exceptions import InvalidInput

DEFAULT_EASE_FACTOR = 2.5
MINIMUM_EASE_FACTOR = 1.3
INITIAL_INTERVAL = 1
SECOND_INTERVAL = 6
PASSING_QUALITY = 3
MIN_QUALITY = 0
MAX_QUALITY = 5


class Quality(IntEnum):
    """Response quality grades on the SM-2 0-5 scale"""
    BLACKOUT = 0
    INCORRECT = 1
    DIFFICULT = 2
    HESITANT = 3
    CORRECT = 4
    PERFECT = 5

    @property
    def description(self) -> str:
        return QUALITY_DESCRIPTIONS[self]

    @property
    def passed(self) -> bool:
        return self >= PASSING_QUALITY


QUALITY_DESCRIPTIONS = {
    Quality.BLACKOUT: "Forgotten completely, needs relearning",
    Quality.INCORRECT: "Remembered only a little",
    Quality.DIFFICULT: "Remembered, but with great difficulty",
    Quality.HESITANT: "Recalled with effort",
    Quality.CORRECT: "Recalled easily",
    Quality.PERFECT: "Recalled instantly",
}


class Priority(str, Enum):
    """Queue tier of a review item, derived from its review history"""
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    RELEARNING = "relearning"


# Lower rank surfaces first in the due queue
PRIORITY_RANK = {
    Priority.RELEARNING: 0,
    Priority.LEARNING: 1,
    Priority.REVIEW: 2,
    Priority.NEW: 3,
}


def validate_quality(quality) -> int:
    """Reject anything that is not an integer grade between 0 and 5"""
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidInput("quality", quality, f"Quality must be an integer 0-5, got {quality!r}")
    if quality < MIN_QUALITY or quality > MAX_QUALITY:
        raise InvalidInput("quality", quality, f"Quality must be between 0 and 5, got {quality}")
    return int(quality)


def derive_priority(repetitions: int, last_quality: Optional[int]) -> Priority:
    """
    Derive the queue priority of an item from its review history.

    An item that was never reviewed is new. With zero repetitions the last
    grade decides: a failed review means relearning, a passing one learning.
    Up to three consecutive successes is still learning; beyond that the item
    is in regular review.
    """
    if repetitions == 0:
        if last_quality is None:
            return Priority.NEW
        if last_quality < PASSING_QUALITY:
            return Priority.RELEARNING
        return Priority.LEARNING
    if repetitions <= 3:
        return Priority.LEARNING
    return Priority.REVIEW


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class SM2Algorithm:
    """
    SM-2 spaced repetition algorithm for calculating review intervals.
    Based on SuperMemo 2 algorithm by Piotr Wozniak.
    """

    @staticmethod
    def next_ease_factor(easiness_factor: float, quality: int) -> float:
        """Update easiness factor based on quality, never below the 1.3 floor"""
        new_ef = easiness_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
        return max(MINIMUM_EASE_FACTOR, new_ef)

    @staticmethod
    def calculate_next_review(
        easiness_factor: float,
        interval: int,
        repetitions: int,
        quality: int,
        reviewed_at: datetime
    ) -> Tuple[float, int, int, datetime]:
        """
        Calculate next review time and update SM-2 parameters.

        Args:
            easiness_factor: Current EF (difficulty), never below 1.3
            interval: Current interval in days
            repetitions: Number of consecutive successful reviews
            quality: Response quality (0-5). 0=total blackout, 5=perfect
            reviewed_at: Moment of the review, the base for the next due time

        Returns:
            (new_ef, new_interval, new_repetitions, next_review_at)

        Raises:
            InvalidInput: quality is not an integer between 0 and 5
        """
        quality = validate_quality(quality)
        new_ef = SM2Algorithm.next_ease_factor(easiness_factor, quality)

        # If quality < 3, reset repetitions (failed recall)
        if quality < PASSING_QUALITY:
            new_repetitions = 0
            new_interval = INITIAL_INTERVAL
        else:
            new_repetitions = repetitions + 1

            if new_repetitions == 1:
                new_interval = INITIAL_INTERVAL
            elif new_repetitions == 2:
                new_interval = SECOND_INTERVAL
            else:
                new_interval = max(INITIAL_INTERVAL, round_half_up(interval * new_ef))

        next_review_at = reviewed_at + timedelta(days=new_interval)

        return new_ef, new_interval, new_repetitions, next_review_at

    @staticmethod
    def initialize_item(reference_time: datetime) -> Tuple[float, int, int, datetime]:
        """
        Initialize SM-2 parameters for a newly encountered item.

        Returns:
            (initial_ef, initial_interval, initial_reps, next_review_at)
        """
        next_review_at = reference_time + timedelta(days=INITIAL_INTERVAL)
        return DEFAULT_EASE_FACTOR, INITIAL_INTERVAL, 0, next_review_at
