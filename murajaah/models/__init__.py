from murajaah.models.review_item import ReviewItemRecord
from murajaah.models.review_log import ReviewLog

__all__ = [
    "ReviewItemRecord",
    "ReviewLog"
]
