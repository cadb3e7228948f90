from murajaah.repositories.base import ReviewItemRepository
from murajaah.repositories.memory import InMemoryReviewRepository
from murajaah.repositories.sqlalchemy_repository import SqlAlchemyReviewRepository

__all__ = [
    "ReviewItemRepository",
    "InMemoryReviewRepository",
    "SqlAlchemyReviewRepository"
]
