"""Dict-backed ReviewItemRepository for tests and short-lived sessions."""

from typing import Dict, Iterable, List, Optional

from murajaah.schemas import ReviewItem, ReviewLogEntry


class InMemoryReviewRepository:
    """Concrete ReviewItemRepository keeping everything in process memory.

    Items are copied on the way in and out so callers never share state with
    the store.
    """

    def __init__(self, items: Iterable[ReviewItem] = ()) -> None:
        self._items: Dict[str, ReviewItem] = {}
        self._logs: List[ReviewLogEntry] = []
        for item in items:
            self.save(item)

    def get(self, item_id: str) -> Optional[ReviewItem]:
        item = self._items.get(item_id)
        return item.model_copy() if item is not None else None

    def save(self, item: ReviewItem) -> ReviewItem:
        self._items[item.id] = item.model_copy()
        return item.model_copy()

    def save_review(self, item: ReviewItem, entry: ReviewLogEntry) -> ReviewItem:
        # the item only changes once the log append went through
        self.add_review_log(entry)
        return self.save(item)

    def list_by_subjects(self, subject_ids: Iterable[str], user_id: Optional[str] = None) -> List[ReviewItem]:
        wanted = set(subject_ids)
        return [
            item for item in self.list_all(user_id)
            if item.subject_id in wanted
        ]

    def list_all(self, user_id: Optional[str] = None) -> List[ReviewItem]:
        return [
            item.model_copy() for item in self._items.values()
            if user_id is None or item.user_id == user_id
        ]

    def add_review_log(self, entry: ReviewLogEntry) -> None:
        self._logs.append(entry.model_copy())

    def list_review_logs(self, item_id: Optional[str] = None, limit: Optional[int] = None) -> List[ReviewLogEntry]:
        logs = [
            entry.model_copy() for entry in self._logs
            if item_id is None or entry.item_id == item_id
        ]
        logs.sort(key=lambda entry: entry.reviewed_at, reverse=True)
        return logs[:limit] if limit is not None else logs
