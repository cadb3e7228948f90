"""ReviewItemRepository protocol: the storage contract the service relies on."""

from typing import Iterable, List, Optional, Protocol, runtime_checkable

from murajaah.schemas import ReviewItem, ReviewLogEntry


@runtime_checkable
class ReviewItemRepository(Protocol):
    """Repository interface for review item and review log access."""

    def get(self, item_id: str) -> Optional[ReviewItem]:
        """Look up an item by id.

        Returns:
            The item, or None if not found.
        """
        ...

    def save(self, item: ReviewItem) -> ReviewItem:
        """Insert or overwrite an item, keyed by its id."""
        ...

    def save_review(self, item: ReviewItem, entry: ReviewLogEntry) -> ReviewItem:
        """Store a reviewed item together with its log entry.

        Both writes succeed or neither does.
        """
        ...

    def list_by_subjects(self, subject_ids: Iterable[str], user_id: Optional[str] = None) -> List[ReviewItem]:
        """Get all items for the given subjects, optionally for one user.

        Returns:
            List of items (may be empty).
        """
        ...

    def list_all(self, user_id: Optional[str] = None) -> List[ReviewItem]:
        """Get every item, optionally restricted to one user."""
        ...

    def add_review_log(self, entry: ReviewLogEntry) -> None:
        """Append a review to the log."""
        ...

    def list_review_logs(self, item_id: Optional[str] = None, limit: Optional[int] = None) -> List[ReviewLogEntry]:
        """Get logged reviews, most recent first."""
        ...
