"""
Typed errors raised by the review scheduler and its callers.

The scheduler core only ever raises ``InvalidInput``; ``ItemNotFound`` comes
from the service layer when a repository lookup misses.
"""

from typing import Any


class SchedulerError(Exception):
    """Base class for all scheduler errors."""


class InvalidInput(SchedulerError, ValueError):
    """A caller supplied a value outside the accepted range."""

    def __init__(self, field: str, value: Any, message: str = None) -> None:
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid {field}: {value!r}")


class ItemNotFound(SchedulerError, LookupError):
    """No review item exists with the given id."""

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"Review item {item_id} not found")
