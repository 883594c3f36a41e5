"""
Ports (interfaces) for the storage collaborator.

These define the contract that infrastructure adapters must implement.
The scheduling core depends on these abstractions, never on a concrete
storage engine or its serialization format.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .models import LearningItem
from .session import SessionSummary


@dataclass(frozen=True)
class ReviewStatistics:
    """Running totals across all recorded review sessions."""

    total_sessions: int = 0
    total_reviews: int = 0
    total_due_reviewed: int = 0
    total_new_reviewed: int = 0
    cards_reviewed_today: int = 0  # Resets when the UTC day changes
    last_review_date: datetime | None = None


class CardRepository(ABC):
    """
    Port for reading and updating the item collection.

    Implementations:
        - InMemoryCardRepository: Dict-backed store used by hosts and tests.
    """

    @abstractmethod
    def get_card(self, item_id: str) -> LearningItem | None:
        """Return the item with the given ID, or None if it does not exist."""
        pass

    @abstractmethod
    def get_all_cards(self) -> list[LearningItem]:
        """Return every item in the collection."""
        pass

    @abstractmethod
    def update_card(self, item_id: str, **fields: Any) -> None:
        """
        Merge the given fields into the stored item.

        Implementations advance the item's `updated` timestamp. Unknown IDs
        are ignored.
        """
        pass

    @abstractmethod
    async def save(self) -> None:
        """
        Durably flush pending changes.

        This is the only call in the core that may suspend.
        """
        pass


class ReviewStatsRecorder(ABC):
    """Port for aggregate review statistics kept by the host."""

    @abstractmethod
    def record_review_session(self, summary: SessionSummary) -> None:
        pass

    @abstractmethod
    def get_review_statistics(self) -> ReviewStatistics:
        pass
