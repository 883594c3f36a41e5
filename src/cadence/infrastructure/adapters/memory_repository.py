"""
In-Memory Card Repository — Infrastructure adapter holding items in a dict.

Implements CardRepository and ReviewStatsRecorder. Hosts that own a real
storage engine wrap it behind the same ports; this adapter has no
serialization format of its own.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from cadence.domain.clock import Clock, ensure_utc, utc_now
from cadence.domain.models import LearningItem
from cadence.domain.ports import CardRepository, ReviewStatistics, ReviewStatsRecorder
from cadence.domain.session import SessionSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageStatistics:
    total_cards: int
    total_decks: int
    cards_needing_filling: int


class InMemoryCardRepository(CardRepository, ReviewStatsRecorder):
    """
    Dict-backed item store.

    `save()` only records that a flush happened; subclasses or wrappers
    that need durability override it.
    """

    def __init__(self, cards: Iterable[LearningItem] = (), clock: Clock | None = None):
        self._clock = clock or utc_now
        self._cards: dict[str, LearningItem] = {}
        self._review_stats = ReviewStatistics()
        self.save_count = 0
        self.last_saved: datetime | None = None
        self.add_cards(cards)

    # ---------- CardRepository ----------

    def get_card(self, item_id: str) -> LearningItem | None:
        return self._cards.get(item_id)

    def get_all_cards(self) -> list[LearningItem]:
        return list(self._cards.values())

    def update_card(self, item_id: str, **fields: Any) -> None:
        card = self._cards.get(item_id)
        if card is None:
            logger.warning(f"Ignoring update for unknown card {item_id}")
            return
        fields.pop("id", None)  # IDs are immutable keys
        fields.pop("updated", None)  # Always advanced by the repository
        self._cards[item_id] = replace(card, **fields, updated=ensure_utc(self._clock()))

    async def save(self) -> None:
        self.save_count += 1
        self.last_saved = self._clock()
        logger.debug(f"Saved {len(self._cards)} cards")

    # ---------- Collection management ----------

    def add_card(self, card: LearningItem) -> None:
        self._cards[card.id] = card

    def add_cards(self, cards: Iterable[LearningItem]) -> None:
        for card in cards:
            self._cards[card.id] = card

    def delete_card(self, item_id: str) -> None:
        self._cards.pop(item_id, None)

    def get_cards_by_deck(self, deck: str) -> list[LearningItem]:
        return [c for c in self._cards.values() if c.deck == deck]

    def get_cards_by_tag(self, tag: str) -> list[LearningItem]:
        return [c for c in self._cards.values() if tag in c.tags]

    def get_cards_needing_filling(self) -> list[LearningItem]:
        return [c for c in self._cards.values() if c.needs_filling]

    def get_deck_names(self) -> list[str]:
        # Insertion order, without duplicates
        return list(dict.fromkeys(c.deck for c in self._cards.values()))

    def get_statistics(self) -> StorageStatistics:
        return StorageStatistics(
            total_cards=len(self._cards),
            total_decks=len(self.get_deck_names()),
            cards_needing_filling=len(self.get_cards_needing_filling()),
        )

    # ---------- ReviewStatsRecorder ----------

    def record_review_session(self, summary: SessionSummary) -> None:
        """
        Fold a finished session into the running totals.

        "Cards reviewed today" restarts whenever the session's UTC date differs
        from the previously recorded review date.
        """
        timestamp = summary.finished_at or summary.started_at or self._clock()
        stats = self._review_stats

        reviewed_today = stats.cards_reviewed_today
        if not _same_utc_day(timestamp, stats.last_review_date):
            reviewed_today = 0

        self._review_stats = ReviewStatistics(
            total_sessions=stats.total_sessions + 1,
            total_reviews=stats.total_reviews + summary.total_reviewed,
            total_due_reviewed=stats.total_due_reviewed + summary.reviewed_due,
            total_new_reviewed=stats.total_new_reviewed + summary.reviewed_new,
            cards_reviewed_today=reviewed_today + summary.total_reviewed,
            last_review_date=timestamp,
        )

    def get_review_statistics(self) -> ReviewStatistics:
        return self._review_stats


def _same_utc_day(first: datetime | None, second: datetime | None) -> bool:
    if first is None or second is None:
        return False
    return ensure_utc(first).date() == ensure_utc(second).date()
