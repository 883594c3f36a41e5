"""
Queue builder for review sessions.

Builds an immutable snapshot of what to study by:
1. Filtering the collection (empty answers, deck selection, learning items)
2. Partitioning survivors into due and new items
3. Sorting each partition deterministically
4. Applying per-partition limits
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime

from cadence.domain.clock import Clock, ensure_utc, utc_now
from cadence.domain.constants import DEFAULT_LIMIT_DUE, DEFAULT_LIMIT_NEW, QUEUE_LIMIT_ERROR
from cadence.domain.exceptions import InvalidArgumentError
from cadence.domain.models import CardState, LearningItem, QueueSnapshot
from cadence.domain.ports import CardRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueueBuildOptions:
    """
    Options for a single queue build.

    All fields are optional; defaults match a typical daily review.
    """

    decks: Iterable[str] | None = None  # Case-insensitive deck names; None = all decks
    limit_due: int = DEFAULT_LIMIT_DUE
    limit_new: int = DEFAULT_LIMIT_NEW
    include_learning: bool = True
    now: datetime | None = None
    exclude_empty_answers: bool = True


class ReviewQueueBuilder:
    """
    Builds review queues from the items in a CardRepository.

    Performs no writes; safe to call repeatedly.
    """

    def __init__(self, repository: CardRepository, clock: Clock | None = None):
        self._repo = repository
        self._clock = clock or utc_now

    def build(self, options: QueueBuildOptions | None = None, **overrides) -> QueueSnapshot:
        """
        Build a queue snapshot.

        Args:
            options: Build options; defaults are used when omitted.
            **overrides: Individual QueueBuildOptions fields, applied on top.

        Returns:
            A fresh QueueSnapshot.

        Raises:
            InvalidArgumentError: if limit_due or limit_new is negative.
        """
        opts = options or QueueBuildOptions()
        if overrides:
            opts = replace(opts, **overrides)

        # Limits are checked before storage is read
        if opts.limit_due < 0 or opts.limit_new < 0:
            raise InvalidArgumentError(QUEUE_LIMIT_ERROR)

        current = ensure_utc(opts.now if opts.now is not None else self._clock())

        cards = filter_cards(
            self._repo.get_all_cards(),
            decks=opts.decks,
            include_learning=opts.include_learning,
            exclude_empty_answers=opts.exclude_empty_answers,
        )

        due_cards = sort_due([c for c in cards if is_due(c, current)])
        new_cards = sort_new([c for c in cards if is_new(c)])

        due_selection = due_cards[: opts.limit_due]
        new_selection = new_cards[: opts.limit_new]

        snapshot = QueueSnapshot(
            due=tuple(due_selection),
            new=tuple(new_selection),
            remaining_due=max(0, len(due_cards) - len(due_selection)),
            remaining_new=max(0, len(new_cards) - len(new_selection)),
            total_due=len(due_cards),
            total_new=len(new_cards),
            generated_at=current,
        )

        logger.info(
            f"Built review queue: {len(due_selection)}/{len(due_cards)} due, "
            f"{len(new_selection)}/{len(new_cards)} new"
        )
        return snapshot


def filter_cards(
    cards: Iterable[LearningItem],
    decks: Iterable[str] | None = None,
    include_learning: bool = True,
    exclude_empty_answers: bool = True,
) -> list[LearningItem]:
    """Drop items that should never enter a queue under these options."""
    if isinstance(decks, str):
        decks = [decks]
    deck_set = {d.lower() for d in decks} if decks is not None else None

    kept: list[LearningItem] = []
    for card in cards:
        if exclude_empty_answers and card.needs_filling:
            continue
        if deck_set is not None and card.deck.lower() not in deck_set:
            continue
        if not include_learning and card.memory.state == CardState.LEARNING:
            continue
        kept.append(card)
    return kept


def is_new(card: LearningItem) -> bool:
    return card.memory.state == CardState.NEW


def is_due(card: LearningItem, now: datetime) -> bool:
    """A non-new item whose due time has passed (inclusive)."""
    if card.memory.due is None:
        return False  # Malformed item; never queue it
    if is_new(card):
        return False
    return ensure_utc(card.memory.due) <= now


def sort_due(cards: list[LearningItem]) -> list[LearningItem]:
    """Most overdue first; ties broken by least recently updated."""
    return sorted(cards, key=lambda c: (ensure_utc(c.memory.due), ensure_utc(c.updated)))


def sort_new(cards: list[LearningItem]) -> list[LearningItem]:
    """Oldest first, so items waiting longest are introduced first."""
    return sorted(cards, key=lambda c: ensure_utc(c.created))
