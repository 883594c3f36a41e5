"""
Domain models for study items and their scheduling state.

These are pure data structures with no I/O or external dependencies.
All values are immutable; updates produce new instances via dataclasses.replace.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any

from .clock import ensure_utc
from .exceptions import InvalidRatingError


class CardState(IntEnum):
    """Learning phase of an item."""

    NEW = 0
    LEARNING = 1
    REVIEW = 2
    RELEARNING = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Grade(IntEnum):
    """Recall quality reported by the learner (1=Again, 2=Hard, 3=Good, 4=Easy)."""

    AGAIN = 1
    HARD = 2
    GOOD = 3
    EASY = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: Any) -> "Grade":
        """
        Coerce a raw value into a Grade.

        Raises:
            InvalidRatingError: if the value is not one of the four grades.
        """
        if isinstance(value, cls):
            return value
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidRatingError(value)
        try:
            return cls(value)
        except ValueError:
            raise InvalidRatingError(value) from None


@dataclass(frozen=True)
class MemoryState:
    """
    Scheduling state of a single item.

    Attributes:
        state: Current learning phase.
        due: When the item is next due. Always set.
        stability: Algorithm-specific memory strength (None until first review).
        difficulty: Algorithm-specific difficulty; the ease factor for SM-2.
        scheduled_days: Interval assigned at the last review, in days.
        reps: Review count (reset to 0 by SM-2 on Again).
        lapses: Number of times the item was forgotten.
        last_review: When the item was last graded.
        step: Short-term learning step, used only by the FSRS adapter.
    """

    state: CardState
    due: datetime
    stability: float | None = None
    difficulty: float | None = None
    scheduled_days: float = 0.0
    reps: int = 0
    lapses: int = 0
    last_review: datetime | None = None
    step: int | None = None

    @classmethod
    def new(cls, now: datetime) -> "MemoryState":
        """Empty state for an item that has never been reviewed."""
        return cls(state=CardState.NEW, due=ensure_utc(now))


@dataclass(frozen=True)
class LearningItem:
    """
    A study item (flashcard) as handed out by the storage collaborator.

    The scheduling core never holds on to these; it receives whole values
    and returns new ones.
    """

    id: str
    front: str
    back: str
    deck: str
    memory: MemoryState
    created: datetime
    updated: datetime
    tags: frozenset[str] = field(default_factory=frozenset)
    needs_filling: bool = False  # True when the back is empty
    source: str | None = None  # e.g. "notes/biology.md:L12"

    @classmethod
    def create(
        cls,
        item_id: str,
        front: str,
        back: str,
        now: datetime,
        deck: str = "Default",
        tags: Iterable[str] = (),
        source: str | None = None,
    ) -> "LearningItem":
        """Build a brand-new item with an empty memory state."""
        now = ensure_utc(now)
        trimmed_back = back.strip()
        return cls(
            id=item_id,
            front=front.strip(),
            back=trimmed_back,
            deck=deck,
            memory=MemoryState.new(now),
            created=now,
            updated=now,
            tags=frozenset(tags),
            needs_filling=trimmed_back == "",
            source=source,
        )


@dataclass(frozen=True)
class RatingPreviewOption:
    """What would happen if the learner picked this grade."""

    grade: Grade
    label: str
    next_review: datetime
    interval_days: float  # May be fractional for short intervals


# Preview keyed by grade; always holds all four grades.
SchedulerPreview = dict[Grade, RatingPreviewOption]


@dataclass(frozen=True)
class ReviewOutcome:
    """Result of applying one grade to one item."""

    updated_item: LearningItem
    grade: Grade
    next_review: datetime
    interval_days: float
    log: Any = None  # Raw scheduler log for downstream analytics


@dataclass(frozen=True)
class QueueSnapshot:
    """
    Point-in-time selection of due and new items ready for review.

    Created fresh per query and never mutated.
    """

    due: tuple[LearningItem, ...]
    new: tuple[LearningItem, ...]
    remaining_due: int
    remaining_new: int
    total_due: int
    total_new: int
    generated_at: datetime

    @property
    def is_empty(self) -> bool:
        return not self.due and not self.new
