"""
Value types describing a review session.

Only the session's effects (updated items) are ever persisted; these types
live in memory for as long as the host keeps the session object.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .models import Grade, LearningItem, ReviewOutcome


class SessionStatus(str, Enum):
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


class Origin(str, Enum):
    """Which part of the queue snapshot an entry came from."""

    DUE = "due"
    NEW = "new"


@dataclass(frozen=True)
class SessionCard:
    item: LearningItem
    origin: Origin


@dataclass(frozen=True)
class CompletedCard:
    item_id: str
    origin: Origin
    grade: Grade
    outcome: ReviewOutcome
    completed_at: datetime


@dataclass(frozen=True)
class ProgressState:
    current_index: int
    total_cards: int
    completed: int
    showing_answer: bool


@dataclass(frozen=True)
class SessionSummary:
    """
    Aggregate of a session's completed log as of the moment it was taken.

    Invariant: total_reviewed == reviewed_due + reviewed_new.
    """

    total_reviewed: int
    reviewed_due: int
    reviewed_new: int
    started_at: datetime | None
    finished_at: datetime | None


@dataclass(frozen=True)
class RateResult:
    outcome: ReviewOutcome
    remaining: int
    completed: int
    next_card: LearningItem | None
