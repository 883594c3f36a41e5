"""
Scheduler strategy contract.

Two implementations exist, selected once per session via SchedulerKind:
    - FsrsScheduler: adapter over the external `fsrs` forgetting-curve library.
    - Sm2Scheduler: self-contained classical SM-2 interval algorithm.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum

from .clock import Clock, ensure_utc, utc_now
from .models import Grade, LearningItem, RatingPreviewOption, ReviewOutcome, SchedulerPreview


class SchedulerKind(str, Enum):
    FSRS = "fsrs"
    SM2 = "sm2"


class SchedulerStrategy(ABC):
    """
    Pure functions of (item, grade, time).

    Neither method mutates the item it is given.
    """

    kind: SchedulerKind

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or utc_now

    def now(self, override: datetime | None = None) -> datetime:
        """Resolve the evaluation time: explicit override first, then the clock."""
        return ensure_utc(override if override is not None else self._clock())

    def get_preview(self, item: LearningItem, now: datetime | None = None) -> SchedulerPreview:
        """
        Compute the outcome of every grade without applying any of them.

        Returns:
            Mapping with an entry for each of the four grades.
        """
        current = self.now(now)
        preview: SchedulerPreview = {}
        for grade in Grade:
            outcome = self.apply_rating(item, grade, current)
            preview[grade] = RatingPreviewOption(
                grade=grade,
                label=grade.label,
                next_review=outcome.next_review,
                interval_days=outcome.interval_days,
            )
        return preview

    @abstractmethod
    def apply_rating(
        self, item: LearningItem, grade: Grade | int, now: datetime | None = None
    ) -> ReviewOutcome:
        """
        Compute one grade's outcome.

        Returns:
            ReviewOutcome whose updated_item carries a brand-new MemoryState.

        Raises:
            InvalidRatingError: if grade is not Again/Hard/Good/Easy.
        """
        pass
