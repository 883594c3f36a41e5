# Domain Package
from .exceptions import CadenceError, InvalidArgumentError, InvalidRatingError
from .models import (
    CardState,
    Grade,
    LearningItem,
    MemoryState,
    QueueSnapshot,
    RatingPreviewOption,
    ReviewOutcome,
    SchedulerPreview,
)
from .ports import CardRepository, ReviewStatistics, ReviewStatsRecorder
from .scheduling import SchedulerKind, SchedulerStrategy

__all__ = [
    "CadenceError",
    "InvalidArgumentError",
    "InvalidRatingError",
    "CardState",
    "Grade",
    "LearningItem",
    "MemoryState",
    "QueueSnapshot",
    "RatingPreviewOption",
    "ReviewOutcome",
    "SchedulerPreview",
    "CardRepository",
    "ReviewStatistics",
    "ReviewStatsRecorder",
    "SchedulerKind",
    "SchedulerStrategy",
]
