"""
FSRS Scheduler Adapter — Infrastructure adapter for the `fsrs` library.

Implements SchedulerStrategy by delegating interval, stability, difficulty
and state transitions to `fsrs.Scheduler`. The library is treated as a
verified black box; this module only maps shapes in and out.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timedelta

from fsrs import Card, Rating, Scheduler, State

from cadence.domain.clock import Clock, ensure_utc
from cadence.domain.constants import (
    FSRS_DESIRED_RETENTION,
    FSRS_LEARNING_STEPS_MINUTES,
    FSRS_MAXIMUM_INTERVAL,
    FSRS_RELEARNING_STEPS_MINUTES,
    SECONDS_PER_DAY,
)
from cadence.domain.models import CardState, Grade, LearningItem, MemoryState, ReviewOutcome
from cadence.domain.scheduling import SchedulerKind, SchedulerStrategy

logger = logging.getLogger(__name__)


class FsrsScheduler(SchedulerStrategy):
    """
    FSRS-backed scheduler.

    Fuzzing and short-term (sub-day learning step) scheduling are explicit
    constructor arguments rather than hidden library defaults:

    - enable_fuzzing: randomize long intervals slightly. Turn off in tests.
    - enable_short_term: when False, learning and relearning steps are empty
      and every grade schedules in whole days.
    """

    kind = SchedulerKind.FSRS

    def __init__(
        self,
        clock: Clock | None = None,
        *,
        enable_fuzzing: bool = True,
        enable_short_term: bool = False,
        desired_retention: float = FSRS_DESIRED_RETENTION,
        maximum_interval: int = FSRS_MAXIMUM_INTERVAL,
        learning_steps_minutes: Sequence[float] = FSRS_LEARNING_STEPS_MINUTES,
        relearning_steps_minutes: Sequence[float] = FSRS_RELEARNING_STEPS_MINUTES,
        parameters: Sequence[float] | None = None,
    ):
        super().__init__(clock)
        self.enable_fuzzing = enable_fuzzing
        self.enable_short_term = enable_short_term

        if enable_short_term:
            learning_steps = tuple(timedelta(minutes=m) for m in learning_steps_minutes)
            relearning_steps = tuple(timedelta(minutes=m) for m in relearning_steps_minutes)
        else:
            learning_steps = ()
            relearning_steps = ()

        kwargs = {
            "desired_retention": desired_retention,
            "learning_steps": learning_steps,
            "relearning_steps": relearning_steps,
            "maximum_interval": maximum_interval,
            "enable_fuzzing": enable_fuzzing,
        }
        if parameters is not None:
            kwargs["parameters"] = tuple(parameters)

        self._fsrs = Scheduler(**kwargs)

    def apply_rating(
        self, item: LearningItem, grade: Grade | int, now: datetime | None = None
    ) -> ReviewOutcome:
        grade = Grade.parse(grade)
        current = self.now(now)
        previous = item.memory

        card, review_log = self._fsrs.review_card(
            to_fsrs_card(previous), Rating(int(grade)), current
        )
        memory = from_fsrs_card(card, previous, grade, current)

        logger.debug(
            f"FSRS {item.id}: {grade.label} -> {memory.scheduled_days:.4f}d "
            f"({previous.state.label} -> {memory.state.label})"
        )

        return ReviewOutcome(
            updated_item=replace(item, memory=memory, updated=current),
            grade=grade,
            next_review=memory.due,
            interval_days=memory.scheduled_days,
            log=review_log,
        )


def to_fsrs_card(memory: MemoryState) -> Card:
    """
    Map a MemoryState onto a fresh `fsrs.Card`.

    New items, and items missing stability or difficulty (e.g. previously
    scheduled by SM-2 before any FSRS review), start as a first-time
    Learning card.
    """
    if (
        memory.state == CardState.NEW
        or memory.stability is None
        or memory.difficulty is None
    ):
        return Card(
            card_id=0,
            state=State.Learning,
            step=0,
            due=ensure_utc(memory.due),
        )

    state = State(int(memory.state))
    step = None if state == State.Review else (memory.step or 0)
    return Card(
        card_id=0,
        state=state,
        step=step,
        stability=memory.stability,
        difficulty=memory.difficulty,
        due=ensure_utc(memory.due),
        last_review=ensure_utc(memory.last_review) if memory.last_review else None,
    )


def from_fsrs_card(
    card: Card, previous: MemoryState, grade: Grade, now: datetime
) -> MemoryState:
    """Map a reviewed `fsrs.Card` back onto a new MemoryState."""
    due = ensure_utc(card.due)
    scheduled_days = max(0.0, (due - now).total_seconds() / SECONDS_PER_DAY)
    lapsed = previous.state == CardState.REVIEW and grade is Grade.AGAIN

    return MemoryState(
        state=CardState(int(card.state)),
        due=due,
        stability=card.stability,
        difficulty=card.difficulty,
        scheduled_days=scheduled_days,
        reps=previous.reps + 1,
        lapses=previous.lapses + (1 if lapsed else 0),
        last_review=now,
        step=card.step,
    )
