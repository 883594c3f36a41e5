"""
Classical SM-2 style interval scheduler.

This is a pure computation module with no I/O. Its state is stored in the
same MemoryState fields the FSRS adapter uses, with `difficulty` holding the
ease factor, so persistence stays uniform across schedulers.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from cadence.domain.constants import (
    SM2_AGAIN_EASE_PENALTY,
    SM2_AGAIN_INTERVAL_DAYS,
    SM2_DEFAULT_EASE,
    SM2_EASY_BONUS,
    SM2_EASY_EASE_BONUS,
    SM2_FIRST_INTERVAL_DAYS,
    SM2_HARD_EASE_PENALTY,
    SM2_HARD_INTERVAL_FACTOR,
    SM2_MIN_EASE,
    SM2_SECOND_INTERVAL_DAYS,
)
from cadence.domain.models import CardState, Grade, LearningItem, MemoryState, ReviewOutcome
from cadence.domain.scheduling import SchedulerKind, SchedulerStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sm2Step:
    """Numbers produced by one SM-2 step."""

    interval_days: float
    due: datetime
    ease: float
    reps: int
    lapses: int
    state: CardState


def compute_step(memory: MemoryState, grade: Grade, now: datetime) -> Sm2Step:
    """
    Apply the SM-2 table to a memory state.

    Missing fields fall back to defaults: interval 1 day, reps/lapses 0,
    ease 2.5.
    """
    prev_interval = max(memory.scheduled_days or 0.0, 1.0)
    prev_reps = memory.reps or 0
    prev_lapses = memory.lapses or 0
    ease = memory.difficulty or SM2_DEFAULT_EASE

    if grade is Grade.AGAIN:
        return _step(
            now,
            interval=SM2_AGAIN_INTERVAL_DAYS,
            ease=max(SM2_MIN_EASE, ease - SM2_AGAIN_EASE_PENALTY),
            reps=0,
            lapses=prev_lapses + 1,
            state=CardState.RELEARNING,
        )

    if grade is Grade.HARD:
        return _step(
            now,
            interval=max(1.0, prev_interval * SM2_HARD_INTERVAL_FACTOR),
            ease=max(SM2_MIN_EASE, ease - SM2_HARD_EASE_PENALTY),
            reps=prev_reps + 1,
            lapses=prev_lapses,
            state=CardState.RELEARNING,
        )

    if grade is Grade.GOOD:
        return _step(
            now,
            interval=_graduating_interval(prev_reps, prev_interval * ease),
            ease=ease,
            reps=prev_reps + 1,
            lapses=prev_lapses,
            state=CardState.REVIEW,
        )

    # Easy: the growth factor uses the ease *before* the bonus is added.
    return _step(
        now,
        interval=_graduating_interval(prev_reps, prev_interval * ease * SM2_EASY_BONUS),
        ease=ease + SM2_EASY_EASE_BONUS,
        reps=prev_reps + 1,
        lapses=prev_lapses,
        state=CardState.REVIEW,
    )


def _graduating_interval(prev_reps: int, grown: float) -> float:
    if prev_reps == 0:
        return SM2_FIRST_INTERVAL_DAYS
    if prev_reps == 1:
        return SM2_SECOND_INTERVAL_DAYS
    return max(1.0, grown)


def _step(
    now: datetime,
    interval: float,
    ease: float,
    reps: int,
    lapses: int,
    state: CardState,
) -> Sm2Step:
    return Sm2Step(
        interval_days=interval,
        due=now + timedelta(days=interval),
        ease=ease,
        reps=reps,
        lapses=lapses,
        state=state,
    )


class Sm2Scheduler(SchedulerStrategy):
    """
    Lightweight SM-2 scheduler.

    Deterministic: the only time source is the injected clock or the
    explicit `now` argument.
    """

    kind = SchedulerKind.SM2

    def apply_rating(
        self, item: LearningItem, grade: Grade | int, now: datetime | None = None
    ) -> ReviewOutcome:
        grade = Grade.parse(grade)
        current = self.now(now)
        step = compute_step(item.memory, grade, current)

        previous_stability = item.memory.stability
        memory = replace(
            item.memory,
            state=step.state,
            due=step.due,
            scheduled_days=step.interval_days,
            last_review=current,
            difficulty=step.ease,
            stability=max(
                step.interval_days,
                previous_stability if previous_stability is not None else step.interval_days,
            ),
            reps=step.reps,
            lapses=step.lapses,
            step=None,
        )

        logger.debug(
            f"SM-2 {item.id}: {grade.label} -> {step.interval_days:.4f}d "
            f"(ease {step.ease:.2f}, reps {step.reps})"
        )

        return ReviewOutcome(
            updated_item=replace(item, memory=memory, updated=current),
            grade=grade,
            next_review=step.due,
            interval_days=step.interval_days,
            log={
                "scheduler": SchedulerKind.SM2.value,
                "grade": int(grade),
                "interval_days": step.interval_days,
            },
        )
