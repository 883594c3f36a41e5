"""
Scheduler Factory
Centralizes the logic for selecting the scheduler strategy for a session.
"""

import logging

from cadence.application.config import FsrsSettings
from cadence.application.scheduling.sm2 import Sm2Scheduler
from cadence.domain.clock import Clock
from cadence.domain.exceptions import InvalidArgumentError
from cadence.domain.scheduling import SchedulerKind, SchedulerStrategy
from cadence.infrastructure.adapters.fsrs_scheduler import FsrsScheduler

logger = logging.getLogger(__name__)


def create_scheduler(
    kind: SchedulerKind | str,
    settings: FsrsSettings | None = None,
    clock: Clock | None = None,
) -> SchedulerStrategy:
    """
    Returns the scheduler implementation for the given kind.

    Args:
        kind: "fsrs" or "sm2".
        settings: FSRS knobs; ignored for SM-2. Defaults apply when omitted.
        clock: Injected time source shared with the rest of the session.

    Raises:
        InvalidArgumentError: for any other kind.
    """
    try:
        kind = SchedulerKind(kind)
    except ValueError:
        raise InvalidArgumentError(f"Unknown scheduler: {kind!r}") from None

    if kind is SchedulerKind.SM2:
        logger.debug("Scheduler: SM-2")
        return Sm2Scheduler(clock)

    settings = settings or FsrsSettings()
    logger.debug(
        f"Scheduler: FSRS (fuzz={settings.enable_fuzzing}, "
        f"short_term={settings.enable_short_term})"
    )
    return FsrsScheduler(
        clock,
        enable_fuzzing=settings.enable_fuzzing,
        enable_short_term=settings.enable_short_term,
        desired_retention=settings.desired_retention,
        maximum_interval=settings.maximum_interval,
        learning_steps_minutes=settings.learning_steps_minutes,
        relearning_steps_minutes=settings.relearning_steps_minutes,
        parameters=settings.parameters,
    )
