"""
Review session state machine.

Drives a single pass over a queue snapshot: traversal, answer visibility,
grading, persistence and progress bookkeeping.

States:
    in-progress -> complete (terminal)

Construction resolves straight to one of the two; an empty snapshot yields a
session that is already complete.

Durability: a rated item's new memory state is written and saved through the
repository *before* the session's own queue is touched. If the write fails,
the step is aborted and the session is left exactly as it was.

Not reentrant: callers must await each rate_card() before issuing another.
"""

import logging
from datetime import datetime

from cadence.domain.clock import Clock, ensure_utc, utc_now
from cadence.domain.models import Grade, QueueSnapshot, SchedulerPreview
from cadence.domain.ports import CardRepository
from cadence.domain.scheduling import SchedulerStrategy
from cadence.domain.session import (
    CompletedCard,
    Origin,
    ProgressState,
    RateResult,
    SessionCard,
    SessionStatus,
    SessionSummary,
)

logger = logging.getLogger(__name__)


class ReviewSession:
    """
    One bounded interactive pass over a queue snapshot.

    Defensive calls (toggling or rating after completion) are no-ops rather
    than errors, so host UIs can call speculatively.
    """

    def __init__(
        self,
        repository: CardRepository,
        scheduler: SchedulerStrategy,
        snapshot: QueueSnapshot,
        clock: Clock | None = None,
        now: datetime | None = None,
    ):
        self._repo = repository
        self._scheduler = scheduler
        self._snapshot = snapshot
        self._clock = clock or utc_now

        self._queue: list[SessionCard] = [
            *(SessionCard(item=item, origin=Origin.DUE) for item in snapshot.due),
            *(SessionCard(item=item, origin=Origin.NEW) for item in snapshot.new),
        ]
        self._index = 0
        self._showing_answer = False
        self._completed: list[CompletedCard] = []

        now = ensure_utc(now if now is not None else self._clock())
        if self._queue:
            self._status = SessionStatus.IN_PROGRESS
            self._started_at: datetime | None = now
            self._finished_at: datetime | None = None
            logger.info(
                f"Review session started with {len(self._queue)} cards "
                f"({len(snapshot.due)} due, {len(snapshot.new)} new) "
                f"using {scheduler.kind.value}"
            )
        else:
            self._status = SessionStatus.COMPLETE
            self._started_at = None
            self._finished_at = now
            logger.info("Review session created from an empty queue; nothing to review")

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def queue_snapshot(self) -> QueueSnapshot:
        return self._snapshot

    @property
    def scheduler(self) -> SchedulerStrategy:
        return self._scheduler

    def is_complete(self) -> bool:
        return self._status is SessionStatus.COMPLETE

    def get_current_card(self) -> SessionCard | None:
        if self.is_complete() or not self._queue:
            return None
        return self._queue[self._index]

    def get_current_preview(self, now: datetime | None = None) -> SchedulerPreview | None:
        """Scheduler preview for the current card, or None when there is none."""
        current = self.get_current_card()
        if current is None:
            return None
        return self._scheduler.get_preview(current.item, now)

    def get_progress(self) -> ProgressState:
        return ProgressState(
            current_index=min(self._index, max(len(self._queue) - 1, 0)),
            total_cards=len(self._queue) + len(self._completed),
            completed=len(self._completed),
            showing_answer=self._showing_answer,
        )

    def toggle_answer(self) -> None:
        if self.is_complete():
            return
        self._showing_answer = not self._showing_answer

    async def rate_card(self, grade: Grade | int, now: datetime | None = None) -> RateResult | None:
        """
        Grade the current card, persist it, and advance.

        Returns:
            RateResult, or None when the session is complete or empty.

        Raises:
            InvalidRatingError: if the grade is unsupported. Nothing changes.
            Exception: whatever the repository raises while persisting.
                Nothing in the session changes.
        """
        current = self.get_current_card()
        if current is None:
            return None

        timestamp = ensure_utc(now if now is not None else self._clock())
        outcome = self._scheduler.apply_rating(current.item, grade, timestamp)

        try:
            self._repo.update_card(current.item.id, memory=outcome.updated_item.memory)
            await self._repo.save()
        except Exception as e:
            logger.error(f"Failed to persist rating for {current.item.id}: {e}")
            raise

        self._completed.append(
            CompletedCard(
                item_id=current.item.id,
                origin=current.origin,
                grade=outcome.grade,
                outcome=outcome,
                completed_at=timestamp,
            )
        )
        del self._queue[self._index]

        if not self._queue:
            self._status = SessionStatus.COMPLETE
            self._finished_at = timestamp
            logger.info(f"Review session complete: {len(self._completed)} cards reviewed")
        else:
            self._index = min(self._index, len(self._queue) - 1)

        self._showing_answer = False

        next_card = self.get_current_card()
        return RateResult(
            outcome=outcome,
            remaining=len(self._queue),
            completed=len(self._completed),
            next_card=next_card.item if next_card else None,
        )

    def get_summary(self) -> SessionSummary:
        reviewed_due = sum(1 for c in self._completed if c.origin is Origin.DUE)
        reviewed_new = sum(1 for c in self._completed if c.origin is Origin.NEW)
        return SessionSummary(
            total_reviewed=len(self._completed),
            reviewed_due=reviewed_due,
            reviewed_new=reviewed_new,
            started_at=self._started_at,
            finished_at=self._finished_at,
        )

    def get_completed(self) -> list[CompletedCard]:
        return list(self._completed)
