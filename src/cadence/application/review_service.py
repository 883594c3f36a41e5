"""
Review Service — Application layer orchestrator.

Wires configuration, the queue builder, a scheduler and the session state
machine together the way a host starts a review.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from cadence.application.config import AppConfig
from cadence.application.factory import create_scheduler
from cadence.application.queue_builder import QueueBuildOptions, ReviewQueueBuilder
from cadence.application.review_session import ReviewSession
from cadence.application.utils.log import setup_logging
from cadence.domain.clock import Clock, utc_now
from cadence.domain.models import QueueSnapshot
from cadence.domain.ports import CardRepository, ReviewStatsRecorder
from cadence.domain.scheduling import SchedulerKind, SchedulerStrategy
from cadence.domain.session import SessionSummary

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Application service for starting and recording review sessions.

    Depends on the CardRepository port, not on a concrete storage engine.
    """

    def __init__(
        self,
        repository: CardRepository,
        config: AppConfig | None = None,
        clock: Clock | None = None,
    ):
        """
        Args:
            repository: The storage collaborator (port).
            config: Resolved configuration; defaults are used if not provided.
            clock: Time source shared by the builder, scheduler and session.
        """
        self._repo = repository
        self._config = config or AppConfig()
        setup_logging(self._config.log_level)
        self._clock = clock or utc_now
        self._builder = ReviewQueueBuilder(repository, self._clock)

    @property
    def config(self) -> AppConfig:
        return self._config

    def build_queue(
        self, decks: Iterable[str] | None = None, now: datetime | None = None
    ) -> QueueSnapshot:
        """
        Build a snapshot using the configured limits.

        When `decks` is None, the configured deck filter applies (empty = all decks).
        """
        if decks is None and self._config.deck_filter:
            decks = self._config.deck_filter

        return self._builder.build(
            QueueBuildOptions(
                decks=decks,
                limit_due=self._config.limit_due,
                limit_new=self._config.limit_new,
                include_learning=self._config.include_learning,
                exclude_empty_answers=self._config.exclude_empty_answers,
                now=now,
            )
        )

    def create_scheduler(self, kind: SchedulerKind | str | None = None) -> SchedulerStrategy:
        return create_scheduler(kind or self._config.scheduler, self._config.fsrs, self._clock)

    def start_session(
        self,
        decks: Iterable[str] | None = None,
        scheduler: SchedulerStrategy | None = None,
        now: datetime | None = None,
    ) -> ReviewSession:
        """
        Build a fresh queue and open a session over it.

        The returned session may already be complete if nothing is due or new.
        """
        snapshot = self.build_queue(decks, now)
        return ReviewSession(
            repository=self._repo,
            scheduler=scheduler or self.create_scheduler(),
            snapshot=snapshot,
            clock=self._clock,
            now=now,
        )

    async def record_session(self, summary: SessionSummary) -> None:
        """
        Typical on-complete callback: fold the summary into review statistics.

        The core never calls this itself; the host does once it sees the
        session is complete.
        """
        if isinstance(self._repo, ReviewStatsRecorder):
            self._repo.record_review_session(summary)
            await self._repo.save()
            logger.info(
                f"Recorded session: {summary.total_reviewed} reviewed "
                f"({summary.reviewed_due} due, {summary.reviewed_new} new)"
            )
        else:
            logger.warning("Repository does not record review statistics; summary dropped")
