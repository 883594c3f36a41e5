"""Tests for scheduler selection."""

import pytest

from cadence.application.config import FsrsSettings
from cadence.application.factory import create_scheduler
from cadence.application.scheduling.sm2 import Sm2Scheduler
from cadence.domain.exceptions import InvalidArgumentError
from cadence.domain.models import Grade
from cadence.domain.scheduling import SchedulerKind
from cadence.infrastructure.adapters.fsrs_scheduler import FsrsScheduler
from conftest import FIXED_NOW, make_item


class TestCreateScheduler:
    @pytest.mark.parametrize("kind", ["sm2", SchedulerKind.SM2])
    def test_sm2(self, kind):
        assert isinstance(create_scheduler(kind), Sm2Scheduler)

    @pytest.mark.parametrize("kind", ["fsrs", SchedulerKind.FSRS])
    def test_fsrs(self, kind):
        assert isinstance(create_scheduler(kind), FsrsScheduler)

    def test_fsrs_settings_are_applied(self):
        settings = FsrsSettings(enable_fuzzing=False, enable_short_term=True, desired_retention=0.8)

        scheduler = create_scheduler("fsrs", settings)

        assert scheduler.enable_fuzzing is False
        assert scheduler.enable_short_term is True
        assert scheduler._fsrs.desired_retention == 0.8

    def test_clock_is_shared(self, clock):
        scheduler = create_scheduler("sm2", clock=clock)
        outcome = scheduler.apply_rating(make_item(), Grade.GOOD)
        assert outcome.updated_item.memory.last_review == FIXED_NOW

    @pytest.mark.parametrize("kind", ["leitner", "", "SM-2"])
    def test_unknown_kind_raises(self, kind):
        with pytest.raises(InvalidArgumentError, match="Unknown scheduler"):
            create_scheduler(kind)
