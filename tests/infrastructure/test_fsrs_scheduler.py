"""Tests for the FSRS adapter. Fuzzing is off so results are deterministic."""

from datetime import datetime, timedelta

import pytest
from fsrs import Rating, State

from cadence.domain.exceptions import InvalidRatingError
from cadence.domain.models import CardState, Grade
from cadence.domain.scheduling import SchedulerKind
from cadence.infrastructure.adapters.fsrs_scheduler import (
    FsrsScheduler,
    from_fsrs_card,
    to_fsrs_card,
)
from conftest import FIXED_NOW, make_item


@pytest.fixture
def scheduler():
    return FsrsScheduler(clock=lambda: FIXED_NOW, enable_fuzzing=False)


@pytest.fixture
def review_item():
    return make_item(
        state=CardState.REVIEW,
        due=FIXED_NOW,
        stability=10.0,
        difficulty=5.0,
        scheduled_days=10.0,
        reps=4,
        lapses=1,
        last_review=FIXED_NOW - timedelta(days=10),
    )


class TestConfiguration:
    def test_fuzz_and_short_term_are_explicit(self):
        scheduler = FsrsScheduler(enable_fuzzing=False, enable_short_term=True)

        assert scheduler.kind is SchedulerKind.FSRS
        assert scheduler.enable_fuzzing is False
        assert scheduler.enable_short_term is True
        assert scheduler._fsrs.enable_fuzzing is False
        assert len(scheduler._fsrs.learning_steps) == 2

    def test_short_term_off_removes_learning_steps(self):
        scheduler = FsrsScheduler(enable_fuzzing=False)

        assert len(scheduler._fsrs.learning_steps) == 0
        assert len(scheduler._fsrs.relearning_steps) == 0


class TestApplyRating:
    def test_new_item_good_graduates_to_review(self, scheduler):
        outcome = scheduler.apply_rating(make_item(), Grade.GOOD, FIXED_NOW)
        memory = outcome.updated_item.memory

        assert memory.state is CardState.REVIEW
        assert outcome.next_review > FIXED_NOW
        assert outcome.interval_days >= 1
        assert memory.due == outcome.next_review
        assert memory.scheduled_days == pytest.approx(outcome.interval_days)
        assert memory.reps == 1
        assert memory.lapses == 0
        assert memory.last_review == FIXED_NOW
        assert memory.stability is not None and memory.stability > 0
        assert memory.difficulty is not None and 1 <= memory.difficulty <= 10
        assert outcome.updated_item.updated == FIXED_NOW

    def test_lapse_in_review_counts(self, scheduler, review_item):
        outcome = scheduler.apply_rating(review_item, Grade.AGAIN, FIXED_NOW)
        memory = outcome.updated_item.memory

        assert memory.lapses == 2
        assert memory.reps == 5
        assert memory.stability < 10.0

    def test_success_in_review_does_not_count_lapse(self, scheduler, review_item):
        outcome = scheduler.apply_rating(review_item, Grade.GOOD, FIXED_NOW)
        memory = outcome.updated_item.memory

        assert memory.lapses == 1
        assert memory.state is CardState.REVIEW
        assert memory.stability > 10.0

    def test_short_term_schedules_learning_steps(self):
        scheduler = FsrsScheduler(enable_fuzzing=False, enable_short_term=True)

        outcome = scheduler.apply_rating(make_item(), Grade.AGAIN, FIXED_NOW)

        assert outcome.updated_item.memory.state is CardState.LEARNING
        assert outcome.updated_item.memory.step == 0
        assert outcome.next_review == FIXED_NOW + timedelta(minutes=1)
        assert outcome.interval_days == pytest.approx(1 / 1440)

    def test_log_is_library_review_log(self, scheduler):
        outcome = scheduler.apply_rating(make_item(), Grade.GOOD, FIXED_NOW)
        assert outcome.log.rating == Rating.Good

    def test_does_not_mutate_input(self, scheduler, review_item):
        before = review_item.memory
        scheduler.apply_rating(review_item, Grade.EASY, FIXED_NOW)
        assert review_item.memory is before
        assert review_item.memory.reps == 4

    def test_naive_now_is_treated_as_utc(self, scheduler):
        naive = datetime(2025, 1, 1, 12, 0)
        outcome = scheduler.apply_rating(make_item(), Grade.GOOD, naive)
        assert outcome.updated_item.memory.last_review == FIXED_NOW

    @pytest.mark.parametrize("bad", [0, 5, None])
    def test_invalid_grade_raises(self, scheduler, bad):
        with pytest.raises(InvalidRatingError):
            scheduler.apply_rating(make_item(), bad, FIXED_NOW)


class TestPreview:
    def test_preview_has_all_grades_in_increasing_order(self, scheduler):
        preview = scheduler.get_preview(make_item(), FIXED_NOW)

        assert set(preview) == set(Grade)
        intervals = [preview[g].interval_days for g in Grade]
        assert intervals == sorted(intervals)
        assert all(preview[g].next_review > FIXED_NOW for g in Grade)

    def test_preview_is_side_effect_free_and_repeatable(self, scheduler, review_item):
        first = scheduler.get_preview(review_item, FIXED_NOW)
        second = scheduler.get_preview(review_item, FIXED_NOW)

        assert first == second
        assert review_item.memory.reps == 4

    def test_preview_matches_apply_without_fuzz(self, scheduler, review_item):
        preview = scheduler.get_preview(review_item, FIXED_NOW)
        outcome = scheduler.apply_rating(review_item, Grade.HARD, FIXED_NOW)

        assert preview[Grade.HARD].next_review == outcome.next_review


class TestMapping:
    def test_new_item_maps_to_fresh_learning_card(self):
        card = to_fsrs_card(make_item().memory)

        assert card.state == State.Learning
        assert card.step == 0
        assert card.stability is None
        assert card.difficulty is None
        assert card.last_review is None

    def test_review_item_has_no_step(self, review_item):
        card = to_fsrs_card(review_item.memory)

        assert card.state == State.Review
        assert card.step is None
        assert card.stability == 10.0
        assert card.difficulty == 5.0
        assert card.last_review == FIXED_NOW - timedelta(days=10)

    def test_relearning_item_defaults_step_to_zero(self):
        item = make_item(
            state=CardState.RELEARNING,
            stability=2.0,
            difficulty=6.0,
            last_review=FIXED_NOW - timedelta(days=1),
        )
        card = to_fsrs_card(item.memory)

        assert card.state == State.Relearning
        assert card.step == 0

    def test_item_without_fsrs_memory_starts_fresh(self):
        # e.g. scheduled by SM-2 before: ease factor but no stability yet
        item = make_item(state=CardState.REVIEW, difficulty=2.5, reps=3)
        card = to_fsrs_card(item.memory)

        assert card.state == State.Learning
        assert card.stability is None

    def test_from_fsrs_card_counts_reps_and_lapses(self, review_item):
        card = to_fsrs_card(review_item.memory)
        card.due = FIXED_NOW + timedelta(days=2)

        memory = from_fsrs_card(card, review_item.memory, Grade.AGAIN, FIXED_NOW)

        assert memory.reps == 5
        assert memory.lapses == 2
        assert memory.scheduled_days == pytest.approx(2.0)
        assert memory.last_review == FIXED_NOW
