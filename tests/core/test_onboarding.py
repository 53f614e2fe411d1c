"""Tests for onboarding progress."""

import json

import pytest

from core.onboarding import STEP_ORDER, OnboardingStep, OnboardingTracker, is_new_user
from core.persistence import ONBOARDING_KEY

from conftest import BrokenStore, make_record


@pytest.fixture
def tracker(store):
    return OnboardingTracker(store)


class TestOnboardingStep:
    def test_order(self):
        assert [s.value for s in STEP_ORDER] == [
            "deck_countdown",
            "counting_drill",
            "true_count",
            "play_and_count",
        ]

    def test_labels(self):
        assert OnboardingStep.DECK_COUNTDOWN.label == "Card Values"
        assert OnboardingStep.PLAY_AND_COUNT.label == "Full Simulation"
        assert all(step.description for step in OnboardingStep)


class TestOnboardingTracker:
    def test_fresh_progress(self, tracker):
        progress = tracker.get_progress()
        assert progress.completed_steps == ()
        assert progress.current_step == OnboardingStep.DECK_COUNTDOWN
        assert not progress.is_complete

    def test_complete_step_advances(self, tracker):
        progress = tracker.complete_step(OnboardingStep.DECK_COUNTDOWN)
        assert progress.completed_steps == (OnboardingStep.DECK_COUNTDOWN,)
        assert progress.current_step == OnboardingStep.COUNTING_DRILL

    def test_complete_step_is_idempotent(self, tracker, store):
        tracker.complete_step(OnboardingStep.TRUE_COUNT)
        tracker.complete_step(OnboardingStep.TRUE_COUNT)
        assert json.loads(store.get(ONBOARDING_KEY)) == ["true_count"]

    def test_current_step_is_first_incomplete(self, tracker):
        progress = tracker.complete_step(OnboardingStep.COUNTING_DRILL)
        assert progress.current_step == OnboardingStep.DECK_COUNTDOWN

    def test_completion_order_kept(self, tracker):
        tracker.complete_step(OnboardingStep.TRUE_COUNT)
        progress = tracker.complete_step(OnboardingStep.DECK_COUNTDOWN)
        assert progress.completed_steps == (OnboardingStep.TRUE_COUNT, OnboardingStep.DECK_COUNTDOWN)

    def test_all_complete(self, tracker):
        for step in STEP_ORDER:
            progress = tracker.complete_step(step)
        assert progress.is_complete
        assert progress.current_step == STEP_ORDER[-1]

    def test_reset(self, tracker):
        tracker.complete_step(OnboardingStep.DECK_COUNTDOWN)
        tracker.reset()
        assert tracker.get_progress().completed_steps == ()

    @pytest.mark.parametrize(
        "raw",
        ["not json", '{"step": 1}', "", '"deck_countdown"'],
    )
    def test_unreadable_progress_is_empty(self, store, tracker, raw):
        store.set(ONBOARDING_KEY, raw)
        assert tracker.get_progress().completed_steps == ()

    def test_unknown_and_duplicate_entries_dropped(self, store, tracker):
        store.set(ONBOARDING_KEY, json.dumps(["true_count", "juggling", 7, "true_count"]))
        assert tracker.get_progress().completed_steps == (OnboardingStep.TRUE_COUNT,)

    def test_storage_failure(self):
        tracker = OnboardingTracker(BrokenStore())
        assert tracker.get_progress().completed_steps == ()
        tracker.complete_step(OnboardingStep.DECK_COUNTDOWN)
        tracker.reset()


class TestIsNewUser:
    def test_new(self, tracker, repository):
        assert is_new_user(tracker, repository)

    def test_completed_step(self, tracker, repository):
        tracker.complete_step(OnboardingStep.DECK_COUNTDOWN)
        assert not is_new_user(tracker, repository)

    def test_finished_session(self, tracker, repository):
        repository.append_history(make_record("done"))
        assert not is_new_user(tracker, repository)
