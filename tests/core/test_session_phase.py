"""Tests for the session phase table."""

import pytest

from core.session import (
    PAUSABLE_PHASES,
    VALID_TRANSITIONS,
    InvalidTransitionError,
    SessionPhase,
    assert_transition,
    can_transition,
)


class TestSessionPhase:
    def test_every_phase_has_transitions(self):
        assert set(VALID_TRANSITIONS) == set(SessionPhase)

    def test_is_active(self):
        assert not SessionPhase.IDLE.is_active
        assert not SessionPhase.COMPLETED.is_active
        assert SessionPhase.PAUSED.is_active
        assert SessionPhase.DEALING.is_active

    def test_str(self):
        assert str(SessionPhase.COUNT_PROMPT_OPEN) == "Count Prompt Open"


class TestTransitions:
    @pytest.mark.parametrize(
        "source,dest",
        [
            (SessionPhase.IDLE, SessionPhase.READY),
            (SessionPhase.READY, SessionPhase.DEALING),
            (SessionPhase.DEALING, SessionPhase.AWAITING_PLAYER_ACTION),
            (SessionPhase.DEALING, SessionPhase.DEALER_TURN),
            (SessionPhase.AWAITING_PLAYER_ACTION, SessionPhase.DEALER_TURN),
            (SessionPhase.DEALER_TURN, SessionPhase.HAND_RESOLVED),
            (SessionPhase.HAND_RESOLVED, SessionPhase.COUNT_PROMPT_OPEN),
            (SessionPhase.COUNT_PROMPT_OPEN, SessionPhase.HAND_RESOLVED),
            (SessionPhase.HAND_RESOLVED, SessionPhase.DEALING),
            (SessionPhase.COMPLETED, SessionPhase.IDLE),
        ],
    )
    def test_allowed(self, source, dest):
        assert can_transition(source, dest)
        assert_transition(source, dest)

    @pytest.mark.parametrize(
        "source,dest",
        [
            (SessionPhase.IDLE, SessionPhase.DEALING),
            (SessionPhase.IDLE, SessionPhase.COMPLETED),
            (SessionPhase.DEALING, SessionPhase.PAUSED),
            (SessionPhase.COUNT_PROMPT_OPEN, SessionPhase.DEALING),
            (SessionPhase.COMPLETED, SessionPhase.READY),
            (SessionPhase.PAUSED, SessionPhase.IDLE),
        ],
    )
    def test_rejected(self, source, dest):
        assert not can_transition(source, dest)
        with pytest.raises(InvalidTransitionError) as exc:
            assert_transition(source, dest)
        assert exc.value.source is source
        assert exc.value.dest is dest

    def test_only_completed_reaches_idle(self):
        sources = [s for s, dests in VALID_TRANSITIONS.items() if SessionPhase.IDLE in dests]
        assert sources == [SessionPhase.COMPLETED]

    def test_dealing_cannot_pause(self):
        assert SessionPhase.DEALING not in PAUSABLE_PHASES

    @pytest.mark.parametrize("phase", PAUSABLE_PHASES)
    def test_pause_round_trip(self, phase):
        assert can_transition(phase, SessionPhase.PAUSED)
        assert can_transition(SessionPhase.PAUSED, phase)

    @pytest.mark.parametrize("phase", [p for p in SessionPhase if p.is_active and p != SessionPhase.DEALING])
    def test_active_phases_can_complete(self, phase):
        assert can_transition(phase, SessionPhase.COMPLETED)
