"""Tests for the session repository."""

import json

import pytest

from core.persistence import (
    ACTIVE_SESSION_KEY,
    MAX_HISTORY,
    MILESTONES_KEY,
    SESSION_HISTORY_KEY,
    SETTINGS_KEY,
    SessionRepository,
)
from core.session import PersistedSettings, SessionPhase, SessionSnapshot, TrainingMode
from core.session.snapshot import PersistedMilestones, RulesData, UnlockedMilestone

from conftest import BrokenStore, make_record


class TestActiveSession:
    def test_save_and_load(self, repository):
        snapshot = SessionSnapshot(phase=SessionPhase.HAND_RESOLVED, hands_played=2, running_count=-3)
        assert repository.save(snapshot)
        assert repository.load() == snapshot

    def test_load_missing(self, repository):
        assert repository.load() is None

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "{}",
            '{"phase": "ready"}',
            '{"phase": "warp", "hands_played": 1}',
            '{"phase": "ready", "hands_played": -1}',
            '{"phase": "ready", "hands_played": 1, "shoe": ["ZZ"]}',
            '{"phase": "dealer_turn", "hands_played": 1}',
            '{"phase": "count_prompt_open", "hands_played": 1}',
        ],
    )
    def test_corrupt_snapshot_is_absent(self, store, repository, raw):
        store.set(ACTIVE_SESSION_KEY, raw)
        assert repository.load() is None

    def test_clear(self, repository):
        repository.save(SessionSnapshot(phase=SessionPhase.READY, hands_played=0))
        repository.clear()
        repository.clear()
        assert repository.load() is None

    def test_recovery_candidate(self, repository):
        snapshot = SessionSnapshot(phase=SessionPhase.HAND_RESOLVED, hands_played=1)
        repository.save(snapshot)
        assert repository.recovery_candidate() == snapshot

    def test_stale_snapshot_cleared(self, store, repository):
        repository.save(SessionSnapshot(phase=SessionPhase.READY, hands_played=0))
        assert repository.recovery_candidate() is None
        assert store.get(ACTIVE_SESSION_KEY) is None

    def test_namespaced(self, store):
        alice = SessionRepository(store, namespace="alice")
        bob = SessionRepository(store, namespace="bob")
        alice.save(SessionSnapshot(phase=SessionPhase.READY, hands_played=1))

        assert alice.load() is not None
        assert bob.load() is None
        assert store.keys() == [f"alice:{ACTIVE_SESSION_KEY}"]


class TestHistory:
    def test_empty(self, repository):
        assert repository.load_history() == []

    def test_append(self, repository):
        repository.append_history(make_record("a"))
        repository.append_history(make_record("b"))
        assert [r.session_id for r in repository.load_history()] == ["a", "b"]

    def test_keeps_most_recent(self, repository):
        for i in range(MAX_HISTORY + 5):
            repository.append_history(make_record(f"s{i}"))

        history = repository.load_history()
        assert len(history) == MAX_HISTORY
        assert history[0].session_id == "s5"
        assert history[-1].session_id == f"s{MAX_HISTORY + 4}"

    def test_stored_as_json_list(self, store, repository):
        repository.append_history(make_record("a"))
        data = json.loads(store.get(SESSION_HISTORY_KEY))
        assert data[0]["session_id"] == "a"
        assert data[0]["mode"] == "counting_drill"

    def test_corrupt_history_is_empty(self, store, repository):
        store.set(SESSION_HISTORY_KEY, '[{"session_id": 1}]')
        assert repository.load_history() == []
        repository.append_history(make_record("fresh"))
        assert [r.session_id for r in repository.load_history()] == ["fresh"]


class TestSettings:
    def test_round_trip(self, repository):
        settings = PersistedSettings(mode=TrainingMode.PLAY_AND_COUNT, rules=RulesData(decks=2))
        repository.save_settings(settings)
        assert repository.load_settings() == settings

    def test_missing(self, repository):
        assert repository.load_settings() is None

    def test_corrupt(self, store, repository):
        store.set(SETTINGS_KEY, '{"mode": "poker"}')
        assert repository.load_settings() is None



class TestMilestones:
    def test_round_trip(self, repository):
        saved = PersistedMilestones(
            unlocked=[UnlockedMilestone(id="first_session", unlocked_at="2026-03-01T12:00:00+00:00")]
        )
        assert repository.save_milestones(saved)
        assert repository.load_milestones().ids == ["first_session"]

    def test_missing_or_corrupt_is_empty(self, store, repository):
        assert repository.load_milestones().unlocked == []
        store.set(MILESTONES_KEY, "[1, 2]")
        assert repository.load_milestones().unlocked == []

class TestStorageFailures:
    @pytest.fixture
    def broken(self):
        return SessionRepository(BrokenStore())

    def test_reads_report_absent(self, broken):
        assert broken.load() is None
        assert broken.load_history() == []
        assert broken.load_settings() is None
        assert broken.recovery_candidate() is None

    def test_writes_report_failure(self, broken):
        assert not broken.save(SessionSnapshot(phase=SessionPhase.READY, hands_played=0))
        assert not broken.append_history(make_record("a"))
        broken.clear()
