"""Session persistence gateway: active snapshot, history and settings."""

import logging
from typing import TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from core.persistence.store import KeyValueStore, NamespacedStore, StorageError
from core.session.snapshot import (
    PersistedMilestones,
    PersistedSettings,
    SessionRecord,
    SessionSnapshot,
)

logger = logging.getLogger(__name__)

ACTIVE_SESSION_KEY = "bjt_active_session"
SESSION_HISTORY_KEY = "bjt_session_history"
SETTINGS_KEY = "bjt_settings"
ONBOARDING_KEY = "bjt_onboarding"
MILESTONES_KEY = "bjt_milestones"

MAX_HISTORY = 100

ModelT = TypeVar("ModelT", bound=BaseModel)

_history_adapter = TypeAdapter(list[SessionRecord])


class SessionRepository:
    """
    Reads and writes persisted session documents.

    Every slot is a whole-document replace. Unreadable or malformed data is
    logged and reported as absent rather than raised.
    """

    def __init__(self, store: KeyValueStore, namespace: str = "") -> None:
        self._store = NamespacedStore(store, namespace) if namespace else store
        self._namespace = namespace

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def _read(self, key: str) -> str | None:
        try:
            return self._store.get(key)
        except StorageError as e:
            logger.warning(f"Storage unavailable reading {key}: {e}")
            return None

    def _write(self, key: str, value: str) -> bool:
        try:
            self._store.set(key, value)
        except StorageError as e:
            logger.warning(f"Storage unavailable writing {key}: {e}")
            return False
        return True

    def _load_model(self, key: str, model: type[ModelT]) -> ModelT | None:
        raw = self._read(key)
        if raw is None:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable {key}: {e.error_count()} validation error(s)")
            return None

    # Active session

    def save(self, snapshot: SessionSnapshot) -> bool:
        """Replace the active-session snapshot."""
        return self._write(ACTIVE_SESSION_KEY, snapshot.model_dump_json())

    def load(self) -> SessionSnapshot | None:
        """Load the active-session snapshot, or None if missing or corrupt."""
        return self._load_model(ACTIVE_SESSION_KEY, SessionSnapshot)

    def clear(self) -> None:
        """Remove the active-session snapshot."""
        try:
            self._store.delete(ACTIVE_SESSION_KEY)
        except StorageError as e:
            logger.warning(f"Storage unavailable clearing session: {e}")

    def recovery_candidate(self) -> SessionSnapshot | None:
        """
        Return a snapshot worth offering for recovery.

        Snapshots with no hands played are stale and are cleared.
        """
        snapshot = self.load()
        if snapshot is None:
            return None
        if snapshot.hands_played <= 0:
            self.clear()
            return None
        return snapshot

    # History

    def load_history(self) -> list[SessionRecord]:
        raw = self._read(SESSION_HISTORY_KEY)
        if raw is None:
            return []
        try:
            return _history_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable history: {e.error_count()} validation error(s)")
            return []

    def append_history(self, record: SessionRecord) -> bool:
        """Append a completed session, keeping the most recent MAX_HISTORY."""
        history = self.load_history()
        history.append(record)
        history = history[-MAX_HISTORY:]
        return self._write(SESSION_HISTORY_KEY, _history_adapter.dump_json(history).decode("utf-8"))

    # Settings

    def save_settings(self, settings: PersistedSettings) -> bool:
        return self._write(SETTINGS_KEY, settings.model_dump_json())

    def load_settings(self) -> PersistedSettings | None:
        return self._load_model(SETTINGS_KEY, PersistedSettings)

    # Milestones

    def save_milestones(self, milestones: PersistedMilestones) -> bool:
        return self._write(MILESTONES_KEY, milestones.model_dump_json())

    def load_milestones(self) -> PersistedMilestones:
        """Unlocked milestones; none when missing or unreadable."""
        return self._load_model(MILESTONES_KEY, PersistedMilestones) or PersistedMilestones()
