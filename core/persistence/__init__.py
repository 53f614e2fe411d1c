"""Persistence: key-value stores and the session repository."""

from core.persistence.repository import (
    ACTIVE_SESSION_KEY,
    MAX_HISTORY,
    MILESTONES_KEY,
    ONBOARDING_KEY,
    SESSION_HISTORY_KEY,
    SETTINGS_KEY,
    SessionRepository,
)
from core.persistence.store import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    NamespacedStore,
    RedisStore,
    StorageError,
)

__all__ = [
    "ACTIVE_SESSION_KEY",
    "MAX_HISTORY",
    "MILESTONES_KEY",
    "ONBOARDING_KEY",
    "SESSION_HISTORY_KEY",
    "SETTINGS_KEY",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "NamespacedStore",
    "RedisStore",
    "SessionRepository",
    "StorageError",
]
