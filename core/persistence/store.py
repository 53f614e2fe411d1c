"""Key-value storage backends for persisted trainer data."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import redis

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """The backing store could not be read or written."""


class KeyValueStore(ABC):
    """Abstract string key-value store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get the value for a key, or None if absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the value for a key."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a key; missing keys are ignored."""
        ...

    def exists(self, key: str) -> bool:
        """Check if a key is present."""
        return self.get(key) is not None


class InMemoryStore(KeyValueStore):
    """In-memory store for tests and local development."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonFileStore(KeyValueStore):
    """
    One file per key under a directory.

    Writes go to a temporary file that replaces the target, so readers never
    see a half-written document.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        safe = "".join(c if c.isalnum() or c in "-_." else "_" for c in key)
        return self._directory / f"{safe}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            fd, tmp = tempfile.mkstemp(dir=self._directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp, path)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e
        logger.debug(f"Wrote {len(value)} bytes to {path}")

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot delete {key}: {e}") from e


class RedisStore(KeyValueStore):
    """Redis-backed store."""

    def __init__(self, client: redis.Redis, prefix: str = "bjt:") -> None:
        self._redis = client
        self._prefix = prefix

    def _key(self, key: str) -> str:
        """Get Redis key for a store key."""
        return f"{self._prefix}{key}"

    def get(self, key: str) -> str | None:
        try:
            data = self._redis.get(self._key(key))
        except redis.RedisError as e:
            raise StorageError(f"Redis read failed for {key}: {e}") from e
        if data is None:
            return None
        if isinstance(data, bytes):
            return data.decode("utf-8")
        return data

    def set(self, key: str, value: str) -> None:
        try:
            self._redis.set(self._key(key), value)
        except redis.RedisError as e:
            raise StorageError(f"Redis write failed for {key}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(self._key(key))
        except redis.RedisError as e:
            raise StorageError(f"Redis delete failed for {key}: {e}") from e


class NamespacedStore(KeyValueStore):
    """Prefixes every key, so several users can share one backend."""

    def __init__(self, store: KeyValueStore, namespace: str) -> None:
        self._store = store
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}" if self._namespace else key

    def get(self, key: str) -> str | None:
        return self._store.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        self._store.set(self._key(key), value)

    def delete(self, key: str) -> None:
        self._store.delete(self._key(key))
