"""Tests for key-value storage backends."""

from unittest.mock import MagicMock

import pytest
import redis

from core.persistence import (
    InMemoryStore,
    JsonFileStore,
    NamespacedStore,
    RedisStore,
    StorageError,
)


class TestInMemoryStore:
    def test_set_and_get(self, store):
        store.set("a", "1")
        assert store.get("a") == "1"
        assert store.exists("a")

    def test_missing_key(self, store):
        assert store.get("missing") is None
        assert not store.exists("missing")

    def test_overwrite(self, store):
        store.set("a", "1")
        store.set("a", "2")
        assert store.get("a") == "2"

    def test_delete_is_idempotent(self, store):
        store.set("a", "1")
        store.delete("a")
        store.delete("a")
        assert store.get("a") is None


class TestJsonFileStore:
    def test_set_and_get(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.set("bjt_active_session", '{"phase": "ready"}')
        assert store.get("bjt_active_session") == '{"phase": "ready"}'
        assert (tmp_path / "bjt_active_session.json").exists()

    def test_creates_directory(self, tmp_path):
        directory = tmp_path / "nested" / "data"
        JsonFileStore(directory)
        assert directory.is_dir()

    def test_missing_key(self, tmp_path):
        assert JsonFileStore(tmp_path).get("nothing") is None

    def test_unsafe_key_stays_in_directory(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.set("../escape:key", "x")
        assert store.get("../escape:key") == "x"
        assert [p.parent for p in tmp_path.iterdir()] == [tmp_path]

    def test_no_temp_files_left(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.set("a", "1")
        store.set("a", "2")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.json"]

    def test_delete(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.set("a", "1")
        store.delete("a")
        store.delete("a")
        assert store.get("a") is None

    def test_unreadable_raises_storage_error(self, tmp_path):
        store = JsonFileStore(tmp_path)
        (tmp_path / "a.json").mkdir()
        with pytest.raises(StorageError):
            store.get("a")


class TestRedisStore:
    def test_prefixes_keys(self):
        client = MagicMock()
        client.get.return_value = "value"
        store = RedisStore(client, prefix="test:")

        store.set("k", "v")
        assert store.get("k") == "value"
        store.delete("k")

        client.set.assert_called_once_with("test:k", "v")
        client.get.assert_called_once_with("test:k")
        client.delete.assert_called_once_with("test:k")

    def test_decodes_bytes(self):
        client = MagicMock()
        client.get.return_value = b"caf\xc3\xa9"
        assert RedisStore(client).get("k") == "café"

    def test_missing_key(self):
        client = MagicMock()
        client.get.return_value = None
        assert RedisStore(client).get("k") is None

    @pytest.mark.parametrize("method,args", [("get", ("k",)), ("set", ("k", "v")), ("delete", ("k",))])
    def test_redis_errors_become_storage_errors(self, method, args):
        client = MagicMock()
        getattr(client, method).side_effect = redis.ConnectionError("down")
        with pytest.raises(StorageError):
            getattr(RedisStore(client), method)(*args)


class TestNamespacedStore:
    def test_keys_are_prefixed(self, store):
        alice = NamespacedStore(store, "alice")
        bob = NamespacedStore(store, "bob")

        alice.set("settings", "a")
        bob.set("settings", "b")

        assert alice.get("settings") == "a"
        assert bob.get("settings") == "b"
        assert store.keys() == ["alice:settings", "bob:settings"]

    def test_empty_namespace(self, store):
        NamespacedStore(store, "").set("k", "v")
        assert store.get("k") == "v"

    def test_delete(self, store):
        scoped = NamespacedStore(store, "x")
        scoped.set("k", "v")
        scoped.delete("k")
        assert store.keys() == []
