"""Tests for key-value store adapters."""

from pathlib import Path

import pytest

from streamflow_stations.adapters.storage import InMemoryKeyValueStore, SqliteKeyValueStore


class TestInMemoryKeyValueStore:
    """Tests for InMemoryKeyValueStore."""

    def test_set_then_get_returns_value(self) -> None:
        store = InMemoryKeyValueStore()

        assert store.set("k", b"v") is True
        assert store.get("k") == b"v"

    def test_delete_missing_key_is_noop(self) -> None:
        store = InMemoryKeyValueStore()

        store.delete("missing")

        assert store.get("missing") is None

    def test_when_writes_fail_then_set_returns_false(self) -> None:
        store = InMemoryKeyValueStore(fail_writes=True)

        assert store.set("k", b"v") is False
        assert store.get("k") is None

    def test_keys_lists_stored_keys(self) -> None:
        store = InMemoryKeyValueStore()
        store.set("a", b"1")
        store.set("b", b"2")
        store.delete("a")

        assert store.keys() == {"b"}


class TestSqliteKeyValueStore:
    """Tests for SqliteKeyValueStore."""

    @pytest.fixture
    def db_path(self, tmp_path: Path) -> Path:
        return tmp_path / "cache" / "stations.db"

    def test_set_then_get_returns_value(self, db_path: Path) -> None:
        with SqliteKeyValueStore(db_path) as store:
            assert store.set("k", b'{"data": []}') is True
            assert store.get("k") == b'{"data": []}'

    def test_missing_key_returns_none(self, db_path: Path) -> None:
        with SqliteKeyValueStore(db_path) as store:
            assert store.get("missing") is None

    def test_set_replaces_existing_value(self, db_path: Path) -> None:
        with SqliteKeyValueStore(db_path) as store:
            store.set("k", b"old")
            store.set("k", b"new")

            assert store.get("k") == b"new"

    def test_delete_removes_value(self, db_path: Path) -> None:
        with SqliteKeyValueStore(db_path) as store:
            store.set("k", b"v")
            store.delete("k")

            assert store.get("k") is None

    def test_values_persist_across_instances(self, db_path: Path) -> None:
        """Given a value written by one store, when reopening the file, then it is still there."""
        with SqliteKeyValueStore(db_path) as store:
            store.set("k", b"persisted")

        with SqliteKeyValueStore(db_path) as reopened:
            assert reopened.get("k") == b"persisted"

    def test_in_memory_database_is_supported(self) -> None:
        with SqliteKeyValueStore(":memory:") as store:
            store.set("k", b"v")

            assert store.get("k") == b"v"
