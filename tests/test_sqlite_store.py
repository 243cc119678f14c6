"""Tests for the SQLite key-value store."""

import tempfile
from pathlib import Path

import pytest

from dailytile.adapters.sqlite_store import RECEIVER_NAMESPACE, SENDER_NAMESPACE, SQLiteStore
from dailytile.core.errors import StorageError


@pytest.fixture
def temp_db():
    """Create a temporary database path in a not-yet-existing directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "nested" / "state.sqlite"


def test_get_missing_key(temp_db):
    """Test an empty store returns nothing."""
    store = SQLiteStore(temp_db, SENDER_NAMESPACE)
    assert store.get("vault_path") is None
    assert store.get_many(["a", "b"]) == {}
    assert store.get_many([]) == {}


def test_put_many_and_read_back(temp_db):
    """Test values round-trip as text, integers included."""
    store = SQLiteStore(temp_db, SENDER_NAMESPACE)
    store.put_many({"last_sync": 1700000000000, "last_note_date": "2024-01-02"})

    assert store.get("last_sync") == "1700000000000"
    assert store.get_many(["last_sync", "last_note_date", "other"]) == {
        "last_sync": "1700000000000",
        "last_note_date": "2024-01-02",
    }


def test_put_many_overwrites(temp_db):
    """Test writing an existing key replaces its value."""
    store = SQLiteStore(temp_db, SENDER_NAMESPACE)
    store.put_many({"k": "one"})
    store.put_many({"k": "two"})
    assert store.get("k") == "two"


def test_namespaces_are_isolated(temp_db):
    """Test sender and receiver share a file but not keys."""
    sender = SQLiteStore(temp_db, SENDER_NAMESPACE)
    receiver = SQLiteStore(temp_db, RECEIVER_NAMESPACE)

    sender.put_many({"date": "2024-01-01"})
    receiver.put_many({"date": "2024-02-02"})

    assert sender.get("date") == "2024-01-01"
    assert receiver.get("date") == "2024-02-02"


def test_values_survive_new_instance(temp_db):
    """Test state is durable across store instances."""
    SQLiteStore(temp_db, RECEIVER_NAMESPACE).put_many({"excerpt": "a\nb"})
    assert SQLiteStore(temp_db, RECEIVER_NAMESPACE).get("excerpt") == "a\nb"


def test_corrupt_file_raises_storage_error(temp_db):
    """Test sqlite failures surface as StorageError."""
    temp_db.parent.mkdir(parents=True)
    temp_db.write_bytes(b"garbage" * 200)
    store = SQLiteStore(temp_db, RECEIVER_NAMESPACE)

    with pytest.raises(StorageError):
        store.get("date")
    with pytest.raises(StorageError):
        store.put_many({"date": "2024-01-01"})
