"""Tests for watch mode functionality."""

import tempfile
import time
from pathlib import Path

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from dailytile.watch import DebounceHandler, watch_folder


@pytest.fixture
def batches():
    """Collect the batches a handler flushes."""
    return []


def test_watch_collects_dated_notes(batches):
    """Test that create, modify, delete and move events are all recorded."""
    handler = DebounceHandler(batches.append, debounce_ms=50)

    handler.on_created(FileCreatedEvent("/notes/2024-01-01.md"))
    handler.on_modified(FileModifiedEvent("/notes/2024-01-02.md"))
    handler.on_deleted(FileDeletedEvent("/notes/2024-01-03.md"))
    handler.on_moved(FileMovedEvent("/notes/.2024-01-04.md.tmp", "/notes/2024-01-04.md"))

    assert handler.pending == {"2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04"}


def test_watch_skip_temp_and_unrelated_files(batches):
    """Test that watch mode skips temp, swap and undated files."""
    handler = DebounceHandler(batches.append, debounce_ms=50)

    for name in ["2024-01-01.md.swp", "2024-01-01.md~", ".2024-01-01.md", "notes.md", "2024-01-01.txt"]:
        handler.on_modified(FileModifiedEvent(f"/notes/{name}"))
    handler.on_modified(DirModifiedEvent("/notes/2024-01-01.md"))

    assert handler.pending == set()
    handler.flush()
    assert batches == []


def test_watch_debounce(batches):
    """Test that debouncing coalesces multiple events."""
    handler = DebounceHandler(batches.append, debounce_ms=100)

    handler.on_modified(FileModifiedEvent("/notes/2024-01-02.md"))
    handler.on_modified(FileModifiedEvent("/notes/2024-01-02.md"))
    handler.on_created(FileCreatedEvent("/notes/2024-01-03.md"))

    # Still inside the window
    handler.check_and_flush()
    assert batches == []

    handler.last_event_time = time.time() - 1
    handler.check_and_flush()
    assert batches == [{"2024-01-02", "2024-01-03"}]
    assert handler.pending == set()


def test_watch_custom_extension(batches):
    """Test the configured extension is honoured."""
    handler = DebounceHandler(batches.append, extension="txt")
    handler.on_modified(FileModifiedEvent("/notes/2024-01-02.txt"))
    handler.on_modified(FileModifiedEvent("/notes/2024-01-03.md"))
    assert handler.pending == {"2024-01-02"}


def test_watch_folder_missing():
    """Test watching a missing folder fails fast."""
    with tempfile.TemporaryDirectory() as tmpdir:
        assert watch_folder(None, Path(tmpdir) / "missing", quiet=True) == 1
