"""Watch mode for dailytile - sync whenever a daily note changes."""

import json
import signal
import sys
import time
from pathlib import Path
from typing import Any, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .core.errors import DailyTileError
from .core.selector import parse_dated_name
from .sync import run_sync


class DebounceHandler(FileSystemEventHandler):
    """File system event handler with debouncing."""

    def __init__(
        self,
        on_batch: Callable[[set[str]], None],
        extension: str = "md",
        debounce_ms: int = 500,
    ):
        super().__init__()
        self.on_batch = on_batch
        self.extension = extension
        self.debounce_ms = debounce_ms

        # Dates of dated notes touched since the last flush
        self.pending: set[str] = set()
        self.last_event_time = 0.0

    def _extract_date(self, path: Path) -> str | None:
        """Date of a dated note; None for temp, hidden or unrelated files."""
        name = path.name
        if name.startswith(".") or name.endswith("~") or name.endswith(".swp"):
            return None
        return parse_dated_name(name, self.extension)

    def _record(self, path: str | bytes) -> None:
        day = self._extract_date(Path(str(path)))
        if day:
            self.pending.add(day)
            self.last_event_time = time.time()

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._record(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._record(event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        # Deleting today's note can make an older note current again.
        if not event.is_directory:
            self._record(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Editors often save through a rename onto the real file.
        if not event.is_directory:
            self._record(getattr(event, "dest_path", event.src_path))

    def check_and_flush(self) -> None:
        """Check if debounce period has elapsed and flush if so."""
        if not self.pending:
            return

        elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            self.flush()

    def flush(self) -> None:
        """Process accumulated events."""
        if not self.pending:
            return

        changed, self.pending = self.pending, set()

        if self.on_batch:
            self.on_batch(changed)


def watch_folder(
    rt: Any,
    folder: Path,
    debounce_ms: int = 500,
    quiet: bool = False,
    json_output: bool = False,
) -> int:
    """
    Watch a daily notes folder and run a sync pass after each batch of changes.

    Args:
        rt: Runtime instance
        folder: Documents root to watch
        debounce_ms: Debounce window in milliseconds
        quiet: Suppress output
        json_output: Output JSON events instead of human-readable

    Returns:
        Exit code
    """
    if not folder.is_dir():
        print(f"Error: Folder not found: {folder}", file=sys.stderr)
        return 1

    running = True

    def handle_batch(changed: set[str]) -> None:
        """Run one sync pass for a batch of changes."""
        start_time = time.time()
        try:
            report = run_sync(rt)
        except DailyTileError as e:
            if json_output:
                print(json.dumps({"type": "error", "message": str(e)}), flush=True)
            else:
                print(f"Error: {e}", file=sys.stderr, flush=True)
            return

        duration_ms = int((time.time() - start_time) * 1000)
        if json_output:
            event = {
                "type": "sync",
                "changed": sorted(changed),
                "status": report.status,
                "date": report.date,
                "duration_ms": duration_ms,
            }
            print(json.dumps(event), flush=True)
        elif not quiet:
            print(f"Sync {report.status}: {report.date or '-'} ({duration_ms}ms)", flush=True)

    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        if not quiet and not json_output:
            print("\nShutting down...", flush=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    handler = DebounceHandler(handle_batch, rt.config.vault.extension, debounce_ms)
    observer = Observer()
    observer.schedule(handler, str(folder), recursive=False)

    if not quiet and not json_output:
        print(f"Watching {folder} (debounce: {debounce_ms}ms)", flush=True)
        print("Press Ctrl+C to stop", flush=True)

    observer.start()

    try:
        while running:
            time.sleep(0.1)
            handler.check_and_flush()
    finally:
        handler.flush()
        observer.stop()
        observer.join()

    if not quiet and not json_output:
        print("Watch stopped", flush=True)

    return 0
