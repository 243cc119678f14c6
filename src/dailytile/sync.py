"""One sync pass: resolve, select, render, transmit, remember."""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Literal

from .core.errors import NotFound, StorageError
from .core.ports import KeyValueStore
from .core.transmitter import now_millis

logger = logging.getLogger(__name__)

KEY_VAULT_PATH = "vault_path"
KEY_LAST_SYNC = "last_sync"
KEY_LAST_NOTE_DATE = "last_note_date"


class SenderState:
    """Sender-side preferences. Unreadable values read as "not configured"."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _get(self, key: str) -> str | None:
        try:
            return self.store.get(key)
        except StorageError as e:
            logger.warning("Sender state unreadable: %s", e)
            return None

    def vault_path(self) -> Path | None:
        value = self._get(KEY_VAULT_PATH)
        return Path(value) if value else None

    def set_vault_path(self, path: Path) -> None:
        self.store.put_many({KEY_VAULT_PATH: str(path)})

    def last_sync(self) -> int | None:
        value = self._get(KEY_LAST_SYNC)
        try:
            return int(value) if value else None
        except ValueError:
            return None

    def last_note_date(self) -> str | None:
        return self._get(KEY_LAST_NOTE_DATE) or None

    def record_sync(self, timestamp: int, note_date: str) -> None:
        try:
            self.store.put_many({KEY_LAST_SYNC: timestamp, KEY_LAST_NOTE_DATE: note_date})
        except StorageError as e:
            logger.warning("Could not record sync of %s: %s", note_date, e)


@dataclass
class SyncReport:
    status: Literal["synced", "nothing", "failed"]
    date: str | None = None
    chars: int = 0
    reason: str | None = None


def vault_folder(rt: Any) -> Path:
    """CLI override, then the linked folder, then the configured root."""
    return rt.vault_override or rt.sender_state.vault_path() or rt.config.vault.root


def run_sync(rt: Any, today: date | None = None, now: int | None = None) -> SyncReport:
    folder = vault_folder(rt)
    try:
        root = rt.resolver.resolve(folder)
        document = rt.selector.select(root, today=today)
    except NotFound as e:
        logger.info("Nothing to sync: %s", e)
        return SyncReport("nothing", reason=str(e))

    note = rt.builder.build(document)
    logger.debug("Read note %s, %d chars", note.date, len(note.full_text))

    timestamp = now if now is not None else now_millis()
    if not rt.transmitter.transmit(note, now=timestamp):
        return SyncReport("failed", date=note.date, reason="transport failure")

    rt.sender_state.record_sync(timestamp, note.date)
    logger.info("Synced note %s", note.date)
    return SyncReport("synced", date=note.date, chars=len(note.full_text))
