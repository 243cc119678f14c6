"""Receiver-side cache of the latest note, guarded by the staleness rule."""

import logging
import threading
from typing import Any, Callable, Mapping

from .errors import StorageError
from .model import ISO_DATE_RE, CachedNote, TransportRecord
from .ports import KeyValueStore, NoteObserver

logger = logging.getLogger(__name__)

KEY_DATE = "date"
KEY_FULL_TEXT = "full_text"
KEY_EXCERPT = "excerpt"
KEY_RECEIVED_AT = "received_at"

_KEYS = [KEY_DATE, KEY_FULL_TEXT, KEY_EXCERPT, KEY_RECEIVED_AT]


def load_cached_note(store: KeyValueStore) -> CachedNote | None:
    """Read the persisted note; anything unreadable counts as no note."""
    try:
        values = store.get_many(_KEYS)
    except StorageError as e:
        logger.warning("Cached note unreadable, starting empty: %s", e)
        return None

    day = values.get(KEY_DATE)
    if day is None:
        return None
    if not ISO_DATE_RE.match(day):
        logger.warning("Cached note has a malformed date %r, ignoring it", day)
        return None
    try:
        received_at = int(values.get(KEY_RECEIVED_AT, "0"))
    except ValueError:
        logger.warning("Cached note has a malformed timestamp, ignoring it")
        return None

    return CachedNote(
        date=day,
        full_text=values.get(KEY_FULL_TEXT, ""),
        excerpt=values.get(KEY_EXCERPT, ""),
        received_at=received_at,
    )


class SyncCache:
    """
    Holds the single cached note of a receiver.

    An update is accepted iff nothing is cached yet or its timestamp is not
    older than the cached one; equal timestamps are accepted so a resend is
    harmless. ``received_at`` therefore never decreases.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._lock = threading.Lock()
        self._persist_lock = threading.Lock()
        # Reentrant so an observer may apply an update itself.
        self._publish_lock = threading.RLock()
        self._published: CachedNote | None = None
        self._observers: list[NoteObserver] = []
        self._current: CachedNote | None = load_cached_note(store)

    @property
    def current(self) -> CachedNote | None:
        return self._current

    def subscribe(self, observer: NoteObserver) -> Callable[[], None]:
        """Register observer; returns a function that unregisters it."""
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def apply(self, record: TransportRecord) -> bool:
        incoming = CachedNote.from_record(record)
        with self._lock:
            existing = self._current
            if existing is not None and incoming.received_at < existing.received_at:
                logger.info(
                    "Stale update ignored (incoming: %d, cached: %d)",
                    incoming.received_at, existing.received_at,
                )
                return False
            self._current = incoming

        self._persist()
        logger.info("Accepted note for %s (timestamp %d)", incoming.date, incoming.received_at)
        self._publish()
        return True

    def apply_mapping(self, data: Mapping[str, Any]) -> bool:
        return self.apply(TransportRecord.from_mapping(data))

    def _publish(self) -> None:
        # Like _persist, always hand out the newest note, one batch at a time,
        # so observers never see received_at go backwards.
        with self._publish_lock:
            note = self._current
            if note is None or note is self._published:
                return
            self._published = note
            with self._lock:
                observers = list(self._observers)
            for observer in observers:
                if self._published is not note:
                    # a nested apply already published something newer
                    return
                try:
                    observer(note)
                except Exception:
                    logger.exception("Note observer %r failed", observer)

    def _persist(self) -> None:
        # Always write whatever is newest, so racing writers cannot leave an
        # older snapshot on disk.
        with self._persist_lock:
            note = self._current
            if note is None:
                return
            try:
                self.store.put_many({
                    KEY_DATE: note.date,
                    KEY_FULL_TEXT: note.full_text,
                    KEY_EXCERPT: note.excerpt,
                    KEY_RECEIVED_AT: note.received_at,
                })
            except StorageError as e:
                logger.warning("Persisting cached note failed, keeping it in memory: %s", e)
