"""Package rendered notes and hand them to a transport."""

import logging
import time

from .errors import TransportFailure
from .model import DAILY_NOTE_PATH, RenderedNote, TransportRecord
from .ports import Transport

logger = logging.getLogger(__name__)

# Transport items are limited to ~100KB; stay well under it.
MAX_FULL_TEXT = 50_000
TRUNCATION_MARKER = "\n\n[... truncated for watch display]"


def now_millis() -> int:
    return time.time_ns() // 1_000_000


class SyncTransmitter:
    """Package a rendered note and hand it to the transport, once."""

    def __init__(self, transport: Transport, max_full_text: int = MAX_FULL_TEXT):
        self.transport = transport
        self.max_full_text = max_full_text

    def package(self, note: RenderedNote, now: int | None = None) -> TransportRecord:
        full_text = note.full_text
        if len(full_text) > self.max_full_text:
            logger.warning(
                "Note %s truncated from %d to %d chars",
                note.date, len(full_text), self.max_full_text,
            )
            full_text = full_text[: self.max_full_text] + TRUNCATION_MARKER

        return TransportRecord(
            date=note.date,
            full_text=full_text,
            excerpt=note.excerpt,
            timestamp=now if now is not None else now_millis(),
        )

    def transmit(self, note: RenderedNote, now: int | None = None) -> bool:
        record = self.package(note, now)
        logger.debug("Sending %s (%d chars) to %s", record.date, len(record.full_text), DAILY_NOTE_PATH)
        try:
            self.transport.send(DAILY_NOTE_PATH, record, urgent=True)
        except TransportFailure as e:
            logger.error("Send failed for %s: %s", record.date, e)
            return False
        logger.debug("Sent %s", record.date)
        return True
