"""Tests for packaging and sending rendered notes."""

from dailytile.core.errors import TransportFailure
from dailytile.core.model import DAILY_NOTE_PATH, RenderedNote, TransportRecord
from dailytile.core.transmitter import MAX_FULL_TEXT, TRUNCATION_MARKER, SyncTransmitter


class RecordingTransport:
    """Transport double that remembers what it was given."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[tuple[str, TransportRecord, bool]] = []

    def send(self, path: str, record: TransportRecord, urgent: bool = False) -> None:
        if self.fail:
            raise TransportFailure("link down")
        self.sent.append((path, record, urgent))


def _note(full_text: str = "# Today", excerpt: str = "Today") -> RenderedNote:
    return RenderedNote(date="2024-01-02", full_text=full_text, excerpt=excerpt)


def test_transmit_packages_record():
    """Test a small note is sent as-is to the fixed path, urgently."""
    transport = RecordingTransport()
    assert SyncTransmitter(transport).transmit(_note(), now=1234) is True

    path, record, urgent = transport.sent[0]
    assert path == DAILY_NOTE_PATH
    assert urgent is True
    assert record == TransportRecord(
        date="2024-01-02", full_text="# Today", excerpt="Today", timestamp=1234
    )


def test_transmit_truncates_oversized_text():
    """Test 60,000 chars become 50,000 plus the marker."""
    transport = RecordingTransport()
    SyncTransmitter(transport).transmit(_note(full_text="a" * 60_000), now=1)

    record = transport.sent[0][1]
    assert MAX_FULL_TEXT == 50_000
    assert record.full_text == "a" * 50_000 + TRUNCATION_MARKER
    assert record.excerpt == "Today"


def test_transmit_text_at_ceiling_untouched():
    """Test text exactly at the ceiling is not truncated."""
    transport = RecordingTransport()
    SyncTransmitter(transport, max_full_text=10).transmit(_note(full_text="b" * 10), now=1)
    assert transport.sent[0][1].full_text == "b" * 10


def test_transmit_failure_returns_false():
    """Test a transport failure is reported, not raised, and not retried."""
    transport = RecordingTransport(fail=True)
    assert SyncTransmitter(transport).transmit(_note(), now=1) is False
    assert transport.sent == []


def test_transmit_defaults_timestamp_to_now():
    """Test the timestamp defaults to the current epoch millis."""
    transport = RecordingTransport()
    SyncTransmitter(transport).transmit(_note())
    assert transport.sent[0][1].timestamp > 1_600_000_000_000
