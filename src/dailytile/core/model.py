from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .errors import MalformedRecord

# Single note slot shared by sender and receiver.
DAILY_NOTE_PATH = "/daily_note"

KEY_DATE = "date"
KEY_FULL_TEXT = "full_text"
KEY_EXCERPT = "excerpt"
KEY_TIMESTAMP = "timestamp"

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class Document:
    date: str  # ISO-8601, taken from the filename
    path: Path
    raw: str


@dataclass(frozen=True)
class RenderedNote:
    date: str
    full_text: str  # front matter stripped, otherwise raw
    excerpt: str  # rendered, wrapped tail lines joined with "\n"


@dataclass(frozen=True)
class TransportRecord:
    date: str
    full_text: str
    excerpt: str
    timestamp: int  # epoch millis, producer side

    def to_dict(self) -> dict[str, Any]:
        return {
            KEY_DATE: self.date,
            KEY_FULL_TEXT: self.full_text,
            KEY_EXCERPT: self.excerpt,
            KEY_TIMESTAMP: self.timestamp,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TransportRecord":
        """Decode a wire mapping.

        Missing text fields default to "", as the transport layer does for
        absent string keys. A missing or non-integer timestamp, or a date that
        is not ``YYYY-MM-DD``, is rejected.
        """
        if not isinstance(data, Mapping):
            raise MalformedRecord(f"expected a mapping, got {type(data).__name__}")

        fields: dict[str, str] = {}
        for key in (KEY_DATE, KEY_FULL_TEXT, KEY_EXCERPT):
            value = data.get(key, "")
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise MalformedRecord(f"{key} must be a string")
            fields[key] = value

        if not ISO_DATE_RE.match(fields[KEY_DATE]):
            raise MalformedRecord(f"{KEY_DATE} must be an ISO date, got {fields[KEY_DATE]!r}")

        timestamp = data.get(KEY_TIMESTAMP)
        # bool is an int subclass; refuse it explicitly
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise MalformedRecord(f"{KEY_TIMESTAMP} must be an integer")

        return cls(
            date=fields[KEY_DATE],
            full_text=fields[KEY_FULL_TEXT],
            excerpt=fields[KEY_EXCERPT],
            timestamp=timestamp,
        )


@dataclass(frozen=True)
class CachedNote:
    date: str
    full_text: str
    excerpt: str
    received_at: int  # epoch millis of the accepted record

    @classmethod
    def from_record(cls, record: TransportRecord) -> "CachedNote":
        return cls(
            date=record.date,
            full_text=record.full_text,
            excerpt=record.excerpt,
            received_at=record.timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "full_text": self.full_text,
            "excerpt": self.excerpt,
            "received_at": self.received_at,
        }
