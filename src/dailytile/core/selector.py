"""Locate the daily notes folder and pick the current note."""

import logging
import re
from datetime import date
from pathlib import Path
from typing import Iterable

from ..format.fm import strip_frontmatter
from .errors import FolderNotFound, NoNoteFound
from .model import Document

logger = logging.getLogger(__name__)


def _dated_name_re(extension: str) -> re.Pattern[str]:
    return re.compile(rf"^(\d{{4}})-(\d{{2}})-(\d{{2}})\.{re.escape(extension)}$")


def parse_dated_name(name: str, extension: str = "md") -> str | None:
    """
    Return the ISO date encoded in a filename, or None.

    Only zero-padded ``YYYY-MM-DD.<ext>`` names naming a real calendar day
    qualify, so lexical order of accepted names is chronological order.
    """
    m = _dated_name_re(extension).match(name)
    if not m:
        return None
    try:
        day = date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None
    return day.isoformat()


def _list_dir(folder: Path) -> list[Path]:
    try:
        return list(folder.iterdir())
    except OSError as e:
        raise FolderNotFound(f"Cannot list {folder}: {e}") from e


def _dated_files(folder: Path, extension: str) -> Iterable[tuple[str, Path]]:
    for p in _list_dir(folder):
        if not p.is_file():
            continue
        day = parse_dated_name(p.name, extension)
        if day is not None:
            yield day, p


class FolderResolver:
    """Find the folder that directly holds the dated notes."""

    def __init__(self, label: str = "Daily Notes", hint: str = "daily", extension: str = "md"):
        self.label = label
        self.hint = hint
        self.extension = extension

    def resolve(self, folder: Path) -> Path:
        if not folder.is_dir():
            raise FolderNotFound(f"Folder not found: {folder}")

        if any(_dated_files(folder, self.extension)):
            return folder

        labelled = folder / self.label
        if labelled.is_dir():
            return labelled

        hint = self.hint.lower()
        if hint:
            for child in sorted(_list_dir(folder), key=lambda p: p.name):
                if child.is_dir() and hint in child.name.lower():
                    return child

        raise FolderNotFound(f"No daily notes folder in {folder}")


class NoteSelector:
    """Pick today's note, else the most recent note with content."""

    def __init__(self, extension: str = "md"):
        self.extension = extension

    def _load(self, day: str, path: Path) -> Document | None:
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read note file %s: %s", path.name, e)
            return None
        return Document(date=day, path=path, raw=raw)

    @staticmethod
    def _has_content(doc: Document) -> bool:
        return bool(strip_frontmatter(doc.raw).strip())

    def select(self, root: Path, today: date | None = None) -> Document:
        if not root.is_dir():
            raise FolderNotFound(f"Folder not found: {root}")

        today_iso = (today or date.today()).isoformat()

        today_path = root / f"{today_iso}.{self.extension}"
        if today_path.is_file():
            doc = self._load(today_iso, today_path)
            if doc is not None and self._has_content(doc):
                return doc
            logger.debug("Today's note %s is empty, looking further back", today_path.name)

        candidates = sorted(_dated_files(root, self.extension), key=lambda t: t[1].name, reverse=True)
        for day, path in candidates:
            if day == today_iso:
                continue
            doc = self._load(day, path)
            if doc is not None and self._has_content(doc):
                return doc

        raise NoNoteFound(f"No non-empty daily note in {root}")
