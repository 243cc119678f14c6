"""Tests for locating the daily notes folder and selecting the current note."""

import tempfile
from datetime import date
from pathlib import Path

import pytest

from dailytile.core.errors import FolderNotFound, NoNoteFound, NotFound
from dailytile.core.selector import FolderResolver, NoteSelector, parse_dated_name


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _write(folder: Path, name: str, text: str) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    p = folder / name
    p.write_text(text, encoding="utf-8")
    return p


def test_parse_dated_name():
    """Test only zero-padded real dates are accepted."""
    assert parse_dated_name("2024-01-02.md") == "2024-01-02"
    assert parse_dated_name("2024-1-2.md") is None
    assert parse_dated_name("2024-13-01.md") is None
    assert parse_dated_name("2024-02-30.md") is None
    assert parse_dated_name("2024-01-02.txt") is None
    assert parse_dated_name("2024-01-02.txt", extension="txt") == "2024-01-02"
    assert parse_dated_name("x2024-01-02.md") is None
    assert parse_dated_name("2024-01-02.md.bak") is None


def test_resolver_folder_itself(temp_dir):
    """Test a folder holding dated notes is the documents root."""
    _write(temp_dir, "2024-01-02.md", "hi")
    assert FolderResolver().resolve(temp_dir) == temp_dir


def test_resolver_prefers_exact_label(temp_dir):
    """Test the exactly-named child wins over a hinted one."""
    (temp_dir / "Archive daily").mkdir()
    (temp_dir / "Daily Notes").mkdir()
    assert FolderResolver().resolve(temp_dir) == temp_dir / "Daily Notes"


def test_resolver_falls_back_to_hint(temp_dir):
    """Test a child containing the hint, case-insensitively."""
    (temp_dir / "Projects").mkdir()
    (temp_dir / "My DAILY log").mkdir()
    assert FolderResolver().resolve(temp_dir) == temp_dir / "My DAILY log"


def test_resolver_ignores_files_matching_hint(temp_dir):
    """Test only directories are considered as children."""
    _write(temp_dir, "daily.md", "not a folder")
    with pytest.raises(FolderNotFound):
        FolderResolver().resolve(temp_dir)


def test_resolver_not_found(temp_dir):
    """Test missing folders raise NotFound."""
    with pytest.raises(NotFound):
        FolderResolver().resolve(temp_dir / "missing")
    with pytest.raises(FolderNotFound):
        FolderResolver().resolve(temp_dir)


def test_select_today_when_present(temp_dir):
    """Test today's note wins when it has content."""
    _write(temp_dir, "2024-01-01.md", "older")
    _write(temp_dir, "2024-01-02.md", "today")

    doc = NoteSelector().select(temp_dir, today=date(2024, 1, 2))
    assert doc.date == "2024-01-02"
    assert doc.raw == "today"


def test_select_skips_blank_today(temp_dir):
    """Test a blank today falls back to the latest non-blank note."""
    _write(temp_dir, "2024-01-01.md", "   \n")
    _write(temp_dir, "2024-01-02.md", "content")
    _write(temp_dir, "2024-01-03.md", "\n\n")

    doc = NoteSelector().select(temp_dir, today=date(2024, 1, 3))
    assert doc.date == "2024-01-02"


def test_select_blank_older_and_filled_today(temp_dir):
    """Test blank 01-01 and filled 01-02 with reference 01-02."""
    _write(temp_dir, "2024-01-01.md", "")
    _write(temp_dir, "2024-01-02.md", "filled")

    doc = NoteSelector().select(temp_dir, today=date(2024, 1, 2))
    assert doc.date == "2024-01-02"


def test_select_missing_today(temp_dir):
    """Test a missing today falls back to the latest note."""
    _write(temp_dir, "2024-01-02.md", "yesterday")

    doc = NoteSelector().select(temp_dir, today=date(2024, 1, 3))
    assert doc.date == "2024-01-02"


def test_select_frontmatter_only_counts_as_blank(temp_dir):
    """Test a note holding only front matter is skipped."""
    _write(temp_dir, "2024-01-01.md", "real text")
    _write(temp_dir, "2024-01-02.md", "---\ntemplate: daily\n---\n\n")

    doc = NoteSelector().select(temp_dir, today=date(2024, 1, 2))
    assert doc.date == "2024-01-01"


def test_select_orders_by_date_not_mtime(temp_dir):
    """Test ordering follows the dated name, ignoring odd names."""
    _write(temp_dir, "2023-12-31.md", "old year")
    _write(temp_dir, "2024-02-01.md", "newest")
    _write(temp_dir, "2024-1-15.md", "not zero padded")
    _write(temp_dir, "notes.md", "unrelated")

    doc = NoteSelector().select(temp_dir, today=date(2030, 1, 1))
    assert doc.date == "2024-02-01"


def test_select_ignores_directories_named_like_notes(temp_dir):
    """Test a directory with a dated name is not a note."""
    (temp_dir / "2024-03-01.md").mkdir()
    _write(temp_dir, "2024-02-01.md", "file")

    doc = NoteSelector().select(temp_dir, today=date(2024, 3, 1))
    assert doc.date == "2024-02-01"


def test_select_no_note(temp_dir):
    """Test NoNoteFound when every note is blank."""
    _write(temp_dir, "2024-01-01.md", "")
    with pytest.raises(NoNoteFound):
        NoteSelector().select(temp_dir, today=date(2024, 1, 1))


def test_select_skips_undecodable_file(temp_dir):
    """Test a file that is not UTF-8 is skipped."""
    _write(temp_dir, "2024-01-01.md", "good")
    (temp_dir / "2024-01-02.md").write_bytes(b"\xff\xfe\xfa broken")

    doc = NoteSelector().select(temp_dir, today=date(2024, 1, 2))
    assert doc.date == "2024-01-01"


def test_unlistable_folder_is_not_found(temp_dir, monkeypatch):
    """Test a folder that cannot be listed counts as not found."""
    _write(temp_dir, "2024-01-02.md", "hi")

    def refuse(self):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "iterdir", refuse)

    with pytest.raises(FolderNotFound):
        FolderResolver().resolve(temp_dir)
    with pytest.raises(NotFound):
        NoteSelector().select(temp_dir, today=date(2024, 1, 3))
