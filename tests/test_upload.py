"""Unit tests for upload processing."""

import sqlite3

import pytest
from syllabus_tracker.config import Settings
from syllabus_tracker.errors import (
    MissingInput, PersistenceFailure, Unauthenticated, UnreadableContent
)
from syllabus_tracker.store import SQLiteEventStore
from syllabus_tracker.upload import UploadProcessor, is_usable_text, safe_filename

SYLLABUS_TEXT = """PSYC 101 Introduction to Psychology, Fall 2026
Quiz 1 due Oct 15
Midterm exam Oct 16 in class
Homework 3 due 10/30
Office hours Oct 15
"""


class FakeTextExtractor:
    """Returns fixed text and remembers what it was given."""

    def __init__(self, text):
        self.text = text
        self.sources = []

    def extract_text(self, source):
        self.sources.append(source)
        return self.text


class FailingEventsStore(SQLiteEventStore):
    def insert_events(self, user_id, syllabus_id, events):
        raise PersistenceFailure("events table is read-only")


@pytest.fixture
def store(tmp_path):
    return SQLiteEventStore(db_path=tmp_path / "events.db")


def make_processor(store, text=SYLLABUS_TEXT, **settings):
    return UploadProcessor(store, text_extractor=FakeTextExtractor(text), settings=Settings(**settings))


def test_upload_saves_events(store):
    processor = make_processor(store)
    result = processor.process("a@school.edu", "psyc101.pdf", b"%PDF-1.4")

    assert result.message == "Saved! Found 3 deadlines."
    assert [e.due for e in result.events] == ["10/30", "Oct 15", "Oct 16"]
    assert result.preview == SYLLABUS_TEXT
    assert processor.text_extractor.sources == [b"%PDF-1.4"]

    stored = store.fetch_events(user_id="a@school.edu")
    assert len(stored) == 3
    assert {e.syllabus_id for e in stored} == {result.syllabus_id}


def test_preview_is_truncated(store):
    processor = make_processor(store, preview_chars=20)
    result = processor.process("a@school.edu", "psyc101.pdf", b"%PDF-1.4")
    assert result.preview == SYLLABUS_TEXT[:20]


def test_requires_user(store):
    with pytest.raises(Unauthenticated):
        make_processor(store).process(None, "psyc101.pdf", b"%PDF-1.4")


def test_requires_file(store):
    with pytest.raises(MissingInput) as exc_info:
        make_processor(store).process("a@school.edu", None, None)
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("text", ["", "   \n  ", "Scanned page 1", "x" * 49])
def test_rejects_text_below_threshold(store, text):
    with pytest.raises(UnreadableContent) as exc_info:
        make_processor(store, text=text).process("a@school.edu", "scan.pdf", b"%PDF-1.4")
    assert "text-based" in exc_info.value.message
    assert store.fetch_events() == []


def test_text_with_no_deadlines_still_saves_syllabus(store, tmp_path):
    text = "This course has no graded work listed anywhere in this outline at all."
    result = make_processor(store, text=text).process("a@school.edu", "notes.pdf", b"%PDF-1.4")
    assert result.message == "Saved! Found 0 deadlines."
    assert result.events == []

    conn = sqlite3.connect(tmp_path / "events.db")
    count = conn.execute("SELECT COUNT(*) FROM syllabi").fetchone()[0]
    conn.close()
    assert count == 1


def test_failed_events_insert_leaves_syllabus_row(tmp_path):
    """Test the syllabus row stays when its events fail to save."""
    store = FailingEventsStore(db_path=tmp_path / "events.db")
    with pytest.raises(PersistenceFailure) as exc_info:
        make_processor(store).process("a@school.edu", "psyc101.pdf", b"%PDF-1.4")
    assert exc_info.value.message == "events table is read-only"

    conn = sqlite3.connect(tmp_path / "events.db")
    rows = conn.execute("SELECT user_id, filename FROM syllabi").fetchall()
    conn.close()
    assert rows == [("a@school.edu", "psyc101.pdf")]


def test_filename_is_sanitized(store, tmp_path):
    make_processor(store).process("a@school.edu", "../../my syllabus.pdf", b"%PDF-1.4")
    conn = sqlite3.connect(tmp_path / "events.db")
    filename = conn.execute("SELECT filename FROM syllabi").fetchone()[0]
    conn.close()
    assert filename == "my_syllabus.pdf"


@pytest.mark.parametrize("filename,expected", [
    ("outline.pdf", "outline.pdf"),
    (None, "syllabus.pdf"),
    ("", "syllabus.pdf"),
    ("???", "syllabus.pdf"),
])
def test_safe_filename(filename, expected):
    assert safe_filename(filename) == expected


def test_is_usable_text():
    assert is_usable_text("x" * 50)
    assert is_usable_text("   " + "x" * 50 + "   ")
    assert not is_usable_text("   " + "x" * 49 + "   ")
    assert not is_usable_text(None)
