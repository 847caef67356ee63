"""Tests for the command line interface."""

import json
import sqlite3

import psycopg2
import pytest
from datetime import datetime
from syllabus_tracker import main as main_module
from syllabus_tracker import supabase_store
from syllabus_tracker.main import main
from syllabus_tracker.store import SQLiteEventStore
from syllabus_tracker.event_extractor import extract_events

SYLLABUS_TEXT = "Quiz 1 due Oct 15\nMidterm exam Oct 16\nHomework 3 due 10/30\n"


@pytest.fixture
def fake_pdf(monkeypatch, tmp_path):
    """A PDF path whose text extraction is stubbed out."""
    path = tmp_path / "psyc101.pdf"
    path.write_bytes(b"%PDF-1.4")
    monkeypatch.setattr(
        main_module.PDFTextExtractor, "extract_text", lambda self, source: SYLLABUS_TEXT
    )
    return path


def test_extract_prints_events(fake_pdf, capsys):
    assert main(["extract", str(fake_pdf)]) == 0
    out = capsys.readouterr().out
    assert "Found 3 deadlines in psyc101.pdf" in out
    assert "Midterm exam Oct 16 (exam)" in out


def test_extract_json(fake_pdf, capsys):
    assert main(["extract", str(fake_pdf), "--json"]) == 0
    events = json.loads(capsys.readouterr().out)
    assert [e["due"] for e in events] == ["10/30", "Oct 15", "Oct 16"]


def test_extract_missing_file(tmp_path, capsys):
    assert main(["extract", str(tmp_path / "missing.pdf")]) == 1
    assert "not found" in capsys.readouterr().err


def test_upcoming(monkeypatch, tmp_path, capsys):
    db_path = tmp_path / "events.db"
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("SQLITE_DB_PATH", str(db_path))
    monkeypatch.setattr(main_module, "local_now", lambda timezone_name=None: datetime(2026, 10, 14, 9, 0))

    store = SQLiteEventStore(db_path=db_path)
    syllabus_id = store.create_syllabus("a@school.edu", "psyc101.pdf")
    store.insert_events("a@school.edu", syllabus_id, extract_events(SYLLABUS_TEXT))

    assert main(["upcoming", "--user", "a@school.edu", "--view", "week"]) == 0
    out = capsys.readouterr().out
    assert "Due This Week" in out
    assert out.index("Quiz 1 Oct 15") < out.index("Midterm exam Oct 16")
    assert "Homework 3 10/30" not in out


def test_upcoming_empty(monkeypatch, tmp_path, capsys):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("SQLITE_DB_PATH", str(tmp_path / "events.db"))
    assert main(["upcoming", "--user", "nobody@school.edu", "--view", "all"]) == 0
    assert "No deadlines found" in capsys.readouterr().out


def test_unknown_view_rejected():
    with pytest.raises(SystemExit):
        main(["upcoming", "--user", "a@school.edu", "--view", "year"])


def test_init_db_sqlite(monkeypatch, tmp_path, capsys):
    db_path = tmp_path / "fresh" / "events.db"
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("SQLITE_DB_PATH", str(db_path))

    assert main(["init-db"]) == 0
    assert "Tables ready" in capsys.readouterr().out

    conn = sqlite3.connect(db_path)
    tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    conn.close()
    assert {"syllabi", "events"} <= tables


class FakeCursor:
    def __init__(self, executed):
        self.executed = executed

    def execute(self, sql, params=None):
        self.executed.append(sql)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, executed):
        self.executed = executed
        self.committed = False

    def cursor(self, cursor_factory=None):
        return FakeCursor(self.executed)

    def commit(self):
        self.committed = True

    def close(self):
        pass


def test_init_db_supabase(monkeypatch, capsys):
    """Test init-db runs the Postgres schema when DATABASE_URL is set."""
    executed = []
    urls = []

    def fake_connect(url):
        urls.append(url)
        return FakeConnection(executed)

    monkeypatch.setenv("DATABASE_URL", "postgresql://user:pw@db.example.test/postgres")
    monkeypatch.setattr(supabase_store.psycopg2, "connect", fake_connect)

    assert main(["init-db"]) == 0
    assert "Tables ready in Supabase" in capsys.readouterr().out
    assert set(urls) == {"postgresql://user:pw@db.example.test/postgres"}
    assert executed == [supabase_store.SCHEMA_SQL]
    assert "ON DELETE CASCADE" in executed[0]


def test_init_db_supabase_unreachable(monkeypatch, capsys):
    def refuse(url):
        raise psycopg2.OperationalError("could not connect to server")

    monkeypatch.setenv("DATABASE_URL", "postgresql://user:pw@db.example.test/postgres")
    monkeypatch.setattr(supabase_store.psycopg2, "connect", refuse)

    assert main(["init-db"]) == 1
    assert "could not connect to server" in capsys.readouterr().err
