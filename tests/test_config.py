"""Unit tests for settings."""

import pytest
from pathlib import Path
from syllabus_tracker.config import DEFAULT_SQLITE_PATH, get_settings

ENV_VARS = [
    "SECRET_KEY", "DATABASE_URL", "SQLITE_DB_PATH", "MAX_UPLOAD_BYTES", "PDF_MAX_PAGES",
    "MIN_TEXT_CHARS", "PREVIEW_CHARS", "EVENT_FETCH_LIMIT", "APP_TIMEZONE", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = get_settings()
    assert settings.database_url is None
    assert settings.sqlite_db_path == DEFAULT_SQLITE_PATH
    assert settings.max_upload_bytes == 16 * 1024 * 1024
    assert settings.pdf_max_pages == 5
    assert settings.min_text_chars == 50
    assert settings.preview_chars == 1500
    assert settings.event_fetch_limit == 500
    assert settings.timezone is None
    assert settings.log_level == "INFO"


def test_values_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/test")
    monkeypatch.setenv("SQLITE_DB_PATH", str(tmp_path / "x.db"))
    monkeypatch.setenv("PDF_MAX_PAGES", "3")
    monkeypatch.setenv("APP_TIMEZONE", "America/Toronto")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()
    assert settings.database_url == "postgresql://localhost/test"
    assert settings.sqlite_db_path == Path(tmp_path / "x.db")
    assert settings.pdf_max_pages == 3
    assert settings.timezone == "America/Toronto"
    assert settings.log_level == "DEBUG"


def test_empty_database_url_means_sqlite(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "")
    assert get_settings().database_url is None


def test_bad_integer(monkeypatch):
    monkeypatch.setenv("EVENT_FETCH_LIMIT", "lots")
    with pytest.raises(ValueError):
        get_settings()
