"""
Application settings.

Everything is read from environment variables so the same code runs locally
(SQLite file in the home directory) and in production (Supabase, selected by
setting DATABASE_URL).

Env vars:
- SECRET_KEY: Flask session key
- DATABASE_URL: PostgreSQL connection string; when set, Supabase storage is used
- SQLITE_DB_PATH: SQLite file for local storage (default ~/.syllabus_tracker/events.db)
- MAX_UPLOAD_BYTES: largest accepted upload (default 16MB)
- PDF_MAX_PAGES: pages read from each PDF (default 5)
- MIN_TEXT_CHARS: less extracted text than this means "no usable text" (default 50)
- PREVIEW_CHARS: length of the text preview returned after upload (default 1500)
- EVENT_FETCH_LIMIT: most events loaded for the dashboard (default 500)
- APP_TIMEZONE: pytz zone used as the dashboard clock (default: host local time)
- LOG_LEVEL: logging level name (default INFO)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_SQLITE_PATH = Path.home() / ".syllabus_tracker" / "events.db"


@dataclass(frozen=True)
class Settings:
    secret_key: str = "dev-secret-key-change-in-production"
    database_url: Optional[str] = None
    sqlite_db_path: Path = DEFAULT_SQLITE_PATH
    max_upload_bytes: int = 16 * 1024 * 1024  # 16MB
    pdf_max_pages: int = 5
    min_text_chars: int = 50
    preview_chars: int = 1500
    event_fetch_limit: int = 500
    timezone: Optional[str] = None
    log_level: str = "INFO"


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{value}'")


def get_settings() -> Settings:
    """Load settings from the environment.

    Returns:
        Settings with defaults filled in for anything not set

    Raises:
        ValueError: If a numeric variable is not an integer
    """
    sqlite_path = os.getenv("SQLITE_DB_PATH")
    return Settings(
        secret_key=os.getenv("SECRET_KEY", "dev-secret-key-change-in-production"),
        database_url=os.getenv("DATABASE_URL") or None,
        sqlite_db_path=Path(sqlite_path).expanduser() if sqlite_path else DEFAULT_SQLITE_PATH,
        max_upload_bytes=_get_int("MAX_UPLOAD_BYTES", 16 * 1024 * 1024),
        pdf_max_pages=_get_int("PDF_MAX_PAGES", 5),
        min_text_chars=_get_int("MIN_TEXT_CHARS", 50),
        preview_chars=_get_int("PREVIEW_CHARS", 1500),
        event_fetch_limit=_get_int("EVENT_FETCH_LIMIT", 500),
        timezone=os.getenv("APP_TIMEZONE") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
