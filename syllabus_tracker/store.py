"""
Event storage for syllabus deadlines.

Uses SQLite for local development and Supabase PostgreSQL for production.
Automatically selects the appropriate store based on environment variables.

Two tables:
- syllabi: one row per uploaded document (owner, filename)
- events: deadline rows, each pointing at its syllabus; deleting a syllabus
  deletes its events
"""

import logging
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from .config import Settings
from .errors import PersistenceFailure
from .models import CandidateEvent, PersistedEvent, deserialize_datetime

logger = logging.getLogger(__name__)


class EventStore(ABC):
    """Interface shared by the SQLite and Supabase stores."""

    @abstractmethod
    def init_schema(self):
        """Create the syllabi and events tables if they don't exist."""

    @abstractmethod
    def create_syllabus(self, user_id: str, filename: str) -> int:
        """Insert one syllabus row and return its id."""

    @abstractmethod
    def insert_events(self, user_id: str, syllabus_id: int,
                      events: Iterable[CandidateEvent]) -> int:
        """Insert all events of one syllabus; return the number written."""

    @abstractmethod
    def fetch_events(self, user_id: Optional[str] = None, limit: int = 500) -> List[PersistedEvent]:
        """Load events, newest first, optionally for one owner."""

    @abstractmethod
    def delete_syllabus(self, syllabus_id: int) -> bool:
        """Delete a syllabus and its events; True if a row was removed."""


class SQLiteEventStore(EventStore):
    """Stores syllabi and events in a local SQLite file."""

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize the store and create tables if needed.

        Args:
            db_path: SQLite file. Defaults to ~/.syllabus_tracker/events.db
        """
        if db_path is None:
            db_path = Path.home() / ".syllabus_tracker" / "events.db"
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self.db_path = db_path
        self.init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        # SQLite leaves foreign keys off unless asked, ON DELETE CASCADE needs them
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def init_schema(self):
        """Create the syllabi and events tables if they don't exist."""
        conn = self._connect()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS syllabi (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    filename TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS events (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    syllabus_id INTEGER NOT NULL REFERENCES syllabi(id) ON DELETE CASCADE,
                    title TEXT NOT NULL,
                    type TEXT,
                    due_text TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def create_syllabus(self, user_id: str, filename: str) -> int:
        """Insert one syllabus row.

        Args:
            user_id: Owner of the document
            filename: Sanitized upload filename

        Returns:
            The new syllabus id

        Raises:
            PersistenceFailure: If the insert fails
        """
        try:
            conn = self._connect()
            try:
                cursor = conn.execute(
                    "INSERT INTO syllabi (user_id, filename, created_at) VALUES (?, ?, ?)",
                    (user_id, filename, datetime.now().isoformat())
                )
                conn.commit()
                return cursor.lastrowid
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error("Syllabus insert failed: %s", e)
            raise PersistenceFailure(str(e))

    def insert_events(self, user_id: str, syllabus_id: int,
                      events: Iterable[CandidateEvent]) -> int:
        """Insert all events of one syllabus in a single batch.

        Args:
            user_id: Owner of the events
            syllabus_id: Parent syllabus row
            events: Extracted events; `due` is stored as due_text

        Returns:
            Number of rows written (0 for an empty list, nothing is executed)

        Raises:
            PersistenceFailure: If the insert fails
        """
        created_at = datetime.now().isoformat()
        rows = [
            (user_id, syllabus_id, e.title, getattr(e.type, "value", e.type), e.due, created_at)
            for e in events
        ]
        if not rows:
            return 0

        try:
            conn = self._connect()
            try:
                conn.executemany(
                    """
                    INSERT INTO events (user_id, syllabus_id, title, type, due_text, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    rows
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error("Events insert failed for syllabus %s: %s", syllabus_id, e)
            raise PersistenceFailure(str(e))
        return len(rows)

    def fetch_events(self, user_id: Optional[str] = None, limit: int = 500) -> List[PersistedEvent]:
        """Load events, newest first.

        Args:
            user_id: Only return this owner's events. None returns everyone's.
            limit: Most rows to return

        Returns:
            List of PersistedEvent objects

        Raises:
            PersistenceFailure: If the query fails
        """
        query = "SELECT id, user_id, syllabus_id, title, type, due_text, created_at FROM events"
        params = []
        if user_id is not None:
            query += " WHERE user_id = ?"
            params.append(user_id)
        query += " ORDER BY created_at DESC, id DESC LIMIT ?"
        params.append(limit)

        try:
            conn = self._connect()
            try:
                rows = conn.execute(query, params).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error("Events fetch failed: %s", e)
            raise PersistenceFailure(str(e))

        return [
            PersistedEvent(
                id=row_id,
                user_id=owner,
                syllabus_id=syllabus_id,
                title=title,
                type=event_type,
                due_text=due_text,
                created_at=deserialize_datetime(created_at) if created_at else None,
            )
            for row_id, owner, syllabus_id, title, event_type, due_text, created_at in rows
        ]

    def delete_syllabus(self, syllabus_id: int) -> bool:
        """Delete a syllabus and, through the foreign key, all its events.

        Returns:
            True if a syllabus row was deleted
        """
        try:
            conn = self._connect()
            try:
                cursor = conn.execute("DELETE FROM syllabi WHERE id = ?", (syllabus_id,))
                conn.commit()
                return cursor.rowcount > 0
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error("Syllabus delete failed for %s: %s", syllabus_id, e)
            raise PersistenceFailure(str(e))


# Auto-select store based on environment
def get_event_store(settings: Settings) -> EventStore:
    """Get the appropriate event store for these settings.

    Returns:
        SupabaseEventStore if DATABASE_URL is set, otherwise SQLiteEventStore
    """
    if settings.database_url:
        # Use Supabase for production
        from .supabase_store import SupabaseEventStore
        return SupabaseEventStore(settings.database_url)
    # Use SQLite for local development
    return SQLiteEventStore(settings.sqlite_db_path)
