"""
Supabase-based event store for production deployment.

Uses Supabase PostgreSQL database instead of local SQLite.
Automatically used when DATABASE_URL environment variable is set.
"""

import logging
import os
from typing import Iterable, List, Optional

import psycopg2
from psycopg2.extras import RealDictCursor, execute_values

from .errors import PersistenceFailure
from .models import CandidateEvent, PersistedEvent
from .store import EventStore

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS syllabi (
    id BIGSERIAL PRIMARY KEY,
    user_id TEXT NOT NULL,
    filename TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS events (
    id BIGSERIAL PRIMARY KEY,
    user_id TEXT NOT NULL,
    syllabus_id BIGINT NOT NULL REFERENCES syllabi(id) ON DELETE CASCADE,
    title TEXT NOT NULL,
    type TEXT,
    due_text TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""


class SupabaseEventStore(EventStore):
    """Stores syllabi and events in Supabase PostgreSQL.

    Every operation opens its own connection and closes it when done.
    Database errors are logged and re-raised as PersistenceFailure carrying
    the database's message.
    """

    def __init__(self, database_url: Optional[str] = None):
        """Initialize Supabase event store.

        Args:
            database_url: PostgreSQL connection string. If None, reads from
                         DATABASE_URL environment variable.

        Raises:
            ValueError: If database_url is not provided and DATABASE_URL env var is not set
            ConnectionError: If the database cannot be reached
        """
        if database_url is None:
            database_url = os.getenv("DATABASE_URL")

        if not database_url:
            raise ValueError(
                "DATABASE_URL environment variable must be set for Supabase storage. "
                "For local development, use SQLiteEventStore instead."
            )

        self.database_url = database_url
        self._test_connection()

    def _test_connection(self):
        """Test database connection on initialization.

        Raises:
            ConnectionError: If connection fails
        """
        try:
            conn = psycopg2.connect(self.database_url)
            conn.close()
        except psycopg2.Error as e:
            raise ConnectionError(f"Failed to connect to Supabase: {e}")

    def _get_connection(self):
        """Get a database connection."""
        return psycopg2.connect(self.database_url)

    def init_schema(self):
        """Create the syllabi and events tables if they don't exist.

        Run once per database, e.g. through `syllabus-deadlines init-db`.
        """
        try:
            conn = self._get_connection()
            try:
                cur = conn.cursor()
                cur.execute(SCHEMA_SQL)
                conn.commit()
                cur.close()
            finally:
                conn.close()
        except psycopg2.Error as e:
            logger.error("Schema setup failed: %s", e)
            raise PersistenceFailure(str(e).strip())
        logger.info("Supabase schema is ready")

    def create_syllabus(self, user_id: str, filename: str) -> int:
        """Insert one syllabus row and return its id."""
        try:
            conn = self._get_connection()
            try:
                cur = conn.cursor()
                cur.execute(
                    "INSERT INTO syllabi (user_id, filename) VALUES (%s, %s) RETURNING id",
                    (user_id, filename)
                )
                syllabus_id = cur.fetchone()[0]
                conn.commit()
                cur.close()
                return syllabus_id
            finally:
                conn.close()
        except psycopg2.Error as e:
            logger.error("Syllabus insert failed: %s", e)
            raise PersistenceFailure(str(e).strip())

    def insert_events(self, user_id: str, syllabus_id: int,
                      events: Iterable[CandidateEvent]) -> int:
        """Insert all events of one syllabus in a single statement."""
        rows = [
            (user_id, syllabus_id, e.title, getattr(e.type, "value", e.type), e.due)
            for e in events
        ]
        if not rows:
            return 0

        try:
            conn = self._get_connection()
            try:
                cur = conn.cursor()
                execute_values(
                    cur,
                    "INSERT INTO events (user_id, syllabus_id, title, type, due_text) VALUES %s",
                    rows
                )
                conn.commit()
                cur.close()
            finally:
                conn.close()
        except psycopg2.Error as e:
            logger.error("Events insert failed for syllabus %s: %s", syllabus_id, e)
            raise PersistenceFailure(str(e).strip())
        return len(rows)

    def fetch_events(self, user_id: Optional[str] = None, limit: int = 500) -> List[PersistedEvent]:
        """Load events, newest first, optionally for one owner."""
        try:
            conn = self._get_connection()
            try:
                cur = conn.cursor(cursor_factory=RealDictCursor)
                if user_id is not None:
                    cur.execute(
                        """
                        SELECT id, user_id, syllabus_id, title, type, due_text, created_at
                        FROM events
                        WHERE user_id = %s
                        ORDER BY created_at DESC, id DESC
                        LIMIT %s
                        """,
                        (user_id, limit)
                    )
                else:
                    cur.execute(
                        """
                        SELECT id, user_id, syllabus_id, title, type, due_text, created_at
                        FROM events
                        ORDER BY created_at DESC, id DESC
                        LIMIT %s
                        """,
                        (limit,)
                    )
                rows = cur.fetchall()
                cur.close()
            finally:
                conn.close()
        except psycopg2.Error as e:
            logger.error("Events fetch failed: %s", e)
            raise PersistenceFailure(str(e).strip())

        return [
            PersistedEvent(
                id=row["id"],
                user_id=row["user_id"],
                syllabus_id=row["syllabus_id"],
                title=row["title"],
                type=row["type"],
                due_text=row["due_text"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def delete_syllabus(self, syllabus_id: int) -> bool:
        """Delete a syllabus; its events go with it (ON DELETE CASCADE)."""
        try:
            conn = self._get_connection()
            try:
                cur = conn.cursor()
                cur.execute("DELETE FROM syllabi WHERE id = %s", (syllabus_id,))
                deleted = cur.rowcount > 0
                conn.commit()
                cur.close()
                return deleted
            finally:
                conn.close()
        except psycopg2.Error as e:
            logger.error("Syllabus delete failed for %s: %s", syllabus_id, e)
            raise PersistenceFailure(str(e).strip())
