"""
Data models for the syllabus deadline tracker.

This module defines all the data structures used throughout the application.
All models use Python dataclasses, which keep the records small and give us
__init__ and __repr__ for free.

These models represent:
- Event types (the closed set of deadline categories)
- Candidate events pulled out of syllabus text
- Event rows as they come back from storage
- Resolved events and date windows for the dashboard
- The payload returned by an upload
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class EventType(str, Enum):
    """Category of a deadline.

    Values are plain strings so they compare equal to the text stored in
    the database and serialize to JSON without a custom encoder.
    """
    EXAM = "exam"
    QUIZ = "quiz"
    ASSIGNMENT = "assignment"
    PROJECT = "project"
    READING = "reading"
    OTHER = "other"


EVENT_TYPE_VALUES = [t.value for t in EventType]


@dataclass
class CandidateEvent:
    """A deadline found in one line of syllabus text.

    The title is the cleaned line, `due` is the date fragment exactly as it
    appeared (for example "Oct 3" or "12/15"). Nothing here has been turned
    into a real date yet; that happens on display.
    """
    title: str                  # Cleaned line, "due"/"deadline" markers removed
    type: EventType             # First matching keyword category
    due: str                    # Date fragment as found in the line, never empty
    source_line: str            # The trimmed line it came from

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape used by the upload response."""
        return {
            "title": self.title,
            "type": self.type.value,
            "due": self.due,
            "sourceLine": self.source_line,
        }


@dataclass
class PersistedEvent:
    """An event row as stored.

    Created once in a batch insert for a single syllabus and never updated.
    `type` is kept as the stored string and may be empty for rows written
    by other tools.
    """
    title: str
    type: Optional[str]
    due_text: str
    user_id: Optional[str] = None
    syllabus_id: Optional[int] = None
    created_at: Optional[datetime] = None
    id: Optional[int] = None


@dataclass
class ResolvedEvent:
    """A persisted event with its due text turned into a concrete date.

    Built fresh for every dashboard request. `due_date` is None when the due
    text has no recognizable date.
    """
    event: PersistedEvent
    due_date: Optional[datetime]

    @property
    def title(self) -> str:
        return self.event.title

    @property
    def type(self) -> str:
        return self.event.type or EventType.OTHER.value

    @property
    def due_text(self) -> str:
        return self.event.due_text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.event.title,
            "type": self.type,
            "due_text": self.event.due_text,
            "due_date": serialize_datetime(self.due_date) if self.due_date else None,
            "created_at": serialize_datetime(self.event.created_at) if self.event.created_at else None,
        }


@dataclass
class DateWindow:
    """Inclusive [start, end] range for one dashboard view."""
    view: str                   # "tomorrow", "week", "month" or "all"
    label: str                  # Heading shown above the list, e.g. "Due This Week"
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


@dataclass
class UploadResult:
    """What an upload hands back to the caller."""
    message: str
    preview: str
    events: List[CandidateEvent] = field(default_factory=list)
    syllabus_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "preview": self.preview,
            "events": [e.to_dict() for e in self.events],
            "syllabusId": self.syllabus_id,
        }


# Serialization helpers for JSON conversion

def serialize_datetime(dt: datetime) -> str:
    """Convert datetime to ISO format string."""
    return dt.isoformat()


def deserialize_datetime(s: str) -> datetime:
    """Convert ISO format string to datetime."""
    return datetime.fromisoformat(s)
