"""
Deadline extraction from syllabus text.

Turns the raw text of a syllabus into a list of candidate deadline events.
A line becomes an event when it mentions a graded item (exam, quiz,
homework, ...) AND contains a date like "Oct 3" or "10/3". Everything here
is pure: no I/O, no state between calls.
"""

import re
from typing import List, Optional, Tuple

from .models import CandidateEvent, EventType

# Patterns are ASCII-only: under plain IGNORECASE "ſ" matches "s" and the
# captured month name is then missing from MONTH_INDEX.

MAX_EVENTS = 60
MAX_TITLE_LENGTH = 140
ELLIPSIS = "…"

# Month name followed by a day: "October 3", "Oct. 3", "Sept 14"
MONTH_DAY_PATTERN = re.compile(
    r'\b(Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?|'
    r'Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)'
    r'\.?\s+(0?[1-9]|[12]\d|3[01])\b',
    re.IGNORECASE | re.ASCII,
)

# Numeric month/day: "10/3", "10-3", "10.3"
NUMERIC_DATE_PATTERN = re.compile(r'\b(0?[1-9]|1[0-2])[/\-.](0?[1-9]|[12]\d|3[01])\b', re.ASCII)

# Checked in order, the first category that matches wins
TYPE_KEYWORDS: List[Tuple[EventType, "re.Pattern[str]"]] = [
    (EventType.EXAM, re.compile(r'\b(exam|midterm|final)\b', re.IGNORECASE | re.ASCII)),
    (EventType.QUIZ, re.compile(r'\b(quiz)\b', re.IGNORECASE | re.ASCII)),
    (EventType.ASSIGNMENT, re.compile(r'\b(homework|hw|assignment|paper|essay)\b', re.IGNORECASE | re.ASCII)),
    (EventType.PROJECT, re.compile(r'\b(project|presentation|proposal)\b', re.IGNORECASE | re.ASCII)),
    (EventType.READING, re.compile(r'\b(reading|chapter|ch\.)\b', re.IGNORECASE | re.ASCII)),
]

# "due", "Due:", "DEADLINE -" and the spacing around them
DUE_MARKER_PATTERN = re.compile(r'\b(due|deadline)\b\s*[:\-]?\s*', re.IGNORECASE | re.ASCII)
WHITESPACE_PATTERN = re.compile(r'\s+')
LINE_BREAK_PATTERN = re.compile(r'\r?\n')


def split_lines(text: str) -> List[str]:
    """Split text into trimmed, non-empty lines."""
    lines = (line.strip() for line in LINE_BREAK_PATTERN.split(text or ""))
    return [line for line in lines if line]


def classify_line(line: str) -> Optional[EventType]:
    """Return the first keyword category the line mentions, or None."""
    for event_type, pattern in TYPE_KEYWORDS:
        if pattern.search(line):
            return event_type
    return None


def find_due_fragment(line: str) -> Optional[str]:
    """Find the date fragment in a line.

    Month-name dates win over numeric ones when a line has both, so
    "Quiz 2 (week 3/4) on Sept 14" gives "Sept 14".

    Args:
        line: A single trimmed line of text

    Returns:
        The matched text, or None if the line has no recognizable date
    """
    match = MONTH_DAY_PATTERN.search(line) or NUMERIC_DATE_PATTERN.search(line)
    if match is None:
        return None
    return match.group(0).strip() or None


def clean_title(line: str) -> str:
    """Strip due/deadline markers, collapse spaces and cap the length."""
    title = DUE_MARKER_PATTERN.sub("", line)
    title = WHITESPACE_PATTERN.sub(" ", title).strip()
    if len(title) > MAX_TITLE_LENGTH:
        title = title[:MAX_TITLE_LENGTH] + ELLIPSIS
    return title


def extract_events(text: str) -> List[CandidateEvent]:
    """Extract candidate deadline events from syllabus text.

    This function scans the text line by line:
    1. Lines without a graded-item keyword are skipped
    2. Lines without a date fragment are skipped
    3. The remaining lines become events, typed by their first keyword
    4. Duplicates (same title and due text) are dropped, first one wins
    5. The result is sorted by the due text as a plain string
    6. At most 60 events are returned

    The sort in step 5 is a string sort, not a calendar sort: "12/25"
    comes before "3/1" and "Dec 1" comes before "Oct 3".

    Args:
        text: Raw document text, may be empty

    Returns:
        List of CandidateEvent objects. Never raises for odd input, an
        empty or unmatched text simply gives an empty list.
    """
    events = []
    for line in split_lines(text):
        event_type = classify_line(line)
        if event_type is None:
            continue

        due = find_due_fragment(line)
        if not due:
            continue

        events.append(CandidateEvent(
            title=clean_title(line),
            type=event_type,
            due=due,
            source_line=line,
        ))

    seen = set()
    unique = []
    for event in events:
        key = (event.title, event.due)
        if key in seen:
            continue
        seen.add(key)
        unique.append(event)

    unique.sort(key=lambda e: e.due)
    return unique[:MAX_EVENTS]
