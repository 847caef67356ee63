"""
Due-date resolution.

Turns the free-text due fragment stored with an event ("Oct 3", "12/15")
into a concrete local datetime. Syllabi rarely give a time, so every
deadline lands at 23:59 on its day. No year is ever stored: the year is
whatever the current year is when the date gets resolved.
"""

from datetime import datetime, timedelta
from typing import Optional

from pytz import timezone

from .event_extractor import MONTH_DAY_PATTERN, NUMERIC_DATE_PATTERN

DUE_HOUR = 23
DUE_MINUTE = 59

# Zero-based month index for every name the month pattern can match
MONTH_INDEX = {
    "jan": 0, "january": 0,
    "feb": 1, "february": 1,
    "mar": 2, "march": 2,
    "apr": 3, "april": 3,
    "may": 4,
    "jun": 5, "june": 5,
    "jul": 6, "july": 6,
    "aug": 7, "august": 7,
    "sep": 8, "sept": 8, "september": 8,
    "oct": 9, "october": 9,
    "nov": 10, "november": 10,
    "dec": 11, "december": 11,
}


def local_now(timezone_name: Optional[str] = None) -> datetime:
    """Current wall-clock time as a naive datetime.

    Args:
        timezone_name: Optional pytz zone name (e.g. "America/Toronto").
                       If None, the host's local time is used.

    Returns:
        Naive datetime of the local time in that zone
    """
    if timezone_name:
        return datetime.now(timezone(timezone_name)).replace(tzinfo=None)
    return datetime.now()


def _due_datetime(year: int, month_index: int, day: int) -> datetime:
    # Days past the end of the month roll into the next one ("Feb 30" -> Mar 2)
    first = datetime(year, month_index + 1, 1, DUE_HOUR, DUE_MINUTE)
    return first + timedelta(days=day - 1)


def resolve_due(due_text: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Resolve a due fragment to a concrete datetime.

    Tries the month-name form first ("Oct 3", "Sept. 14"), then the numeric
    form ("10/3", "10-3", "10.3"). The year is taken from `now`.

    Args:
        due_text: Free-text due fragment, usually CandidateEvent.due
        now: Reference moment for the year. Defaults to the local clock.

    Returns:
        datetime at 23:59:00 on that day, or None if no date pattern matches
        or the month name is not in MONTH_INDEX
    """
    text = (due_text or "").strip()
    if not text:
        return None

    year = (now or local_now()).year

    word_match = MONTH_DAY_PATTERN.search(text)
    if word_match:
        month_index = MONTH_INDEX.get(word_match.group(1).lower().replace(".", ""))
        if month_index is None:
            return None
        return _due_datetime(year, month_index, int(word_match.group(2)))

    numeric_match = NUMERIC_DATE_PATTERN.search(text)
    if numeric_match:
        return _due_datetime(year, int(numeric_match.group(1)) - 1, int(numeric_match.group(2)))

    return None
