"""
Dashboard windows.

Builds the date range behind each dashboard view (tomorrow, this week, this
month, all upcoming) and filters a list of stored events down to the ones
due inside it. Unlike extraction, which orders events by their due text,
the dashboard orders events by their real due date.
"""

import calendar
from datetime import datetime, time, timedelta
from typing import Iterable, List, Optional

from .due_dates import local_now, resolve_due
from .models import DateWindow, EventType, PersistedEvent, ResolvedEvent

VIEWS = ("tomorrow", "week", "month", "all")
DEFAULT_VIEW = "week"

VIEW_LABELS = {
    "tomorrow": "Due Tomorrow",
    "week": "Due This Week",
    "month": "Due This Month",
    "all": "All Upcoming",
}

END_OF_DAY = time(23, 59, 59, 999000)


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), END_OF_DAY)


def start_of_week(moment: datetime) -> datetime:
    """Monday 00:00 of the week containing `moment` (Sunday belongs to the week before it)."""
    return start_of_day(moment) - timedelta(days=moment.weekday())


def window_range(view: str, now: Optional[datetime] = None) -> DateWindow:
    """Build the inclusive date range for a dashboard view.

    Args:
        view: One of "tomorrow", "week", "month", "all"
        now: Reference moment. Defaults to the local clock.

    Returns:
        DateWindow with inclusive start and end

    Raises:
        ValueError: If the view name is unknown
    """
    if view not in VIEW_LABELS:
        raise ValueError(f"Unknown view '{view}'. Expected one of: {', '.join(VIEWS)}")

    now = now or local_now()

    if view == "tomorrow":
        tomorrow = now + timedelta(days=1)
        start, end = start_of_day(tomorrow), end_of_day(tomorrow)
    elif view == "week":
        start = start_of_week(now)
        end = end_of_day(start + timedelta(days=6))
    elif view == "month":
        last_day = calendar.monthrange(now.year, now.month)[1]
        start = datetime(now.year, now.month, 1)
        end = datetime.combine(now.date().replace(day=last_day), END_OF_DAY)
    else:
        # Not unbounded: everything from today through the end of next year
        start = start_of_day(now)
        end = datetime.combine(now.date().replace(year=now.year + 1, month=12, day=31), END_OF_DAY)

    return DateWindow(view=view, label=VIEW_LABELS[view], start=start, end=end)


def resolve_events(events: Iterable[PersistedEvent],
                   now: Optional[datetime] = None) -> List[ResolvedEvent]:
    """Resolve every event's due text, keeping the ones that don't parse.

    Args:
        events: Stored events
        now: Reference moment for the year. Defaults to the local clock.

    Returns:
        One ResolvedEvent per input event, in input order. Events with no
        recognizable date have due_date=None.
    """
    now = now or local_now()
    return [ResolvedEvent(event=e, due_date=resolve_due(e.due_text, now)) for e in events]


def _matches_query(event: ResolvedEvent, query: str) -> bool:
    title = (event.event.title or "").lower()
    due = (event.event.due_text or "").lower()
    event_type = (event.event.type or "").lower()
    return query in title or query in due or query in event_type


def filter_and_sort(events: Iterable[PersistedEvent],
                    window: DateWindow,
                    type_filter: str = "all",
                    query: str = "",
                    now: Optional[datetime] = None) -> List[ResolvedEvent]:
    """Filter stored events for a dashboard view and order them by due date.

    Steps:
    1. Resolve each event's due text; drop events with no date
    2. Keep events due inside the window (both ends inclusive)
    3. If type_filter is not "all", keep events of that type
       (a missing type counts as "other")
    4. If query is not blank, keep events whose title, due text or type
       contains it (case-insensitive)
    5. Sort by resolved due date, earliest first

    Args:
        events: Stored events, e.g. from EventStore.fetch_events()
        window: Range from window_range()
        type_filter: "all" or one of the EventType values
        query: Free-text search, may be empty
        now: Reference moment for resolving due dates. Defaults to the local clock.

    Returns:
        List of ResolvedEvent objects, all with a due_date
    """
    resolved = [e for e in resolve_events(events, now) if e.due_date is not None]
    in_range = [e for e in resolved if window.contains(e.due_date)]

    if type_filter and type_filter != "all":
        in_range = [e for e in in_range if (e.event.type or EventType.OTHER.value) == type_filter]

    q = (query or "").strip().lower()
    if q:
        in_range = [e for e in in_range if _matches_query(e, q)]

    in_range.sort(key=lambda e: e.due_date)
    return in_range
