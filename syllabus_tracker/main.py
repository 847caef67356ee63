"""
Main CLI entry point for the syllabus deadline tracker.

Commands:
    extract PDF       Print the deadlines found in a syllabus PDF
    upcoming          Print a user's stored deadlines for one dashboard view
    init-db           Create the storage tables (SQLite or Supabase)
    serve             Run the web app (development server)
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import get_settings
from .due_dates import local_now
from .errors import PersistenceFailure
from .event_extractor import extract_events
from .models import EVENT_TYPE_VALUES
from .pdf_extractor import PDFTextExtractor
from .store import get_event_store
from .windows import DEFAULT_VIEW, VIEWS, filter_and_sort, window_range


def cmd_extract(args) -> int:
    """Extract deadlines from a PDF and print them."""
    pdf_path = Path(args.pdf_path)
    if not pdf_path.exists():
        print(f"Error: PDF file not found: {pdf_path}", file=sys.stderr)
        return 1

    extractor = PDFTextExtractor(max_pages=args.max_pages)
    text = extractor.extract_text(pdf_path)
    events = extract_events(text)

    if args.json:
        print(json.dumps([e.to_dict() for e in events], indent=2))
        return 0

    print(f"Found {len(events)} deadlines in {pdf_path.name}")
    for event in events:
        print(f"  {event.due:<12} {event.title} ({event.type.value})")
    return 0


def cmd_upcoming(args) -> int:
    """Print a user's stored deadlines for one view."""
    settings = get_settings()
    now = local_now(settings.timezone)
    window = window_range(args.view, now)

    try:
        store = get_event_store(settings)
        events = store.fetch_events(user_id=args.user, limit=settings.event_fetch_limit)
    except PersistenceFailure as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    resolved = filter_and_sort(events, window, args.type, args.query, now)

    print(f"{window.label}: {window.start:%a %b %d %Y} -> {window.end:%a %b %d %Y}")
    if not resolved:
        print("No deadlines found for this view.")
        return 0
    for event in resolved:
        print(f"  {event.due_date:%a %b %d %H:%M}  {event.title} ({event.type})")
    return 0


def cmd_init_db(args) -> int:
    """Create the storage tables for the configured database."""
    settings = get_settings()
    try:
        store = get_event_store(settings)
        store.init_schema()
    except (ConnectionError, PersistenceFailure) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    target = "Supabase" if settings.database_url else settings.sqlite_db_path
    print(f"Tables ready in {target}")
    return 0


def cmd_serve(args) -> int:
    """Run the Flask development server."""
    from .app import create_app

    create_app().run(debug=args.debug, host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find deadlines in syllabus PDFs and list the upcoming ones"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser("extract", help="Print deadlines found in a PDF")
    extract_parser.add_argument("pdf_path", type=str, help="Path to syllabus PDF file")
    extract_parser.add_argument("--json", action="store_true", help="Print events as JSON")
    extract_parser.add_argument(
        "--max-pages",
        type=int,
        default=5,
        help="Number of pages to read from the start of the PDF (default: 5)"
    )
    extract_parser.set_defaults(func=cmd_extract)

    upcoming_parser = subparsers.add_parser("upcoming", help="Print stored deadlines for a view")
    upcoming_parser.add_argument("--user", required=True, help="Owner of the events (login email)")
    upcoming_parser.add_argument("--view", choices=VIEWS, default=DEFAULT_VIEW)
    upcoming_parser.add_argument("--type", choices=["all"] + EVENT_TYPE_VALUES, default="all")
    upcoming_parser.add_argument("--query", default="", help="Only events containing this text")
    upcoming_parser.set_defaults(func=cmd_upcoming)

    init_db_parser = subparsers.add_parser("init-db", help="Create the storage tables")
    init_db_parser.set_defaults(func=cmd_init_db)

    serve_parser = subparsers.add_parser("serve", help="Run the web app")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=5000)
    serve_parser.add_argument("--debug", action="store_true")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, get_settings().log_level, logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
