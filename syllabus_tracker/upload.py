"""
Syllabus upload processing.

Runs one upload from start to finish:
1. Checks there is a signed-in user and a file
2. Extracts the text of the first pages
3. Rejects files with too little text (scans)
4. Extracts deadline events from the text
5. Saves a syllabus row, then its events
6. Returns a message, a text preview and the events

The two saves are not wrapped in a transaction. If the events insert fails
the syllabus row stays behind with no events.
"""

import logging
from typing import Optional

from werkzeug.utils import secure_filename

from .config import Settings
from .errors import MissingInput, Unauthenticated, UnreadableContent
from .event_extractor import extract_events
from .models import UploadResult
from .pdf_extractor import PDFSource, PDFTextExtractor
from .store import EventStore

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "syllabus.pdf"


def safe_filename(filename: Optional[str]) -> str:
    """Sanitize an upload filename, falling back to syllabus.pdf."""
    return secure_filename(filename or "") or DEFAULT_FILENAME


def is_usable_text(text: str, min_chars: int = 50) -> bool:
    """True if the text has at least min_chars characters once trimmed."""
    stripped = (text or "").strip()
    return bool(stripped) and len(stripped) >= min_chars


class UploadProcessor:
    """Turns an uploaded syllabus into stored deadline events."""

    def __init__(self, store: EventStore, text_extractor: Optional[PDFTextExtractor] = None,
                 settings: Optional[Settings] = None):
        """Initialize upload processor.

        Args:
            store: Where syllabi and events are saved
            text_extractor: Anything with extract_text(source) -> str.
                            Defaults to a PDFTextExtractor reading settings.pdf_max_pages pages.
            settings: Application settings. Defaults to Settings().
        """
        self.settings = settings or Settings()
        self.store = store
        self.text_extractor = text_extractor or PDFTextExtractor(max_pages=self.settings.pdf_max_pages)

    def process(self, user_id: Optional[str], filename: Optional[str],
                source: Optional[PDFSource]) -> UploadResult:
        """Process one upload.

        Args:
            user_id: Signed-in user, or None
            filename: Original filename of the upload
            source: File contents (bytes) or a path; None if no file was sent

        Returns:
            UploadResult with message, preview and the extracted events

        Raises:
            Unauthenticated: If there is no user
            MissingInput: If there is no file
            UnreadableContent: If the file has too little text
            PersistenceFailure: If saving fails
        """
        if not user_id:
            raise Unauthenticated()

        if source is None:
            raise MissingInput()

        name = safe_filename(filename)
        text = self.text_extractor.extract_text(source)

        if not is_usable_text(text, self.settings.min_text_chars):
            logger.info("Rejected %s: %d characters of text", name, len((text or "").strip()))
            raise UnreadableContent()

        events = extract_events(text)
        logger.info("Found %d deadline(s) in %s", len(events), name)

        syllabus_id = self.store.create_syllabus(user_id, name)
        if events:
            self.store.insert_events(user_id, syllabus_id, events)

        return UploadResult(
            message=f"Saved! Found {len(events)} deadlines.",
            preview=text[:self.settings.preview_chars],
            events=events,
            syllabus_id=syllabus_id,
        )
