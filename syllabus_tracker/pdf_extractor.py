"""
PDF text extraction for uploaded syllabi.

Reads the selectable text of the first few pages of a PDF. Scanned,
image-only PDFs come back (nearly) empty; the upload service treats that as
"no usable text" rather than trying OCR.
"""

import io
import logging
from pathlib import Path
from typing import List, Union

import pdfplumber

logger = logging.getLogger(__name__)

# A path on disk or the raw bytes of an upload
PDFSource = Union[str, Path, bytes]


class PDFTextExtractor:
    """Extracts plain text from the first pages of a PDF."""

    def __init__(self, max_pages: int = 5):
        """Initialize extractor.

        Args:
            max_pages: Number of pages to read from the start of the document
        """
        self.max_pages = max_pages

    def extract_pages(self, source: PDFSource) -> List[str]:
        """Extract text page by page.

        Pages with no selectable text are skipped, so an image-only page
        adds no empty entry (and no extra blank lines in extract_text).
        Only the separators differ from joining every page; the text used
        for deadline extraction is the same.

        Args:
            source: Path to the PDF file, or its raw bytes

        Returns:
            List of page texts, at most max_pages long
        """
        if isinstance(source, bytes):
            source = io.BytesIO(source)

        pages_text = []
        with pdfplumber.open(source) as pdf:
            for page in pdf.pages[:self.max_pages]:
                text = page.extract_text()
                if text:
                    pages_text.append(text)
        logger.debug("Read %d page(s) with text", len(pages_text))
        return pages_text

    def extract_text(self, source: PDFSource) -> str:
        """Extract the text of the first pages with text, joined by blank lines."""
        return "\n\n".join(self.extract_pages(source))
