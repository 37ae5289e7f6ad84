#!/usr/bin/env python3
"""
Per-document extraction: decode PDF pages with pdfplumber, rebuild their
lines and read the client and event date from page 1.
"""

import io
import logging
from typing import List, Optional

import pdfplumber

from .client_metadata import extract_client, extract_event_date
from .exceptions import PdfDecodeError
from .line_reconstructor import reconstruct_lines
from .models import PdfExtractResult, TextFragment

logger = logging.getLogger(__name__)

# Lines at the end of every sheet that belong to the printed footer
FOOTER_LINE_COUNT = 7


def page_fragments(page) -> List[TextFragment]:
    """
    Positioned words of one pdfplumber page.

    pdfplumber measures `bottom` from the top edge; it is flipped so Y grows
    upward like native PDF coordinates.
    """
    words = page.extract_words(use_text_flow=True, keep_blank_chars=False)
    return [
        TextFragment(text=word["text"], x=float(word["x0"]), y=float(page.height) - float(word["bottom"]))
        for word in words
    ]


def decode_pages(buffer: bytes, document_index: Optional[int] = None) -> List[List[str]]:
    """
    Reconstructed lines of every page, in increasing page order.

    Args:
        buffer: Raw PDF bytes
        document_index: Position of the document in its batch, for error reporting

    Returns:
        One list of lines per page

    Raises:
        PdfDecodeError: If pdfplumber cannot open or read the document
    """
    try:
        with pdfplumber.open(io.BytesIO(buffer)) as pdf:
            pages = [reconstruct_lines(page_fragments(page)) for page in pdf.pages]
    except Exception as e:
        logger.error(f"PDF decoding failed: {e}")
        raise PdfDecodeError(f"could not decode PDF: {e}", document_index) from e

    logger.info(f"Decoded {len(pages)} pages")
    return pages


def trim_footer(lines: List[str]) -> List[str]:
    if len(lines) > FOOTER_LINE_COUNT:
        return lines[:-FOOTER_LINE_COUNT]
    return list(lines)


def extract_from_pages(pages: List[List[str]], year: Optional[int] = None) -> PdfExtractResult:
    """
    Build a document's extraction result from its page lines.

    Args:
        pages: Lines per page, first page first
        year: Year for the event date; the current year when omitted

    Returns:
        PdfExtractResult with footer-trimmed lines, client and event date
    """
    all_lines = [line for page in pages for line in page]
    page1_lines = list(pages[0]) if pages else []

    client = extract_client(page1_lines)
    event_date, date_line = extract_event_date(page1_lines, year)
    logger.debug(f"Client '{client}', event date {event_date}")

    return PdfExtractResult(
        lines=trim_footer(all_lines),
        client=client,
        event_date=event_date,
        date_line=date_line,
        page1_lines=page1_lines,
    )


def extract_from_pdf(buffer: bytes, document_index: Optional[int] = None) -> PdfExtractResult:
    """Convenience function to decode one PDF buffer and extract its order data."""
    return extract_from_pages(decode_pages(buffer, document_index))
