#!/usr/bin/env python3
"""
Client name and event date from the page-1 header of an order sheet.
"""

import logging
import re
from datetime import date
from typing import List, Optional, Tuple

from .line_classifier import find_header_index

logger = logging.getLogger(__name__)

MISSING_CLIENT = "ללא שם לקוח"

# "לכבוד: <client> שובל בוטיק בייקרי"
CLIENT_RE = re.compile(r"^לכבוד\s*:\s*(.+?)\s+שובל\s+בוטיק\s+בייקרי\s*$")

# DD/MM or DD.MM
FREE_DATE_RE = re.compile(r"\b(\d{1,2})[./](\d{1,2})\b")


def extract_client(page1_lines: List[str]) -> str:
    """
    First client name matching the addressee template on page 1.

    Args:
        page1_lines: Lines of the first page in reading order

    Returns:
        The client name, or MISSING_CLIENT when no line matches
    """
    for line in page1_lines:
        match = CLIENT_RE.match(line.strip())
        if match and match.group(1).strip():
            return match.group(1).strip()
    logger.info("No client line found, using placeholder")
    return MISSING_CLIENT


def resolve_day_month(a: int, b: int) -> Tuple[int, int]:
    """Pick (day, month) from two numbers; day-first unless only one can be a month."""
    if a > 12 and b <= 12:
        return a, b
    if b > 12 and a <= 12:
        return b, a
    return a, b


def parse_free_date(line: str, year: Optional[int] = None) -> Optional[str]:
    """
    First valid DD/MM or DD.MM date in a line, as an ISO string.

    Args:
        line: Text to scan
        year: Year to attach; the current year when omitted

    Returns:
        "YYYY-MM-DD", or None if no token forms a real calendar date
    """
    if year is None:
        year = date.today().year
    for match in FREE_DATE_RE.finditer(line or ""):
        a, b = int(match.group(1)), int(match.group(2))
        if not (1 <= a <= 31 and 1 <= b <= 31):
            continue
        day, month = resolve_day_month(a, b)
        try:
            return date(year, month, day).isoformat()
        except ValueError:
            logger.debug(f"Rejected impossible date {match.group(0)}")
    return None


def extract_event_date(page1_lines: List[str], year: Optional[int] = None) -> Tuple[Optional[str], Optional[str]]:
    """
    Event date expected on the line right above the table header.

    Falls back to every page-1 line above the header, or the whole page when
    there is no header.

    Returns:
        (iso_date or None, raw line above the header or None)
    """
    header_index = find_header_index(page1_lines)
    date_line = None
    if header_index is not None and header_index > 0:
        date_line = page1_lines[header_index - 1].strip()
        event_date = parse_free_date(date_line, year)
        if event_date:
            return event_date, date_line

    upper = header_index if header_index is not None else len(page1_lines)
    for line in page1_lines[:upper]:
        event_date = parse_free_date(line.strip(), year)
        if event_date:
            return event_date, date_line

    logger.info("No event date found on page 1")
    return None, date_line
