#!/usr/bin/env python3
"""
Line classifier for the order-sheet item table.

Every cleaned line gets exactly one LineKind from an ordered chain of anchored
regular expressions. Price-bearing kinds require the currency glyph.
"""

import logging
import re
from enum import Enum
from typing import List, Optional

from .sanitize import CURRENCY, clean_line

logger = logging.getLogger(__name__)

HEADER_PRODUCT_TOKEN = "מוצר"
HEADER_TOTAL_TOKEN = "סה"

# Invoice boilerplate that never describes an ordered product
NOISE_PATTERNS = [
    'מסמך ממוחשב זה הופק באמצעות', 'סה"כ ללא מע"מ', 'מע"מ',
    'סה"כ לתשלום', 'סה"כ', "חתימה", "אופן העברת התשלום",
    "מוטב:", "בית עוזיאל", "לכבוד:",
    "קונדטוריה למגשי", "עוסק מורשה", "עמוד ",
    "הנחה", "משלוח", "מספר קטלוגי:",
]

# Financial summary rows that match the item grammar but are not products
RESERVED_KEYWORDS = ["משלוח", "דמי משלוח", "הובלה", 'סה"כ', "הנחה"]

STRICT_CURRENCY = True

# "1,234.56", "110.17", "45"
NUMBER = r"(?:\d{1,3}(?:[.,]\d{3})*|\d+)(?:[.,]\d+)?"

# text  qty  unit  total₪
TEXT_QTY_PRICE_RE = re.compile(rf"^(.+?)\s+(\d+)\s+{NUMBER}\s+{NUMBER}\s*{CURRENCY}\s*$")
# qty  unit  total₪
QTY_PRICE_RE = re.compile(rf"^\s*(\d+)\s+{NUMBER}\s+{NUMBER}\s*{CURRENCY}\s*$")
# price₪
PRICE_ONLY_RE = re.compile(rf"^\s*{NUMBER}\s*{CURRENCY}\s*$")
# text  price₪
TEXT_PRICE_RE = re.compile(rf"^(.+?)\s+{NUMBER}\s*{CURRENCY}\s*$")


class LineKind(Enum):
    HEADER = "header"
    NOISE = "noise"
    TEXT_ONLY = "text"
    TEXT_QTY_PRICE = "text_qty_price"
    QTY_PRICE_ONLY = "qty_price"
    # Consumption markers, only set while assembling items
    USED = "used"
    USED_NOTE = "used_note"


ANCHOR_KINDS = (LineKind.TEXT_QTY_PRICE, LineKind.QTY_PRICE_ONLY)


def is_header_line(line: str) -> bool:
    cleaned = clean_line(line)
    return HEADER_PRODUCT_TOKEN in cleaned and HEADER_TOTAL_TOKEN in cleaned


def find_header_index(lines: List[str]) -> Optional[int]:
    """Index of the first table header line, or None."""
    for index, line in enumerate(lines):
        if is_header_line(line):
            return index
    return None


def is_noise_line(line: str) -> bool:
    cleaned = clean_line(line)
    if not cleaned:
        return True
    return any(pattern in cleaned for pattern in NOISE_PATTERNS)


def _classify_raw(line: str) -> LineKind:
    if is_header_line(line):
        return LineKind.HEADER
    if TEXT_QTY_PRICE_RE.match(line):
        return LineKind.TEXT_QTY_PRICE
    if QTY_PRICE_RE.match(line):
        return LineKind.QTY_PRICE_ONLY
    if PRICE_ONLY_RE.match(line):
        return LineKind.QTY_PRICE_ONLY
    if TEXT_PRICE_RE.match(line):
        return LineKind.TEXT_QTY_PRICE
    if is_noise_line(line):
        return LineKind.NOISE
    return LineKind.TEXT_ONLY


def classify(line: str) -> LineKind:
    """
    Classify one table line.

    Args:
        line: Raw or sanitized line text

    Returns:
        The line's LineKind; never a consumption marker
    """
    cleaned = clean_line(line)
    kind = _classify_raw(cleaned)

    if kind is LineKind.TEXT_QTY_PRICE:
        leading = leading_text(cleaned)
        if any(keyword in leading for keyword in RESERVED_KEYWORDS):
            logger.debug(f"Reserved keyword row treated as noise: {cleaned}")
            kind = LineKind.NOISE

    if STRICT_CURRENCY and kind in ANCHOR_KINDS and CURRENCY not in cleaned:
        kind = LineKind.TEXT_ONLY

    return kind


def leading_text(line: str) -> str:
    """Return the text portion before the numbers of a text+price row, or ''."""
    cleaned = clean_line(line)
    match = TEXT_QTY_PRICE_RE.match(cleaned) or TEXT_PRICE_RE.match(cleaned)
    if match:
        return clean_line(match.group(1))
    return ""


def quantity_of(line: str) -> int:
    """
    Quantity carried by an anchor row.

    The bare integer column for full rows, 1 for rows that show a single price.
    """
    cleaned = clean_line(line)
    match = TEXT_QTY_PRICE_RE.match(cleaned)
    if match:
        return int(match.group(2))
    match = QTY_PRICE_RE.match(cleaned)
    if match:
        return int(match.group(1))
    return 1
