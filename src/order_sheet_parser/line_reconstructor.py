#!/usr/bin/env python3
"""
Rebuild reading-order lines from the positioned text fragments of one page.

Fragments are bucketed into rows by Y proximity (first fit: a fragment joins
the first existing row within Y_TOLERANCE, in arrival order). Fragments that
straddle the tolerance inside one visual line can land in different rows; the
order-sheet template keeps its rows far enough apart for this to hold.
"""

import logging
import re
from typing import Iterable, List

from .models import TextFragment
from .sanitize import CURRENCY

logger = logging.getLogger(__name__)

# PDF units; fragments closer than this vertically share a row
Y_TOLERANCE = 3

# Right-to-left ordering reverses the fragments of a decimal number:
# "59 . 135 ₪" was printed as "135.59 ₪"
SPLIT_DECIMAL_RE = re.compile(r"(\d+)\s+\.\s+(\d+)")


class _Row:
    """A row of fragments anchored at the Y of the first fragment that opened it."""

    def __init__(self, y: float):
        self.y = y
        self.fragments: List[TextFragment] = []


def group_rows(fragments: Iterable[TextFragment], tolerance: float = Y_TOLERANCE) -> List[_Row]:
    rows: List[_Row] = []
    for fragment in fragments:
        if not fragment.text:
            continue
        for row in rows:
            if abs(row.y - fragment.y) <= tolerance:
                row.fragments.append(fragment)
                break
        else:
            row = _Row(fragment.y)
            row.fragments.append(fragment)
            rows.append(row)
    return rows


def repair_split_decimals(line: str) -> str:
    """
    Swap the halves of decimal numbers broken apart by RTL fragment ordering.

    Only lines carrying the currency glyph are touched.

    Args:
        line: A joined, whitespace-collapsed line

    Returns:
        The line with "<a> . <b>" rewritten to "<b>.<a>"
    """
    if CURRENCY not in line:
        return line
    return SPLIT_DECIMAL_RE.sub(r"\2.\1", line)


def reconstruct_lines(fragments: Iterable[TextFragment]) -> List[str]:
    """
    Turn one page's fragments into ordered logical lines.

    Rows run top to bottom (descending Y, since the PDF origin is bottom-left)
    and fragments within a row run right to left (descending X).

    Args:
        fragments: All fragments of a single page, in any order

    Returns:
        Non-empty lines in reading order
    """
    rows = group_rows(fragments)
    rows.sort(key=lambda row: row.y, reverse=True)

    lines = []
    for row in rows:
        ordered = sorted(row.fragments, key=lambda fragment: fragment.x, reverse=True)
        line = " ".join(fragment.text for fragment in ordered)
        line = re.sub(r"\s+", " ", line).strip()
        line = repair_split_decimals(line)
        if line:
            lines.append(line)

    logger.debug(f"Reconstructed {len(lines)} lines from {len(rows)} rows")
    return lines
