#!/usr/bin/env python3
"""
Item assembly for the order-sheet table.

The table mixes three row shapes: full rows (title, qty, prices on one line),
price-only rows whose title sits on the line above, and free-text rows that
are either titles or notes. Titles precede their price row while notes follow
it, so the rows are walked once from the bottom up: each anchor is resolved
before the text above it, and no lookahead or backtracking is needed.

Rows are kept in a flat list and consumed in place by switching their kind to
USED / USED_NOTE, so one assembler instance handles exactly one document.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from .line_classifier import LineKind, classify, find_header_index, leading_text, quantity_of
from .models import ParsedItem, ParseResult
from .sanitize import clean_line

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "<unknown@{anchor}>"

CONSUMED_KINDS = (LineKind.USED, LineKind.USED_NOTE)


@dataclass
class TableRow:
    text: str
    kind: LineKind


def build_table_rows(lines: List[str]) -> List[TableRow]:
    """
    Cleaned and classified rows below the table header.

    Without a header the whole sequence is treated as the table body.
    Noise and header rows are dropped here and never reach the scan.
    """
    header_index = find_header_index(lines)
    if header_index is None:
        logger.debug("No table header found, parsing from the first line")
        body = lines
    else:
        body = lines[header_index + 1:]

    rows = []
    for line in body:
        text = clean_line(line)
        if not text:
            continue
        kind = classify(text)
        if kind in (LineKind.NOISE, LineKind.HEADER):
            continue
        rows.append(TableRow(text, kind))
    return rows


class ItemAssembler:
    """Greedy bottom-up scanner pairing titles with quantities and notes."""

    def __init__(self, lines: List[str]):
        self.rows = build_table_rows(lines)
        self._items: List[ParsedItem] = []
        self._note_blocks: List[Tuple[str, str]] = []

    def assemble(self) -> ParseResult:
        """
        Run the scan once and return items in top-to-bottom order.

        Returns:
            ParseResult with the items and a title -> note map
        """
        index = len(self.rows) - 1
        while index >= 0:
            kind = self.rows[index].kind
            if kind is LineKind.TEXT_QTY_PRICE:
                index = self._take_full_row(index)
            elif kind is LineKind.QTY_PRICE_ONLY:
                index = self._take_price_row(index)
            elif kind is LineKind.TEXT_ONLY:
                index = self._take_note_run(index)
            else:
                index -= 1

        self._items.reverse()
        self._note_blocks.reverse()

        # Top-to-bottom; the topmost note wins for a repeated title
        notes = {}
        for title, block in self._note_blocks:
            notes.setdefault(title, block)
        logger.debug(f"Assembled {len(self._items)} items from {len(self.rows)} table rows")
        return ParseResult(items=self._items, notes=notes)

    def title_at(self, index: int, anchor: int) -> str:
        """Row text at index, or a placeholder naming the anchor row when out of range."""
        if 0 <= index < len(self.rows):
            return self.rows[index].text
        return UNKNOWN_TITLE.format(anchor=anchor)

    def _is_text(self, index: int) -> bool:
        return 0 <= index < len(self.rows) and self.rows[index].kind is LineKind.TEXT_ONLY

    def _mark(self, indexes: List[int], kind: LineKind):
        for index in indexes:
            self.rows[index].kind = kind

    def _emit(self, title: str, qty: int, note_indexes: List[int]):
        if qty < 1:
            logger.debug(f"Skipping '{title}' with quantity {qty}")
            return
        self._items.append(ParsedItem(title=title, qty=qty))
        block = " ".join(
            note for note in (clean_line(self.rows[i].text) for i in note_indexes) if note
        )
        if block:
            self._note_blocks.append((title, block))

    def _take_full_row(self, index: int) -> int:
        row = self.rows[index]
        title = leading_text(row.text)
        if title:
            self._emit(title, quantity_of(row.text), [])
            row.kind = LineKind.USED
        return index - 1

    def _take_price_row(self, index: int) -> int:
        title_index = index - 1
        if not self._is_text(title_index):
            logger.debug(f"Price row {index} has no title above it, dropped")
            return index - 1

        note_indexes = [index + 1] if self._is_text(index + 1) else []
        self._emit(self.title_at(title_index, index), quantity_of(self.rows[index].text), note_indexes)
        self._mark([title_index, index], LineKind.USED)
        self._mark(note_indexes, LineKind.USED_NOTE)
        return title_index - 1

    def _take_note_run(self, index: int) -> int:
        note_indexes = [index]
        boundary = index - 1
        while boundary >= 0:
            kind = self.rows[boundary].kind
            if kind in CONSUMED_KINDS:
                boundary -= 1
                continue
            if kind is LineKind.TEXT_ONLY:
                note_indexes.insert(0, boundary)
                boundary -= 1
                continue
            if kind is LineKind.TEXT_QTY_PRICE:
                return self._close_on_full_row(boundary, note_indexes)
            if kind is LineKind.QTY_PRICE_ONLY:
                return self._close_on_price_row(boundary, note_indexes)
            break

        logger.debug(f"Text run ending at row {index} has no anchor, dropped")
        return boundary - 1 if boundary >= 0 else -1

    def _close_on_full_row(self, anchor: int, note_indexes: List[int]) -> int:
        row = self.rows[anchor]
        self._emit(leading_text(row.text), quantity_of(row.text), note_indexes)
        row.kind = LineKind.USED
        self._mark(note_indexes, LineKind.USED_NOTE)
        return anchor - 1

    def _close_on_price_row(self, anchor: int, note_indexes: List[int]) -> int:
        title_index = anchor - 1
        if not self._is_text(title_index):
            logger.debug(f"Price row {anchor} has no title above it, text run dropped")
            return anchor - 1

        # With two or more note lines and text two rows up, the row right above
        # the price row is one more note and the title sits above it.
        if len(note_indexes) >= 2 and self._is_text(anchor - 2):
            note_indexes.insert(0, title_index)
            title_index = anchor - 2

        self._emit(self.title_at(title_index, anchor), quantity_of(self.rows[anchor].text), note_indexes)
        self._mark([title_index, anchor], LineKind.USED)
        self._mark(note_indexes, LineKind.USED_NOTE)
        return title_index - 1


def parse_items(lines: List[str]) -> ParseResult:
    """
    Parse one document's lines into items and notes.

    Args:
        lines: Footer-trimmed lines of one document in page order

    Returns:
        ParseResult with items top to bottom and notes keyed by title
    """
    return ItemAssembler(lines).assemble()
