#!/usr/bin/env python3
"""
Tests for per-document extraction.
pdfplumber is mocked; pages are described by their word boxes.
"""

import sys
import unittest
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock, patch

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from order_sheet_parser.client_metadata import MISSING_CLIENT
from order_sheet_parser.exceptions import PdfDecodeError
from order_sheet_parser.item_parser import parse_items
from order_sheet_parser.pdf_extractor import (
    FOOTER_LINE_COUNT,
    decode_pages,
    extract_from_pages,
    extract_from_pdf,
    page_fragments,
    trim_footer,
)

HEADER = 'מוצר כמות מחיר סה"כ'


def make_page(rows, height=800):
    """Mock pdfplumber page; rows are (bottom, [(text, x0), ...])."""
    page = MagicMock()
    page.height = height
    page.extract_words.return_value = [
        {"text": text, "x0": x0, "bottom": bottom}
        for bottom, words in rows
        for text, x0 in words
    ]
    return page


def mock_pdf(pages):
    pdf = MagicMock()
    pdf.pages = pages
    opened = MagicMock()
    opened.__enter__.return_value = pdf
    return opened


class TestPdfExtractor(unittest.TestCase):
    """Test cases for decoding and extraction."""

    def setUp(self):
        self.page1 = make_page([
            (100, [("לכבוד:", 500), ("דנה", 450), ("שובל", 400), ("בוטיק", 350), ("בייקרי", 300)]),
            (150, [("06/03", 300)]),
            (200, [("מוצר", 500), ("כמות", 400), ('סה"כ', 300)]),
            (250, [("עוגה", 500), ("2", 400), ("10.00", 300), ("20.00", 200), ("₪", 100)]),
        ])
        self.page2 = make_page([
            (100, [("לחם", 500), ("1", 400), ("8.00", 300), ("8.00", 200), ("₪", 100)]),
        ])

    def test_page_fragments_flip_y(self):
        """Test converting word boxes to bottom-origin fragments."""
        fragments = page_fragments(self.page2)
        self.assertEqual(fragments[0].text, "לחם")
        self.assertEqual(fragments[0].x, 500.0)
        self.assertEqual(fragments[0].y, 700.0)

    @patch("order_sheet_parser.pdf_extractor.pdfplumber.open")
    def test_decode_pages_in_page_order(self, mock_open):
        """Test decoding pages in page order."""
        mock_open.return_value = mock_pdf([self.page1, self.page2])
        pages = decode_pages(b"%PDF-1.4")
        self.assertEqual(len(pages), 2)
        self.assertEqual(pages[0][0], "לכבוד: דנה שובל בוטיק בייקרי")
        self.assertEqual(pages[0][3], "עוגה 2 10.00 20.00 ₪")
        self.assertEqual(pages[1], ["לחם 1 8.00 8.00 ₪"])

    @patch("order_sheet_parser.pdf_extractor.pdfplumber.open")
    def test_decode_failure(self, mock_open):
        """Test wrapping pdfplumber errors."""
        mock_open.side_effect = ValueError("not a pdf")
        with self.assertRaises(PdfDecodeError) as ctx:
            decode_pages(b"garbage", document_index=3)
        self.assertEqual(ctx.exception.document_index, 3)
        self.assertIn("Document 3", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, ValueError)

    @patch("order_sheet_parser.pdf_extractor.pdfplumber.open")
    def test_extract_from_pdf(self, mock_open):
        """Test extracting a document end to end."""
        mock_open.return_value = mock_pdf([self.page1, self.page2])
        result = extract_from_pdf(b"%PDF-1.4")
        self.assertEqual(result.client, "דנה")
        self.assertEqual(result.event_date, f"{date.today().year}-03-06")
        self.assertEqual(result.date_line, "06/03")
        self.assertEqual(len(result.page1_lines), 4)
        parsed = parse_items(result.lines)
        self.assertEqual([(i.title, i.qty) for i in parsed.items], [("עוגה", 2), ("לחם", 1)])

    def test_trim_footer(self):
        """Test trimming the footer lines."""
        lines = [f"line {i}" for i in range(10)]
        self.assertEqual(trim_footer(lines), lines[:10 - FOOTER_LINE_COUNT])
        short = ["a", "b"]
        self.assertEqual(trim_footer(short), short)

    def test_footer_removed_from_concatenated_pages(self):
        """Test trimming the footer after joining pages."""
        footer = [f"footer {i}" for i in range(FOOTER_LINE_COUNT)]
        pages = [[HEADER, "עוגה 1 10.00 10.00 ₪"], ["לחם 1 8.00 8.00 ₪"] + footer]
        result = extract_from_pages(pages, 2025)
        self.assertEqual(result.lines, [HEADER, "עוגה 1 10.00 10.00 ₪", "לחם 1 8.00 8.00 ₪"])
        self.assertEqual(result.client, MISSING_CLIENT)
        self.assertIsNone(result.event_date)

    def test_empty_document(self):
        """Test a document without pages."""
        result = extract_from_pages([])
        self.assertEqual(result.lines, [])
        self.assertEqual(result.client, MISSING_CLIENT)
        self.assertIsNone(result.event_date)


if __name__ == "__main__":
    unittest.main()
