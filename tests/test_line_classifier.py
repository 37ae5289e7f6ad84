#!/usr/bin/env python3
"""
Tests for the table line classifier.
"""

import sys
import unittest
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from order_sheet_parser.line_classifier import LineKind, classify, leading_text, quantity_of


class TestLineClassifier(unittest.TestCase):
    """Test cases for classify and the anchor helpers."""

    def test_header(self):
        """Test header detection."""
        self.assertIs(classify('שם מוצר כמות מחיר סה"כ'), LineKind.HEADER)

    def test_text_qty_price(self):
        """Test a full item row."""
        line = "עוגת שוקולד 3 45.00 135.00₪"
        self.assertIs(classify(line), LineKind.TEXT_QTY_PRICE)
        self.assertEqual(quantity_of(line), 3)
        self.assertEqual(leading_text(line), "עוגת שוקולד")

    def test_qty_price_only(self):
        """Test a price-only row."""
        line = "2 10.00 20.00 ₪"
        self.assertIs(classify(line), LineKind.QTY_PRICE_ONLY)
        self.assertEqual(quantity_of(line), 2)

    def test_lone_price_has_implicit_quantity(self):
        """Test a lone price with an implicit quantity."""
        for line in ("45.00 ₪", "1,234.56₪"):
            with self.subTest(line=line):
                self.assertIs(classify(line), LineKind.QTY_PRICE_ONLY)
                self.assertEqual(quantity_of(line), 1)

    def test_text_with_single_price(self):
        """Test text followed by a single price."""
        line = "עוגיות חמאה 45.00 ₪"
        self.assertIs(classify(line), LineKind.TEXT_QTY_PRICE)
        self.assertEqual(quantity_of(line), 1)
        self.assertEqual(leading_text(line), "עוגיות חמאה")

    def test_currency_spelled_out(self):
        """Test the currency written as ILS."""
        self.assertIs(classify("עוגה 2 10.00 20.00 ILS"), LineKind.TEXT_QTY_PRICE)

    def test_noise_phrases(self):
        """Test invoice boilerplate phrases."""
        for line in ('סה"כ לתשלום 500.00', "חתימה: ______", "עמוד 1 מתוך 2", "עוסק מורשה 123456789"):
            with self.subTest(line=line):
                self.assertIs(classify(line), LineKind.NOISE)

    def test_reserved_keyword_rows_are_noise(self):
        """Test delivery and discount rows."""
        self.assertIs(classify("משלוח 1 20.00 20.00₪"), LineKind.NOISE)
        self.assertIs(classify("דמי משלוח 30.00 ₪"), LineKind.NOISE)
        self.assertIs(classify("הובלה 1 50.00 50.00 ₪"), LineKind.NOISE)

    def test_numbers_without_currency_are_text(self):
        """Test numbers without a currency glyph."""
        self.assertIs(classify("עוגה 2 10.00 20.00"), LineKind.TEXT_ONLY)
        self.assertIs(classify("להגיע עד 10"), LineKind.TEXT_ONLY)

    def test_plain_text(self):
        """Test a plain text line."""
        self.assertIs(classify("בלי אגוזים"), LineKind.TEXT_ONLY)

    def test_classify_is_total(self):
        """Test that every input gets exactly one kind."""
        samples = ["", "   ", "₪", "12", "מוצר", "סה", "a b c", "1 2 3 ₪", "x 1.5 ₪", "א" * 200]
        for line in samples:
            with self.subTest(line=line):
                kind = classify(line)
                self.assertIsInstance(kind, LineKind)
                self.assertNotIn(kind, (LineKind.USED, LineKind.USED_NOTE))


if __name__ == "__main__":
    unittest.main()
