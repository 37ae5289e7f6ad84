"""
Order Sheet Parser

Extracts structured orders (client, event date, items, notes) from printed
Hebrew order-sheet PDFs and merges a batch into per-client order records.
"""

__version__ = "1.0.0"

from .exceptions import MappingError, OrderSheetError, PdfDecodeError
from .item_parser import parse_items
from .matrix import (
    apply_mapping,
    build_matrix_from_pdfs,
    build_matrix_from_results,
    ingest_pdfs,
    matrix_to_orders,
    matrix_to_orders_json,
)
from .models import MatrixResult, NoteEntry, OrderRecord, ParsedItem, PdfExtractResult, TextFragment
from .pdf_extractor import extract_from_pdf
from .sanitize import clean_line, normalize_soft, sanitize_text

__all__ = [
    "MappingError",
    "OrderSheetError",
    "PdfDecodeError",
    "parse_items",
    "apply_mapping",
    "build_matrix_from_pdfs",
    "build_matrix_from_results",
    "ingest_pdfs",
    "matrix_to_orders",
    "matrix_to_orders_json",
    "MatrixResult",
    "NoteEntry",
    "OrderRecord",
    "ParsedItem",
    "PdfExtractResult",
    "TextFragment",
    "extract_from_pdf",
    "clean_line",
    "normalize_soft",
    "sanitize_text",
]
