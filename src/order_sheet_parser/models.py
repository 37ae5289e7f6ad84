"""
Data models for the Order Sheet Parser.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class TextFragment:
    """A positioned run of text decoded from a PDF page."""
    text: str
    x: float
    y: float


@dataclass
class ParsedItem:
    """One ordered product as it appears in a single document."""
    title: str
    qty: int


@dataclass
class NoteEntry:
    """Free text attached to one product of a client's order."""
    product: str
    note: str


@dataclass
class ParseResult:
    """Items and per-title notes parsed from one document's lines."""
    items: List[ParsedItem] = field(default_factory=list)
    notes: Dict[str, str] = field(default_factory=dict)


@dataclass
class PdfExtractResult:
    """Lines and header metadata extracted from one order sheet."""
    lines: List[str]
    client: str
    event_date: Optional[str] = None
    date_line: Optional[str] = None
    page1_lines: List[str] = field(default_factory=list)


@dataclass
class MatrixResult:
    """Product x client quantities merged across a batch of documents."""
    matrix: Dict[str, Dict[str, int]] = field(default_factory=dict)
    client_date: Dict[str, str] = field(default_factory=dict)
    notes_by_client: Dict[str, List[NoteEntry]] = field(default_factory=dict)


@dataclass
class OrderRecord:
    """A client's order, ready to hand over to the order-management app."""
    client_name: str
    event_date: Optional[str]
    items: List[ParsedItem]
    order_notes: Optional[List[str]] = None
    status: str = "confirmed"
    source: str = "pdf-import"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orderId": None,
            "clientName": self.client_name,
            "eventDate": self.event_date,
            "status": self.status,
            "items": [{"title": item.title, "qty": item.qty} for item in self.items],
            "orderNotes": list(self.order_notes) if self.order_notes else None,
            "totalSum": None,
            "currency": None,
            "source": self.source,
            "meta": {},
        }
