"""
Exceptions raised by the Order Sheet Parser.
"""

from typing import Optional


class OrderSheetError(Exception):
    """Base exception for order-sheet parsing errors."""
    pass


class PdfDecodeError(OrderSheetError):
    """A PDF buffer could not be opened or its pages could not be read."""

    def __init__(self, message: str, document_index: Optional[int] = None):
        self.message = message
        self.document_index = document_index
        if document_index is not None:
            message = f"Document {document_index}: {message}"
        super().__init__(message)


class MappingError(OrderSheetError):
    """A title alias mapping is not an object of strings."""
    pass
