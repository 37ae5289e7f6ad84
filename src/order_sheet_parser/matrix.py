#!/usr/bin/env python3
"""
Batch aggregation: merge the parsed documents of one upload into a
product x client quantity matrix and serialize it as order records.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from .exceptions import MappingError
from .item_parser import parse_items
from .models import MatrixResult, NoteEntry, OrderRecord, ParsedItem, PdfExtractResult
from .pdf_extractor import extract_from_pdf
from .sanitize import normalize_soft

logger = logging.getLogger(__name__)


def merge_document(result: MatrixResult, document: PdfExtractResult) -> MatrixResult:
    """
    Add one extracted document into a batch matrix.

    Quantities add up per (product, client); the first event date seen for a
    client is kept; non-blank notes are appended in document order.
    """
    client = document.client
    if document.event_date and client not in result.client_date:
        result.client_date[client] = document.event_date

    parsed = parse_items(document.lines)
    for item in parsed.items:
        per_client = result.matrix.setdefault(item.title, {})
        per_client[client] = per_client.get(client, 0) + item.qty

    for product, note in parsed.notes.items():
        note = (note or "").strip()
        if note:
            result.notes_by_client.setdefault(client, []).append(NoteEntry(product=product, note=note))

    logger.debug(f"Merged {len(parsed.items)} items for client '{client}'")
    return result


def build_matrix_from_results(documents: Iterable[PdfExtractResult]) -> MatrixResult:
    result = MatrixResult()
    for document in documents:
        merge_document(result, document)
    return result


def build_matrix_from_pdfs(buffers: Iterable[bytes]) -> MatrixResult:
    """
    Decode and merge a batch of order-sheet PDFs.

    Args:
        buffers: Raw PDF bytes, one per order sheet

    Returns:
        MatrixResult for the whole batch

    Raises:
        PdfDecodeError: On the first document that cannot be decoded
    """
    documents = [extract_from_pdf(buffer, index) for index, buffer in enumerate(buffers)]
    result = build_matrix_from_results(documents)
    logger.info(f"Built matrix of {len(result.matrix)} products from {len(documents)} documents")
    return result


def validate_mapping(mapping: Any) -> Dict[str, str]:
    if not isinstance(mapping, dict):
        raise MappingError("mapping must be a JSON object")
    for source, target in mapping.items():
        if not isinstance(source, str) or not isinstance(target, str):
            raise MappingError(f"mapping entry {source!r} -> {target!r} is not a pair of strings")
    return mapping


def apply_mapping(result: MatrixResult, mapping: Optional[Dict[str, str]]) -> MatrixResult:
    """
    Fold aliased product titles into their canonical titles.

    Args:
        result: Matrix to update in place
        mapping: {source_title: canonical_title}; sources are soft-normalized

    Returns:
        The same MatrixResult
    """
    for source, target in validate_mapping(mapping or {}).items():
        source = normalize_soft(source)
        if source == target or source not in result.matrix:
            continue
        source_row = result.matrix.pop(source)
        target_row = result.matrix.setdefault(target, {})
        for client, qty in source_row.items():
            target_row[client] = target_row.get(client, 0) + qty
        logger.debug(f"Mapped '{source}' to '{target}'")
    return result


def _client_sort_key(client: str):
    return normalize_soft(client).casefold(), client


def matrix_to_orders(result: MatrixResult) -> List[OrderRecord]:
    """
    One order record per client, clients sorted alphabetically.

    Items follow product first-seen order and skip zero quantities.
    """
    clients = {client for per_client in result.matrix.values() for client in per_client}

    orders = []
    for client in sorted(clients, key=_client_sort_key):
        items = [
            ParsedItem(title=product, qty=per_client[client])
            for product, per_client in result.matrix.items()
            if per_client.get(client, 0)
        ]
        notes = [f"{entry.product}: {entry.note}" for entry in result.notes_by_client.get(client, [])]
        orders.append(OrderRecord(
            client_name=client,
            event_date=result.client_date.get(client),
            items=items,
            order_notes=notes or None,
        ))
    return orders


def matrix_to_orders_json(result: MatrixResult) -> Dict[str, List[Dict[str, Any]]]:
    return {"orders": [order.to_dict() for order in matrix_to_orders(result)]}


def ingest_pdfs(buffers: Iterable[bytes], mapping: Optional[Dict[str, str]] = None) -> Dict[str, List[Dict[str, Any]]]:
    """
    Full batch: decode, merge, apply title aliases and serialize.

    Args:
        buffers: Raw PDF bytes, one per order sheet
        mapping: Optional {source_title: canonical_title} aliases

    Returns:
        {"orders": [...]} ready for the order-management application
    """
    result = apply_mapping(build_matrix_from_pdfs(buffers), mapping)
    orders = matrix_to_orders_json(result)
    logger.info(f"Produced {len(orders['orders'])} orders")
    return orders
