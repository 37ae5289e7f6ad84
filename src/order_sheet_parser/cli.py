#!/usr/bin/env python3
"""
Order Sheet Parser CLI
Turns a batch of order-sheet PDFs into order records.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

import click
from rich.console import Console
from rich.table import Table

from .exceptions import MappingError, OrderSheetError
from .matrix import ingest_pdfs, validate_mapping

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_MB = 50
MAX_TOTAL_MB = 120

console = Console(stderr=True)


def read_buffers(paths: List[str]) -> List[bytes]:
    """Read PDF files, enforcing the per-file and per-batch size limits."""
    total_mb = 0.0
    buffers = []
    for path in paths:
        size_mb = Path(path).stat().st_size / (1024 * 1024)
        total_mb += size_mb
        if size_mb > MAX_FILE_SIZE_MB:
            raise click.BadParameter(
                f"{path} is too large ({size_mb:.1f}MB > {MAX_FILE_SIZE_MB}MB)", param_hint="FILES"
            )
        if total_mb > MAX_TOTAL_MB:
            raise click.BadParameter(
                f"batch exceeds the size limit ({total_mb:.1f}MB > {MAX_TOTAL_MB}MB)", param_hint="FILES"
            )
        buffers.append(Path(path).read_bytes())
    return buffers


def load_mapping(path: Optional[str]) -> Dict[str, str]:
    if not path:
        return {}
    try:
        mapping = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"mapping is not valid JSON: {e}", param_hint="--mapping")
    try:
        return validate_mapping(mapping)
    except MappingError as e:
        raise click.BadParameter(str(e), param_hint="--mapping")


def print_summary(orders: List[dict]):
    table = Table(title="Orders")
    table.add_column("Client")
    table.add_column("Event date")
    table.add_column("Items", justify="right")
    table.add_column("Notes", justify="right")
    for order in orders:
        table.add_row(
            order["clientName"],
            order["eventDate"] or "-",
            str(len(order["items"])),
            str(len(order["orderNotes"] or [])),
        )
    console.print(table)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def cli(verbose: bool):
    """Order Sheet Parser - order-sheet PDFs to structured orders."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(), help='Output JSON file path')
@click.option('--mapping', '-m', type=click.Path(exists=True, dir_okay=False),
              help='JSON object of {source title: canonical title} aliases')
@click.option('--quiet', '-q', is_flag=True, help='Do not print the summary table')
def parse(files, output: Optional[str], mapping: Optional[str], quiet: bool):
    """Parse order-sheet PDFs and emit {"orders": [...]} JSON."""
    buffers = read_buffers(list(files))

    try:
        result = ingest_pdfs(buffers, load_mapping(mapping))
    except OrderSheetError as e:
        logger.error(f"Parsing failed: {e}")
        click.echo(f"Error parsing order sheets: {e}", err=True)
        raise click.Abort()

    json_str = json.dumps(result, indent=2, ensure_ascii=False)
    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(json_str)
        logger.info(f"Results saved to: {output}")
    else:
        click.echo(json_str)

    if not quiet:
        print_summary(result["orders"])


if __name__ == "__main__":
    cli()
