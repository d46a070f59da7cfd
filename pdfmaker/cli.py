"""
Command-line interface for pdfmaker.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .assembler import convert_batch
from .config import Settings
from .exceptions import BatchRejectedError
from .formats import EXTENSION_FORMATS
from .housekeeping import sweep_directories
from .models import ItemStatus, SourceDocument
from .report import describe
from .utils import format_file_size, get_logger

console = Console()

_STATUS_STYLES = {
    ItemStatus.CONVERTED: "green",
    ItemStatus.SKIPPED: "yellow",
    ItemStatus.FAILED: "red",
}


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log every processing step")
def cli(verbose):
    """
    pdfmaker - merge text, images, documents, spreadsheets and PDFs into one PDF.
    """
    get_logger("pdfmaker").setLevel(logging.DEBUG if verbose else logging.WARNING)


@cli.command(name="convert")
@click.argument("inputs", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output", "-o",
    required=True,
    type=click.Path(dir_okay=False),
    help="Path of the merged PDF",
)
@click.option("--bookmarks", is_flag=True, help="Add one bookmark per converted file")
@click.option("--title", default=None, help="Title stored in the PDF metadata")
def convert(inputs, output, bookmarks, title):
    """
    Convert INPUTS, in the given order, into a single PDF.

    Examples:

        pdfmaker convert notes.txt photo.jpg sheet.xlsx -o merged.pdf

        pdfmaker convert *.pdf -o all.pdf --bookmarks --title "Archive"
    """
    settings = Settings.from_env()
    documents = [
        SourceDocument.from_bytes(position, Path(path).name, Path(path).read_bytes())
        for position, path in enumerate(inputs)
    ]

    try:
        result = convert_batch(
            documents,
            settings=settings,
            bookmarks=bookmarks,
            document_info={"title": title} if title else None,
        )
    except BatchRejectedError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    table = Table(title="Conversion Results")
    table.add_column("#", justify="right", style="dim")
    table.add_column("File", style="cyan")
    table.add_column("Status")
    table.add_column("Pages", justify="right")
    table.add_column("Details", style="dim")
    for outcome in result.outcomes:
        style = _STATUS_STYLES[outcome.status]
        table.add_row(
            str(outcome.position + 1),
            outcome.name,
            f"[{style}]{outcome.status.value}[/{style}]",
            str(outcome.page_count),
            outcome.reason or "",
        )
    console.print(table)

    if not result.succeeded:
        console.print(f"[bold red]✗ Error:[/bold red] {result.error}")
        sys.exit(1)

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result.pdf_bytes or b"")

    console.print(f"[bold green]✓ {describe(result)}[/bold green]")
    console.print(f"[dim]Output: {output_path.resolve()} ({format_file_size(output_path.stat().st_size)})[/dim]")


@cli.command(name="formats")
def list_formats():
    """
    List the supported file extensions.
    """
    table = Table(title="Supported Formats")
    table.add_column("Extension", style="cyan")
    table.add_column("Handled as", style="green")
    for extension, fmt in EXTENSION_FORMATS.items():
        table.add_row(extension, fmt.value)
    console.print(table)


@cli.command(name="cleanup")
@click.argument("directories", nargs=-1, required=True, type=click.Path(file_okay=False))
@click.option(
    "--max-age",
    default=Settings().retention_seconds,
    show_default=True,
    type=int,
    help="Remove files older than this many seconds",
)
def cleanup(directories, max_age):
    """
    Remove stale files from staging or download DIRECTORIES.
    """
    removed = sweep_directories(directories, max_age)
    console.print(f"[bold green]✓ Removed {len(removed)} stale file(s)[/bold green]")
    for path in removed:
        console.print(f"  • {path.name}")


def main():
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
