"""Spreadsheet and CSV rendering as one text line per row on landscape pages."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from pypdf import PdfReader

from ..dispatcher import register_renderer
from ..exceptions import ConversionError
from ..extract import read_first_sheet
from ..formats import DocumentFormat
from .canvas import to_reader
from .layout import LETTER_LANDSCAPE, LinePaginator, PageContent
from .text import decode_text, split_lines

LOGGER = logging.getLogger("pdfmaker.render.table")

TOP = 560.0
TITLE_SIZE = 14.0
TITLE_GAP = 30.0
ROW_SIZE = 10.0
CELL_SEPARATOR = " | "
MAX_ROW_CHARS = 120


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_row(cells: Iterable[Any]) -> str:
    return CELL_SEPARATOR.join(format_cell(cell) for cell in cells)[:MAX_ROW_CHARS]


def layout_rows(rows: Iterable[Sequence[Any]], *, title: str | None = None) -> PageContent:
    paginator = LinePaginator(LETTER_LANDSCAPE, top=TOP)
    if title is not None:
        paginator.add_line(title, TITLE_SIZE, advance=TITLE_GAP)
    for row in rows:
        paginator.add_line(format_row(row), ROW_SIZE)
    return paginator.content()


def parse_csv(text: str) -> list[list[str]]:
    """Split *text* into rows on newlines and into cells on every comma.

    Quoted fields are not recognised: a comma inside quotes still splits.
    """

    return [line.split(",") for line in split_lines(text)]


@register_renderer(DocumentFormat.SPREADSHEET)
def render_spreadsheet(data: bytes, name: str) -> PdfReader:
    try:
        sheet_name, rows = read_first_sheet(data)
    except Exception as exc:
        raise ConversionError(name, f"unable to read workbook: {exc}") from exc
    content = layout_rows(rows, title=f"Sheet: {sheet_name}")
    LOGGER.debug("Laid out %d row(s) of %s on %d page(s)", len(rows), name, len(content))
    return to_reader(content, title=name)


@register_renderer(DocumentFormat.CSV)
def render_csv(data: bytes, name: str) -> PdfReader:
    rows = parse_csv(decode_text(data, name))
    content = layout_rows(rows)
    LOGGER.debug("Laid out %d CSV row(s) of %s on %d page(s)", len(rows), name, len(content))
    return to_reader(content, title=name)


__all__ = [
    "format_cell",
    "format_row",
    "layout_rows",
    "parse_csv",
    "render_spreadsheet",
    "render_csv",
]
