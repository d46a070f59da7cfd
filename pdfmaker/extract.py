"""Content extraction for word-processor and spreadsheet sources."""

from __future__ import annotations

import io
import logging
from typing import Any

from docx import Document
from openpyxl import load_workbook

LOGGER = logging.getLogger("pdfmaker.extract")


def extract_docx_text(data: bytes) -> str:
    """Return the plain text of a ``.docx`` document, one paragraph per line.

    Paragraphs of the body come first, followed by the text of any tables
    in document order, cell by cell.
    """

    document = Document(io.BytesIO(data))
    lines = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                lines.append(cell.text)
    LOGGER.debug("Extracted %d line(s) from document", len(lines))
    return "\n".join(lines)


def read_first_sheet(data: bytes) -> tuple[str, list[list[Any]]]:
    """Return the name and the rows of cell values of the first worksheet.

    Later sheets are ignored. Formula cells yield their cached values.
    """

    workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        rows = [list(row) for row in sheet.iter_rows(values_only=True)]
        name = sheet.title
    finally:
        workbook.close()
    LOGGER.debug("Read %d row(s) from sheet %s", len(rows), name)
    return name, rows


__all__ = ["extract_docx_text", "read_first_sheet"]
