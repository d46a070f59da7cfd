from __future__ import annotations

import io
from pathlib import Path
from typing import Callable
import sys

import pytest
from docx import Document
from openpyxl import Workbook
from PIL import Image
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def pdf_bytes_factory() -> Callable[..., bytes]:
    def _create(pages: int = 1, width: float = 200, height: float = 200, title: str | None = None) -> bytes:
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=width, height=height)
        if title is not None:
            writer.add_metadata({"/Title": title})
        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()

    return _create


@pytest.fixture()
def sample_pdf_bytes(pdf_bytes_factory: Callable[..., bytes]) -> bytes:
    return pdf_bytes_factory(pages=3, width=300, height=400, title="Sample")


@pytest.fixture()
def image_factory() -> Callable[..., bytes]:
    def _create(
        width: int = 200,
        height: int = 100,
        image_format: str = "PNG",
        mode: str = "RGB",
        color: object = (200, 30, 30),
    ) -> bytes:
        image = Image.new(mode, (width, height), color)
        buffer = io.BytesIO()
        image.save(buffer, format=image_format)
        return buffer.getvalue()

    return _create


@pytest.fixture()
def landscape_jpeg(image_factory: Callable[..., bytes]) -> bytes:
    return image_factory(2000, 1000, "JPEG")


@pytest.fixture()
def xlsx_factory() -> Callable[..., bytes]:
    def _create(rows: list[list[object]], title: str = "Data", extra_sheets: int = 0) -> bytes:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = title
        for row in rows:
            sheet.append(row)
        for index in range(extra_sheets):
            extra = workbook.create_sheet(f"Extra{index + 1}")
            extra.append([f"hidden-{index}"])
        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    return _create


@pytest.fixture()
def docx_factory() -> Callable[[list[str]], bytes]:
    def _create(paragraphs: list[str]) -> bytes:
        document = Document()
        for paragraph in paragraphs:
            document.add_paragraph(paragraph)
        buffer = io.BytesIO()
        document.save(buffer)
        return buffer.getvalue()

    return _create
