"""Plain text and extracted document text rendering."""

from __future__ import annotations

import logging

from pypdf import PdfReader

from ..dispatcher import register_renderer
from ..exceptions import ConversionError
from ..extract import extract_docx_text
from ..formats import DocumentFormat
from .canvas import to_reader
from .layout import LETTER_PORTRAIT, LinePaginator, PageContent

LOGGER = logging.getLogger("pdfmaker.render.text")

TOP = 750.0
FONT_SIZE = 12.0
MAX_LINE_CHARS = 100


def decode_text(data: bytes, name: str) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ConversionError(name, f"text is not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc


def split_lines(text: str) -> list[str]:
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def layout_text(text: str, *, skip_blank_lines: bool = False) -> PageContent:
    """Lay *text* out on portrait Letter pages, one truncated line per slot.

    With ``skip_blank_lines`` each line is trimmed first and lines that end
    up empty take no slot at all; otherwise blank lines still advance.
    """

    paginator = LinePaginator(LETTER_PORTRAIT, top=TOP)
    for line in split_lines(text):
        if skip_blank_lines:
            line = line.strip()
            if not line:
                continue
        paginator.add_line(line[:MAX_LINE_CHARS], FONT_SIZE)
    return paginator.content()


@register_renderer(DocumentFormat.TEXT)
def render_text(data: bytes, name: str) -> PdfReader:
    content = layout_text(decode_text(data, name))
    LOGGER.debug("Laid out %s on %d page(s)", name, len(content))
    return to_reader(content, title=name)


@register_renderer(DocumentFormat.DOCUMENT)
def render_document(data: bytes, name: str) -> PdfReader:
    try:
        text = extract_docx_text(data)
    except Exception as exc:
        raise ConversionError(name, f"unable to extract document text: {exc}") from exc
    content = layout_text(text, skip_blank_lines=True)
    LOGGER.debug("Laid out document %s on %d page(s)", name, len(content))
    return to_reader(content, title=name)


__all__ = ["decode_text", "split_lines", "layout_text", "render_text", "render_document"]
