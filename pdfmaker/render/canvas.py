"""Paint :class:`PageContent` onto a ReportLab canvas."""

from __future__ import annotations

import io

from pypdf import PdfReader
from reportlab import rl_config
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as pdfcanvas

from .layout import ImageRun, PageContent, TextRun

FONT_NAME = "Helvetica"
# Standard Type 1 fonts are WinAnsi encoded.
FONT_ENCODING = "cp1252"


def encodable(text: str) -> str:
    """Replace characters the standard font cannot show with ``?``."""

    return text.encode(FONT_ENCODING, "replace").decode(FONT_ENCODING)


def paint(content: PageContent, *, title: str | None = None) -> bytes:
    """Render *content* into PDF bytes, one canvas page per :class:`PageSpec`."""

    # Embed JPEG and content streams as binary; ASCII85 would grow them by a quarter.
    rl_config.useA85 = 0
    buffer = io.BytesIO()
    first_size = content.pages[0].size if content.pages else (612.0, 792.0)
    pdf = pdfcanvas.Canvas(buffer, pagesize=first_size, pageCompression=1)
    pdf.setCreator("pdfmaker")
    if title:
        pdf.setTitle(title)

    for page in content.pages:
        pdf.setPageSize(page.size)
        for element in page.elements:
            if isinstance(element, TextRun):
                pdf.setFillColorRGB(*element.color)
                pdf.setFont(FONT_NAME, element.size)
                pdf.drawString(element.x, element.y, encodable(element.text))
            elif isinstance(element, ImageRun):
                pdf.drawImage(
                    ImageReader(io.BytesIO(element.data)),
                    element.x,
                    element.y,
                    width=element.width,
                    height=element.height,
                )
        pdf.showPage()

    pdf.save()
    return buffer.getvalue()


def to_reader(content: PageContent, *, title: str | None = None) -> PdfReader:
    """Paint *content* and load the result as a fresh, independently owned reader."""

    return PdfReader(io.BytesIO(paint(content, title=title)))


__all__ = ["FONT_NAME", "encodable", "paint", "to_reader"]
