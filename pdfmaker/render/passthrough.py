"""Import pages of documents that already are PDFs."""

from __future__ import annotations

import io
import logging

from pypdf import PasswordType, PdfReader

from ..dispatcher import register_renderer
from ..exceptions import ConversionError
from ..formats import DocumentFormat

LOGGER = logging.getLogger("pdfmaker.render.passthrough")


def load_pdf(data: bytes, name: str) -> PdfReader:
    """Return a reader over *data*, raising :class:`ConversionError` if unusable.

    Encrypted files are opened with an empty password. A document without
    pages is rejected.
    """

    try:
        reader = PdfReader(io.BytesIO(data))
    except Exception as exc:
        LOGGER.error("Failed to read PDF %s: %s", name, exc)
        raise ConversionError(name, f"unable to read PDF: {exc}") from exc

    if reader.is_encrypted:
        LOGGER.debug("Attempting to decrypt encrypted PDF %s", name)
        try:
            decrypted = reader.decrypt("")
        except Exception as exc:
            raise ConversionError(name, f"encrypted PDF cannot be decrypted: {exc}") from exc
        if decrypted == PasswordType.NOT_DECRYPTED:
            raise ConversionError(name, "encrypted PDF requires a password")

    try:
        page_count = len(reader.pages)
    except Exception as exc:
        raise ConversionError(name, f"unable to read PDF pages: {exc}") from exc

    if page_count == 0:
        raise ConversionError(name, "PDF contains no pages")

    LOGGER.debug("Loaded PDF %s with %d page(s)", name, page_count)
    return reader


@register_renderer(DocumentFormat.PDF)
def render_pdf(data: bytes, name: str) -> PdfReader:
    return load_pdf(data, name)


__all__ = ["load_pdf", "render_pdf"]
