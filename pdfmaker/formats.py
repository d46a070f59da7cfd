"""Document formats recognised by the batch converter."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath


class DocumentFormat(str, Enum):
    """Closed set of source formats, including an explicit unsupported member."""

    TEXT = "text"
    IMAGE = "image"
    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    CSV = "csv"
    PDF = "pdf"
    UNSUPPORTED = "unsupported"

    @property
    def is_supported(self) -> bool:
        return self is not DocumentFormat.UNSUPPORTED


EXTENSION_FORMATS: dict[str, DocumentFormat] = {
    ".txt": DocumentFormat.TEXT,
    ".jpg": DocumentFormat.IMAGE,
    ".jpeg": DocumentFormat.IMAGE,
    ".png": DocumentFormat.IMAGE,
    ".gif": DocumentFormat.IMAGE,
    ".webp": DocumentFormat.IMAGE,
    ".docx": DocumentFormat.DOCUMENT,
    ".xlsx": DocumentFormat.SPREADSHEET,
    ".xls": DocumentFormat.SPREADSHEET,
    ".csv": DocumentFormat.CSV,
    ".pdf": DocumentFormat.PDF,
}

SUPPORTED_EXTENSIONS: tuple[str, ...] = tuple(ext.lstrip(".") for ext in EXTENSION_FORMATS)


def extension_of(name: str) -> str:
    """Return the lowercase extension of *name* including the dot, or ``""``."""

    return PurePosixPath(name.replace("\\", "/")).suffix.lower()


def detect_format(name: str) -> DocumentFormat:
    return EXTENSION_FORMATS.get(extension_of(name), DocumentFormat.UNSUPPORTED)


__all__ = ["DocumentFormat", "EXTENSION_FORMATS", "SUPPORTED_EXTENSIONS", "extension_of", "detect_format"]
