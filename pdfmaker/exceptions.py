"""Custom exceptions for the :mod:`pdfmaker` package."""

from __future__ import annotations


class PdfMakerError(Exception):
    """Base exception for all errors raised by :mod:`pdfmaker`."""


class ConversionError(PdfMakerError):
    """Raised when a single document cannot be rendered into PDF pages."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Failed to convert '{name}': {reason}")


class BatchRejectedError(PdfMakerError):
    """Raised when a batch is refused before any conversion starts."""


class FileTooLargeError(BatchRejectedError):
    """Raised when one file of the batch exceeds the per-file size ceiling."""

    def __init__(self, name: str, size: int, limit: int) -> None:
        self.name = name
        self.size = size
        self.limit = limit
        super().__init__(
            f"File '{name}' is {size} bytes which exceeds the limit of {limit} bytes"
        )


class BatchFailedError(PdfMakerError):
    """Raised when no document of a batch produced any page."""


class AssemblerStateError(PdfMakerError):
    """Raised when an assembler is driven outside its state machine."""
