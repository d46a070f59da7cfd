"""Convert an ordered batch of mixed documents into a single PDF."""

from __future__ import annotations

from .assembler import AssemblerState, BatchAssembler, convert_batch, validate_batch
from .config import Settings
from .dispatcher import load_builtin_renderers, registry, select_renderer
from .exceptions import (
    AssemblerStateError,
    BatchFailedError,
    BatchRejectedError,
    ConversionError,
    FileTooLargeError,
    PdfMakerError,
)
from .formats import SUPPORTED_EXTENSIONS, DocumentFormat, detect_format
from .models import BatchResult, ItemOutcome, ItemStatus, SourceDocument
from .report import describe, format_outcome, summarize

__version__ = "0.1.0"

load_builtin_renderers()

__all__ = [
    "AssemblerState",
    "AssemblerStateError",
    "BatchAssembler",
    "BatchFailedError",
    "BatchRejectedError",
    "BatchResult",
    "ConversionError",
    "DocumentFormat",
    "FileTooLargeError",
    "ItemOutcome",
    "ItemStatus",
    "PdfMakerError",
    "Settings",
    "SUPPORTED_EXTENSIONS",
    "SourceDocument",
    "convert_batch",
    "describe",
    "detect_format",
    "format_outcome",
    "load_builtin_renderers",
    "registry",
    "select_renderer",
    "summarize",
    "validate_batch",
    "__version__",
]
