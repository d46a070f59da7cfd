"""Data objects exchanged between the batch converter and its callers."""

from __future__ import annotations

import dataclasses
import logging
from enum import Enum
from pathlib import Path

from .exceptions import BatchFailedError
from .formats import DocumentFormat, detect_format

LOGGER = logging.getLogger("pdfmaker.models")


@dataclasses.dataclass(frozen=True)
class SourceDocument:
    """One item of a batch.

    Either ``content`` holds the raw bytes or ``path`` points at a staged
    copy on disk. ``position`` fixes the item's place in the output and is
    never changed by the conversion outcome.
    """

    position: int
    name: str
    content: bytes | None = None
    path: Path | None = None

    def __post_init__(self) -> None:
        if self.content is None and self.path is None:
            raise ValueError(f"Document '{self.name}' has neither content nor a staged path")
        if self.position < 0:
            raise ValueError(f"Document position must not be negative, got {self.position}")

    @classmethod
    def from_bytes(cls, position: int, name: str, content: bytes) -> "SourceDocument":
        return cls(position=position, name=name, content=bytes(content))

    @classmethod
    def staged(cls, position: int, path: Path, name: str | None = None) -> "SourceDocument":
        """Wrap a staged upload; :meth:`release` deletes *path*."""

        return cls(position=position, name=name or path.name, path=Path(path))

    @property
    def format(self) -> DocumentFormat:
        return detect_format(self.name)

    @property
    def size(self) -> int:
        if self.content is not None:
            return len(self.content)
        return self.path.stat().st_size  # type: ignore[union-attr]

    def read_bytes(self) -> bytes:
        if self.content is not None:
            return self.content
        return self.path.read_bytes()  # type: ignore[union-attr]

    def release(self) -> None:
        """Remove the staged copy of this document, if any."""

        if self.path is None:
            return
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            LOGGER.warning("Failed to remove staged file %s: %s", self.path, exc)


class ItemStatus(str, Enum):
    CONVERTED = "converted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True)
class ItemOutcome:
    """Tagged result of processing one document of a batch."""

    position: int
    name: str
    status: ItemStatus
    page_count: int = 0
    reason: str | None = None

    @classmethod
    def converted(cls, document: SourceDocument, page_count: int) -> "ItemOutcome":
        return cls(document.position, document.name, ItemStatus.CONVERTED, page_count)

    @classmethod
    def skipped(cls, document: SourceDocument) -> "ItemOutcome":
        return cls(document.position, document.name, ItemStatus.SKIPPED)

    @classmethod
    def failed(cls, document: SourceDocument, reason: str) -> "ItemOutcome":
        return cls(
            document.position,
            document.name,
            ItemStatus.FAILED,
            reason=reason or "unknown error",
        )


@dataclasses.dataclass(frozen=True)
class BatchResult:
    """Outcome of one batch conversion."""

    succeeded: bool
    page_count: int
    names: tuple[str, ...]
    converted_count: int
    outcomes: tuple[ItemOutcome, ...] = ()
    pdf_bytes: bytes | None = dataclasses.field(default=None, repr=False)
    error: str | None = None

    @property
    def skipped(self) -> tuple[ItemOutcome, ...]:
        return tuple(o for o in self.outcomes if o.status is ItemStatus.SKIPPED)

    @property
    def failed(self) -> tuple[ItemOutcome, ...]:
        return tuple(o for o in self.outcomes if o.status is ItemStatus.FAILED)

    def raise_for_status(self) -> "BatchResult":
        if not self.succeeded:
            raise BatchFailedError(self.error or "Batch conversion failed")
        return self


__all__ = ["SourceDocument", "ItemStatus", "ItemOutcome", "BatchResult"]
