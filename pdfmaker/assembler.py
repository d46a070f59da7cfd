"""Ordered conversion and merging of a batch of documents."""

from __future__ import annotations

import io
import logging
from enum import Enum
from typing import Iterable, Mapping, Sequence, Tuple, Union

from pypdf import PdfWriter

from .config import Settings
from .dispatcher import select_renderer
from .exceptions import AssemblerStateError, BatchRejectedError, FileTooLargeError
from .formats import SUPPORTED_EXTENSIONS
from .models import BatchResult, ItemOutcome, ItemStatus, SourceDocument

LOGGER = logging.getLogger("pdfmaker.assembler")

NO_PAGES_MESSAGE = (
    "No valid files could be converted. Supported formats: "
    + ", ".join(SUPPORTED_EXTENSIONS)
)

BatchItem = Union[SourceDocument, Tuple[str, bytes]]

_METADATA_KEYS = {
    "title": "/Title",
    "author": "/Author",
    "subject": "/Subject",
    "keywords": "/Keywords",
}


class AssemblerState(str, Enum):
    EMPTY = "empty"
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"
    BATCH_FAILED = "batch_failed"


def _metadata_from(document_info: Mapping[str, object]) -> dict[str, str]:
    metadata: dict[str, str] = {}
    for key, value in document_info.items():
        if value is None:
            continue
        string_value = str(value).strip()
        if not string_value:
            continue
        pdf_key = _METADATA_KEYS.get(str(key).lower())
        if pdf_key is None:
            pdf_key = key if str(key).startswith("/") else f"/{key}"
        metadata[pdf_key] = string_value
    return metadata


class BatchAssembler:
    """Owns the output document of one batch and fills it item by item.

    Items are processed strictly in position order. Each item ends as
    converted, skipped or failed; a failing item never stops the batch.
    An assembler runs exactly once.
    """

    def __init__(
        self,
        *,
        bookmarks: bool = False,
        document_info: Mapping[str, object] | None = None,
    ) -> None:
        self.bookmarks = bookmarks
        self.document_info = dict(document_info or {})
        self.state = AssemblerState.EMPTY
        self._writer = PdfWriter()
        self._outcomes: list[ItemOutcome] = []
        self._bookmark_targets: list[tuple[str, int]] = []

    @property
    def page_count(self) -> int:
        return len(self._writer.pages)

    @property
    def outcomes(self) -> tuple[ItemOutcome, ...]:
        return tuple(self._outcomes)

    def run(self, documents: Iterable[SourceDocument]) -> BatchResult:
        if self.state is not AssemblerState.EMPTY:
            raise AssemblerStateError(f"Assembler already used (state: {self.state.value})")

        ordered = sorted(documents, key=lambda document: document.position)
        LOGGER.info("Converting batch of %d document(s)", len(ordered))
        for index, document in enumerate(ordered, start=1):
            self.state = AssemblerState.ACCUMULATING
            LOGGER.debug("Processing %d/%d: %s", index, len(ordered), document.name)
            self._outcomes.append(self._process(document))

        names = tuple(document.name for document in ordered)
        return self._finish(names)

    def _process(self, document: SourceDocument) -> ItemOutcome:
        try:
            renderer = select_renderer(document)
            if renderer is None:
                LOGGER.warning("Skipping unsupported file type: %s", document.name)
                return ItemOutcome.skipped(document)

            start_page = self.page_count
            try:
                reader = renderer(document.read_bytes(), document.name)
                pages = list(reader.pages)
                # Pages are parsed lazily, so damaged objects may only surface here.
                for page in pages:
                    self._writer.add_page(page)
            except Exception as exc:
                self._discard_pages_from(start_page)
                reason = getattr(exc, "reason", None) or str(exc) or exc.__class__.__name__
                LOGGER.error("Error processing %s: %s", document.name, reason)
                return ItemOutcome.failed(document, reason)

            if self.bookmarks and pages:
                self._bookmark_targets.append((document.name, start_page))
            LOGGER.info("Converted %s into %d page(s)", document.name, len(pages))
            return ItemOutcome.converted(document, len(pages))
        finally:
            document.release()

    def _discard_pages_from(self, start_page: int) -> None:
        added = self.page_count - start_page
        if added > 0:
            LOGGER.debug("Discarding %d partially imported page(s)", added)
            del self._writer.pages[start_page:]

    def _finish(self, names: tuple[str, ...]) -> BatchResult:
        converted = sum(1 for outcome in self._outcomes if outcome.status is ItemStatus.CONVERTED)

        if self.page_count == 0:
            self.state = AssemblerState.BATCH_FAILED
            LOGGER.error("Batch produced no pages: %s", NO_PAGES_MESSAGE)
            return BatchResult(
                succeeded=False,
                page_count=0,
                names=names,
                converted_count=converted,
                outcomes=self.outcomes,
                error=NO_PAGES_MESSAGE,
            )

        metadata = {"/Producer": "pdfmaker"}
        metadata.update(_metadata_from(self.document_info))
        self._writer.add_metadata(metadata)

        for title, page_index in self._bookmark_targets:
            try:
                self._writer.add_outline_item(title, page_index)
            except Exception as exc:  # pragma: no cover - outline errors vary
                LOGGER.warning("Failed to add bookmark '%s': %s", title, exc)

        buffer = io.BytesIO()
        self._writer.write(buffer)
        self.state = AssemblerState.FINALIZED
        LOGGER.info(
            "Merged %d of %d document(s) into %d page(s)",
            converted,
            len(names),
            self.page_count,
        )
        return BatchResult(
            succeeded=True,
            page_count=self.page_count,
            names=names,
            converted_count=converted,
            outcomes=self.outcomes,
            pdf_bytes=buffer.getvalue(),
        )


def build_documents(items: Iterable[BatchItem]) -> list[SourceDocument]:
    """Number *items* in order, accepting documents or ``(name, bytes)`` pairs."""

    documents: list[SourceDocument] = []
    for position, item in enumerate(items):
        if isinstance(item, SourceDocument):
            documents.append(item)
        else:
            name, content = item
            documents.append(SourceDocument.from_bytes(position, name, content))
    return documents


def validate_batch(documents: Sequence[SourceDocument], settings: Settings) -> None:
    """Reject the batch before conversion when it breaks an upstream limit."""

    if not documents:
        raise BatchRejectedError("No files uploaded")
    if len(documents) > settings.max_files:
        raise BatchRejectedError(
            f"Too many files: {len(documents)} (maximum is {settings.max_files})"
        )
    for document in documents:
        try:
            size = document.size
        except OSError as exc:
            raise BatchRejectedError(f"File '{document.name}' is not readable: {exc}") from exc
        if size > settings.max_file_size:
            raise FileTooLargeError(document.name, size, settings.max_file_size)


def convert_batch(
    items: Iterable[BatchItem],
    *,
    settings: Settings | None = None,
    bookmarks: bool = False,
    document_info: Mapping[str, object] | None = None,
) -> BatchResult:
    """Convert *items* in order and merge them into one PDF.

    Raises:
        BatchRejectedError: If the batch is empty, too long or holds a file
            above the size limit. Nothing is converted in that case.
    """

    settings = settings or Settings()
    documents = build_documents(items)
    try:
        validate_batch(documents, settings)
    except BatchRejectedError:
        for document in documents:
            document.release()
        raise
    assembler = BatchAssembler(bookmarks=bookmarks, document_info=document_info)
    return assembler.run(documents)


__all__ = [
    "AssemblerState",
    "BatchAssembler",
    "BatchItem",
    "NO_PAGES_MESSAGE",
    "build_documents",
    "validate_batch",
    "convert_batch",
]
