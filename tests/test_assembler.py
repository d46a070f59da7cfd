from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
from pypdf import PdfReader, PdfWriter
from pypdf.generic import NameObject

from pdfmaker import (
    AssemblerState,
    AssemblerStateError,
    BatchAssembler,
    BatchFailedError,
    BatchRejectedError,
    FileTooLargeError,
    ItemStatus,
    Settings,
    SourceDocument,
    convert_batch,
)
from pdfmaker.assembler import NO_PAGES_MESSAGE


def _reader(pdf_bytes: bytes | None) -> PdfReader:
    assert pdf_bytes is not None
    return PdfReader(io.BytesIO(pdf_bytes))


def _page_texts(pdf_bytes: bytes | None) -> list[str]:
    return [page.extract_text() for page in _reader(pdf_bytes).pages]


def test_mixed_batch_keeps_order(
    landscape_jpeg: bytes,
    xlsx_factory: Callable[..., bytes],
) -> None:
    items = [
        ("notes.txt", b"first line\nsecond line\nthird line"),
        ("photo.jpg", landscape_jpeg),
        ("sheet.xlsx", xlsx_factory([["col", "val"], ["a", 1], ["b", 2], ["c", 3], ["d", 4]])),
    ]

    result = convert_batch(items)

    assert result.succeeded
    assert result.page_count == 3
    assert result.converted_count == 3
    assert result.names == ("notes.txt", "photo.jpg", "sheet.xlsx")
    reader = _reader(result.pdf_bytes)
    sizes = [(float(p.mediabox.width), float(p.mediabox.height)) for p in reader.pages]
    assert sizes == [(612, 792), (612, 792), (792, 612)]
    assert "first line" in reader.pages[0].extract_text()
    assert "Sheet: Data" in reader.pages[2].extract_text()
    assert reader.pages[1].images


def test_reordering_inputs_reverses_pages() -> None:
    a = ("a.txt", b"ALPHA CONTENT")
    b = ("b.txt", b"BRAVO CONTENT")

    forward = _page_texts(convert_batch([a, b]).pdf_bytes)
    backward = _page_texts(convert_batch([b, a]).pdf_bytes)

    assert "ALPHA" in forward[0] and "BRAVO" in forward[1]
    assert forward == list(reversed(backward))


def test_corrupt_item_is_isolated(image_factory: Callable[..., bytes], sample_pdf_bytes: bytes) -> None:
    truncated = image_factory(300, 300, "PNG")[:40]
    items = [
        ("intro.txt", b"INTRO"),
        ("broken.png", truncated),
        ("appendix.pdf", sample_pdf_bytes),
    ]

    result = convert_batch(items)

    assert result.succeeded
    assert result.page_count == 1 + 3
    assert result.converted_count == 2
    statuses = [outcome.status for outcome in result.outcomes]
    assert statuses == [ItemStatus.CONVERTED, ItemStatus.FAILED, ItemStatus.CONVERTED]
    failed = result.outcomes[1]
    assert failed.name == "broken.png"
    assert failed.reason
    assert failed.page_count == 0
    assert result.failed == (failed,)
    assert "INTRO" in _page_texts(result.pdf_bytes)[0]


def test_unsupported_items_are_skipped_never_failed(sample_pdf_bytes: bytes) -> None:
    result = convert_batch([("tool.exe", sample_pdf_bytes), ("notes.txt", b"kept")])

    assert result.succeeded
    assert result.page_count == 1
    skipped = result.outcomes[0]
    assert skipped.status is ItemStatus.SKIPPED
    assert skipped.reason is None
    assert result.skipped == (skipped,)
    assert result.failed == ()


def test_only_unsupported_items_fail_the_batch() -> None:
    result = convert_batch([("a.exe", b"MZ"), ("b.zip", b"PK")])

    assert not result.succeeded
    assert result.page_count == 0
    assert result.pdf_bytes is None
    assert result.error == NO_PAGES_MESSAGE
    assert "txt, jpg, jpeg, png, gif, webp, docx, xlsx, xls, csv, pdf" in result.error
    assert [o.status for o in result.outcomes] == [ItemStatus.SKIPPED, ItemStatus.SKIPPED]
    with pytest.raises(BatchFailedError):
        result.raise_for_status()


def test_all_items_failing_fails_the_batch() -> None:
    result = convert_batch([("bad.pdf", b"garbage"), ("bad.png", b"garbage")])

    assert not result.succeeded
    assert result.converted_count == 0
    assert all(o.status is ItemStatus.FAILED for o in result.outcomes)


def test_single_pdf_passes_through_unchanged(pdf_bytes_factory: Callable[..., bytes]) -> None:
    source = pdf_bytes_factory(pages=4, width=123, height=456)

    result = convert_batch([("only.pdf", source)])

    original = PdfReader(io.BytesIO(source))
    merged = _reader(result.pdf_bytes)
    assert len(merged.pages) == len(original.pages)
    for before, after in zip(original.pages, merged.pages):
        assert before.mediabox == after.mediabox
        assert before.extract_text() == after.extract_text()


def test_empty_batch_is_rejected() -> None:
    with pytest.raises(BatchRejectedError):
        convert_batch([])


def test_too_many_files_rejected_before_conversion(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []
    monkeypatch.setattr(
        "pdfmaker.assembler.select_renderer",
        lambda document: calls.append(document.name),
    )

    with pytest.raises(BatchRejectedError):
        convert_batch([(f"{i}.txt", b"x") for i in range(3)], settings=Settings(max_files=2))
    assert calls == []


def test_oversized_file_rejected(tmp_path: Path) -> None:
    staged = tmp_path / "big.txt"
    staged.write_bytes(b"x" * 11)
    documents = [SourceDocument.staged(0, staged)]

    with pytest.raises(FileTooLargeError) as excinfo:
        convert_batch(documents, settings=Settings(max_file_size=10))

    assert excinfo.value.size == 11
    assert not staged.exists()


def test_staged_files_released_on_every_path(tmp_path: Path, sample_pdf_bytes: bytes) -> None:
    paths = {
        "ok.txt": b"fine",
        "skip.exe": b"MZ",
        "bad.pdf": b"not a pdf",
        "good.pdf": sample_pdf_bytes,
    }
    documents = []
    for position, (name, data) in enumerate(paths.items()):
        path = tmp_path / f"staged-{position}-{name}"
        path.write_bytes(data)
        documents.append(SourceDocument.staged(position, path, name=name))

    result = convert_batch(documents)

    assert result.succeeded
    assert list(tmp_path.iterdir()) == []


def test_staged_file_removed_before_next_item_starts(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    first = tmp_path / "first.txt"
    second = tmp_path / "second.txt"
    first.write_bytes(b"one")
    second.write_bytes(b"two")
    seen: list[bool] = []

    from pdfmaker import dispatcher

    original = dispatcher.select_renderer

    def _spy(document: SourceDocument):
        if document.name == "second.txt":
            seen.append(first.exists())
        return original(document)

    monkeypatch.setattr("pdfmaker.assembler.select_renderer", _spy)
    convert_batch([SourceDocument.staged(0, first), SourceDocument.staged(1, second)])

    assert seen == [False]


def test_documents_sorted_by_position() -> None:
    documents = [
        SourceDocument.from_bytes(1, "second.txt", b"SECOND"),
        SourceDocument.from_bytes(0, "first.txt", b"FIRST"),
    ]

    result = BatchAssembler().run(documents)

    assert result.names == ("first.txt", "second.txt")
    texts = _page_texts(result.pdf_bytes)
    assert "FIRST" in texts[0]
    assert "SECOND" in texts[1]


def test_assembler_state_machine() -> None:
    assembler = BatchAssembler()
    assert assembler.state is AssemblerState.EMPTY

    assembler.run([SourceDocument.from_bytes(0, "a.txt", b"a")])
    assert assembler.state is AssemblerState.FINALIZED

    with pytest.raises(AssemblerStateError):
        assembler.run([SourceDocument.from_bytes(0, "a.txt", b"a")])


def test_assembler_batch_failed_state() -> None:
    assembler = BatchAssembler()
    result = assembler.run([SourceDocument.from_bytes(0, "a.exe", b"")])

    assert assembler.state is AssemblerState.BATCH_FAILED
    assert not result.succeeded


def test_bookmarks_and_metadata(sample_pdf_bytes: bytes) -> None:
    result = convert_batch(
        [("cover.txt", b"cover"), ("skip.bin", b""), ("body.pdf", sample_pdf_bytes)],
        bookmarks=True,
        document_info={"title": "Bundle", "author": "Ops", "subject": "  "},
    )

    reader = _reader(result.pdf_bytes)
    assert reader.metadata.get("/Title") == "Bundle"
    assert reader.metadata.get("/Author") == "Ops"
    assert "/Subject" not in reader.metadata
    assert [item.title for item in reader.outline] == ["cover.txt", "body.pdf"]
    assert [reader.get_destination_page_number(item) for item in reader.outline] == [0, 1]


def _pdf_with_broken_second_page() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    broken = writer.add_blank_page(width=200, height=200)
    del broken[NameObject("/Type")]
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def test_page_import_failure_is_isolated_and_rolled_back() -> None:
    damaged = _pdf_with_broken_second_page()
    assert len(PdfReader(io.BytesIO(damaged)).pages) == 2

    result = convert_batch(
        [("intro.txt", b"INTRO"), ("damaged.pdf", damaged), ("outro.txt", b"OUTRO")],
        bookmarks=True,
    )

    assert result.succeeded
    assert result.page_count == 2
    assert [o.status for o in result.outcomes] == [
        ItemStatus.CONVERTED,
        ItemStatus.FAILED,
        ItemStatus.CONVERTED,
    ]
    assert result.outcomes[1].reason
    reader = _reader(result.pdf_bytes)
    assert len(reader.pages) == 2
    texts = [page.extract_text() for page in reader.pages]
    assert "INTRO" in texts[0]
    assert "OUTRO" in texts[1]
    assert [item.title for item in reader.outline] == ["intro.txt", "outro.txt"]
    assert [reader.get_destination_page_number(item) for item in reader.outline] == [0, 1]


def test_missing_staged_file_rejects_batch_and_releases_the_rest(tmp_path: Path) -> None:
    present = tmp_path / "present.txt"
    present.write_bytes(b"here")
    vanished = tmp_path / "vanished.txt"
    documents = [SourceDocument.staged(0, present), SourceDocument.staged(1, vanished)]

    with pytest.raises(BatchRejectedError, match="vanished.txt"):
        convert_batch(documents)

    assert not present.exists()
