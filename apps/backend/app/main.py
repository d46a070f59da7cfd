"""FastAPI application exposing the batch PDF converter."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, JSONResponse

from pdfmaker import (
    BatchRejectedError,
    FileTooLargeError,
    Settings,
    SourceDocument,
    convert_batch,
    summarize,
)
from pdfmaker.housekeeping import Sweeper
from pdfmaker.utils import get_logger, safe_filename

get_logger("pdfmaker").setLevel(logging.INFO)
LOGGER = logging.getLogger("pdfmaker.backend")


def get_settings() -> Settings:
    return Settings.from_env()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    settings.ensure_directories()
    sweeper = Sweeper(
        [settings.upload_dir, settings.download_dir],
        max_age=settings.retention_seconds,
        interval=settings.cleanup_interval_seconds,
    )
    sweeper.start()
    try:
        yield
    finally:
        sweeper.stop()


app = FastAPI(title="pdfmaker API", version="0.1.0", lifespan=lifespan)


def _error(status_code: int, message: str, **extra: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _release(documents: list[SourceDocument]) -> None:
    for document in documents:
        document.release()


async def _stage_uploads(files: List[UploadFile], settings: Settings) -> list[SourceDocument]:
    """Persist uploads to the staging directory, keeping their submission order."""

    stamp = int(time.time() * 1000)
    documents: list[SourceDocument] = []
    try:
        for position, upload in enumerate(files):
            contents = await upload.read()
            name = safe_filename(upload.filename, f"document_{position + 1}")
            if len(contents) > settings.max_file_size:
                raise FileTooLargeError(name, len(contents), settings.max_file_size)
            staged_path = settings.upload_dir / f"{stamp}-{position}-{name}"
            staged_path.write_bytes(contents)
            documents.append(SourceDocument.staged(position, staged_path, name=name))
    except Exception:
        _release(documents)
        raise
    return documents


@app.get("/health", response_class=JSONResponse)
async def health() -> dict[str, str]:
    """Lightweight health endpoint for uptime checks."""
    return {"status": "ok"}


@app.post("/upload")
async def upload(
    files: Optional[List[UploadFile]] = File(None, description="Documents to merge, in order"),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Convert the uploaded files, in order, into one PDF.

    Uploads are staged on disk and removed as soon as their item has been
    processed. The merged PDF is written to the download directory and a
    link to it is returned together with a per-file summary.
    """

    if not files:
        return _error(400, "No files uploaded")
    if len(files) > settings.max_files:
        return _error(400, f"Too many files: {len(files)} (maximum is {settings.max_files})")

    settings.ensure_directories()
    LOGGER.info("Files received in order: %s", ", ".join(f.filename or "?" for f in files))

    try:
        documents = await _stage_uploads(files, settings)
    except FileTooLargeError as exc:
        return _error(413, str(exc))

    try:
        result = await run_in_threadpool(convert_batch, documents, settings=settings)
    except BatchRejectedError as exc:
        return _error(400, str(exc))
    except Exception as exc:
        LOGGER.exception("Conversion error")
        _release(documents)
        return _error(500, "Failed to convert files to PDF", details=str(exc))

    summary = summarize(result)
    if not result.succeeded:
        return _error(400, result.error or "Conversion failed", files=summary["files"])

    output_name = f"{int(time.time() * 1000)}-converted.pdf"
    (settings.download_dir / output_name).write_bytes(result.pdf_bytes or b"")

    return JSONResponse(
        {
            **summary,
            "downloadUrl": f"/downloads/{output_name}",
            "fileName": output_name,
        }
    )


@app.get("/downloads/{file_name}", response_class=FileResponse)
async def download(file_name: str, settings: Settings = Depends(get_settings)) -> FileResponse:
    """Return a previously produced PDF."""

    root = settings.download_dir.resolve()
    path = (root / file_name).resolve()
    if path.parent != root or not path.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path, media_type="application/pdf", filename=path.name)


__all__ = ["app", "get_settings"]
