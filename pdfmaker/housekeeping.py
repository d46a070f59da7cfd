"""Periodic removal of stale files from the staging and download areas.

The sweeper only looks at file modification times inside the configured
directories. It never touches batches in flight: uploads are removed by
the assembler as soon as their item is processed.
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Iterable

from .config import CLEANUP_INTERVAL_SECONDS, RETENTION_SECONDS
from .utils import PathLike, ensure_path

LOGGER = logging.getLogger("pdfmaker.housekeeping")


def sweep_directories(
    directories: Iterable[PathLike],
    max_age: float = RETENTION_SECONDS,
    *,
    now: float | None = None,
) -> list[Path]:
    """Delete regular files older than *max_age* seconds and return them."""

    current = time.time() if now is None else now
    removed: list[Path] = []
    for directory in directories:
        root = ensure_path(directory)
        if not root.is_dir():
            continue
        for entry in root.iterdir():
            try:
                if not entry.is_file():
                    continue
                if current - entry.stat().st_mtime <= max_age:
                    continue
                entry.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                LOGGER.warning("Failed to remove stale file %s: %s", entry, exc)
                continue
            removed.append(entry)
    if removed:
        LOGGER.info("Removed %d stale file(s)", len(removed))
    return removed


class Sweeper:
    """Runs :func:`sweep_directories` every *interval* seconds on a daemon thread."""

    def __init__(
        self,
        directories: Iterable[PathLike],
        *,
        max_age: float = RETENTION_SECONDS,
        interval: float = CLEANUP_INTERVAL_SECONDS,
    ) -> None:
        self.directories = [ensure_path(directory) for directory in directories]
        self.max_age = max_age
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="pdfmaker-sweeper", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                sweep_directories(self.directories, self.max_age)
            except Exception:  # pragma: no cover - keep the sweeper alive
                LOGGER.exception("Housekeeping sweep failed")


__all__ = ["sweep_directories", "Sweeper"]
