"""Runtime configuration for :mod:`pdfmaker`."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

MAX_FILE_SIZE = 50 * 1024 * 1024
MAX_FILES = 20
RETENTION_SECONDS = 60 * 60
CLEANUP_INTERVAL_SECONDS = 30 * 60

_ENV_PREFIX = "PDFMAKER_"


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(_ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{_ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{_ENV_PREFIX}{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """Limits and directories used by the batch converter and its surfaces."""

    upload_dir: Path = Path("uploads")
    download_dir: Path = Path("downloads")
    max_file_size: int = MAX_FILE_SIZE
    max_files: int = MAX_FILES
    retention_seconds: int = RETENTION_SECONDS
    cleanup_interval_seconds: int = CLEANUP_INTERVAL_SECONDS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            upload_dir=Path(env.get(_ENV_PREFIX + "UPLOAD_DIR") or "uploads"),
            download_dir=Path(env.get(_ENV_PREFIX + "DOWNLOAD_DIR") or "downloads"),
            max_file_size=_read_int(env, "MAX_FILE_SIZE", MAX_FILE_SIZE),
            max_files=_read_int(env, "MAX_FILES", MAX_FILES),
            retention_seconds=_read_int(env, "RETENTION_SECONDS", RETENTION_SECONDS),
            cleanup_interval_seconds=_read_int(
                env, "CLEANUP_INTERVAL_SECONDS", CLEANUP_INTERVAL_SECONDS
            ),
        )

    def ensure_directories(self) -> None:
        for directory in (self.upload_dir, self.download_dir):
            directory.mkdir(parents=True, exist_ok=True)


__all__ = ["Settings", "MAX_FILE_SIZE", "MAX_FILES", "RETENTION_SECONDS", "CLEANUP_INTERVAL_SECONDS"]
