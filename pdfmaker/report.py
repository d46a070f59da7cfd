"""Summaries of batch results for API responses and terminal output."""

from __future__ import annotations

from typing import Any

from .models import BatchResult, ItemOutcome, ItemStatus


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def format_outcome(outcome: ItemOutcome) -> str:
    """Return a one-line description such as ``notes.txt: converted (1 page)``."""

    if outcome.status is ItemStatus.CONVERTED:
        return f"{outcome.name}: converted ({_plural(outcome.page_count, 'page')})"
    if outcome.status is ItemStatus.FAILED:
        return f"{outcome.name}: failed ({outcome.reason})"
    return f"{outcome.name}: skipped"


def outcome_to_dict(outcome: ItemOutcome) -> dict[str, Any]:
    return {
        "position": outcome.position,
        "name": outcome.name,
        "status": outcome.status.value,
        "pages": outcome.page_count,
        "reason": outcome.reason,
    }


def summarize(result: BatchResult) -> dict[str, Any]:
    """Return a JSON-ready summary of *result*."""

    files = [outcome_to_dict(outcome) for outcome in result.outcomes]
    if not result.succeeded:
        return {
            "success": False,
            "error": result.error,
            "fileCount": len(result.names),
            "files": files,
        }
    return {
        "success": True,
        "pageCount": result.page_count,
        "fileCount": len(result.names),
        "convertedCount": result.converted_count,
        "originalName": ", ".join(result.names),
        "files": files,
    }


def describe(result: BatchResult) -> str:
    """Return a one-line headline for *result*."""

    if not result.succeeded:
        return f"Conversion failed: {result.error}"
    parts = [
        f"{_plural(result.page_count, 'page')} from "
        f"{result.converted_count} of {_plural(len(result.names), 'file')}"
    ]
    if result.skipped:
        parts.append(f"{len(result.skipped)} skipped")
    if result.failed:
        parts.append(f"{len(result.failed)} failed")
    return ", ".join(parts)


__all__ = ["format_outcome", "outcome_to_dict", "summarize", "describe"]
