"""Per-format page renderers.

Importing a renderer module registers it with :data:`pdfmaker.dispatcher.registry`.
"""

from __future__ import annotations

from .layout import ImageRun, LinePaginator, PageContent, PageSpec, TextRun

__all__ = ["ImageRun", "LinePaginator", "PageContent", "PageSpec", "TextRun"]
