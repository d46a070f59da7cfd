"""Renderer registry and format dispatch for :mod:`pdfmaker`."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable

from pypdf import PdfReader

from .formats import DocumentFormat
from .models import SourceDocument

LOGGER = logging.getLogger("pdfmaker.dispatcher")

Renderer = Callable[[bytes, str], PdfReader]


class RendererRegistry:
    """Maps every supported :class:`DocumentFormat` to exactly one renderer."""

    def __init__(self) -> None:
        self._renderers: Dict[DocumentFormat, Renderer] = {}

    def register(self, fmt: DocumentFormat, renderer: Renderer) -> None:
        if not fmt.is_supported:
            raise ValueError("The unsupported format cannot have a renderer")
        if fmt in self._renderers:
            raise ValueError(f"Renderer for '{fmt.value}' is already registered")
        self._renderers[fmt] = renderer

    def get(self, fmt: DocumentFormat) -> Renderer | None:
        return self._renderers.get(fmt)

    def formats(self) -> Iterable[DocumentFormat]:
        return sorted(self._renderers, key=lambda fmt: fmt.value)

    def missing(self) -> list[DocumentFormat]:
        return [fmt for fmt in DocumentFormat if fmt.is_supported and fmt not in self._renderers]


registry = RendererRegistry()


def register_renderer(*formats: DocumentFormat):
    def decorator(func: Renderer) -> Renderer:
        for fmt in formats:
            registry.register(fmt, func)
        return func

    return decorator


def load_builtin_renderers() -> None:
    from .render import image, passthrough, table, text  # noqa: F401  # register renderers


def select_renderer(document: SourceDocument) -> Renderer | None:
    """Return the renderer for *document* or ``None`` when it must be skipped."""

    load_builtin_renderers()
    fmt = document.format
    if fmt is DocumentFormat.UNSUPPORTED:
        LOGGER.debug("No renderer for %s (unsupported extension)", document.name)
        return None
    renderer = registry.get(fmt)
    if renderer is None:
        raise LookupError(f"No renderer registered for format '{fmt.value}'")
    LOGGER.debug("Dispatching %s to the %s renderer", document.name, fmt.value)
    return renderer


__all__ = [
    "Renderer",
    "RendererRegistry",
    "registry",
    "register_renderer",
    "load_builtin_renderers",
    "select_renderer",
]
