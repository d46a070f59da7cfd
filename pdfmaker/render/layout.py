"""Page descriptors produced by the renderers and the shared line paginator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

LETTER_PORTRAIT = (612.0, 792.0)
LETTER_LANDSCAPE = (792.0, 612.0)

BLACK = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class TextRun:
    text: str
    x: float
    y: float
    size: float
    color: tuple[float, float, float] = BLACK


@dataclass(frozen=True)
class ImageRun:
    data: bytes = field(repr=False)
    x: float
    y: float
    width: float
    height: float


Element = Union[TextRun, ImageRun]


@dataclass
class PageSpec:
    width: float
    height: float
    elements: list[Element] = field(default_factory=list)

    @property
    def size(self) -> tuple[float, float]:
        return (self.width, self.height)

    def texts(self) -> list[str]:
        return [element.text for element in self.elements if isinstance(element, TextRun)]


@dataclass(frozen=True)
class PageContent:
    """Ordered pages synthesised for one source document."""

    pages: tuple[PageSpec, ...]

    def __len__(self) -> int:
        return len(self.pages)


class LinePaginator:
    """Writes text lines top to bottom, opening a new page on overflow.

    The overflow check runs before each line is placed: once the cursor has
    dropped below ``bottom`` a fresh page of the same size is started and
    the cursor returns to ``top``.
    """

    def __init__(
        self,
        page_size: tuple[float, float],
        *,
        top: float,
        bottom: float = 50.0,
        left: float = 50.0,
        line_height: float = 15.0,
    ) -> None:
        self.page_size = page_size
        self.top = top
        self.bottom = bottom
        self.left = left
        self.line_height = line_height
        self._pages: list[PageSpec] = []
        self.y = top
        self.new_page()

    @property
    def current(self) -> PageSpec:
        return self._pages[-1]

    def new_page(self) -> PageSpec:
        width, height = self.page_size
        page = PageSpec(width, height)
        self._pages.append(page)
        self.y = self.top
        return page

    def add_line(self, text: str, size: float, *, advance: float | None = None) -> TextRun:
        if self.y < self.bottom:
            self.new_page()
        run = TextRun(text=text, x=self.left, y=self.y, size=size)
        self.current.elements.append(run)
        self.y -= self.line_height if advance is None else advance
        return run

    def content(self) -> PageContent:
        return PageContent(tuple(self._pages))


__all__ = [
    "LETTER_PORTRAIT",
    "LETTER_LANDSCAPE",
    "BLACK",
    "TextRun",
    "ImageRun",
    "Element",
    "PageSpec",
    "PageContent",
    "LinePaginator",
]
