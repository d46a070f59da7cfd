"""Raster image rendering onto a single portrait page."""

from __future__ import annotations

import dataclasses
import io
import logging

from PIL import Image, ImageOps
from pypdf import PdfReader

from ..dispatcher import register_renderer
from ..exceptions import ConversionError
from ..formats import DocumentFormat
from .canvas import to_reader
from .layout import LETTER_PORTRAIT, ImageRun, PageContent, PageSpec

LOGGER = logging.getLogger("pdfmaker.render.image")

PAGE_MARGIN = 36.0

_MIB = 1024 * 1024


@dataclasses.dataclass(frozen=True)
class ImageTier:
    """Downscaling policy selected from the size of the source file."""

    name: str
    min_bytes: int
    max_width: int
    quality: int


# Ordered from the largest inputs down; the first matching tier wins.
_TIERS: tuple[ImageTier, ...] = (
    ImageTier("large", min_bytes=5 * _MIB, max_width=1000, quality=70),
    ImageTier("medium", min_bytes=2 * _MIB, max_width=1400, quality=80),
    ImageTier("small", min_bytes=0, max_width=1800, quality=90),
)


def select_tier(size_bytes: int) -> ImageTier:
    for tier in _TIERS:
        if size_bytes > tier.min_bytes:
            return tier
    return _TIERS[-1]


def _flatten(img: Image.Image) -> Image.Image:
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if img.mode != "RGB":
        return img.convert("RGB")
    return img


def prepare_image(data: bytes, name: str = "image") -> tuple[bytes, tuple[int, int]]:
    """Decode, orient, downscale and re-encode *data* as JPEG.

    Returns the JPEG bytes and the final pixel size.
    """

    tier = select_tier(len(data))
    try:
        with Image.open(io.BytesIO(data)) as source:
            source.seek(0)
            source.load()
            img = ImageOps.exif_transpose(source)
            img = _flatten(img)
            if img.width > tier.max_width:
                height = max(1, round(img.height * tier.max_width / img.width))
                img = img.resize((tier.max_width, height), Image.LANCZOS)
            output = io.BytesIO()
            img.save(output, format="JPEG", quality=tier.quality, optimize=True)
    except Exception as exc:
        raise ConversionError(name, f"unreadable image data: {exc}") from exc

    LOGGER.debug(
        "Prepared %s with tier %s (quality=%d, size=%dx%d)",
        name,
        tier.name,
        tier.quality,
        img.width,
        img.height,
    )
    return output.getvalue(), img.size


def fit_to_page(
    image_size: tuple[int, int],
    page_size: tuple[float, float] = LETTER_PORTRAIT,
    margin: float = PAGE_MARGIN,
) -> tuple[float, float, float, float]:
    """Return ``(x, y, width, height)`` placing the image centred inside the margins."""

    image_width, image_height = image_size
    page_width, page_height = page_size
    box_width = page_width - 2 * margin
    box_height = page_height - 2 * margin
    aspect = image_width / image_height
    if aspect >= box_width / box_height:
        width, height = box_width, box_width / aspect
    else:
        width, height = box_height * aspect, box_height
    x = (page_width - width) / 2
    y = (page_height - height) / 2
    return x, y, width, height


def layout_image(data: bytes, name: str = "image") -> PageContent:
    jpeg, size = prepare_image(data, name)
    x, y, width, height = fit_to_page(size)
    page = PageSpec(*LETTER_PORTRAIT, elements=[ImageRun(jpeg, x, y, width, height)])
    return PageContent((page,))


@register_renderer(DocumentFormat.IMAGE)
def render_image(data: bytes, name: str) -> PdfReader:
    return to_reader(layout_image(data, name), title=name)


__all__ = ["ImageTier", "PAGE_MARGIN", "select_tier", "prepare_image", "fit_to_page", "layout_image", "render_image"]
