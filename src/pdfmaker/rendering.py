"""PDF page rasterization using PDFium."""

from __future__ import annotations

from importlib import import_module
import math
from pathlib import Path
from typing import Any, Protocol

from PIL import Image

from pdfmaker.errors import ConfigurationError, ItemError
from pdfmaker.models import BASE_DPI


class PageRenderer(Protocol):
    """Render one PDF page into a raster of an exact pixel size."""

    def render_page(self, page: Any, target_size: tuple[int, int]) -> Image.Image:
        ...


def load_pdfium() -> Any:
    """Import pypdfium2 or fail with a configuration error."""
    try:
        return import_module("pypdfium2")
    except ModuleNotFoundError as exc:
        raise ConfigurationError(
            "Breaking a PDF into images requires the dependency 'pypdfium2'."
        ) from exc


def open_document(pdf_path: Path) -> Any:
    """Open a PDF for rendering."""
    pdfium = load_pdfium()
    return pdfium.PdfDocument(str(pdf_path))


def align_down(dimension: float) -> int:
    """Round a pixel dimension down to an integer, then down to an even value."""
    value = math.floor(dimension)
    if value % 2:
        value -= 1
    return value


def scale_factor(resolution: float) -> float:
    """Return the render scale for an output resolution in DPI."""
    if resolution == BASE_DPI:
        return 1.0
    return resolution / BASE_DPI


def target_size(page_size_pt: tuple[float, float], scale: float) -> tuple[int, int]:
    """Return the even pixel size for a page of the given point size."""
    width_pt, height_pt = page_size_pt
    return align_down(width_pt * scale), align_down(height_pt * scale)


class PdfiumPageRenderer:
    """PageRenderer backed by pypdfium2."""

    def render_page(self, page: Any, target_size: tuple[int, int]) -> Image.Image:
        target_width, target_height = target_size
        if target_width <= 0 or target_height <= 0:
            raise ItemError(f"Page is too small to render at {target_width}x{target_height} pixels")

        width_pt, height_pt = page.get_size()
        scale = max(target_width / width_pt, target_height / height_pt)
        bitmap = page.render(scale=scale)
        try:
            rendered = bitmap.to_pil()
            image = rendered.convert("RGB")
            if rendered is not image:
                rendered.close()
        finally:
            bitmap.close()

        if image.size != (target_width, target_height):
            resized = image.resize((target_width, target_height), Image.Resampling.LANCZOS)
            image.close()
            image = resized
        return image
