"""Single-page PDF construction for encoded images."""

from __future__ import annotations

import img2pdf


def build_page_pdf(image_data: bytes) -> bytes:
    """Return a one-page PDF whose page bounds equal the image's pixel size.

    The image format is detected from the bytes themselves. JPEG data is
    embedded as-is; every other format is stored losslessly, with any
    alpha channel kept as a soft mask.
    """
    return img2pdf.convert(image_data, layout_fun=pixel_sized_layout)


def pixel_sized_layout(
    width_px: int,
    height_px: int,
    dpi: tuple[float, float] | None,
) -> tuple[float, float, float, float]:
    """img2pdf layout callback placing one pixel on one point, ignoring image DPI."""
    width = float(width_px)
    height = float(height_px)
    return width, height, width, height
