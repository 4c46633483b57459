"""Image decoding and encoding through Pillow."""

from __future__ import annotations

from io import BytesIO
from typing import Protocol

from PIL import Image

JPEG_FORMAT = "JPEG"
ENCODABLE_MODES = frozenset({"L", "RGB", "CMYK"})


class ImageCodec(Protocol):
    """Decode raw image bytes and encode rasters back to bytes."""

    def decode(self, data: bytes) -> Image.Image:
        ...

    def encode(
        self,
        image: Image.Image,
        image_format: str,
        quality: float,
        dpi: float | None = None,
    ) -> bytes:
        ...


class PillowImageCodec:
    """ImageCodec backed by Pillow."""

    def decode(self, data: bytes) -> Image.Image:
        image = Image.open(BytesIO(data))
        image.load()
        return image

    def encode(
        self,
        image: Image.Image,
        image_format: str,
        quality: float,
        dpi: float | None = None,
    ) -> bytes:
        params: dict[str, object] = {}
        if image_format.upper() == JPEG_FORMAT:
            params["quality"] = pillow_quality(quality)
        if dpi is not None:
            params["dpi"] = (dpi, dpi)

        raster = image if image.mode in ENCODABLE_MODES else image.convert("RGB")
        buffer = BytesIO()
        try:
            raster.save(buffer, format=image_format, **params)
        finally:
            if raster is not image:
                raster.close()
        return buffer.getvalue()


def pillow_quality(quality: float) -> int:
    """Map a 0.0-1.0 quality factor onto Pillow's 0-100 JPEG quality scale."""
    return max(0, min(100, int(round(quality * 100))))


def recompress_jpeg(image: Image.Image, codec: ImageCodec, quality: float) -> bytes:
    """Re-encode a decoded image as JPEG.

    This is a full pixel round trip even at quality 1.0, so every call adds
    generation loss.
    """
    return codec.encode(image, JPEG_FORMAT, quality)
