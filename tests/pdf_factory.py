"""Deterministic PDF fixture builders for tests."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from pypdf import PageObject, PdfWriter
from pypdf.generic import DecodedStreamObject

LETTER_WIDTH = 612
LETTER_HEIGHT = 792


@dataclass(frozen=True)
class PageSpec:
    """Describe a deterministic synthetic page for tests."""

    width: float
    height: float
    draw_box: bool = True


def create_pdf_with_pages(page_specs: list[PageSpec]) -> bytes:
    """Build a PDF payload from synthetic page specifications."""
    writer = PdfWriter()

    for page_spec in page_specs:
        page = PageObject.create_blank_page(width=page_spec.width, height=page_spec.height)
        if page_spec.draw_box:
            _apply_raw_content(page, _box_content(page_spec.width, page_spec.height))
        writer.add_page(page)

    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def write_pdf_with_pages(destination: Path, page_specs: list[PageSpec]) -> Path:
    """Write a synthetic PDF to disk and return its path."""
    destination.write_bytes(create_pdf_with_pages(page_specs))
    return destination


def letter_page() -> PageSpec:
    """Return a US Letter page with a filled box."""
    return PageSpec(width=LETTER_WIDTH, height=LETTER_HEIGHT)


def sized_page(width: float, height: float) -> PageSpec:
    """Return a page with an arbitrary point size."""
    return PageSpec(width=width, height=height)


def _box_content(width: float, height: float) -> bytes:
    inset_x = width / 4
    inset_y = height / 4
    return (
        f"0.2 0.4 0.8 rg {inset_x:.3f} {inset_y:.3f} "
        f"{width / 2:.3f} {height / 2:.3f} re f"
    ).encode("ascii")


def _apply_raw_content(page: PageObject, content: bytes) -> None:
    stream = DecodedStreamObject()
    stream.set_data(content)
    page.replace_contents(stream)
