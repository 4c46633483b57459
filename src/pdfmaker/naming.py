"""Collision-safe output naming."""

from __future__ import annotations

from pathlib import Path

from pdfmaker.errors import ConfigurationError

MAX_FILENAME_BYTES = 255
PDF_SUFFIX = ".pdf"


def allocate_filename(directory: Path, basename: str) -> str:
    """Return a PDF filename in ``directory`` that does not clash with an existing file.

    ``Report`` and ``Report.pdf`` both resolve to ``Report.pdf``, then
    ``Report 01.pdf``, ``Report 02.pdf`` and so on while those exist.
    """
    stem = _strip_pdf_extension(basename)

    candidate = f"{stem}{PDF_SUFFIX}"
    counter = 0
    while True:
        if len(candidate.encode("utf-8")) > MAX_FILENAME_BYTES:
            raise ConfigurationError(
                f"Generated filename {candidate} is too long -- please provide a filename"
            )
        if not (directory / candidate).exists():
            return candidate
        counter += 1
        candidate = f"{stem} {counter:02d}{PDF_SUFFIX}"


def page_image_name(page_index: int) -> str:
    """Return the image filename for a zero-based PDF page index."""
    return f"page {page_index + 1:03d}.jpg"


def _strip_pdf_extension(basename: str) -> str:
    path = Path(basename)
    extension = path.suffix.lower()
    if extension == PDF_SUFFIX:
        return basename[: -len(PDF_SUFFIX)]
    if extension:
        raise ConfigurationError(f"{basename} does not reference a PDF file")
    return basename
