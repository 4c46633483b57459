"""Breaking a PDF into one JPEG image per page."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pdfmaker.diagnostics import DiagnosticCapture, capture_diagnostics
from pdfmaker.discovery import discover_files
from pdfmaker.errors import ConfigurationError
from pdfmaker.imaging import JPEG_FORMAT, ImageCodec, PillowImageCodec
from pdfmaker.models import ExtractionResult, RunConfig
from pdfmaker.naming import page_image_name
from pdfmaker.rendering import (
    PageRenderer,
    PdfiumPageRenderer,
    load_pdfium,
    open_document,
    scale_factor,
    target_size,
)
from pdfmaker.reporting import Reporter, describe_quality


def pdf_to_images(
    config: RunConfig,
    reporter: Reporter,
    renderer: PageRenderer | None = None,
    codec: ImageCodec | None = None,
    capture: DiagnosticCapture | None = None,
) -> ExtractionResult:
    """Validate the run's paths and write ``page NNN.jpg`` files for the source PDF."""
    if not config.destination_is_dir:
        raise ConfigurationError(
            f"Chosen image destination {config.destination} is not a directory"
        )
    if config.source_is_dir:
        raise ConfigurationError(f"Source {config.source} is a directory")
    if not discover_files(config.source, "pdf"):
        raise ConfigurationError(f"Source {config.source} is not a .pdf file")

    reporter.info(f"Attempting to disassemble {config.source} to {config.destination}...")
    if config.compress:
        reporter.info(f"     Quality: {describe_quality(config.quality)}")

    capture = capture if capture is not None else DiagnosticCapture()
    result = extract_pages(
        pdf_path=config.source,
        dest_dir=config.destination,
        config=config,
        reporter=reporter,
        renderer=renderer,
        codec=codec,
        capture=capture,
    )
    reporter.report_diagnostics(
        capture,
        list_messages=config.verbose or config.verbose_diagnostics,
    )
    return result


def extract_pages(
    pdf_path: Path,
    dest_dir: Path,
    config: RunConfig,
    reporter: Reporter,
    renderer: PageRenderer | None = None,
    codec: ImageCodec | None = None,
    capture: DiagnosticCapture | None = None,
) -> ExtractionResult:
    """Render every page of ``pdf_path`` in index order and write it as a JPEG.

    Pages that fail to render, encode or write are reported and skipped;
    their numbers are not reused by later pages.
    """
    load_pdfium()
    renderer = renderer if renderer is not None else PdfiumPageRenderer()
    codec = codec if codec is not None else PillowImageCodec()
    capture = capture if capture is not None else DiagnosticCapture()
    scale = scale_factor(config.resolution)

    try:
        document = open_document(pdf_path)
    except Exception as exc:
        reporter.error(f"Could not extract the PDF data from {pdf_path}: {exc}")
        return ExtractionResult(output_dir=str(dest_dir), images_written=0, pages_failed=0)

    output_paths: list[str] = []
    pages_failed = 0
    try:
        for page_index in range(len(document)):
            output_path = dest_dir / page_image_name(page_index)
            try:
                data, pixel_size = _render_page_jpeg(
                    document=document,
                    page_index=page_index,
                    scale=scale,
                    config=config,
                    renderer=renderer,
                    codec=codec,
                    capture=capture,
                )
            except Exception as exc:
                reporter.error(
                    f"Could not create an image for {pdf_path} page {page_index + 1}: {exc}"
                )
                pages_failed += 1
                continue

            try:
                output_path.write_bytes(data)
            except OSError as exc:
                reporter.error(f"Could not write file {output_path}: {exc}")
                pages_failed += 1
                continue
            finally:
                del data

            output_paths.append(str(output_path))
            width, height = pixel_size
            reporter.info(f"Written image: {output_path} of pixel size {width}x{height}")
    finally:
        document.close()

    return ExtractionResult(
        output_dir=str(dest_dir),
        images_written=len(output_paths),
        pages_failed=pages_failed,
        output_paths=output_paths,
        success=bool(output_paths),
    )


def _render_page_jpeg(
    document: Any,
    page_index: int,
    scale: float,
    config: RunConfig,
    renderer: PageRenderer,
    codec: ImageCodec,
    capture: DiagnosticCapture,
) -> tuple[bytes, tuple[int, int]]:
    """Rasterize and encode one page, releasing its page and raster before returning."""
    page = document[page_index]
    image = None
    try:
        size = target_size(page.get_size(), scale)
        with capture_diagnostics(capture):
            image = renderer.render_page(page, size)
            dpi = config.resolution if scale != 1.0 else None
            data = codec.encode(image, JPEG_FORMAT, config.quality, dpi=dpi)
        return data, image.size
    finally:
        if image is not None:
            image.close()
        page.close()
