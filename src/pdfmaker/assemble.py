"""Assembly of ordered image files into one PDF document."""

from __future__ import annotations

from collections.abc import Sequence
from io import BytesIO
from pathlib import Path

from pypdf import PdfReader, PdfWriter

from pdfmaker.diagnostics import DiagnosticCapture, capture_diagnostics
from pdfmaker.discovery import enumerate_candidates
from pdfmaker.errors import ConfigurationError, ItemError
from pdfmaker.imaging import JPEG_FORMAT, ImageCodec, PillowImageCodec, recompress_jpeg
from pdfmaker.models import DEFAULT_OUTPUT_NAME, AssemblyResult, RunConfig
from pdfmaker.naming import allocate_filename
from pdfmaker.pages import build_page_pdf
from pdfmaker.paths import ensure_directory
from pdfmaker.reporting import Reporter, describe_quality


def images_to_pdf(
    config: RunConfig,
    reporter: Reporter,
    capture: DiagnosticCapture | None = None,
    codec: ImageCodec | None = None,
) -> AssemblyResult:
    """Assemble every supported image under ``config.source`` into one new PDF."""
    save_path = build_save_path(config)
    reporter.info(f"Attempting to assemble {save_path} from {config.source}...")
    if config.compress:
        reporter.info(f"     Quality: {describe_quality(config.quality)}")

    files: list[Path] = []
    for candidate in enumerate_candidates(config.source, "image"):
        if candidate.reason == "hidden":
            continue
        action = "processing" if candidate.included else "ignoring"
        reporter.info(f"Found file: {candidate.path}, {action}")
        if candidate.included:
            files.append(candidate.path)

    capture = capture if capture is not None else DiagnosticCapture()
    result = assemble_pdf(
        files=files,
        save_path=save_path,
        config=config,
        reporter=reporter,
        capture=capture,
        codec=codec,
    )
    reporter.report_diagnostics(
        capture,
        list_messages=config.verbose or config.verbose_diagnostics,
    )
    return result


def build_save_path(config: RunConfig) -> Path:
    """Return the collision-free path the assembled PDF will be written to."""
    if config.destination_is_dir:
        name = config.output_name or DEFAULT_OUTPUT_NAME
        return config.destination / allocate_filename(config.destination, name)

    directory = config.destination.parent
    if not ensure_directory(directory, "Target", make_dirs=config.make_dirs):
        raise ConfigurationError(f"Target directory {directory} is not a directory")
    return directory / allocate_filename(directory, config.destination.name)


def assemble_pdf(
    files: Sequence[Path],
    save_path: Path,
    config: RunConfig,
    reporter: Reporter,
    capture: DiagnosticCapture | None = None,
    codec: ImageCodec | None = None,
) -> AssemblyResult:
    """Add one page per image, in the given order, and write the document once.

    A file that cannot be decoded or turned into a page is reported and
    skipped. Nothing is written unless at least one page was produced.
    """
    codec = codec if codec is not None else PillowImageCodec()
    capture = capture if capture is not None else DiagnosticCapture()
    document: PdfWriter | None = None
    pages_written = 0
    files_skipped = 0

    for image_path in files:
        try:
            image_data = load_page_data(image_path, config=config, codec=codec)
        except ItemError as exc:
            reporter.error(str(exc))
            files_skipped += 1
            continue

        try:
            with capture_diagnostics(capture):
                page_data = build_page_pdf(image_data)
                document = _insert_page(document, page_data, index=pages_written)
        except Exception as exc:
            reporter.error(f"Could not create page for image {image_path}, ignoring: {exc}")
            files_skipped += 1
            continue
        pages_written += 1

    if document is None:
        reporter.warning("No suitable image files found in the source directory")
        return AssemblyResult(
            output_path=str(save_path),
            pages_written=0,
            files_skipped=files_skipped,
            success=False,
        )

    reporter.info(f"Writing PDF file {save_path}")
    try:
        with save_path.open("wb") as handle:
            document.write(handle)
    except OSError as exc:
        reporter.error(f"Could not write file {save_path}: {exc}")
        return AssemblyResult(
            output_path=str(save_path),
            pages_written=pages_written,
            files_skipped=files_skipped,
            success=False,
        )

    return AssemblyResult(
        output_path=str(save_path),
        pages_written=pages_written,
        files_skipped=files_skipped,
        success=True,
    )


def load_page_data(
    image_path: Path,
    config: RunConfig,
    codec: ImageCodec,
) -> bytes:
    """Decode one image and return the encoded bytes to embed for its page.

    Only data that decodes as JPEG is recompressed, whatever the file is
    called; everything else is returned unchanged.
    """
    try:
        data = image_path.read_bytes()
        image = codec.decode(data)
    except Exception as exc:
        raise ItemError(f"Could not load image {image_path}: {exc}") from exc

    try:
        if not config.compress or image.format != JPEG_FORMAT:
            return data
        try:
            data = recompress_jpeg(image, codec=codec, quality=config.quality)
            codec.decode(data).close()
        except Exception as exc:
            raise ItemError(f"Could not compress image {image_path}, ignoring: {exc}") from exc
        return data
    finally:
        image.close()


def _insert_page(document: PdfWriter | None, page_data: bytes, index: int) -> PdfWriter:
    reader = PdfReader(BytesIO(page_data))
    if document is None:
        return PdfWriter(clone_from=reader)
    document.insert_page(reader.pages[0], index=index)
    return document
