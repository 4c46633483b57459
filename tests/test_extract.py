"""Tests for breaking a PDF into page images."""

from __future__ import annotations

import io
from pathlib import Path

from PIL import Image
import pytest

from pdfmaker.errors import ConfigurationError, ItemError
from pdfmaker.extract import extract_pages, pdf_to_images
from pdfmaker.models import RunConfig
from pdfmaker.rendering import PdfiumPageRenderer
from pdfmaker.reporting import Reporter
from tests.pdf_factory import letter_page, sized_page, write_pdf_with_pages

pytest.importorskip("pypdfium2", reason="Breaking PDFs into images requires pypdfium2")


def _config(source: Path, destination: Path, **overrides) -> RunConfig:
    values = {
        "source": source,
        "source_is_dir": source.is_dir(),
        "destination": destination,
        "destination_is_dir": destination.is_dir(),
        "break_pdf": True,
    }
    values.update(overrides)
    return RunConfig(**values)


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "pages"
    directory.mkdir()
    return directory


class FailingOnPageRenderer:
    """Renderer that fails for one page index and renders the rest normally."""

    def __init__(self, failing_call: int) -> None:
        self.failing_call = failing_call
        self.calls = 0
        self._inner = PdfiumPageRenderer()

    def render_page(self, page, target_size):
        self.calls += 1
        if self.calls == self.failing_call:
            raise ItemError("simulated rasterization failure")
        return self._inner.render_page(page, target_size)


def test_pages_become_numbered_jpegs_at_base_resolution(tmp_path: Path, output_dir: Path) -> None:
    source = write_pdf_with_pages(
        tmp_path / "doc.pdf",
        [letter_page(), sized_page(101, 51), sized_page(200, 100)],
    )

    result = pdf_to_images(_config(source, output_dir), Reporter(stream=io.StringIO()))

    assert result.success is True
    assert result.images_written == 3
    assert sorted(path.name for path in output_dir.iterdir()) == [
        "page 001.jpg",
        "page 002.jpg",
        "page 003.jpg",
    ]
    sizes = []
    for name in ("page 001.jpg", "page 002.jpg", "page 003.jpg"):
        with Image.open(output_dir / name) as image:
            assert image.format == "JPEG"
            sizes.append(image.size)
    assert sizes == [(612, 792), (100, 50), (200, 100)]


def test_higher_resolution_scales_and_aligns_to_even(tmp_path: Path, output_dir: Path) -> None:
    source = write_pdf_with_pages(tmp_path / "doc.pdf", [sized_page(101, 51)])

    result = pdf_to_images(
        _config(source, output_dir, resolution=150.0),
        Reporter(stream=io.StringIO()),
    )

    assert result.success is True
    with Image.open(output_dir / "page 001.jpg") as image:
        # 101pt and 51pt at 150/72 are 210.4 and 106.25 pixels.
        assert image.size == (210, 106)
        assert tuple(round(value) for value in image.info["dpi"]) == (150, 150)


def test_double_resolution_doubles_each_aligned_dimension(tmp_path: Path) -> None:
    source = write_pdf_with_pages(tmp_path / "doc.pdf", [sized_page(101, 51)])
    sizes = {}
    for resolution in (72.0, 144.0):
        destination = tmp_path / f"pages-{int(resolution)}"
        destination.mkdir()
        result = pdf_to_images(
            _config(source, destination, resolution=resolution),
            Reporter(stream=io.StringIO()),
        )
        assert result.images_written == 1
        with Image.open(destination / "page 001.jpg") as image:
            sizes[resolution] = image.size

    assert sizes == {72.0: (100, 50), 144.0: (202, 102)}


def test_failed_page_is_skipped_without_renumbering(tmp_path: Path, output_dir: Path) -> None:
    source = write_pdf_with_pages(
        tmp_path / "doc.pdf",
        [sized_page(100, 100), sized_page(100, 100), sized_page(100, 100)],
    )
    stream = io.StringIO()

    result = extract_pages(
        pdf_path=source,
        dest_dir=output_dir,
        config=_config(source, output_dir),
        reporter=Reporter(stream=stream),
        renderer=FailingOnPageRenderer(failing_call=2),
    )

    assert result.images_written == 2
    assert result.pages_failed == 1
    assert sorted(path.name for path in output_dir.iterdir()) == ["page 001.jpg", "page 003.jpg"]
    assert f"Could not create an image for {source} page 2" in stream.getvalue()


def test_too_small_page_is_reported(tmp_path: Path, output_dir: Path) -> None:
    source = write_pdf_with_pages(tmp_path / "doc.pdf", [sized_page(1, 1), sized_page(10, 10)])
    stream = io.StringIO()

    result = pdf_to_images(_config(source, output_dir), Reporter(stream=stream))

    assert result.images_written == 1
    assert [Path(path).name for path in result.output_paths] == ["page 002.jpg"]
    assert "page 1" in stream.getvalue()


def test_unreadable_pdf_fails_without_output(tmp_path: Path, output_dir: Path) -> None:
    source = tmp_path / "broken.pdf"
    source.write_bytes(b"this is not a pdf")
    stream = io.StringIO()

    result = pdf_to_images(_config(source, output_dir), Reporter(stream=stream))

    assert result.success is False
    assert list(output_dir.iterdir()) == []
    assert f"Could not extract the PDF data from {source}" in stream.getvalue()


def test_verbose_run_reports_each_written_image(tmp_path: Path, output_dir: Path) -> None:
    source = write_pdf_with_pages(tmp_path / "doc.pdf", [sized_page(40, 20)])
    stream = io.StringIO()

    pdf_to_images(_config(source, output_dir, verbose=True), Reporter(verbose=True, stream=stream))

    output = stream.getvalue()
    assert f"Attempting to disassemble {source} to {output_dir}..." in output
    assert f"Written image: {output_dir / 'page 001.jpg'} of pixel size 40x20" in output


def test_destination_must_be_a_directory(tmp_path: Path) -> None:
    source = write_pdf_with_pages(tmp_path / "doc.pdf", [sized_page(10, 10)])

    with pytest.raises(ConfigurationError, match="is not a directory"):
        pdf_to_images(_config(source, tmp_path / "out.pdf"), Reporter(stream=io.StringIO()))


def test_source_must_not_be_a_directory(tmp_path: Path, output_dir: Path) -> None:
    with pytest.raises(ConfigurationError, match="is a directory"):
        pdf_to_images(_config(tmp_path, output_dir), Reporter(stream=io.StringIO()))


def test_source_must_be_a_pdf(tmp_path: Path, output_dir: Path) -> None:
    source = tmp_path / "image.png"
    source.write_bytes(b"png")

    with pytest.raises(ConfigurationError, match="is not a .pdf file"):
        pdf_to_images(_config(source, output_dir), Reporter(stream=io.StringIO()))
