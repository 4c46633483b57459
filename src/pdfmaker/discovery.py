"""Ordered discovery of candidate input files."""

from __future__ import annotations

from pathlib import Path

from pdfmaker.errors import ConfigurationError
from pdfmaker.models import CandidateFile, CollectMode

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "tiff", "tif", "heic", "webp", "bmp"})
PDF_EXTENSIONS = frozenset({"pdf"})
HIDDEN_PREFIX = "."


def allowed_extensions(mode: CollectMode) -> frozenset[str]:
    """Return the extension allow-list for a collection mode."""
    if mode == "image":
        return IMAGE_EXTENSIONS
    if mode == "pdf":
        return PDF_EXTENSIONS
    raise ValueError(f"Unsupported collection mode: {mode}")


def file_extension(path: Path) -> str:
    """Return the lower-cased extension of a path without its dot."""
    return path.suffix[1:].lower()


def enumerate_candidates(path: Path, mode: CollectMode) -> list[CandidateFile]:
    """List every candidate under a directory, or the single file itself.

    Directory entries are sorted by name before filtering so that output
    page order only ever depends on file names.
    """
    allowed = allowed_extensions(mode)
    if not path.is_dir():
        return [_classify(path, allowed, check_hidden=False)]

    try:
        entries = sorted(path.iterdir(), key=lambda item: item.name)
    except OSError as exc:
        raise ConfigurationError(f"Unable to get contents of directory {path}: {exc}") from exc

    return [_classify(entry, allowed, check_hidden=True) for entry in entries]


def discover_files(path: Path, mode: CollectMode) -> list[Path]:
    """Return accepted input files in processing order."""
    return [
        candidate.path
        for candidate in enumerate_candidates(path, mode)
        if candidate.included
    ]


def _classify(path: Path, allowed: frozenset[str], check_hidden: bool) -> CandidateFile:
    extension = file_extension(path)
    if check_hidden and path.name.startswith(HIDDEN_PREFIX):
        return CandidateFile(path=path, extension=extension, included=False, reason="hidden")
    if extension not in allowed:
        return CandidateFile(
            path=path,
            extension=extension,
            included=False,
            reason="unsupported_extension",
        )
    if check_hidden and not path.is_file():
        return CandidateFile(path=path, extension=extension, included=False, reason="not_a_file")
    return CandidateFile(path=path, extension=extension, included=True, reason="accepted")
