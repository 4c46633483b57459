"""Typed models for pdfmaker run configuration and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

CollectMode = Literal["image", "pdf"]

BASE_DPI = 72.0
DEFAULT_QUALITY = 0.8
DEFAULT_OUTPUT_NAME = "PDF From Images"


@dataclass(frozen=True)
class RunConfig:
    """Configuration for a single CLI run."""

    source: Path
    source_is_dir: bool
    destination: Path
    destination_is_dir: bool
    output_name: str | None = None
    compress: bool = False
    quality: float = DEFAULT_QUALITY
    resolution: float = BASE_DPI
    break_pdf: bool = False
    make_dirs: bool = False
    verbose: bool = False
    verbose_diagnostics: bool = False


@dataclass(frozen=True)
class CandidateFile:
    """One directory entry considered as pipeline input."""

    path: Path
    extension: str
    included: bool
    reason: str


@dataclass
class DiagnosticRecord:
    """A distinct captured diagnostic message and how often it was seen."""

    message: str
    count: int = 1


@dataclass(frozen=True)
class AssemblyResult:
    """Outcome of assembling images into one PDF."""

    output_path: str
    pages_written: int
    files_skipped: int
    success: bool


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of breaking one PDF into page images."""

    output_dir: str
    images_written: int
    pages_failed: int
    output_paths: list[str] = field(default_factory=list)
    success: bool = False
