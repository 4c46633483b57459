"""Command-line interface for pdfmaker."""

from __future__ import annotations

import argparse
from importlib import metadata
import os
from pathlib import Path
import sys
from typing import Sequence

from pdfmaker.assemble import images_to_pdf
from pdfmaker.diagnostics import configure_codec_logging
from pdfmaker.errors import ConfigurationError
from pdfmaker.extract import pdf_to_images
from pdfmaker.models import BASE_DPI, DEFAULT_QUALITY, RunConfig
from pdfmaker.paths import ensure_directory, resolve_path
from pdfmaker.reporting import DIAGNOSTICS_ENV_VAR, PROGRAM_NAME, Reporter

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130
MIN_QUALITY = 0.0
MAX_QUALITY = 1.0
MIN_RESOLUTION = 1.0
MAX_RESOLUTION = 9999.0
DEFAULT_DESTINATION = "~/Desktop"


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description=(
            "Convert a directory of images or a specified image to a single PDF file, "
            "or expand a single PDF file into a collection of image files."
        ),
    )
    parser.add_argument(
        "-s",
        "--source",
        default=None,
        help="The path to the images or an image. Defaults to the current folder.",
    )
    parser.add_argument(
        "-d",
        "--destination",
        default=DEFAULT_DESTINATION,
        help="Where to save the new PDF. The file name is optional. Defaults to ~/Desktop.",
    )
    parser.add_argument(
        "-n",
        "--name",
        default=None,
        help="Target file name. Only used when the destination is a directory.",
    )
    parser.add_argument(
        "-c",
        "--compress",
        type=float,
        default=None,
        metavar="QUALITY",
        help=(
            "Recompress JPEG images: 0.0 = maximum compression, lowest quality; "
            "1.0 = least compression, best quality."
        ),
    )
    parser.add_argument(
        "-r",
        "--resolution",
        type=float,
        default=BASE_DPI,
        metavar="DPI",
        help="The output resolution of extracted images. Max: 9999.",
    )
    parser.add_argument(
        "-b",
        "--break",
        dest="break_pdf",
        action="store_true",
        help="Break a PDF into JPEG images.",
    )
    parser.add_argument(
        "--createdirs",
        action="store_true",
        help="Make target intermediate directories if they do not exist.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress information. Otherwise only errors are shown.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_codec_logging()
    reporter = Reporter(verbose=bool(args.verbose))

    try:
        config = build_config(args)
        if config.break_pdf:
            result = pdf_to_images(config, reporter)
        else:
            result = images_to_pdf(config, reporter)
    except ConfigurationError as exc:
        reporter.error(f"{exc} -- exiting")
        return EXIT_FAILURE

    return EXIT_SUCCESS if result.success else EXIT_FAILURE


def main(argv: Sequence[str] | None = None) -> None:
    """Run the CLI as a console entry point."""
    try:
        code = run_cli(argv)
    except KeyboardInterrupt:
        print(f"{PROGRAM_NAME} interrupted -- halting", file=sys.stderr)
        code = EXIT_INTERRUPTED
    raise SystemExit(code)


def build_config(args: argparse.Namespace) -> RunConfig:
    """Validate parsed arguments and build the immutable run configuration."""
    compress = args.compress is not None
    quality = float(args.compress) if compress else DEFAULT_QUALITY
    resolution = float(args.resolution)
    validate_options(quality=quality, resolution=resolution)

    source = resolve_path(args.source if args.source is not None else Path.cwd())
    destination = resolve_path(args.destination)
    make_dirs = bool(args.createdirs)
    source_is_dir = ensure_directory(source, "Source", make_dirs=make_dirs)
    destination_is_dir = ensure_directory(destination, "Target", make_dirs=make_dirs)

    return RunConfig(
        source=source,
        source_is_dir=source_is_dir,
        destination=destination,
        destination_is_dir=destination_is_dir,
        output_name=args.name,
        compress=compress,
        quality=quality,
        resolution=resolution,
        break_pdf=bool(args.break_pdf),
        make_dirs=make_dirs,
        verbose=bool(args.verbose),
        verbose_diagnostics=DIAGNOSTICS_ENV_VAR in os.environ,
    )


def validate_options(quality: float, resolution: float) -> None:
    """Reject out-of-range numeric options before any file is touched."""
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise ConfigurationError("Compression level out of range")
    if not MIN_RESOLUTION <= resolution <= MAX_RESOLUTION:
        raise ConfigurationError("Output resolution out of range")


def _package_version() -> str:
    try:
        return metadata.version(PROGRAM_NAME)
    except metadata.PackageNotFoundError:
        return "unknown"
