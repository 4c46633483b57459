"""User-facing error, warning and progress reporting for pdfmaker."""

from __future__ import annotations

import sys
from typing import Literal, TextIO

from pdfmaker.diagnostics import DiagnosticCapture, format_records

PROGRAM_NAME = "pdfmaker"
DIAGNOSTICS_ENV_VAR = "PDFMAKER_VERBOSE_DIAGNOSTICS"
ReportLevel = Literal["error", "warning", "info"]


class Reporter:
    """Write prefixed messages to a text stream (stderr by default)."""

    def __init__(self, verbose: bool = False, stream: TextIO | None = None) -> None:
        self.verbose = verbose
        self._stream = stream
        self.errors: list[str] = []
        self.warnings: list[str] = []

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def report(self, level: ReportLevel, message: str) -> None:
        """Emit one message; info messages only appear in verbose mode."""
        if level == "error":
            self.errors.append(message)
        elif level == "warning":
            self.warnings.append(message)
        elif not self.verbose:
            return
        prefix = f"{PROGRAM_NAME}: {level}: " if level != "info" else f"{PROGRAM_NAME}: "
        print(f"{prefix}{message}", file=self.stream, flush=True)

    def error(self, message: str) -> None:
        self.report("error", message)

    def warning(self, message: str) -> None:
        self.report("warning", message)

    def info(self, message: str) -> None:
        self.report("info", message)

    def report_diagnostics(self, capture: DiagnosticCapture, list_messages: bool) -> None:
        """Summarize codec warnings gathered over the whole run."""
        if capture.is_open:
            raise RuntimeError("Diagnostics must be read after the capture is closed.")
        if not capture.records:
            return
        if list_messages:
            self.warning(f"The PDF codec issued these messages: {format_records(capture.records)}")
        else:
            self.warning(
                "The PDF codec grumbled about one or more images. For more information, "
                f"set the environment variable {DIAGNOSTICS_ENV_VAR} before running "
                f"{PROGRAM_NAME} next time"
            )


def describe_quality(quality: float) -> str:
    """Describe a compression quality factor as a percentage."""
    percent = int(round(quality * 100))
    amount = f"{percent}%"
    if percent == 0:
        return f"Least ({amount})"
    if percent == 100:
        return f"Maximum ({amount})"
    return amount
