"""Capture of free-form codec warnings written to the process error stream."""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import contextmanager
import logging
import os
import sys
import threading
from typing import Iterator

from pdfmaker.models import DiagnosticRecord

STDERR_FILENO = 2
READ_CHUNK_SIZE = 4096
CODEC_LOGGER_NAMES = ("pypdf", "img2pdf")


class DiagnosticCapture:
    """Redirect the error stream into a pipe and collect distinct warning lines.

    A single reader thread drains the pipe and is the only code that touches
    ``records`` while a capture is open. Callers must only read ``records``
    after ``close()`` has returned, since ``close()`` joins that thread.
    """

    def __init__(self, deduplicate: bool = True, target_fd: int = STDERR_FILENO) -> None:
        self.deduplicate = deduplicate
        self.target_fd = target_fd
        self.records: list[DiagnosticRecord] = []
        self._index: dict[str, DiagnosticRecord] = {}
        self._pending = b""
        self._saved_fd: int | None = None
        self._read_fd: int | None = None
        self._write_fd: int | None = None
        self._reader: threading.Thread | None = None
        self._log_handler: _PipeLogHandler | None = None

    @property
    def is_open(self) -> bool:
        return self._reader is not None

    def open(self) -> None:
        """Start redirecting the error stream. Does nothing if already open."""
        if self.is_open:
            return

        _flush_stderr()
        read_fd, write_fd = os.pipe()
        self._saved_fd = os.dup(self.target_fd)
        self._read_fd = read_fd
        self._write_fd = write_fd
        os.dup2(write_fd, self.target_fd)

        self._reader = threading.Thread(
            target=self._pump,
            args=(read_fd,),
            name="pdfmaker-diagnostics",
            daemon=True,
        )
        self._reader.start()

        self._log_handler = _PipeLogHandler(write_fd)
        for name in CODEC_LOGGER_NAMES:
            logging.getLogger(name).addHandler(self._log_handler)

    def close(self) -> bool:
        """Restore the error stream, drain pending output and report whether anything was captured."""
        if not self.is_open:
            return bool(self.records)

        if self._log_handler is not None:
            for name in CODEC_LOGGER_NAMES:
                logging.getLogger(name).removeHandler(self._log_handler)
            self._log_handler = None

        if self._saved_fd is None or self._write_fd is None or self._reader is None:
            raise RuntimeError("Diagnostic capture is open without its descriptors.")

        _flush_stderr()
        os.dup2(self._saved_fd, self.target_fd)
        os.close(self._write_fd)
        self._write_fd = None

        self._reader.join()
        self._reader = None

        if self._read_fd is not None:
            os.close(self._read_fd)
            self._read_fd = None
        os.close(self._saved_fd)
        self._saved_fd = None

        return bool(self.records)

    def _pump(self, read_fd: int) -> None:
        while True:
            chunk = os.read(read_fd, READ_CHUNK_SIZE)
            if not chunk:
                break
            self._deliver(chunk)
        self._finish()

    def _deliver(self, chunk: bytes) -> None:
        """Buffer one raw chunk and record every complete line in it."""
        buffered = self._pending + chunk
        *lines, self._pending = buffered.split(b"\n")
        for line in lines:
            self._record_line(line)

    def _finish(self) -> None:
        # End of stream: nothing can complete the last partial line now.
        if self._pending:
            remainder = self._pending
            self._pending = b""
            self._record_line(remainder)

    def _record_line(self, raw_line: bytes) -> None:
        message = raw_line.decode("utf-8", errors="replace").rstrip("\r")
        if not message.strip():
            return
        if self.deduplicate:
            existing = self._index.get(message)
            if existing is not None:
                existing.count += 1
                return
        record = DiagnosticRecord(message=message)
        self.records.append(record)
        self._index.setdefault(message, record)


class _PipeLogHandler(logging.Handler):
    """Logging handler that writes PDF library warnings into the capture pipe."""

    def __init__(self, write_fd: int) -> None:
        super().__init__(level=logging.WARNING)
        self.write_fd = write_fd

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno < logging.WARNING:
            return
        message = record.getMessage().replace("\n", " ")
        try:
            os.write(self.write_fd, f"{message}\n".encode("utf-8"))
        except OSError:
            self.handleError(record)


@contextmanager
def capture_diagnostics(capture: DiagnosticCapture) -> Iterator[DiagnosticCapture]:
    """Hold a capture open for the duration of a block."""
    capture.open()
    try:
        yield capture
    finally:
        capture.close()


def format_records(records: Iterable[DiagnosticRecord]) -> str:
    """Render records as a single summary line."""
    return ", ".join(f"“{record.message}” (Count: {record.count})" for record in records)


def configure_codec_logging() -> None:
    """Silence pypdf and img2pdf warnings outside of an open capture."""
    for name in CODEC_LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(logging.WARNING)
        logger.propagate = False
        if not any(isinstance(handler, logging.NullHandler) for handler in logger.handlers):
            logger.addHandler(logging.NullHandler())


def _flush_stderr() -> None:
    stream = sys.stderr
    if stream is not None:
        stream.flush()
