"""Exception types raised by the pdfmaker pipeline."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid paths or options; aborts the run before output is produced."""


class ItemError(RuntimeError):
    """A single image or PDF page could not be converted."""
