"""Path resolution and directory checks for CLI inputs."""

from __future__ import annotations

import os
from pathlib import Path

from pdfmaker.errors import ConfigurationError


def resolve_path(raw_path: str | Path) -> Path:
    """Expand ``~`` and resolve a relative path against the working directory."""
    expanded = Path(raw_path).expanduser()
    return Path(os.path.normpath(expanded.absolute()))


def ensure_directory(path: Path, role: str, make_dirs: bool = False) -> bool:
    """Return True if ``path`` is a directory, False if it is (or will be) a file.

    A missing path with an extension is assumed to name a file that will be
    created later. A missing path without one is a directory: it is created
    when ``make_dirs`` is set and rejected otherwise.
    """
    if path.exists():
        return path.is_dir()

    if path.suffix:
        return False

    if not make_dirs:
        raise ConfigurationError(
            f"{role} directory {path} does not exist. Use the --createdirs switch"
        )
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(
            f"{role} directory {path} does not exist and cannot be created"
        ) from exc
    return True
