"""Process-wide CLI state: config location and the as-of date."""

from __future__ import annotations

from datetime import date
from pathlib import Path


class _Context:
    """Values set once by the CLI callback and read by loaders and renderers."""

    def __init__(self) -> None:
        self.config_path: Path | None = None
        self.as_of: date | None = None


_context = _Context()


def get_config_path() -> Path | None:
    """Get the config path given with --config, if any."""
    return _context.config_path


def set_config_path(path: Path | None) -> None:
    """Remember the config path given with --config."""
    _context.config_path = path


def get_as_of() -> date:
    """Date treated as "today" for overdue checks and the today marker."""
    return _context.as_of or date.today()  # noqa: DTZ011


def set_as_of(value: date | None) -> None:
    """Pin "today" (None restores the system date)."""
    _context.as_of = value
