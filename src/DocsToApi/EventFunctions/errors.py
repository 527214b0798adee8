"""Exception types shared by the event-function scraper and its CLI.

Extraction itself never raises on malformed documentation: a missing heading,
link or detail page simply produces no observation. The exceptions below cover
the handful of conditions that do abort a run: an unreadable documentation
root, a scan requested out of version order, a broken configuration file, and
invalid command line input.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

__all__ = [
    "CLIValidationError",
    "ConfigLoadError",
    "DocsToApiError",
    "DocumentationRootError",
    "VersionOrderError",
    "format_cli_error",
]


class DocsToApiError(Exception):
    """Base class for errors surfaced to callers of the scraper."""


class DocumentationRootError(DocsToApiError):
    """Raised when the configured script reference directory cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read documentation root {path}: {reason}")


class VersionOrderError(DocsToApiError, ValueError):
    """Raised when a scan is requested for a version older than one already merged."""

    def __init__(self, version: object, latest: object) -> None:
        self.version = version
        self.latest = latest
        super().__init__(
            f"Version {version} is older than already merged version {latest}; "
            "scan documentation roots in ascending version order"
        )


@dataclass(slots=True)
class ConfigLoadError(DocsToApiError):
    """Raised when configuration documents cannot be deserialized."""

    message: str

    def __str__(self) -> str:  # pragma: no cover - dataclass convenience
        """Return the stored error message for human-facing output."""

        return self.message


@dataclass(slots=True)
class CLIValidationError(DocsToApiError, ValueError):
    """Invalid command line input, with the offending option and an optional hint."""

    option: str
    message: str
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message


def format_cli_error(error: CLIValidationError) -> str:
    """Return a consistent error string for CLI consumption."""

    hint = f" Hint: {error.hint}" if error.hint else ""
    return f"[scan] {error.option}: {error.message}.{hint}".strip()
