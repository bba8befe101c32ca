"""Error types raised at the edges of formsight.

The engine functions never raise for shape mismatches between a model and
its accessor tree. These errors cover the surfaces that read external input:
configuration files and form snapshot files loaded by the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass


class FormsightError(Exception):
    """Base class for all formsight errors."""


@dataclass
class ConfigError(FormsightError):
    """Raised when a configuration file cannot be read or is invalid.

    Attributes:
        path: Path of the offending file, as given.
        reason: Human-readable description of the problem.
    """

    path: str
    reason: str

    def __post_init__(self) -> None:
        super().__init__(f"Invalid config {self.path}: {self.reason}")


@dataclass
class SnapshotFormatError(FormsightError):
    """Raised when a form snapshot document does not have the expected shape.

    Attributes:
        location: Structural path inside the document (e.g. ``field.children.email``).
        reason: What was expected at that location.
    """

    location: str
    reason: str

    def __post_init__(self) -> None:
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return f"Malformed snapshot at '{self.location}': {self.reason}"
        return f"Malformed snapshot: {self.reason}"
