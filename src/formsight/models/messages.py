"""Validation message model.

A message is identified by its ``kind``. By convention a kind starting with
``warn:`` is an advisory warning; every other kind is a blocking error.
Extra parameters (``min_length=8``) ride along for message formatting.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

WARNING_PREFIX = "warn:"


class ValidationMessage(BaseModel):
    """A single validation result attached to a field.

    Attributes:
        kind: Free-form identifier, e.g. ``required`` or ``warn:weak-password``.
        message: Optional human-readable text. ``None`` means "resolve from kind".
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    kind: str = ""
    message: str | None = None

    @property
    def params(self) -> dict[str, object]:
        """Extra parameters supplied alongside kind and message."""
        return dict(self.model_extra or {})


def warning_message(kind: str, message: str | None = None, **params: object) -> ValidationMessage:
    """Build a non-blocking warning by prefixing *kind* with ``warn:``.

    Example:
        >>> warning_message("weak-password", "Use 12+ characters").kind
        'warn:weak-password'
    """
    return ValidationMessage(kind=f"{WARNING_PREFIX}{kind}", message=message, **params)
