"""Blocking-versus-warning classification of validation messages.

Classification looks at ``kind`` only, so a message never needs to be
re-validated to be re-classified. Anything that is not clearly a warning is
blocking: an empty or malformed kind stays visible as an error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from formsight.models.messages import WARNING_PREFIX

if TYPE_CHECKING:
    from collections.abc import Iterable

    from formsight.models.messages import ValidationMessage

LiveRegionRole = Literal["alert", "status"]


@dataclass
class MessagePartition:
    """Messages split by severity, each list in input order."""

    blocking: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)


def is_warning(msg: ValidationMessage) -> bool:
    """True if the message kind carries the ``warn:`` prefix."""
    kind = getattr(msg, "kind", None)
    return isinstance(kind, str) and kind.startswith(WARNING_PREFIX)


def is_blocking(msg: ValidationMessage) -> bool:
    """True for every message that is not a warning."""
    return not is_warning(msg)


def partition(msgs: Iterable[ValidationMessage]) -> MessagePartition:
    """Stable partition of *msgs* into blocking errors and warnings."""
    result = MessagePartition()
    for msg in msgs:
        if is_warning(msg):
            result.warnings.append(msg)
        else:
            result.blocking.append(msg)
    return result


def dedupe_messages(msgs: Iterable[ValidationMessage]) -> list[ValidationMessage]:
    """Drop repeated ``(kind, message)`` pairs, keeping the first occurrence.

    Aggregation never calls this; duplicates at different paths are
    legitimate there. It exists for callers rendering one merged list.
    """
    seen: set[tuple[str, str]] = set()
    result: list[ValidationMessage] = []
    for msg in msgs:
        key = (str(msg.kind), msg.message or "")
        if key in seen:
            continue
        seen.add(key)
        result.append(msg)
    return result


def live_region_role(msg: ValidationMessage) -> LiveRegionRole:
    """ARIA live-region role a renderer should announce *msg* with."""
    return "status" if is_warning(msg) else "alert"
