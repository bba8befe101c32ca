"""Capability interfaces the engine reads field state through.

formsight never owns field state. Callers adapt their own reactive field
primitive to :class:`FieldSnapshot` (or subclass :class:`BaseFieldSnapshot`
to inherit defaults for the optional extensions) and hand the engine a
:class:`TreeNode` accessor shaped like their data model.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from formsight.models.messages import ValidationMessage

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class SubmissionStatus(StrEnum):
    """Form-level submission lifecycle."""

    UNSUBMITTED = "unsubmitted"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class DisplayStrategy(StrEnum):
    """Policy deciding when invalid fields surface their errors."""

    IMMEDIATE = "immediate"
    ON_TOUCH = "on-touch"
    ON_SUBMIT = "on-submit"
    MANUAL = "manual"


INHERIT = "inherit"


@runtime_checkable
class FieldSnapshot(Protocol[T_co]):
    """Read-only view of one field's validation state.

    A snapshot is recomputed on demand by the caller; the engine reads it
    during a single derivation and never keeps it. ``error_summary()`` is an
    optional extension read through :func:`read_error_summary`.
    """

    def touched(self) -> bool: ...

    def dirty(self) -> bool: ...

    def valid(self) -> bool: ...

    def invalid(self) -> bool: ...

    def pending(self) -> bool: ...

    def errors(self) -> list[ValidationMessage]:
        """Messages attached directly to this field."""
        ...

    def value(self) -> T_co: ...


@runtime_checkable
class FormSnapshot(FieldSnapshot[T_co], Protocol[T_co]):
    """Root snapshot that also knows about submission."""

    def submitting(self) -> bool: ...

    def submitted_status(self) -> SubmissionStatus | None:
        """Explicit submission status, or None when the host does not track one."""
        ...


@runtime_checkable
class TreeNode(Protocol):
    """Accessor returning a snapshot, subscriptable by model key or index."""

    def __call__(self) -> FieldSnapshot[Any]: ...

    def __getitem__(self, key: str | int) -> Any: ...


class BaseFieldSnapshot(ABC, Generic[T]):
    """Convenience base implementing the optional parts of the interface.

    Subclasses provide the core state readers; ``valid``, ``error_summary``,
    ``submitting`` and ``submitted_status`` get conservative defaults.
    """

    @abstractmethod
    def touched(self) -> bool: ...

    @abstractmethod
    def dirty(self) -> bool: ...

    @abstractmethod
    def invalid(self) -> bool: ...

    @abstractmethod
    def pending(self) -> bool: ...

    @abstractmethod
    def errors(self) -> list[ValidationMessage]: ...

    @abstractmethod
    def value(self) -> T: ...

    def valid(self) -> bool:
        # Pending fields are neither valid nor invalid yet.
        return not self.invalid() and not self.pending()

    def error_summary(self) -> list[ValidationMessage]:
        return list(self.errors())

    def submitting(self) -> bool:
        return False

    def submitted_status(self) -> SubmissionStatus | None:
        return None
