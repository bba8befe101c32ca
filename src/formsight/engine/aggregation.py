"""Aggregation of validation state across a field subtree.

Built on the walker, the visibility resolver and the classifier. Every
function here is a fresh derivation over whatever the caller's snapshots
currently report; nothing is cached between calls.

Leaf collection excludes the root's own errors. Those represent
cross-field rules ("these fields, together, are wrong") and are queried
separately with :func:`collect_root_messages`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from formsight.engine.classifier import partition
from formsight.engine.visibility import should_show_errors
from formsight.engine.walker import FieldPath, is_leaf, walk_with_paths
from formsight.models.field import DisplayStrategy, FieldSnapshot, SubmissionStatus, TreeNode
from formsight.models.messages import ValidationMessage
from formsight.observability.logging import get_logger

log = get_logger(__name__)

VisibilityFlag = Callable[[], bool]


@dataclass(frozen=True)
class VisibilityResult:
    """One message tagged with whether the active strategy shows it.

    Attributes:
        message: The validation message as reported by the field.
        visible: Whether the owning field's errors are currently shown.
        path: Keys/indices from the aggregation root to the owning field.
    """

    message: ValidationMessage
    visible: bool
    path: FieldPath = ()


@dataclass
class FieldsetState:
    """Group-level summary of several leaf fields.

    Flags are OR-folded over the leaves. ``errors`` and ``warnings`` are
    concatenated in traversal order, duplicates included: the same kind at
    two different paths is two problems.
    """

    touched: bool = False
    dirty: bool = False
    invalid: bool = False
    pending: bool = False
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)
    show_errors: bool = False
    show_warnings: bool = False

    @property
    def valid(self) -> bool:
        return not self.invalid and not self.pending

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


def read_error_summary(snapshot: FieldSnapshot[Any]) -> list[ValidationMessage]:
    """Errors of *snapshot* and its descendants.

    Uses the snapshot's ``error_summary()`` when it has one, otherwise falls
    back to its own ``errors()``.
    """
    summary = getattr(snapshot, "error_summary", None)
    if callable(summary):
        return list(summary())
    return list(snapshot.errors())


def _leaf_fields(root: TreeNode, model: Any) -> list[tuple[FieldPath, FieldSnapshot[Any]]]:
    leaves: list[tuple[FieldPath, FieldSnapshot[Any]]] = []

    def visit(child: TreeNode, child_model: Any, path: FieldPath) -> None:
        if is_leaf(child_model):
            leaves.append((path, child()))

    walk_with_paths(root, model, visit)
    return leaves


def collect_leaf_messages(
    root: TreeNode,
    model: Any,
    strategy: DisplayStrategy | str,
    submission: SubmissionStatus | str,
) -> list[VisibilityResult]:
    """Collect every leaf field's errors under *root*, tagged with visibility.

    Results follow traversal order (mapping key order, then array index
    order). Leaves missing from the accessor tree are skipped.
    """
    strategy = DisplayStrategy(strategy)
    submission = SubmissionStatus(submission)

    results: list[VisibilityResult] = []
    for path, snapshot in _leaf_fields(root, model):
        visible = should_show_errors(snapshot, strategy, submission)
        results.extend(
            VisibilityResult(message=msg, visible=visible, path=path) for msg in snapshot.errors()
        )
    return results


def collect_root_messages(
    root: TreeNode,
    strategy: DisplayStrategy | str,
    submission: SubmissionStatus | str,
) -> list[VisibilityResult]:
    """Errors attached to *root* itself, tagged with the root's visibility."""
    snapshot = root()
    visible = should_show_errors(snapshot, strategy, submission)
    return [VisibilityResult(message=msg, visible=visible) for msg in snapshot.errors()]


def combine_visibility(flags: Sequence[VisibilityFlag]) -> VisibilityFlag:
    """Combine several visibility flags into one "any of them" flag.

    The returned callable re-reads every input on each call, so it always
    reflects the latest field state. Used to drive one group-level banner.
    """
    captured = tuple(flags)

    def combined() -> bool:
        return any(flag() for flag in captured)

    return combined


def aggregate_fields(
    fields: Iterable[FieldSnapshot[Any]],
    strategy: DisplayStrategy | str,
    submission: SubmissionStatus | str,
) -> FieldsetState:
    """Fold an explicit list of field snapshots into a :class:`FieldsetState`."""
    strategy = DisplayStrategy(strategy)
    submission = SubmissionStatus(submission)

    state = FieldsetState()
    flags: list[VisibilityFlag] = []
    messages: list[ValidationMessage] = []
    for snapshot in fields:
        state.touched = state.touched or snapshot.touched()
        state.dirty = state.dirty or snapshot.dirty()
        state.invalid = state.invalid or snapshot.invalid()
        state.pending = state.pending or snapshot.pending()
        messages.extend(snapshot.errors())
        flags.append(lambda s=snapshot: should_show_errors(s, strategy, submission))

    split = partition(messages)
    state.errors = split.blocking
    state.warnings = split.warnings

    any_visible = combine_visibility(flags)()
    state.show_errors = any_visible and state.has_errors
    # Errors take the region; warnings only show when no error does.
    state.show_warnings = not state.show_errors and any_visible and state.has_warnings

    log.debug(
        "fieldset_aggregated",
        fields=len(flags),
        errors=len(state.errors),
        warnings=len(state.warnings),
        show_errors=state.show_errors,
    )
    return state


def aggregate_fieldset(
    root: TreeNode,
    model: Any,
    strategy: DisplayStrategy | str,
    submission: SubmissionStatus | str,
) -> FieldsetState:
    """Summarise every leaf field under *root* for one group-level error region.

    The root's own errors are not included; see :func:`collect_root_messages`.
    """
    leaves = [snapshot for _, snapshot in _leaf_fields(root, model)]
    return aggregate_fields(leaves, strategy, submission)
