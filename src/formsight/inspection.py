"""Form audit for debugging error visibility.

Produces a flat view of every validation message in a form, annotated with
whether the active strategy currently shows it, so a developer can see what
the strategy is suppressing. Pure derivation, no field state is changed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from formsight.engine.aggregation import (
    VisibilityResult,
    collect_leaf_messages,
    collect_root_messages,
    read_error_summary,
)
from formsight.engine.classifier import is_blocking, is_warning
from formsight.engine.visibility import derive_submission_status
from formsight.engine.walker import walk
from formsight.models.field import DisplayStrategy, FormSnapshot, SubmissionStatus, TreeNode
from formsight.models.messages import ValidationMessage
from formsight.observability.logging import get_logger

log = get_logger(__name__)


@dataclass
class FormAuditReport:
    """Everything a debugging panel shows for one form.

    Attributes:
        strategy: Strategy the report was computed with.
        submission: Submission status the report was computed with.
        valid: Root validity.
        invalid: Root invalidity.
        dirty: Root dirtiness.
        pending: Whether async validation is in flight anywhere.
        field_results: Leaf messages in traversal order.
        root_results: Messages attached to the root (cross-field rules).
        has_touched_fields: Whether the root or any descendant is touched.
        errors_visible: Strategy-level answer to "would errors show now?".
        error_summary: Every message under the root, as the root reports it.
    """

    strategy: DisplayStrategy
    submission: SubmissionStatus
    valid: bool
    invalid: bool
    dirty: bool
    pending: bool
    field_results: list[VisibilityResult] = field(default_factory=list)
    root_results: list[VisibilityResult] = field(default_factory=list)
    has_touched_fields: bool = False
    errors_visible: bool = False
    error_summary: list[ValidationMessage] = field(default_factory=list)

    @property
    def all_results(self) -> list[VisibilityResult]:
        return [*self.field_results, *self.root_results]

    @property
    def blocking(self) -> list[VisibilityResult]:
        return [r for r in self.all_results if is_blocking(r.message)]

    @property
    def warnings(self) -> list[VisibilityResult]:
        return [r for r in self.all_results if is_warning(r.message)]

    @property
    def visible_blocking_count(self) -> int:
        return sum(1 for r in self.blocking if r.visible)

    @property
    def visible_warning_count(self) -> int:
        return sum(1 for r in self.warnings if r.visible)

    @property
    def has_blocking_errors(self) -> bool:
        # A root can be invalid through errors the tree does not expose.
        return bool(self.blocking) or self.invalid

    def to_dict(self) -> dict[str, Any]:
        def result_dict(result: VisibilityResult) -> dict[str, Any]:
            return {
                "path": list(result.path),
                "kind": result.message.kind,
                "message": result.message.message,
                "blocking": is_blocking(result.message),
                "visible": result.visible,
            }

        return {
            "strategy": str(self.strategy),
            "submission": str(self.submission),
            "valid": self.valid,
            "invalid": self.invalid,
            "dirty": self.dirty,
            "pending": self.pending,
            "has_touched_fields": self.has_touched_fields,
            "errors_visible": self.errors_visible,
            "error_summary": [m.kind for m in self.error_summary],
            "counts": {
                "blocking": len(self.blocking),
                "blocking_visible": self.visible_blocking_count,
                "warnings": len(self.warnings),
                "warnings_visible": self.visible_warning_count,
            },
            "fields": [result_dict(r) for r in self.field_results],
            "root": [result_dict(r) for r in self.root_results],
        }


def has_touched_fields(root: TreeNode, model: Any) -> bool:
    """True if the root or any descendant field reports touched."""
    if root().touched():
        return True

    touched = False

    def visit(child: TreeNode, _child_model: Any) -> None:
        nonlocal touched
        if not touched and child().touched():
            touched = True

    walk(root, model, visit)
    return touched


def errors_visible(
    strategy: DisplayStrategy, submission: SubmissionStatus, any_touched: bool
) -> bool:
    """Strategy-level visibility, independent of any single field's validity."""
    attempted = submission is not SubmissionStatus.UNSUBMITTED
    if strategy is DisplayStrategy.IMMEDIATE:
        return True
    if strategy is DisplayStrategy.ON_TOUCH:
        return any_touched or attempted
    if strategy is DisplayStrategy.ON_SUBMIT:
        return attempted
    return False


def inspect_form(
    root: TreeNode,
    strategy: DisplayStrategy | str,
    submission: SubmissionStatus | str | None = None,
    model: Any = None,
) -> FormAuditReport:
    """Audit a whole form.

    Args:
        root: Root accessor of the form.
        strategy: Display strategy to evaluate.
        submission: Submission status. If None it is derived from the root
            snapshot when that implements FormSnapshot, else unsubmitted.
        model: Model to traverse; defaults to the root snapshot's value.
    """
    strategy = DisplayStrategy(strategy)
    snapshot = root()
    if submission is None:
        if isinstance(snapshot, FormSnapshot):
            submission = derive_submission_status(snapshot)
        else:
            submission = SubmissionStatus.UNSUBMITTED
    submission = SubmissionStatus(submission)
    if model is None:
        model = snapshot.value()

    any_touched = has_touched_fields(root, model)
    report = FormAuditReport(
        strategy=strategy,
        submission=submission,
        valid=snapshot.valid(),
        invalid=snapshot.invalid(),
        dirty=snapshot.dirty(),
        pending=snapshot.pending(),
        field_results=collect_leaf_messages(root, model, strategy, submission),
        root_results=collect_root_messages(root, strategy, submission),
        has_touched_fields=any_touched,
        errors_visible=errors_visible(strategy, submission, any_touched),
        error_summary=read_error_summary(snapshot),
    )

    log.info(
        "form_inspected",
        strategy=str(strategy),
        submission=str(submission),
        blocking=len(report.blocking),
        warnings=len(report.warnings),
        visible_blocking=report.visible_blocking_count,
    )
    return report
