"""Per-field error visibility.

Decides whether a field's errors should be shown right now, from the field's
own state, the display strategy in effect and the form's submission status.
Submission status is an explicit argument; nothing here looks up ambient
form context.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from formsight.models.field import INHERIT, DisplayStrategy, SubmissionStatus

if TYPE_CHECKING:
    from formsight.models.field import FieldSnapshot, FormSnapshot


def should_show_errors(
    field: FieldSnapshot[Any],
    strategy: DisplayStrategy | str,
    submission: SubmissionStatus | str,
) -> bool:
    """Return True if *field*'s errors should currently be visible.

    Rules, first match wins:
        1. A field that is not invalid has nothing to show.
        2. ``manual``: never; the caller owns visibility.
        3. ``immediate``: always.
        4. ``on-touch``: once touched, or once any submission was attempted
           (a submit attempt counts as touching every field).
        5. ``on-submit``: once any submission was attempted.

    ``pending()`` is not consulted; ``invalid()`` only reflects validators
    that already resolved.

    Raises:
        ValueError: If *strategy* or *submission* is not a known value.
    """
    strategy = DisplayStrategy(strategy)
    submission = SubmissionStatus(submission)

    if not field.invalid():
        return False

    attempted = submission is not SubmissionStatus.UNSUBMITTED

    if strategy is DisplayStrategy.MANUAL:
        return False
    if strategy is DisplayStrategy.IMMEDIATE:
        return True
    if strategy is DisplayStrategy.ON_TOUCH:
        return field.touched() or attempted
    return attempted


def resolve_display_strategy(
    explicit: DisplayStrategy | str | None,
    context: DisplayStrategy | str | None = None,
    default: DisplayStrategy | str | None = None,
) -> DisplayStrategy:
    """Pick the effective strategy from the usual override chain.

    Resolution order: explicit (per field) → context (per form) → default
    (configuration) → ``on-touch``. ``None`` and ``"inherit"`` defer to the
    next level.
    """
    for candidate in (explicit, context, default):
        if candidate is None or candidate == INHERIT:
            continue
        return DisplayStrategy(candidate)
    return DisplayStrategy.ON_TOUCH


def derive_submission_status(form: FormSnapshot[Any]) -> SubmissionStatus:
    """Work out the submission status from a root form snapshot.

    An explicit ``submitted_status()`` wins. Otherwise an in-flight submit
    means SUBMITTING, and a touched root means a submit already happened
    (hosts mark every field touched on submit).
    """
    explicit = form.submitted_status()
    if explicit is not None:
        return SubmissionStatus(explicit)
    if form.submitting():
        return SubmissionStatus.SUBMITTING
    if form.touched():
        return SubmissionStatus.SUBMITTED
    return SubmissionStatus.UNSUBMITTED


def can_submit(form: FormSnapshot[Any]) -> bool:
    """True when the form is valid and no submission is in flight."""
    return form.valid() and not form.submitting()
