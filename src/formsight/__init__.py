"""formsight: error visibility and aggregation for nested form field trees."""

from formsight.engine import (
    FieldsetState,
    MessagePartition,
    VisibilityResult,
    aggregate_fields,
    aggregate_fieldset,
    can_submit,
    collect_leaf_messages,
    collect_root_messages,
    combine_visibility,
    dedupe_messages,
    derive_submission_status,
    is_blocking,
    is_warning,
    live_region_role,
    partition,
    read_error_summary,
    resolve_display_strategy,
    resolve_message_text,
    should_show_errors,
    walk,
)
from formsight.models import (
    BaseFieldSnapshot,
    DisplayStrategy,
    FieldSnapshot,
    FormSnapshot,
    SubmissionStatus,
    TreeNode,
    ValidationMessage,
    warning_message,
)

__version__ = "0.1.0"

__all__ = [
    "BaseFieldSnapshot",
    "DisplayStrategy",
    "FieldSnapshot",
    "FieldsetState",
    "FormSnapshot",
    "MessagePartition",
    "SubmissionStatus",
    "TreeNode",
    "ValidationMessage",
    "VisibilityResult",
    "__version__",
    "aggregate_fields",
    "aggregate_fieldset",
    "can_submit",
    "collect_leaf_messages",
    "collect_root_messages",
    "combine_visibility",
    "dedupe_messages",
    "derive_submission_status",
    "is_blocking",
    "is_warning",
    "live_region_role",
    "partition",
    "read_error_summary",
    "resolve_display_strategy",
    "resolve_message_text",
    "should_show_errors",
    "walk",
    "warning_message",
]
