"""Error visibility and aggregation engine.

Pure functions over caller-owned field snapshots:
- classifier: blocking versus warning messages
- visibility: per-field "show errors now?" decisions
- walker: traversal of accessor trees shaped like the data model
- aggregation: leaf collection and fieldset summaries
"""

from formsight.engine.aggregation import (
    FieldsetState,
    VisibilityResult,
    aggregate_fields,
    aggregate_fieldset,
    collect_leaf_messages,
    collect_root_messages,
    combine_visibility,
    read_error_summary,
)
from formsight.engine.classifier import (
    MessagePartition,
    dedupe_messages,
    is_blocking,
    is_warning,
    live_region_role,
    partition,
)
from formsight.engine.messages import default_message_text, resolve_message_text
from formsight.engine.visibility import (
    can_submit,
    derive_submission_status,
    resolve_display_strategy,
    should_show_errors,
)
from formsight.engine.walker import child_accessor, format_path, is_leaf, walk, walk_with_paths

__all__ = [
    "FieldsetState",
    "MessagePartition",
    "VisibilityResult",
    "aggregate_fields",
    "aggregate_fieldset",
    "can_submit",
    "child_accessor",
    "collect_leaf_messages",
    "collect_root_messages",
    "combine_visibility",
    "dedupe_messages",
    "default_message_text",
    "derive_submission_status",
    "format_path",
    "is_blocking",
    "is_leaf",
    "is_warning",
    "live_region_role",
    "partition",
    "read_error_summary",
    "resolve_display_strategy",
    "resolve_message_text",
    "should_show_errors",
    "walk",
    "walk_with_paths",
]
