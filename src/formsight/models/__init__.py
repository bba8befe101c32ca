"""Data models shared by the engine, the audit view and the CLI."""

from formsight.models.field import (
    INHERIT,
    BaseFieldSnapshot,
    DisplayStrategy,
    FieldSnapshot,
    FormSnapshot,
    SubmissionStatus,
    TreeNode,
)
from formsight.models.messages import WARNING_PREFIX, ValidationMessage, warning_message

__all__ = [
    "INHERIT",
    "WARNING_PREFIX",
    "BaseFieldSnapshot",
    "DisplayStrategy",
    "FieldSnapshot",
    "FormSnapshot",
    "SubmissionStatus",
    "TreeNode",
    "ValidationMessage",
    "warning_message",
]
