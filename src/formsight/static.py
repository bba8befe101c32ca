"""Plain-data field trees.

:class:`StaticField` is a :class:`FieldSnapshot` whose state is fixed at
construction time, and :class:`StaticNode` is the matching accessor. They
serve two purposes: loading form snapshot documents for ``formsight audit``
and building fixtures without a reactive host.

Document shape (YAML or JSON)::

    model: {email: "", tags: ["a"]}
    strategy: on-touch            # optional
    submission: unsubmitted       # optional
    field:
      touched: false
      errors: [{kind: passwords_match}]
      children:
        email: {touched: true, errors: [{kind: required}]}
        tags:
          children: [{dirty: true}]

Parent state follows the usual host semantics: a parent is touched, dirty,
pending or invalid when it or any descendant is.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from formsight.errors import SnapshotFormatError
from formsight.models.field import BaseFieldSnapshot, DisplayStrategy, SubmissionStatus
from formsight.models.messages import ValidationMessage
from formsight.observability.logging import get_logger

log = get_logger(__name__)

_FLAG_KEYS = ("touched", "dirty", "pending", "submitting")
_NODE_KEYS = {*_FLAG_KEYS, "errors", "children", "submitted_status"}


@dataclass
class StaticField(BaseFieldSnapshot[Any]):
    """Field snapshot backed by fixed values."""

    model: Any = None
    own_touched: bool = False
    own_dirty: bool = False
    own_pending: bool = False
    own_errors: list[ValidationMessage] = field(default_factory=list)
    children: list[StaticField] = field(default_factory=list)
    is_submitting: bool = False
    status: SubmissionStatus | None = None

    def touched(self) -> bool:
        return self.own_touched or any(c.touched() for c in self.children)

    def dirty(self) -> bool:
        return self.own_dirty or any(c.dirty() for c in self.children)

    def pending(self) -> bool:
        return self.own_pending or any(c.pending() for c in self.children)

    def invalid(self) -> bool:
        return bool(self.own_errors) or any(c.invalid() for c in self.children)

    def errors(self) -> list[ValidationMessage]:
        return list(self.own_errors)

    def error_summary(self) -> list[ValidationMessage]:
        summary = list(self.own_errors)
        for child in self.children:
            summary.extend(child.error_summary())
        return summary

    def value(self) -> Any:
        return self.model

    def submitting(self) -> bool:
        return self.is_submitting

    def submitted_status(self) -> SubmissionStatus | None:
        return self.status


class StaticNode:
    """Accessor over a :class:`StaticField`, subscriptable like the model."""

    def __init__(
        self,
        snapshot: StaticField,
        children: Mapping[Any, StaticNode] | list[StaticNode] | None = None,
    ) -> None:
        self._snapshot = snapshot
        self._children: Mapping[Any, StaticNode] | list[StaticNode] = (
            children if children is not None else {}
        )

    def __call__(self) -> StaticField:
        return self._snapshot

    def __getitem__(self, key: str | int) -> StaticNode:
        if isinstance(self._children, list) and not isinstance(key, int):
            raise KeyError(key)
        return self._children[key]  # type: ignore[index]

    def __repr__(self) -> str:
        return f"StaticNode(errors={self._snapshot.own_errors!r})"


@dataclass
class FormDocument:
    """A loaded snapshot document ready for the engine."""

    root: StaticNode
    model: Any
    strategy: DisplayStrategy | None = None
    submission: SubmissionStatus | None = None


def _location(parent: str, key: str | int) -> str:
    if isinstance(key, int):
        return f"{parent}[{key}]"
    return f"{parent}.{key}" if parent else key


def _parse_errors(raw: Any, location: str) -> list[ValidationMessage]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise SnapshotFormatError(location, "errors must be a list")

    messages: list[ValidationMessage] = []
    for index, item in enumerate(raw):
        if isinstance(item, str):
            item = {"kind": item}
        if not isinstance(item, Mapping):
            raise SnapshotFormatError(_location(location, index), "expected a mapping or a kind")
        try:
            messages.append(ValidationMessage.model_validate(dict(item)))
        except PydanticValidationError as e:
            raise SnapshotFormatError(_location(location, index), str(e)) from e
    return messages


def build_static_tree(
    data: Mapping[str, Any], model: Any = None, location: str = "field"
) -> StaticNode:
    """Build a :class:`StaticNode` tree from a node mapping.

    Raises:
        SnapshotFormatError: If *data* does not follow the node shape.
    """
    if not isinstance(data, Mapping):
        raise SnapshotFormatError(location, "expected a mapping")

    unknown = set(data) - _NODE_KEYS
    if unknown:
        names = ", ".join(sorted(map(str, unknown)))
        raise SnapshotFormatError(location, f"unknown keys: {names}")

    for key in _FLAG_KEYS:
        if key in data and not isinstance(data[key], bool):
            raise SnapshotFormatError(_location(location, key), "expected true or false")

    status = None
    if data.get("submitted_status") is not None:
        try:
            status = SubmissionStatus(data["submitted_status"])
        except ValueError as e:
            raise SnapshotFormatError(_location(location, "submitted_status"), str(e)) from e

    raw_children = data.get("children")
    child_nodes: dict[Any, StaticNode] | list[StaticNode]
    if raw_children is None:
        child_nodes = {}
    elif isinstance(raw_children, Mapping):
        child_nodes = {
            key: build_static_tree(
                child,
                model.get(key) if isinstance(model, Mapping) else None,
                _location(_location(location, "children"), str(key)),
            )
            for key, child in raw_children.items()
        }
    elif isinstance(raw_children, list):
        child_nodes = [
            build_static_tree(
                child,
                model[index] if isinstance(model, list) and index < len(model) else None,
                _location(_location(location, "children"), index),
            )
            for index, child in enumerate(raw_children)
        ]
    else:
        raise SnapshotFormatError(_location(location, "children"), "expected a mapping or a list")

    child_snapshots = list(child_nodes.values() if isinstance(child_nodes, dict) else child_nodes)
    snapshot = StaticField(
        model=model,
        own_touched=data.get("touched", False),
        own_dirty=data.get("dirty", False),
        own_pending=data.get("pending", False),
        own_errors=_parse_errors(data.get("errors"), _location(location, "errors")),
        children=[node() for node in child_snapshots],
        is_submitting=data.get("submitting", False),
        status=status,
    )
    return StaticNode(snapshot, child_nodes)


def parse_form_document(data: Any) -> FormDocument:
    """Turn a decoded snapshot document into a :class:`FormDocument`.

    Raises:
        SnapshotFormatError: If the document is malformed.
    """
    if not isinstance(data, Mapping):
        raise SnapshotFormatError("", "document must be a mapping")
    if "field" not in data:
        raise SnapshotFormatError("", "missing 'field'")

    model = _plain(data.get("model"))
    root = build_static_tree(data["field"], model)

    strategy = None
    if data.get("strategy") is not None:
        try:
            strategy = DisplayStrategy(data["strategy"])
        except ValueError as e:
            raise SnapshotFormatError("strategy", str(e)) from e

    submission = None
    if data.get("submission") is not None:
        try:
            submission = SubmissionStatus(data["submission"])
        except ValueError as e:
            raise SnapshotFormatError("submission", str(e)) from e

    return FormDocument(root=root, model=model, strategy=strategy, submission=submission)


def load_form_document(path: Path) -> FormDocument:
    """Read a YAML or JSON snapshot document from *path*.

    Raises:
        SnapshotFormatError: If the file cannot be read or parsed.
    """
    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)
    except OSError as e:
        raise SnapshotFormatError("", f"cannot read {path}: {e}") from e
    except YAMLError as e:
        raise SnapshotFormatError("", f"cannot parse {path}: {e}") from e

    document = parse_form_document(data)
    log.debug("form_document_loaded", path=str(path))
    return document


def _plain(value: Any) -> Any:
    """Convert loader containers into plain dicts and lists."""
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value
