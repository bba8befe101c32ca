"""Schema-free traversal of a field accessor tree.

The accessor tree mirrors the data model: an object model key ``"email"``
has a child accessor at ``node["email"]``, an array element at index 2 has
one at ``node[2]``. The walker follows the *model*, not the accessor, so a
node is a leaf exactly when its model value is neither a mapping nor a list.

Models are assumed acyclic (plain form data); there is no cycle guard.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from formsight.models.field import TreeNode

FieldPath = tuple[str | int, ...]
Visitor = Callable[[TreeNode, Any], None]
PathVisitor = Callable[[TreeNode, Any, FieldPath], None]


def is_leaf(model: Any) -> bool:
    """True unless *model* is a mapping (object) or a list/tuple (array)."""
    return not isinstance(model, (Mapping, list, tuple))


def child_accessor(node: Any, key: str | int) -> TreeNode | None:
    """Look up the child accessor for *key*, or None if there is none.

    The accessor tree may lag the model during an update, so a missing or
    non-callable child is not an error.
    """
    try:
        child = node[key]
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
    if not callable(child):
        return None
    return child


def _children(model: Any) -> Iterator[tuple[str | int, Any]]:
    if isinstance(model, Mapping):
        yield from model.items()
    elif isinstance(model, (list, tuple)):
        yield from enumerate(model)


def walk(node: TreeNode, model: Any, visitor: Visitor) -> None:
    """Visit every descendant accessor of *node* in model order.

    For each key (mapping insertion order) or index (ascending) of *model*
    that has a callable accessor on *node*, calls ``visitor(child,
    child_model)`` and then descends into it. The root itself is not visited.
    """
    for key, child_model in _children(model):
        child = child_accessor(node, key)
        if child is None:
            continue
        visitor(child, child_model)
        walk(child, child_model, visitor)


def walk_with_paths(
    node: TreeNode, model: Any, visitor: PathVisitor, path: FieldPath = ()
) -> None:
    """Like :func:`walk`, also passing each child's structural path."""
    for key, child_model in _children(model):
        child = child_accessor(node, key)
        if child is None:
            continue
        child_path = (*path, key)
        visitor(child, child_model, child_path)
        walk_with_paths(child, child_model, visitor, child_path)


def format_path(path: FieldPath) -> str:
    """Render a path the way templates address fields: ``items[0].name``."""
    parts: list[str] = []
    for key in path:
        if isinstance(key, int):
            parts.append(f"[{key}]")
        elif parts:
            parts.append(f".{key}")
        else:
            parts.append(str(key))
    return "".join(parts) or "<root>"
