"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from formsight import config
from formsight.static import StaticNode, build_static_tree

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep developer environment settings out of test runs."""
    monkeypatch.delenv("FORMSIGHT_DEFAULT_STRATEGY", raising=False)
    monkeypatch.delenv("FORMSIGHT_CONFIG", raising=False)
    monkeypatch.setattr(config, "_DEFAULT_CONFIG_DIR", tmp_path / "user-config")


@pytest.fixture
def nested_form() -> tuple[StaticNode, dict[str, Any]]:
    """Model ``{a: {b: '', c: 'x'}}`` with ``a.b`` required and untouched."""
    model: dict[str, Any] = {"a": {"b": "", "c": "x"}}
    root = build_static_tree(
        {
            "children": {
                "a": {
                    "children": {
                        "b": {"errors": [{"kind": "required"}]},
                        "c": {},
                    }
                }
            }
        },
        model,
    )
    return root, model
