"""Tests for leaf collection and fieldset aggregation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from formsight.engine.aggregation import (
    FieldsetState,
    aggregate_fields,
    aggregate_fieldset,
    collect_leaf_messages,
    collect_root_messages,
    combine_visibility,
    read_error_summary,
)
from formsight.models.field import SubmissionStatus
from formsight.models.messages import ValidationMessage
from formsight.static import StaticField, build_static_tree

if TYPE_CHECKING:
    from formsight.static import StaticNode


def _profile_form() -> tuple[StaticNode, dict[str, Any]]:
    """Profile with nested address and a list of phone numbers."""
    model: dict[str, Any] = {
        "name": "",
        "address": {"street": "Main 1", "zip": "12"},
        "phones": ["", "555"],
    }
    root = build_static_tree(
        {
            "errors": [{"kind": "profile_incomplete"}],
            "children": {
                "name": {"touched": True, "errors": [{"kind": "required"}]},
                "address": {
                    "children": {
                        "street": {"dirty": True},
                        "zip": {
                            "errors": [{"kind": "min_length", "min_length": 5}],
                            "pending": True,
                        },
                    }
                },
                "phones": {
                    "children": [
                        {"errors": [{"kind": "required"}, {"kind": "warn:format"}]},
                        {},
                    ]
                },
            },
        },
        model,
    )
    return root, model


class TestCollectLeafMessages:
    """Tests for collect_leaf_messages()."""

    def test_untouched_field_hidden_before_submit(
        self, nested_form: tuple[StaticNode, dict[str, Any]]
    ) -> None:
        root, model = nested_form
        results = collect_leaf_messages(root, model, "on-touch", "unsubmitted")

        assert len(results) == 1
        assert results[0].message.kind == "required"
        assert results[0].path == ("a", "b")
        assert results[0].visible is False

    def test_submitting_reveals_untouched_field(
        self, nested_form: tuple[StaticNode, dict[str, Any]]
    ) -> None:
        root, model = nested_form
        results = collect_leaf_messages(root, model, "on-touch", SubmissionStatus.SUBMITTING)

        assert len(results) == 1
        assert results[0].visible is True

    def test_traversal_order(self) -> None:
        root, model = _profile_form()
        results = collect_leaf_messages(root, model, "immediate", "unsubmitted")

        assert [(r.path, r.message.kind) for r in results] == [
            (("name",), "required"),
            (("address", "zip"), "min_length"),
            (("phones", 0), "required"),
            (("phones", 0), "warn:format"),
        ]
        assert all(r.visible for r in results)

    def test_root_errors_excluded(self) -> None:
        root, model = _profile_form()
        results = collect_leaf_messages(root, model, "immediate", "submitted")
        kinds = [r.message.kind for r in results]
        assert "profile_incomplete" not in kinds

    def test_visibility_is_per_field(self) -> None:
        root, model = _profile_form()
        results = collect_leaf_messages(root, model, "on-touch", "unsubmitted")

        visible = {r.path: r.visible for r in results}
        assert visible[("name",)] is True
        assert visible[("address", "zip")] is False
        assert visible[("phones", 0)] is False

    def test_manual_hides_everything(self) -> None:
        root, model = _profile_form()
        results = collect_leaf_messages(root, model, "manual", "submitted")
        assert results
        assert not any(r.visible for r in results)

    def test_mismatched_accessor_tree_degrades_silently(self) -> None:
        model = {"a": "", "b": "", "c": ""}
        root = build_static_tree(
            {"children": {"a": {"errors": ["required"]}, "c": {"errors": ["email"]}}},
            model,
        )
        results = collect_leaf_messages(root, model, "immediate", "unsubmitted")
        assert [r.message.kind for r in results] == ["required", "email"]

    def test_empty_containers_are_not_leaves(self) -> None:
        model: dict[str, Any] = {"tags": [], "meta": {}}
        root = build_static_tree(
            {"children": {"tags": {"errors": ["min_items"]}, "meta": {"errors": ["x"]}}}, model
        )
        assert collect_leaf_messages(root, model, "immediate", "unsubmitted") == []

    def test_leaf_root_model_collects_nothing(self) -> None:
        root = build_static_tree({"errors": ["required"]}, "")
        assert collect_leaf_messages(root, "", "immediate", "submitted") == []

    def test_each_call_is_fresh(self) -> None:
        root, model = _profile_form()
        first = collect_leaf_messages(root, model, "on-submit", "unsubmitted")
        second = collect_leaf_messages(root, model, "on-submit", "submitted")

        assert not any(r.visible for r in first)
        assert all(r.visible for r in second)


class TestCollectRootMessages:
    """Tests for collect_root_messages()."""

    def test_returns_root_errors_only(self) -> None:
        root, _ = _profile_form()
        results = collect_root_messages(root, "immediate", "unsubmitted")

        assert [r.message.kind for r in results] == ["profile_incomplete"]
        assert results[0].path == ()
        assert results[0].visible is True

    def test_root_visibility_uses_root_state(self) -> None:
        root, _ = _profile_form()
        # The root counts as touched because "name" is touched.
        results = collect_root_messages(root, "on-touch", "unsubmitted")
        assert results[0].visible is True

        results = collect_root_messages(root, "on-submit", "unsubmitted")
        assert results[0].visible is False


class TestCombineVisibility:
    """Tests for combine_visibility()."""

    def test_any_true(self) -> None:
        assert combine_visibility([lambda: False, lambda: True])() is True

    def test_all_false(self) -> None:
        assert combine_visibility([lambda: False, lambda: False])() is False

    def test_empty_is_false(self) -> None:
        assert combine_visibility([])() is False

    def test_re_evaluates_on_each_read(self) -> None:
        state = {"shown": False}
        combined = combine_visibility([lambda: state["shown"]])

        assert combined() is False
        state["shown"] = True
        assert combined() is True
        state["shown"] = False
        assert combined() is False

    def test_input_list_is_captured(self) -> None:
        flags = [lambda: False]
        combined = combine_visibility(flags)
        flags.append(lambda: True)
        assert combined() is False


class TestAggregateFieldset:
    """Tests for aggregate_fieldset()."""

    def test_counts_errors_and_warnings(self) -> None:
        model = {"password": ""}
        root = build_static_tree(
            {"children": {"password": {"errors": ["required", "warn:weak"]}}}, model
        )
        state = aggregate_fieldset(root, model, "immediate", "unsubmitted")

        assert len(state.errors) == 1
        assert len(state.warnings) == 1
        assert state.errors[0].kind == "required"
        assert state.warnings[0].kind == "warn:weak"

    def test_flags_are_or_folded(self) -> None:
        root, model = _profile_form()
        state = aggregate_fieldset(root, model, "on-touch", "unsubmitted")

        assert state.touched is True
        assert state.dirty is True
        assert state.invalid is True
        assert state.pending is True
        assert state.valid is False

    def test_invalid_matches_leaf_or(self) -> None:
        model = {"a": "x", "b": "y"}
        root = build_static_tree({"children": {"a": {}, "b": {}}}, model)
        assert aggregate_fieldset(root, model, "immediate", "submitted").invalid is False

        root = build_static_tree({"children": {"a": {}, "b": {"errors": ["email"]}}}, model)
        assert aggregate_fieldset(root, model, "immediate", "submitted").invalid is True

    def test_duplicates_are_concatenated(self) -> None:
        model = {"first": "", "last": ""}
        root = build_static_tree(
            {"children": {"first": {"errors": ["required"]}, "last": {"errors": ["required"]}}},
            model,
        )
        state = aggregate_fieldset(root, model, "immediate", "unsubmitted")
        assert [m.kind for m in state.errors] == ["required", "required"]

    def test_root_errors_not_aggregated(self) -> None:
        root, model = _profile_form()
        state = aggregate_fieldset(root, model, "immediate", "unsubmitted")
        assert "profile_incomplete" not in [m.kind for m in state.errors]
        assert [m.kind for m in state.errors] == ["required", "min_length", "required"]
        assert [m.kind for m in state.warnings] == ["warn:format"]

    def test_show_errors_follows_any_visible_leaf(self) -> None:
        root, model = _profile_form()

        hidden = aggregate_fieldset(root, model, "on-submit", "unsubmitted")
        assert hidden.show_errors is False

        shown = aggregate_fieldset(root, model, "on-submit", "submitted")
        assert shown.show_errors is True
        assert shown.show_warnings is False

    def test_warnings_shown_when_no_errors(self) -> None:
        model = {"email": "a@tempmail.com"}
        root = build_static_tree({"children": {"email": {"errors": ["warn:disposable"]}}}, model)
        state = aggregate_fieldset(root, model, "immediate", "unsubmitted")

        assert state.show_errors is False
        assert state.show_warnings is True
        assert state.has_warnings is True
        assert state.has_errors is False

    def test_empty_fieldset(self) -> None:
        root = build_static_tree({}, {})
        state = aggregate_fieldset(root, {}, "immediate", "submitted")
        assert state == FieldsetState()
        assert state.valid is True

    def test_unknown_strategy_raises(self) -> None:
        root, model = _profile_form()
        with pytest.raises(ValueError):
            aggregate_fieldset(root, model, "later", "unsubmitted")


class TestAggregateFields:
    """Tests for aggregate_fields() with an explicit field list."""

    def test_single_field(self) -> None:
        field = StaticField(
            own_touched=True,
            own_errors=[ValidationMessage(kind="required"), ValidationMessage(kind="warn:weak")],
        )
        state = aggregate_fields([field], "on-touch", "unsubmitted")

        assert state.touched is True
        assert len(state.errors) == 1
        assert len(state.warnings) == 1
        assert state.show_errors is True

    def test_order_follows_input(self) -> None:
        fields = [
            StaticField(own_errors=[ValidationMessage(kind="b")]),
            StaticField(own_errors=[ValidationMessage(kind="a")]),
        ]
        state = aggregate_fields(fields, "immediate", "unsubmitted")
        assert [m.kind for m in state.errors] == ["b", "a"]


class TestReadErrorSummary:
    """Tests for read_error_summary()."""

    def test_uses_error_summary_when_present(self) -> None:
        child = StaticField(own_errors=[ValidationMessage(kind="required")])
        parent = StaticField(own_errors=[ValidationMessage(kind="mismatch")], children=[child])

        assert [m.kind for m in read_error_summary(parent)] == ["mismatch", "required"]

    def test_falls_back_to_errors(self) -> None:
        class OwnErrorsOnly:
            def errors(self) -> list[ValidationMessage]:
                return [ValidationMessage(kind="email")]

        summary = read_error_summary(OwnErrorsOnly())  # type: ignore[arg-type]
        assert [m.kind for m in summary] == ["email"]
