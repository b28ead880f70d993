from __future__ import annotations

import itertools

import pytest

from coursefactory.core.layout import (
    build_grid_model,
    move_activity_to_cell,
    move_activity_to_insertion,
    normalize_activities,
    normalize_activity,
    normalize_layout,
    normalize_module_layout,
    rectangles_collide,
)


def _activity(activity_id: str, **layout) -> dict:
    return {"id": activity_id, "type": "content_block", "data": {}, "layout": layout}


def _cells(activities: list[dict]) -> list[tuple[int, int]]:
    cells = []
    for activity in activities:
        layout = activity["layout"]
        for col in range(layout["col"], layout["col"] + layout["colSpan"]):
            cells.append((layout["row"], col))
    return cells


def _positions(activities: list[dict]) -> list[tuple[int, int]]:
    return [(activity["layout"]["row"], activity["layout"]["col"]) for activity in activities]


def test_three_single_span_activities_wrap_in_two_columns() -> None:
    activities = [_activity(name, colSpan=1, row=1) for name in ("a", "b", "c")]
    packed = normalize_activities(activities, 2, "simple")
    assert _positions(packed) == [(1, 1), (1, 2), (2, 1)]


@pytest.mark.parametrize("max_columns", [1, 2, 3, 4])
def test_simple_packing_never_overlaps(max_columns: int) -> None:
    spans = [1, 2, 3, 4, 2, 1, 1, 3]
    anchors = [(1, 1), (1, 2), (1, 1), (2, 3), (2, 2), (1, 4), (3, 1), (1, 1)]
    activities = [
        _activity(f"a{idx}", colSpan=span, row=row, col=col)
        for idx, (span, (row, col)) in enumerate(zip(spans, anchors))
    ]
    packed = normalize_activities(activities, max_columns, "simple")
    cells = _cells(packed)
    assert len(cells) == len(set(cells))
    for activity in packed:
        layout = activity["layout"]
        assert 1 <= layout["colSpan"] <= max_columns
        assert layout["col"] + layout["colSpan"] - 1 <= max_columns
        assert layout["row"] >= 1


@pytest.mark.parametrize("max_columns", [1, 2, 4])
def test_canvas_packing_never_overlaps(max_columns: int) -> None:
    activities = [
        _activity("a", x=0, y=0, w=2, h=3),
        _activity("b", x=1, y=1, w=2, h=2),
        _activity("c", x=0, y=0, w=1, h=1),
        _activity("d", x=3, y=0, w=1, h=5),
    ]
    packed = normalize_activities(activities, max_columns, "canvas")
    rects = [activity["layout"] for activity in packed]
    for first, second in itertools.combinations(rects, 2):
        assert not rectangles_collide(first, second)
    for rect in rects:
        assert rect["x"] >= 0 and rect["y"] >= 0
        assert rect["x"] + rect["w"] <= max_columns


def test_canvas_collisions_push_down_and_keep_horizontal_position() -> None:
    packed = normalize_activities([_activity("a", x=0, y=0, w=2, h=2), _activity("b", x=1, y=0, w=1, h=1)], 2, "canvas")
    assert packed[1]["layout"]["x"] == 1
    assert packed[1]["layout"]["y"] == 2


@pytest.mark.parametrize("mode", ["simple", "canvas"])
def test_normalize_activities_is_idempotent(mode: str) -> None:
    activities = [
        _activity("a", colSpan=2, row=1),
        _activity("b", colSpan=1, row=1),
        _activity("c", x=1, y=0, w=1, h=2),
        {"type": "quiz"},
    ]
    once = normalize_activities(activities, 3, mode)
    twice = normalize_activities(once, 3, mode)
    assert once == twice


def test_shared_anchor_keeps_list_order() -> None:
    activities = [_activity(name, colSpan=1, row=2, col=1) for name in ("first", "second", "third")]
    packed = normalize_activities(activities, 3, "simple")
    assert [activity["id"] for activity in sorted(packed, key=lambda a: (a["layout"]["row"], a["layout"]["col"]))] == [
        "first",
        "second",
        "third",
    ]


def test_normalize_does_not_mutate_input() -> None:
    activities = [_activity("a", colSpan=9, row=0)]
    normalize_activities(activities, 2, "simple")
    assert activities[0]["layout"] == {"colSpan": 9, "row": 0}


def test_non_list_input_yields_empty_list() -> None:
    assert normalize_activities(None) == []
    assert normalize_activities({"id": "a"}) == []


def test_normalize_activity_fills_defaults() -> None:
    activity = normalize_activity({}, 2)
    assert activity["id"] == "activity-3"
    assert activity["type"] == "content_block"
    assert activity["style"] == {"border": True, "variant": "card", "padding": "md", "titleVariant": "md"}
    assert activity["behavior"] == {"collapsible": False, "collapsedByDefault": False}


def test_collapsed_by_default_requires_collapsible() -> None:
    activity = normalize_activity({"behavior": {"collapsedByDefault": True}}, 0)
    assert activity["behavior"]["collapsedByDefault"] is False


def test_normalize_layout_clamps_bounds() -> None:
    layout = normalize_layout(
        {"mode": "CANVAS", "maxColumns": 9, "rowHeight": 2, "margin": [300, -4], "simpleMatchTallestRow": "yes"}
    )
    assert layout["mode"] == "canvas"
    assert layout["maxColumns"] == 4
    assert layout["rowHeight"] == 8
    assert layout["margin"] == [200, 0]
    assert layout["containerPadding"] == [12, 12]
    assert layout["simpleMatchTallestRow"] is False


def test_normalize_module_layout_uses_module_settings() -> None:
    layout, activities = normalize_module_layout(
        {"composerLayout": {"maxColumns": 2}, "activities": [_activity("a", colSpan=4)]}
    )
    assert layout["maxColumns"] == 2
    assert activities[0]["layout"]["colSpan"] == 2


def test_pinned_move_to_current_cell_is_unchanged() -> None:
    activities = normalize_activities([_activity(name, colSpan=1) for name in ("a", "b", "c")], 2)
    result = move_activity_to_cell(activities, 1, 1, 2, max_columns=2)
    assert result.changed is False
    assert _positions(result.activities) == _positions(activities)


def test_pinned_move_displaces_others() -> None:
    activities = normalize_activities([_activity(name, colSpan=1) for name in ("a", "b", "c")], 2)
    result = move_activity_to_cell(activities, 2, 1, 1, max_columns=2)
    assert result.changed is True
    assert result.activities[2]["layout"]["row"] == 1
    assert result.activities[2]["layout"]["col"] == 1
    cells = _cells(result.activities)
    assert len(cells) == len(set(cells))


def test_move_with_invalid_index_is_noop() -> None:
    activities = [_activity("a")]
    assert move_activity_to_cell(activities, 5, 1, 1).changed is False
    assert move_activity_to_cell(activities, True, 1, 1).changed is False


def test_move_to_insertion_reorders() -> None:
    activities = [_activity(name) for name in ("a", "b", "c")]
    result = move_activity_to_insertion(activities, 0, 3)
    assert result.changed is True
    assert result.to_index == 2
    assert [activity["id"] for activity in result.activities] == ["b", "c", "a"]


def test_move_to_insertion_same_slot_is_unchanged() -> None:
    activities = [_activity(name) for name in ("a", "b")]
    result = move_activity_to_insertion(activities, 0, 1)
    assert result.changed is False


def test_grid_model_reports_empty_slots() -> None:
    model = build_grid_model([_activity("a", colSpan=1, row=1, col=1)], 2, trailing_rows=1)
    assert model.row_count == 2
    assert [slot.key for slot in model.empty_slots] == ["slot-1-2", "slot-2-1", "slot-2-2"]
