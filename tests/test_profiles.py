from __future__ import annotations

from coursefactory.composer import switch_template
from coursefactory.composer.profiles import (
    apply_template_layout_profile,
    capture_template_layout_profile,
    normalize_template_layout_profiles,
    resolve_template_key,
)


def _cells(activities):
    return [(item["layout"]["row"], item["layout"]["col"], item["layout"]["colSpan"]) for item in activities]


def _activities():
    return [
        {"id": "a", "type": "content_block", "layout": {"colSpan": 2}},
        {"id": "b", "type": "content_block"},
        {"id": "c", "type": "content_block"},
    ]


def test_resolve_template_key() -> None:
    assert resolve_template_key(" Coursebook ") == "coursebook"
    assert resolve_template_key("poster", "toolkit_dashboard") == "toolkit_dashboard"
    assert resolve_template_key(None, None) == "deck"


def test_capture_records_layout_per_activity() -> None:
    profile = capture_template_layout_profile({"mode": "simple", "maxColumns": 2}, _activities())
    assert profile["composerLayout"]["maxColumns"] == 2
    assert profile["activityLayouts"]["a"]["colSpan"] == 2
    assert profile["activityLayouts"]["b"]["row"] == 2
    assert profile["activityLayouts"]["c"]["col"] == 2


def test_normalize_profiles_drops_unknown_templates_and_stale_ids() -> None:
    profiles = normalize_template_layout_profiles(
        {
            "Deck": {"activityLayouts": {"a": {"row": "2"}, "gone": {"row": 1}}},
            "poster": {"activityLayouts": {}},
        },
        _activities(),
    )
    assert list(profiles) == ["deck"]
    assert profiles["deck"]["activityLayouts"] == {"a": {"row": 2}}


def test_apply_without_profile_stacks_rows() -> None:
    layout, placed = apply_template_layout_profile(_activities()[1:], None, "simple", 3)
    assert layout["maxColumns"] == 3
    assert _cells(placed) == [(1, 1, 1), (2, 1, 1)]


def test_apply_simple_profile_appends_missing_below_anchored() -> None:
    profile = {
        "composerLayout": {"mode": "simple", "maxColumns": 2},
        "activityLayouts": {"a": {"row": 1, "col": 2, "colSpan": 1}},
    }
    _, placed = apply_template_layout_profile(_activities(), profile)
    assert _cells(placed) == [(1, 2, 1), (2, 1, 1), (3, 1, 1)]


def test_apply_canvas_profile_stacks_from_lowest_edge() -> None:
    profile = {
        "composerLayout": {"mode": "canvas", "maxColumns": 4},
        "activityLayouts": {"a": {"x": 1, "y": 0, "w": 2, "h": 3}},
    }
    layout, placed = apply_template_layout_profile(_activities()[:2], profile)
    assert layout["mode"] == "canvas"
    a, b = (item["layout"] for item in placed)
    assert (a["x"], a["y"], a["w"], a["h"]) == (1, 0, 2, 3)
    assert (b["x"], b["y"]) == (0, 3)


def test_switch_template_round_trip_restores_arrangement() -> None:
    module = {"template": "deck", "composerLayout": {"mode": "simple", "maxColumns": 2}, "activities": _activities()}

    switched = switch_template(module, "coursebook")
    assert switched["template"] == "coursebook"
    assert _cells(switched["activities"]) == [(1, 1, 2), (2, 1, 1), (2, 2, 1)]
    assert set(switched["templateLayoutProfiles"]) == {"deck", "coursebook"}

    switched["composerLayout"] = {"mode": "simple", "maxColumns": 1}
    back = switch_template(switched, "deck")

    assert back["template"] == "deck"
    assert back["composerLayout"]["maxColumns"] == 2
    assert _cells(back["activities"]) == [(1, 1, 2), (2, 1, 1), (2, 2, 1)]
    assert back["templateLayoutProfiles"]["coursebook"]["composerLayout"]["maxColumns"] == 1


def test_switch_template_does_not_mutate_input() -> None:
    module = {"template": "deck", "activities": _activities()}
    switch_template(module, "finlit")
    assert module == {"template": "deck", "activities": _activities()}
