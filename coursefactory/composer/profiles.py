"""
Per-template layout profiles.

Authors can arrange the same module differently for each template (a dense
grid for ``deck``, a single column for ``coursebook``...). A profile stores
the composer layout plus the placement fields of each activity, keyed by
activity id, so switching templates restores the arrangement saved for it.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional, Tuple

from ..core.layout import normalize_activities, normalize_layout
from ..core.values import as_dict, as_list, parse_int, text

TEMPLATE_LAYOUT_KEYS = ("deck", "finlit", "coursebook", "toolkit_dashboard")
LAYOUT_FIELDS = ("colSpan", "row", "col", "x", "y", "w", "h")

Profile = Dict[str, Any]


def _token(value: Any) -> str:
    return text(value).strip().lower()


def _activity_id(activity: Any) -> str:
    return text(as_dict(activity).get("id")).strip()


def layout_fields(layout: Any) -> Dict[str, int]:
    """The integer placement fields of an activity layout; unparseable values are dropped."""
    source = as_dict(layout)
    fields = {}
    for name in LAYOUT_FIELDS:
        value = parse_int(source.get(name))
        if value is not None:
            fields[name] = value
    return fields


def clone_profile(profile: Any) -> Profile:
    source = as_dict(profile)
    activity_layouts = {}
    for activity_id, activity_layout in as_dict(source.get("activityLayouts")).items():
        key = text(activity_id).strip()
        if key:
            activity_layouts[key] = layout_fields(activity_layout)
    return {"composerLayout": normalize_layout(source.get("composerLayout")), "activityLayouts": activity_layouts}


def resolve_template_key(override: Any, course_default: Any = "deck") -> str:
    for candidate in (_token(override), _token(course_default)):
        if candidate in TEMPLATE_LAYOUT_KEYS:
            return candidate
    return "deck"


def capture_template_layout_profile(composer_layout: Any, activities: Any) -> Profile:
    """Snapshot the current arrangement so it can be restored for this template later."""
    layout = normalize_layout(composer_layout)
    normalized = normalize_activities(activities, layout["maxColumns"], layout["mode"])
    activity_layouts = {}
    for activity in normalized:
        key = _activity_id(activity)
        if key:
            activity_layouts[key] = layout_fields(activity.get("layout"))
    return {"composerLayout": layout, "activityLayouts": activity_layouts}


def normalize_template_layout_profiles(profiles: Any, activities: Any = None) -> Dict[str, Profile]:
    """Drop unknown template keys and, when ``activities`` is given, entries for ids no longer present."""
    allowed = {key for key in (_activity_id(activity) for activity in as_list(activities)) if key}
    result = {}
    for raw_key, raw_profile in as_dict(profiles).items():
        key = _token(raw_key)
        if key not in TEMPLATE_LAYOUT_KEYS:
            continue
        profile = clone_profile(raw_profile)
        if allowed:
            profile["activityLayouts"] = {
                activity_id: fields for activity_id, fields in profile["activityLayouts"].items() if activity_id in allowed
            }
        result[key] = profile
    return result


def _stack_canvas(activities: List[Dict[str, Any]], missing: List[int], anchored: List[int]) -> None:
    next_y = 0
    for idx in anchored:
        layout = as_dict(activities[idx].get("layout"))
        top = parse_int(layout.get("y"))
        height = parse_int(layout.get("h"))
        bottom = (max(0, top) if top is not None else 0) + (max(1, height) if height is not None else 4)
        next_y = max(next_y, bottom)
    for idx in missing:
        layout = dict(as_dict(activities[idx].get("layout")))
        width = parse_int(layout.get("w"))
        height = parse_int(layout.get("h"))
        safe_width = max(1, width) if width is not None else max(1, parse_int(layout.get("colSpan")) or 1)
        safe_height = max(1, height) if height is not None else 4
        layout.update(x=0, y=next_y, w=safe_width, h=safe_height, col=1, row=next_y + 1, colSpan=safe_width)
        activities[idx] = {**activities[idx], "layout": layout}
        next_y += safe_height


def _stack_rows(activities: List[Dict[str, Any]], missing: List[int], anchored: List[int]) -> None:
    next_row = 1
    if anchored:
        rows = [parse_int(as_dict(activities[idx].get("layout")).get("row")) for idx in anchored]
        next_row = max([1] + [max(1, row) if row is not None else 1 for row in rows]) + 1
    for idx in missing:
        layout = dict(as_dict(activities[idx].get("layout")))
        layout.update(row=next_row, col=1, x=0, y=next_row - 1)
        activities[idx] = {**activities[idx], "layout": layout}
        next_row += 1


def apply_template_layout_profile(
    activities: Any,
    profile: Optional[Any],
    mode: Any = "simple",
    max_columns: Any = 1,
) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """Merge a saved profile into ``activities`` and return ``(composer_layout, activities)``.

    Activities with a saved entry keep their saved placement. The rest are
    appended below the anchored ones: stacked from the lowest canvas edge at
    ``x=0`` in canvas mode, one row each in simple mode.
    """
    target = clone_profile(profile)
    saved = target["activityLayouts"]
    if isinstance(as_dict(profile).get("composerLayout"), dict):
        layout = target["composerLayout"]
    else:
        layout = normalize_layout({"mode": mode, "maxColumns": max_columns})

    merged = []
    for activity in normalize_activities(copy.deepcopy(as_list(activities)), layout["maxColumns"], layout["mode"]):
        overrides = saved.get(_activity_id(activity))
        if overrides is not None:
            activity = {**activity, "layout": {**as_dict(activity.get("layout")), **overrides}}
        merged.append(activity)
    merged = normalize_activities(merged, layout["maxColumns"], layout["mode"])

    missing = [idx for idx, activity in enumerate(merged) if _activity_id(activity) not in saved]
    if not missing:
        return layout, merged
    missing_set = set(missing)
    anchored = [idx for idx in range(len(merged)) if idx not in missing_set]
    if layout["mode"] == "canvas":
        _stack_canvas(merged, missing, anchored)
    else:
        _stack_rows(merged, missing, anchored)
    return layout, normalize_activities(merged, layout["maxColumns"], layout["mode"])


def switch_template(module: Any, next_template: Any, course_default: Any = "deck") -> Dict[str, Any]:
    """Return a copy of ``module`` re-laid-out for ``next_template``.

    The current arrangement is saved under the current template key first, so
    switching back restores it. The target arrangement comes from the saved
    profile of the next template, else the current one.
    """
    source = copy.deepcopy(as_dict(module))
    activities = as_list(source.get("activities"))
    current_key = resolve_template_key(source.get("template"), course_default)
    next_key = resolve_template_key(next_template, course_default)
    active = capture_template_layout_profile(source.get("composerLayout"), activities)

    profiles = normalize_template_layout_profiles(source.get("templateLayoutProfiles"), activities)
    profiles[current_key] = active
    target = clone_profile(profiles.get(next_key) or profiles.get(current_key) or active)
    layout, placed = apply_template_layout_profile(activities, target, active["composerLayout"]["mode"], active["composerLayout"]["maxColumns"])
    profiles[next_key] = capture_template_layout_profile(layout, placed)

    source.update(
        template=next_key,
        composerLayout=layout,
        activities=placed,
        templateLayoutProfiles=normalize_template_layout_profiles(profiles, placed),
    )
    return source


__all__ = [
    "TEMPLATE_LAYOUT_KEYS",
    "apply_template_layout_profile",
    "capture_template_layout_profile",
    "clone_profile",
    "layout_fields",
    "normalize_template_layout_profiles",
    "resolve_template_key",
    "switch_template",
]
