"""Placement engine for composer activities.

Two layout modes are supported:

* ``simple`` - a row/column grid. Every activity asks for an anchor cell and a
  column span; the packer walks the grid row-major from each anchor and takes
  the first free window, so nothing overlaps and ties resolve in list order.
* ``canvas`` - absolute rectangles (``x``/``y``/``w``/``h`` in grid cells).
  Colliding rectangles are pushed straight down until they fit; horizontal
  gaps chosen by the author are preserved.

All functions are pure: inputs are never mutated and fresh dicts are returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .values import as_dict, parse_int, text

LOGGER = logging.getLogger(__name__)

MIN_COLUMNS = 1
MAX_COLUMNS = 4
DEFAULT_COLUMNS = 1
DEFAULT_COL_SPAN = 1
DEFAULT_MODE = "simple"
DEFAULT_ROW_HEIGHT = 24
DEFAULT_MARGIN = (12, 12)
DEFAULT_CONTAINER_PADDING = (12, 12)
DEFAULT_CANVAS_HEIGHT = 4

PADDING_VALUES = ("sm", "md", "lg")
VARIANT_VALUES = ("card", "flat")
TITLE_VARIANT_VALUES = ("xs", "sm", "md", "lg", "xl")

Activity = Dict[str, Any]


@dataclass(slots=True)
class Placement:
    index: int
    row: int
    col: int
    col_span: int


@dataclass(slots=True)
class EmptySlot:
    key: str
    row: int
    col: int


@dataclass(slots=True)
class GridModel:
    """Read-only view of a simple grid, used by editors to draw drop targets."""

    max_columns: int
    row_count: int
    placements: List[Placement] = field(default_factory=list)
    empty_slots: List[EmptySlot] = field(default_factory=list)


@dataclass(slots=True)
class MoveResult:
    activities: List[Activity]
    to_index: Any
    changed: bool


def _coalesce(value: Any, fallback: Any) -> Any:
    return fallback if value is None else value


def _positive(value: Any, fallback: int = 1) -> int:
    parsed = parse_int(value)
    return fallback if parsed is None else max(1, parsed)


def _non_negative(value: Any, fallback: int = 0) -> int:
    parsed = parse_int(value)
    return fallback if parsed is None else max(0, parsed)


def _clamp_int(value: Any, lower: int, upper: int, fallback: int) -> int:
    parsed = parse_int(value, fallback)
    return max(lower, min(upper, parsed))


# ---------------------------------------------------------------------------
# Clamps
# ---------------------------------------------------------------------------


def clamp_columns(value: Any) -> int:
    return _clamp_int(value, MIN_COLUMNS, MAX_COLUMNS, DEFAULT_COLUMNS)


def clamp_col_span(value: Any, max_columns: Any = DEFAULT_COLUMNS) -> int:
    return _clamp_int(value, DEFAULT_COL_SPAN, clamp_columns(max_columns), DEFAULT_COL_SPAN)


def clamp_row(value: Any) -> int:
    return _positive(value, 1)


def clamp_col_start(value: Any, max_columns: Any = DEFAULT_COLUMNS, col_span: Any = DEFAULT_COL_SPAN) -> int:
    columns = clamp_columns(max_columns)
    span = clamp_col_span(col_span, columns)
    return min(_positive(value, 1), max(1, columns - span + 1))


def clamp_canvas_w(value: Any, max_columns: Any = DEFAULT_COLUMNS) -> int:
    return clamp_col_span(value, max_columns)


def clamp_canvas_x(value: Any, max_columns: Any = DEFAULT_COLUMNS, w: Any = DEFAULT_COL_SPAN) -> int:
    columns = clamp_columns(max_columns)
    width = clamp_canvas_w(w, columns)
    return min(_non_negative(value, 0), max(0, columns - width))


def clamp_canvas_y(value: Any) -> int:
    return _non_negative(value, 0)


def clamp_canvas_h(value: Any) -> int:
    return _positive(value, DEFAULT_CANVAS_HEIGHT)


# ---------------------------------------------------------------------------
# Module-level layout + per-activity metadata
# ---------------------------------------------------------------------------


def normalize_mode(value: Any) -> str:
    return "canvas" if str(value or "").strip().lower() == "canvas" else "simple"


def _spacing_pair(value: Any, fallback: Tuple[int, int]) -> List[int]:
    source = value if isinstance(value, (list, tuple)) else fallback
    first = source[0] if len(source) > 0 else None
    second = source[1] if len(source) > 1 else None
    return [_clamp_int(first, 0, 200, fallback[0]), _clamp_int(second, 0, 200, fallback[1])]


def normalize_layout(raw: Any) -> Dict[str, Any]:
    """Clamp a module's composer layout settings to supported bounds."""
    layout = dict(as_dict(raw))
    layout["mode"] = normalize_mode(layout.get("mode"))
    layout["maxColumns"] = clamp_columns(layout.get("maxColumns"))
    layout["rowHeight"] = _clamp_int(layout.get("rowHeight"), 8, 200, DEFAULT_ROW_HEIGHT)
    layout["margin"] = _spacing_pair(layout.get("margin"), DEFAULT_MARGIN)
    layout["containerPadding"] = _spacing_pair(layout.get("containerPadding"), DEFAULT_CONTAINER_PADDING)
    layout["simpleMatchTallestRow"] = layout.get("simpleMatchTallestRow") is True
    return layout


def _choice(value: Any, allowed: Sequence[str], fallback: str) -> str:
    raw = str(value or "").strip().lower()
    return raw if raw in allowed else fallback


def normalize_style(style: Any) -> Dict[str, Any]:
    result = dict(as_dict(style))
    result["border"] = result.get("border") is not False
    result["variant"] = _choice(result.get("variant"), VARIANT_VALUES, "card")
    result["padding"] = _choice(result.get("padding"), PADDING_VALUES, "md")
    result["titleVariant"] = _choice(result.get("titleVariant"), TITLE_VARIANT_VALUES, "md")
    return result


def normalize_behavior(behavior: Any) -> Dict[str, Any]:
    result = dict(as_dict(behavior))
    result["collapsible"] = result.get("collapsible") is True
    result["collapsedByDefault"] = result["collapsible"] and result.get("collapsedByDefault") is True
    return result


def _normalize_simple_layout(raw: Any, max_columns: int) -> Dict[str, Any]:
    layout = dict(as_dict(raw))
    layout["colSpan"] = clamp_col_span(layout.get("colSpan"), max_columns)
    for key in ("row", "col"):
        if parse_int(layout.get(key)) is None:
            layout.pop(key, None)
        else:
            layout[key] = _positive(layout.get(key), 1)
    layout["w"] = clamp_canvas_w(_coalesce(layout.get("w"), layout["colSpan"]), max_columns)
    layout["x"] = clamp_canvas_x(_coalesce(layout.get("x"), (parse_int(layout.get("col")) or 1) - 1), max_columns, layout["w"])
    layout["y"] = clamp_canvas_y(_coalesce(layout.get("y"), (parse_int(layout.get("row")) or 1) - 1))
    layout["h"] = clamp_canvas_h(layout.get("h"))
    return layout


def _normalize_canvas_layout(raw: Any, max_columns: int) -> Dict[str, Any]:
    layout = dict(as_dict(raw))
    layout["w"] = clamp_canvas_w(_coalesce(layout.get("w"), layout.get("colSpan")), max_columns)
    layout["h"] = clamp_canvas_h(layout.get("h"))
    layout["x"] = clamp_canvas_x(_coalesce(layout.get("x"), (parse_int(layout.get("col")) or 1) - 1), max_columns, layout["w"])
    layout["y"] = clamp_canvas_y(_coalesce(layout.get("y"), (parse_int(layout.get("row")) or 1) - 1))
    layout["colSpan"] = clamp_col_span(_coalesce(layout.get("colSpan"), layout["w"]), max_columns)
    layout["col"] = clamp_col_start(layout.get("col") or layout["x"] + 1, max_columns, layout["colSpan"])
    layout["row"] = clamp_row(layout.get("row") or layout["y"] + 1)
    return layout


def normalize_activity(activity: Any, index: int, max_columns: Any = DEFAULT_COLUMNS, mode: str = DEFAULT_MODE) -> Activity:
    """Fill in defaults for one activity without packing it against its siblings."""
    result = dict(as_dict(activity))
    result["type"] = result.get("type") or "content_block"
    result["id"] = text(result.get("id")).strip() or f"activity-{index + 1}"
    result["data"] = as_dict(result.get("data"))
    result["style"] = normalize_style(result.get("style"))
    result["behavior"] = normalize_behavior(result.get("behavior"))
    columns = clamp_columns(max_columns)
    if mode == "canvas":
        result["layout"] = _normalize_canvas_layout(result.get("layout"), columns)
    else:
        result["layout"] = _normalize_simple_layout(result.get("layout"), columns)
    return result


# ---------------------------------------------------------------------------
# Simple grid packing
# ---------------------------------------------------------------------------


def _can_place(occupied: Set[Tuple[int, int]], row: int, col: int, col_span: int, max_columns: int) -> bool:
    if row < 1 or col < 1 or col + col_span - 1 > max_columns:
        return False
    return all((row, current) not in occupied for current in range(col, col + col_span))


def _mark(occupied: Set[Tuple[int, int]], row: int, col: int, col_span: int) -> None:
    for current in range(col, col + col_span):
        occupied.add((row, current))


def _find_next_cell(
    occupied: Set[Tuple[int, int]], start_row: int, start_col: int, col_span: int, max_columns: int
) -> Tuple[int, int]:
    max_start = max(1, max_columns - col_span + 1)
    row = max(1, start_row)
    col = max(1, start_col)
    while True:
        if col > max_start:
            row += 1
            col = 1
            continue
        if _can_place(occupied, row, col, col_span, max_columns):
            return row, col
        col += 1


def _pack_simple(activities: Iterable[Any], max_columns: Any, fixed: Optional[Dict[str, Any]] = None) -> List[Activity]:
    columns = clamp_columns(max_columns)
    normalized = [normalize_activity(activity, idx, columns, "simple") for idx, activity in enumerate(activities)]
    if not normalized:
        return []

    entries = []
    for index, activity in enumerate(normalized):
        layout = activity["layout"]
        span = clamp_col_span(layout.get("colSpan"), columns)
        entries.append(
            {
                "index": index,
                "span": span,
                "row": clamp_row(layout.get("row") or 1),
                "col": clamp_col_start(layout.get("col") or 1, columns, span),
            }
        )

    occupied: Set[Tuple[int, int]] = set()
    placed: Dict[int, Tuple[int, int, int]] = {}

    fixed_index = fixed.get("index") if fixed else None
    if isinstance(fixed_index, bool) or not isinstance(fixed_index, int) or not 0 <= fixed_index < len(entries):
        fixed_index = None
    if fixed_index is not None:
        entry = entries[fixed_index]
        target_row = clamp_row(fixed.get("row") or entry["row"])
        target_col = clamp_col_start(fixed.get("col") or entry["col"], columns, entry["span"])
        row, col = _find_next_cell(occupied, target_row, target_col, entry["span"], columns)
        placed[fixed_index] = (row, col, entry["span"])
        _mark(occupied, row, col, entry["span"])

    pending = sorted(
        (entry for entry in entries if entry["index"] != fixed_index),
        key=lambda entry: (entry["row"], entry["col"], entry["index"]),
    )
    for entry in pending:
        row, col = _find_next_cell(occupied, entry["row"], entry["col"], entry["span"], columns)
        placed[entry["index"]] = (row, col, entry["span"])
        _mark(occupied, row, col, entry["span"])

    packed: List[Activity] = []
    for index, activity in enumerate(normalized):
        row, col, span = placed[index]
        layout = dict(activity["layout"])
        width = _coalesce(layout.get("w"), span)
        layout.update(
            colSpan=span,
            row=row,
            col=col,
            w=clamp_canvas_w(width, columns),
            h=clamp_canvas_h(layout.get("h")),
            x=clamp_canvas_x(_coalesce(layout.get("x"), col - 1), columns, width),
            y=clamp_canvas_y(_coalesce(layout.get("y"), row - 1)),
        )
        packed.append({**activity, "layout": layout})
    return packed


# ---------------------------------------------------------------------------
# Canvas packing
# ---------------------------------------------------------------------------


def rectangles_collide(a: Dict[str, int], b: Dict[str, int]) -> bool:
    return not (
        a["x"] + a["w"] <= b["x"]
        or b["x"] + b["w"] <= a["x"]
        or a["y"] + a["h"] <= b["y"]
        or b["y"] + b["h"] <= a["y"]
    )


def _pack_canvas(activities: Iterable[Any], max_columns: Any) -> List[Activity]:
    columns = clamp_columns(max_columns)
    normalized = [normalize_activity(activity, idx, columns, "canvas") for idx, activity in enumerate(activities)]
    if not normalized:
        return []

    rects = []
    for index, activity in enumerate(normalized):
        layout = activity["layout"]
        rects.append(
            {
                "index": index,
                "x": clamp_canvas_x(layout.get("x"), columns, layout.get("w")),
                "y": clamp_canvas_y(layout.get("y")),
                "w": clamp_canvas_w(layout.get("w"), columns),
                "h": clamp_canvas_h(layout.get("h")),
            }
        )
    rects.sort(key=lambda rect: (rect["y"], rect["x"], rect["index"]))

    placed: List[Dict[str, int]] = []
    for rect in rects:
        candidate = dict(rect)
        while any(rectangles_collide(candidate, other) for other in placed):
            candidate["y"] += 1
        placed.append(candidate)

    by_index = {rect["index"]: rect for rect in placed}
    packed: List[Activity] = []
    for index, activity in enumerate(normalized):
        rect = by_index[index]
        layout = dict(activity["layout"])
        span = clamp_col_span(_coalesce(layout.get("colSpan"), rect["w"]), columns)
        layout.update(
            x=rect["x"],
            y=rect["y"],
            w=rect["w"],
            h=rect["h"],
            colSpan=span,
            col=clamp_col_start(layout.get("col") or rect["x"] + 1, columns, span),
            row=clamp_row(layout.get("row") or rect["y"] + 1),
        )
        packed.append({**activity, "layout": layout})
    return packed


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------


def normalize_activities(activities: Any, max_columns: Any = DEFAULT_COLUMNS, mode: Any = DEFAULT_MODE) -> List[Activity]:
    """Normalize and pack ``activities`` so no two of them overlap."""
    if not isinstance(activities, list):
        return []
    columns = clamp_columns(max_columns)
    if normalize_mode(mode) == "canvas":
        return _pack_canvas(activities, columns)
    return _pack_simple(activities, columns)


def normalize_module_layout(module: Any) -> Tuple[Dict[str, Any], List[Activity]]:
    """Return the normalized ``composerLayout`` and packed activities of a module."""
    source = as_dict(module)
    layout = normalize_layout(source.get("composerLayout"))
    activities = normalize_activities(source.get("activities"), layout["maxColumns"], layout["mode"])
    return layout, activities


def build_grid_model(
    activities: Any,
    max_columns: Any = DEFAULT_COLUMNS,
    *,
    include_trailing_row: bool = True,
    trailing_rows: int = 0,
) -> GridModel:
    columns = clamp_columns(max_columns)
    normalized = normalize_activities(activities, columns, "simple")
    placements = []
    occupied: Set[Tuple[int, int]] = set()
    for index, activity in enumerate(normalized):
        layout = activity["layout"]
        span = clamp_col_span(layout.get("colSpan"), columns)
        placement = Placement(
            index=index,
            row=clamp_row(layout.get("row") or 1),
            col=clamp_col_start(layout.get("col") or 1, columns, layout.get("colSpan") or 1),
            col_span=span,
        )
        placements.append(placement)
        _mark(occupied, placement.row, placement.col, placement.col_span)

    highest_row = max((placement.row for placement in placements), default=1)
    extra = max(0, trailing_rows) if isinstance(trailing_rows, int) and include_trailing_row else 0
    row_count = max(1, (highest_row if placements else 1) + extra)

    empty_slots = [
        EmptySlot(key=f"slot-{row}-{col}", row=row, col=col)
        for row in range(1, row_count + 1)
        for col in range(1, columns + 1)
        if (row, col) not in occupied
    ]
    return GridModel(max_columns=columns, row_count=row_count, placements=placements, empty_slots=empty_slots)


def _placement_key(activity: Activity) -> Tuple[Any, Any, Any]:
    layout = activity.get("layout") or {}
    return layout.get("row"), layout.get("col"), layout.get("colSpan")


def move_activity_to_cell(
    activities: Any,
    from_index: Any,
    row: Any,
    col: Any,
    *,
    max_columns: Any = DEFAULT_COLUMNS,
) -> MoveResult:
    """Pin one activity to ``(row, col)`` and repack everything else around it."""
    columns = clamp_columns(max_columns)
    normalized = normalize_activities(activities, columns, "simple")
    if isinstance(from_index, bool) or not isinstance(from_index, int) or not 0 <= from_index < len(normalized):
        return MoveResult(activities=normalized, to_index=from_index, changed=False)

    selected = normalized[from_index]["layout"]
    span = clamp_col_span(selected.get("colSpan"), columns)
    target_row = clamp_row(row or selected.get("row") or 1)
    target_col = clamp_col_start(col or selected.get("col") or 1, columns, span)
    moved = _pack_simple(normalized, columns, {"index": from_index, "row": target_row, "col": target_col})
    changed = any(_placement_key(before) != _placement_key(after) for before, after in zip(normalized, moved))
    if changed:
        LOGGER.debug("Moved activity %s to row %s col %s", from_index, target_row, target_col)
    return MoveResult(activities=moved, to_index=from_index, changed=changed)


def move_activity_to_insertion(
    activities: Any,
    from_index: Any,
    insertion_index: Any,
    *,
    max_columns: Any = DEFAULT_COLUMNS,
) -> MoveResult:
    """Reorder by list position (drag between slots) and repack."""
    if not isinstance(activities, list):
        return MoveResult(activities=[], to_index=0, changed=False)
    if any(isinstance(value, bool) or not isinstance(value, int) for value in (from_index, insertion_index)):
        return MoveResult(activities=activities, to_index=from_index, changed=False)
    if not 0 <= from_index < len(activities):
        return MoveResult(activities=activities, to_index=from_index, changed=False)

    bounded = max(0, min(len(activities), insertion_index))
    reordered = list(activities)
    moved = reordered.pop(from_index)
    target = bounded - 1 if bounded > from_index else bounded
    target = max(0, min(len(reordered), target))
    if target == from_index:
        return MoveResult(
            activities=normalize_activities(activities, max_columns, "simple"),
            to_index=from_index,
            changed=False,
        )
    reordered.insert(target, moved)
    return MoveResult(activities=normalize_activities(reordered, max_columns, "simple"), to_index=target, changed=True)


__all__ = [
    "DEFAULT_COLUMNS",
    "EmptySlot",
    "GridModel",
    "MAX_COLUMNS",
    "MIN_COLUMNS",
    "MoveResult",
    "Placement",
    "build_grid_model",
    "clamp_canvas_h",
    "clamp_canvas_w",
    "clamp_canvas_x",
    "clamp_canvas_y",
    "clamp_col_span",
    "clamp_col_start",
    "clamp_columns",
    "clamp_row",
    "move_activity_to_cell",
    "move_activity_to_insertion",
    "normalize_activities",
    "normalize_activity",
    "normalize_behavior",
    "normalize_layout",
    "normalize_mode",
    "normalize_module_layout",
    "normalize_style",
    "rectangles_collide",
]
