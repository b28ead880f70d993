"""
Interactive widget state over static markup.

These are the server-side counterparts of the runtime's state machines: the
selection widgets (tabs, path map, hotspots), flashcard faces, sort order and
the values derived from form inputs (checklist progress, before/after split,
decision score, rubric total).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from bs4 import BeautifulSoup, Tag

from ..composer.kinds.interactive import decision_lever, decision_score
from ..core.values import format_number, round2, to_number
from .dom import (
    attr,
    closest,
    int_attr,
    is_checked,
    select_all,
    set_hidden,
    toggle_classes,
)

Scope = Union[BeautifulSoup, Tag]


@dataclass(frozen=True, slots=True)
class IndexedWidget:
    """A block whose triggers and panels share an index attribute and exactly one of which is active."""

    block: str
    trigger: str
    panel: str
    index_attr: str
    active_selector: str
    active_classes: Tuple[str, ...]
    idle_classes: Tuple[str, ...]
    aria: bool = False


_NODE_ACTIVE = ("ring-1", "ring-indigo-400", "border-indigo-500", "text-white")
_NODE_IDLE = ("border-slate-700", "text-slate-200")

TABS = IndexedWidget(
    block="[data-tabs-block]",
    trigger="[data-tabs-trigger]",
    panel="[data-tabs-panel]",
    index_attr="data-tab-index",
    active_selector='[data-tabs-trigger][aria-selected="true"]',
    active_classes=_NODE_ACTIVE,
    idle_classes=_NODE_IDLE,
    aria=True,
)
PATH_MAP = IndexedWidget(
    block="[data-path-map-block]",
    trigger="[data-path-node]",
    panel="[data-path-panel]",
    index_attr="data-path-index",
    active_selector="[data-path-node].ring-1",
    active_classes=_NODE_ACTIVE,
    idle_classes=_NODE_IDLE,
)
HOTSPOTS = IndexedWidget(
    block="[data-hotspot-block]",
    trigger="[data-hotspot-btn]",
    panel="[data-hotspot-panel]",
    index_attr="data-hotspot-index",
    active_selector="[data-hotspot-btn].bg-sky-500",
    active_classes=("border-sky-300", "bg-sky-500", "text-slate-950"),
    idle_classes=("border-slate-200/80", "bg-slate-900/85", "text-white"),
)


def set_active_index(block: Tag, widget: IndexedWidget, index: int) -> None:
    """Activate ``index``; an index with no matching trigger falls back to the first trigger."""
    triggers = select_all(block, widget.trigger)
    panels = select_all(block, widget.panel)
    if not triggers or not panels:
        return
    if not any(int_attr(trigger, widget.index_attr, -1) == index for trigger in triggers):
        index = int_attr(triggers[0], widget.index_attr, 0)
    for trigger in triggers:
        active = int_attr(trigger, widget.index_attr, -1) == index
        if widget.aria:
            trigger["aria-selected"] = "true" if active else "false"
        toggle_classes(trigger, widget.active_classes, active)
        toggle_classes(trigger, widget.idle_classes, not active)
    for panel in panels:
        set_hidden(panel, int_attr(panel, widget.index_attr, -1) != index)


def active_index(block: Tag, widget: IndexedWidget) -> int:
    node = block.select_one(widget.active_selector) or block.select_one(widget.trigger)
    return int_attr(node, widget.index_attr, 0)


def set_flashcard_face(card: Tag, show_back: bool) -> None:
    front = card.select_one("[data-flashcard-front]")
    back = card.select_one("[data-flashcard-back]")
    toggle = card.select_one("[data-flashcard-toggle]")
    if front is not None:
        set_hidden(front, show_back)
    if back is not None:
        set_hidden(back, not show_back)
    card["data-flashcard-side"] = "back" if show_back else "front"
    if toggle is not None:
        toggle.string = "Show Front" if show_back else "Show Back"


def open_flashcards(block: Tag) -> List[int]:
    return [idx for idx, card in enumerate(select_all(block, "[data-flashcard]")) if attr(card, "data-flashcard-side") == "back"]


# -- sort lists ------------------------------------------------------------------


def ensure_sort_item_ids(sort_list: Tag, list_index: int) -> None:
    for item_index, item in enumerate(select_all(sort_list, "[data-sort-item]")):
        if not attr(item, "data-sort-item-id"):
            item["data-sort-item-id"] = f"sort-{list_index}-item-{item_index}"


def refresh_sort_ranks(sort_list: Tag) -> None:
    for idx, item in enumerate(select_all(sort_list, "[data-sort-item]"), start=1):
        rank = item.select_one("[data-sort-rank]")
        if rank is not None:
            rank.string = f"{idx}."


def sort_order(sort_list: Tag) -> List[str]:
    return [item_id for item_id in (attr(item, "data-sort-item-id") for item in select_all(sort_list, "[data-sort-item]")) if item_id]


def reorder_sort_list(sort_list: Tag, order: Sequence[str]) -> None:
    """Move the listed items to the end in the given order; unknown ids are ignored."""
    by_id: Dict[str, Tag] = {attr(item, "data-sort-item-id"): item for item in select_all(sort_list, "[data-sort-item]")}
    for item_id in order:
        item = by_id.get(str(item_id))
        if item is not None:
            sort_list.append(item.extract())
    refresh_sort_ranks(sort_list)


# -- derived values --------------------------------------------------------------------


def refresh_checklist(block: Tag) -> None:
    inputs = select_all(block, "[data-checklist-input]")
    done = 0
    for field in inputs:
        checked = is_checked(field)
        done += int(checked)
        row = closest(field, "label")
        label = row.find("span") if row is not None else None
        if label is not None:
            toggle_classes(label, ("line-through", "text-slate-500"), checked)
    total = int_attr(block, "data-checklist-total", len(inputs))
    if total is None or total < 0:
        total = len(inputs)
    progress = block.select_one("[data-checklist-progress]")
    if progress is not None:
        progress.string = f"{done} / {total} done"


def before_after_split(block: Tag) -> Tuple[int, int]:
    slider = block.select_one("[data-before-after-slider]")
    raw = int_attr(slider, "value", 50) if slider is not None and attr(slider, "value") else 50
    after = max(0, min(100, 50 if raw is None else raw))
    return 100 - after, after


def _opacity(percent: int) -> str:
    return f"{max(20, percent) / 100:.2f}"


def refresh_before_after(block: Tag) -> None:
    if block.select_one("[data-before-after-slider]") is None:
        return
    before, after = before_after_split(block)
    for selector, percent in (("[data-before-panel]", before), ("[data-after-panel]", after)):
        panel = block.select_one(selector)
        if panel is not None:
            panel["style"] = f"opacity: {_opacity(percent)};"
    value = block.select_one("[data-before-after-value]")
    if value is not None:
        value.string = f"{before} / {after}"


def refresh_decision(block: Tag) -> Optional[int]:
    inputs = select_all(block, "[data-decision-input]")
    if not inputs:
        return None
    levers = []
    for field in inputs:
        lever = decision_lever(
            attr(field, "data-decision-min"),
            attr(field, "data-decision-max"),
            attr(field, "value"),
            attr(field, "data-decision-weight"),
        )
        levers.append(lever)
        clamped = format_number(lever["value"])
        if attr(field, "value") != clamped:
            field["value"] = clamped
        key = attr(field, "data-decision-key")
        current = block.select_one(f'[data-decision-current][data-decision-key="{key}"]') if key else None
        if current is not None:
            current.string = clamped
    score = decision_score(levers)
    score_el = block.select_one("[data-decision-score]")
    if score_el is not None:
        score_el.string = str(score)
    return score


def rubric_total(block: Tag) -> float:
    total = 0.0
    for choice in select_all(block, "[data-rubric-choice]"):
        if not is_checked(choice):
            continue
        score = to_number(attr(choice, "data-rubric-score") or attr(choice, "value"))
        if score is not None:
            total += score
    return total


def refresh_rubric(block: Tag) -> None:
    for choice in select_all(block, "[data-rubric-choice]"):
        row = int_attr(choice, "data-rubric-row", -1)
        col = int_attr(choice, "data-rubric-col", -1)
        if row < 0 or col < 0:
            continue
        cell = block.select_one(f'[data-rubric-cell][data-rubric-row="{row}"][data-rubric-col="{col}"]')
        if cell is not None:
            toggle_classes(cell, ("ring-1", "ring-emerald-400", "bg-emerald-900/20"), is_checked(choice))
    total_el = block.select_one("[data-rubric-total]")
    if total_el is not None:
        total_el.string = format_number(round2(rubric_total(block)))


def refresh_derived_state(scope: Scope) -> None:
    for block in select_all(scope, "[data-checklist-block]"):
        refresh_checklist(block)
    for block in select_all(scope, "[data-before-after-block]"):
        refresh_before_after(block)
    for block in select_all(scope, "[data-decision-block]"):
        refresh_decision(block)
    for block in select_all(scope, "[data-rubric-block]"):
        refresh_rubric(block)


__all__ = [
    "HOTSPOTS",
    "PATH_MAP",
    "TABS",
    "IndexedWidget",
    "active_index",
    "before_after_split",
    "ensure_sort_item_ids",
    "open_flashcards",
    "refresh_before_after",
    "refresh_checklist",
    "refresh_decision",
    "refresh_derived_state",
    "refresh_rubric",
    "refresh_sort_ranks",
    "reorder_sort_list",
    "rubric_total",
    "set_active_index",
    "set_flashcard_face",
    "sort_order",
]
