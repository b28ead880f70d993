"""Renderers for the stateful interactive activities.

Each block carries the ``data-*`` hooks the composer runtime binds to. The
initial markup already reflects the state the runtime would derive on load
(first tab active, before/after at 50/50, decision score precomputed).
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from ...core.markup import escape_html, render_simple_body, to_safe_url
from ...core.values import as_dict, as_list, format_number, parse_float, text, to_number
from ..normalizers import CHART_DEFAULT_PLACEHOLDER, normalize_fillable_chart
from .content import empty_line

_CARD = '<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-6"'
_ACTIVE_NODE = "ring-1 ring-indigo-400 border-indigo-500 text-white"
_ACTIVE_HOTSPOT = "border-sky-300 bg-sky-500 text-slate-950"
_IDLE_HOTSPOT = "border-slate-200/80 bg-slate-900/85 text-white hover:bg-sky-500 hover:text-slate-950"

SCENARIO_TONES = {
    "good": "border-emerald-500/30 bg-emerald-950/20",
    "caution": "border-amber-500/30 bg-amber-950/20",
    "risk": "border-rose-500/30 bg-rose-950/20",
    "neutral": "border-slate-700 bg-slate-950/70",
}


def _string_items(values: Any) -> List[str]:
    return [text(item).strip() for item in as_list(values) if text(item).strip()]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# checklist_block -------------------------------------------------------------


def default_checklist_block() -> Dict[str, Any]:
    return {"title": "Action Checklist", "items": ["Complete task one", "Complete task two", "Complete task three"]}


def render_checklist_block(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    items = _string_items(data.get("items"))
    checklist_id = escape_html(activity_id or data.get("title") or "checklist")
    rows = "".join(
        '<label class="flex items-center gap-3 rounded-lg border border-slate-700 bg-slate-950/70 p-3">'
        f'<input type="checkbox" class="w-4 h-4" data-checklist-input data-checklist-index="{idx}" />'
        f'<span class="text-sm text-slate-200">{escape_html(item)}</span></label>'
        for idx, item in enumerate(items)
    )
    body = f'<div class="space-y-2">{rows}</div>' if rows else empty_line("No checklist items yet.", "text-sm text-slate-400")
    return (
        f'{_CARD} data-checklist-block data-checklist-id="{checklist_id}" data-checklist-total="{len(items)}">'
        '<div class="flex items-center justify-between gap-3 mb-3">'
        f'<h3 class="text-lg font-bold text-white">{escape_html(data.get("title") or "Checklist")}</h3>'
        f'<p class="text-xs font-semibold uppercase tracking-widest text-slate-400" data-checklist-progress>0 / {len(items)} done</p>'
        f"</div>{body}</article>"
    )


# scenario_branch -------------------------------------------------------------


def default_scenario_branch() -> Dict[str, Any]:
    return {
        "title": "Scenario Lab",
        "prompt": "A key decision appears. What do you do next?",
        "choices": [
            {"label": "Choice A", "outcome": "Outcome for choice A.", "tone": "good"},
            {"label": "Choice B", "outcome": "Outcome for choice B.", "tone": "caution"},
            {"label": "Choice C", "outcome": "Outcome for choice C.", "tone": "neutral"},
        ],
    }


def render_scenario_branch(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    choices = [c for c in as_list(data.get("choices")) if isinstance(c, dict) and (c.get("label") or c.get("outcome"))]
    entries = []
    for idx, choice in enumerate(choices):
        tone = SCENARIO_TONES.get(text(choice.get("tone") or "neutral").lower(), SCENARIO_TONES["neutral"])
        entries.append(
            f'<details class="rounded-lg border p-3 {tone}">'
            f'<summary class="cursor-pointer text-sm font-bold text-slate-100">{escape_html(choice.get("label") or f"Choice {idx + 1}")}</summary>'
            f'<p class="text-sm text-slate-300 mt-2 leading-relaxed">{render_simple_body(choice.get("outcome") or "")}</p>'
            "</details>"
        )
    return (
        f"{_CARD}>"
        f'<h3 class="text-lg font-bold text-white">{escape_html(data.get("title") or "Scenario Branch")}</h3>'
        f'<p class="mt-2 text-sm text-slate-300">{render_simple_body(data.get("prompt") or "")}</p>'
        f'<div class="mt-4 space-y-2">{"".join(entries) or empty_line("No branches added yet.", "text-sm text-slate-400")}</div>'
        "</article>"
    )


# drag_sort_block -------------------------------------------------------------


def default_drag_sort_block() -> Dict[str, Any]:
    return {"title": "Sort Challenge", "instructions": "Order these items from first to last.", "items": ["Item A", "Item B", "Item C"]}


def render_drag_sort_block(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    items = _string_items(data.get("items"))
    move = "px-2 py-1 rounded bg-slate-800 hover:bg-slate-700 text-[10px] font-bold text-white"
    rows = "".join(
        '<li class="rounded-lg border border-slate-700 bg-slate-950/70 px-3 py-2 text-sm text-slate-200 flex items-center '
        'justify-between gap-3" data-sort-item draggable="true">'
        f'<div class="flex items-center gap-2 min-w-0"><span class="text-slate-500 font-mono" data-sort-rank>{idx + 1}.</span>'
        f'<span class="truncate">{escape_html(item)}</span></div>'
        f'<div class="flex items-center gap-1"><button type="button" class="{move}" data-sort-move="-1" title="Move up">Up</button>'
        f'<button type="button" class="{move}" data-sort-move="1" title="Move down">Down</button></div>'
        "</li>"
        for idx, item in enumerate(items)
    )
    listing = f'<ol class="mt-4 space-y-2" data-sort-list>{rows}</ol>' if rows else empty_line("No sort items yet.", "text-sm text-slate-400 mt-3")
    return (
        f"{_CARD} data-sort-block>"
        f'<h3 class="text-lg font-bold text-white">{escape_html(data.get("title") or "Sort")}</h3>'
        f'<p class="text-sm text-slate-300 mt-2">{render_simple_body(data.get("instructions") or "")}</p>'
        f"{listing}"
        '<p class="text-[11px] text-slate-500 mt-3">Tip: drag rows or use Up/Down to reorder.</p>'
        "</article>"
    )


# flashcard_deck --------------------------------------------------------------


def default_flashcard_deck() -> Dict[str, Any]:
    return {"title": "Flashcards", "cards": [{"front": "Front 1", "back": "Back 1"}, {"front": "Front 2", "back": "Back 2"}]}


def render_flashcard_deck(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    cards = [card for card in as_list(data.get("cards")) if isinstance(card, dict) and (card.get("front") or card.get("back"))]
    entries = "".join(
        f'<div class="rounded-lg border border-slate-700 bg-slate-950/70 p-4" data-flashcard data-flashcard-index="{idx}" data-flashcard-side="front">'
        '<div data-flashcard-front><p class="text-[10px] font-bold uppercase tracking-widest text-slate-400">Front</p>'
        f'<p class="text-sm text-white mt-1">{render_simple_body(card.get("front") or "")}</p></div>'
        '<div data-flashcard-back class="hidden"><p class="text-[10px] font-bold uppercase tracking-widest text-slate-400">Back</p>'
        f'<p class="text-sm text-slate-300 mt-1">{render_simple_body(card.get("back") or "")}</p></div>'
        '<button type="button" class="mt-3 px-3 py-1.5 rounded bg-indigo-600 hover:bg-indigo-500 text-[11px] font-bold text-white '
        'uppercase tracking-wide" data-flashcard-toggle>Flip</button>'
        "</div>"
        for idx, card in enumerate(cards)
    )
    return (
        f"{_CARD} data-flashcards-block>"
        f'<h3 class="text-lg font-bold text-white mb-3">{escape_html(data.get("title") or "Flashcards")}</h3>'
        f'<div class="grid gap-3 md:grid-cols-2">{entries or empty_line("No cards yet.", "text-sm text-slate-400")}</div>'
        "</article>"
    )


# reflection_journal ----------------------------------------------------------


def default_reflection_journal() -> Dict[str, Any]:
    return {"title": "Reflection", "prompt": "What stood out from this lesson?", "placeholder": "Write your reflection..."}


def render_reflection_journal(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    return (
        f"{_CARD}>"
        f'<h3 class="text-lg font-bold text-white">{escape_html(data.get("title") or "Reflection")}</h3>'
        f'<p class="text-sm text-slate-300 mt-2">{render_simple_body(data.get("prompt") or "")}</p>'
        '<textarea class="mt-4 w-full min-h-32 rounded-lg border border-slate-700 bg-slate-950/70 p-3 text-sm text-slate-200" '
        f'placeholder="{escape_html(data.get("placeholder") or "Write here...")}"></textarea>'
        "</article>"
    )


# fillable_chart --------------------------------------------------------------


def default_fillable_chart() -> Dict[str, Any]:
    editable = {"label": "", "editable": True, "placeholder": CHART_DEFAULT_PLACEHOLDER}
    return {
        "title": "Fillable Chart",
        "description": "Label each cell and choose whether students can edit it.",
        "rowCount": 2,
        "colCount": 2,
        "showRowLabels": True,
        "rowLabelHeader": "Rows",
        "rows": [{"id": "row-1", "label": "Row 1"}, {"id": "row-2", "label": "Row 2"}],
        "columns": [{"id": "col-1", "label": "Column 1"}, {"id": "col-2", "label": "Column 2"}],
        "cells": [[dict(editable), dict(editable)], [dict(editable), dict(editable)]],
    }


def render_fillable_chart(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    chart = normalize_fillable_chart(data)
    title = text(data.get("title")).strip()
    description = text(data.get("description")).strip()

    head = []
    if chart.show_row_labels:
        head.append(
            '<th class="p-3 border-b border-slate-700 text-left font-bold uppercase tracking-wide text-slate-400 w-40">'
            f"{escape_html(chart.row_label_header) or '&nbsp;'}</th>"
        )
    head.extend(
        '<th class="p-3 border-b border-l border-slate-700 text-left font-bold uppercase tracking-wide text-slate-300">'
        f"{escape_html(column.label) or '&nbsp;'}</th>"
        for column in chart.columns
    )

    body = []
    for row_idx, row in enumerate(chart.rows):
        cells = []
        if chart.show_row_labels:
            cells.append(
                '<th class="p-3 border-b border-slate-800 bg-slate-950/80 text-left text-slate-100 font-bold uppercase tracking-wide">'
                f"{escape_html(row.label) or '&nbsp;'}</th>"
            )
        for cell in chart.cells[row_idx]:
            if cell.editable:
                hint = f'<p class="text-xs text-slate-400 mb-2">{render_simple_body(cell.label)}</p>' if cell.label else ""
                cells.append(
                    f'<td class="p-3 border-b border-l border-slate-800 align-top">{hint}'
                    '<textarea class="w-full min-h-24 rounded border border-slate-700 bg-slate-950/70 p-2 text-sm text-slate-200" '
                    f'placeholder="{escape_html(cell.placeholder or CHART_DEFAULT_PLACEHOLDER)}"></textarea></td>'
                )
            else:
                cells.append(
                    '<td class="p-3 border-b border-l border-slate-800 align-top">'
                    f'<div class="text-sm text-slate-200 leading-relaxed">{render_simple_body(cell.label)}</div></td>'
                )
        body.append(f'<tr>{"".join(cells)}</tr>')

    heading = f'<h3 class="text-lg font-bold text-white">{escape_html(title)}</h3>' if title else ""
    intro = f'<p class="text-sm text-slate-300 mt-2">{render_simple_body(description)}</p>' if description else ""
    return (
        f"{_CARD} data-fillable-chart-block>{heading}{intro}"
        '<div class="mt-4 overflow-x-auto rounded-lg border border-slate-700"><table class="min-w-full border-collapse text-xs">'
        f'<thead class="bg-slate-900/80"><tr>{"".join(head)}</tr></thead><tbody>{"".join(body)}</tbody>'
        "</table></div></article>"
    )


# path_map --------------------------------------------------------------------


def default_path_map() -> Dict[str, Any]:
    return {
        "title": "Learning Paths",
        "nodes": [
            {"title": "Path A", "description": "Description for path A."},
            {"title": "Path B", "description": "Description for path B."},
            {"title": "Path C", "description": "Description for path C."},
        ],
    }


def render_path_map(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    nodes = [node for node in as_list(data.get("nodes")) if isinstance(node, dict) and (node.get("title") or node.get("description"))]
    if not nodes:
        body = empty_line("No paths added yet.", "text-sm text-slate-400")
    else:
        buttons = "".join(
            f'<button type="button" data-path-node data-path-index="{idx}" class="w-full text-left rounded-lg border border-slate-700 '
            'bg-slate-950/70 p-3 transition-colors hover:border-indigo-500/60 hover:bg-slate-900 '
            f'{_ACTIVE_NODE if idx == 0 else "text-slate-200"}">'
            f'<p class="text-xs font-bold uppercase tracking-widest text-slate-500">Path {idx + 1}</p>'
            f'<p class="text-sm font-bold text-white mt-1">{escape_html(node.get("title") or f"Path {idx + 1}")}</p>'
            "</button>"
            for idx, node in enumerate(nodes)
        )
        panels = "".join(
            '<div class="rounded-lg border border-slate-700 bg-slate-950/70 p-4">'
            f'<div data-path-panel data-path-index="{idx}" class="{"" if idx == 0 else "hidden"}">'
            f'<h4 class="text-sm font-bold text-indigo-300">{escape_html(node.get("title") or "Path")}</h4>'
            f'<p class="text-sm text-slate-300 mt-1 leading-relaxed">{render_simple_body(node.get("description") or "")}</p>'
            "</div></div>"
            for idx, node in enumerate(nodes)
        )
        body = (
            '<div class="grid gap-3 md:grid-cols-12">'
            f'<div class="md:col-span-4 space-y-2">{buttons}</div>'
            f'<div class="md:col-span-8 space-y-2">{panels}</div>'
            "</div>"
        )
    return (
        f"{_CARD} data-path-map-block>"
        f'<h3 class="text-lg font-bold text-white mb-3">{escape_html(data.get("title") or "Path Map")}</h3>'
        f"{body}</article>"
    )


# hotspot_image ---------------------------------------------------------------


def default_hotspot_image() -> Dict[str, Any]:
    return {
        "title": "Interactive Image",
        "url": "",
        "alt": "Interactive visual",
        "hotspots": [
            {"label": "Point A", "x": 25, "y": 35, "content": "Explain this area."},
            {"label": "Point B", "x": 60, "y": 55, "content": "Explain this area."},
        ],
    }


def _percent(value: Any) -> str:
    return format_number(max(0.0, min(100.0, parse_float(value) or 0.0)))


def render_hotspot_image(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    url = to_safe_url(data.get("url"))
    title = escape_html(data.get("title") or "Interactive Image")
    if not url:
        body = empty_line("Add an image URL to render hotspot content.", "text-sm text-slate-400")
    else:
        hotspots = [as_dict(spot) for spot in as_list(data.get("hotspots"))]
        buttons = []
        panels = []
        for idx, spot in enumerate(hotspots):
            label = escape_html(spot.get("label") or f"Hotspot {idx + 1}")
            buttons.append(
                f'<button type="button" data-hotspot-btn data-hotspot-index="{idx}" '
                f'style="left:{_percent(spot.get("x"))}%;top:{_percent(spot.get("y"))}%;" '
                'class="absolute -translate-x-1/2 -translate-y-1/2 w-8 h-8 rounded-full border text-[11px] font-black transition-colors '
                f'{_ACTIVE_HOTSPOT if idx == 0 else _IDLE_HOTSPOT}" title="{label}" aria-label="{label}">{idx + 1}</button>'
            )
            panels.append(
                f'<div data-hotspot-panel data-hotspot-index="{idx}" class="rounded border border-slate-700 bg-slate-950/70 p-2 text-xs '
                f'text-slate-300{"" if idx == 0 else " hidden"}">'
                f'<p class="font-bold text-slate-100">{label}</p>'
                f'<p class="mt-1">{render_simple_body(spot.get("content") or "")}</p></div>'
            )
        panel_grid = f'<div class="mt-3 grid md:grid-cols-2 gap-2">{"".join(panels)}</div>' if panels else ""
        body = (
            '<figure class="relative rounded-lg border border-slate-700 bg-black overflow-hidden" data-hotspot-figure>'
            f'<img src="{escape_html(url)}" alt="{escape_html(data.get("alt") or "Interactive image")}" class="w-full h-auto" loading="lazy" />'
            f'{"".join(buttons)}</figure>{panel_grid}'
        )
    return f'{_CARD} data-hotspot-block><h3 class="text-lg font-bold text-white mb-3">{title}</h3>{body}</article>'


# before_after ----------------------------------------------------------------


def default_before_after() -> Dict[str, Any]:
    return {
        "title": "Before vs After",
        "beforeLabel": "Before",
        "beforeText": "Describe the initial state.",
        "afterLabel": "After",
        "afterText": "Describe the transformed state.",
    }


def render_before_after(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    before_label = escape_html(data.get("beforeLabel") or "Before")
    after_label = escape_html(data.get("afterLabel") or "After")
    return (
        f"{_CARD} data-before-after-block>"
        f'<h3 class="text-lg font-bold text-white mb-3">{escape_html(data.get("title") or "Before / After")}</h3>'
        '<p class="text-xs text-slate-400">Move the slider to compare emphasis between both states.</p>'
        '<div class="grid md:grid-cols-2 gap-3">'
        '<div class="rounded-lg border border-rose-500/30 bg-rose-950/20 p-4 transition-opacity" data-before-panel>'
        f'<p class="text-xs font-bold uppercase tracking-widest text-rose-300">{before_label}</p>'
        f'<p class="text-sm text-rose-100/90 mt-2 leading-relaxed">{render_simple_body(data.get("beforeText") or "")}</p></div>'
        '<div class="rounded-lg border border-emerald-500/30 bg-emerald-950/20 p-4 transition-opacity" data-after-panel>'
        f'<p class="text-xs font-bold uppercase tracking-widest text-emerald-300">{after_label}</p>'
        f'<p class="text-sm text-emerald-100/90 mt-2 leading-relaxed">{render_simple_body(data.get("afterText") or "")}</p></div>'
        "</div>"
        '<div class="mt-4"><input type="range" min="0" max="100" value="50" class="w-full" data-before-after-slider />'
        '<div class="mt-1 flex items-center justify-between text-[11px] text-slate-400">'
        f"<span>{before_label}</span><span data-before-after-value>50 / 50</span><span>{after_label}</span>"
        "</div></div></article>"
    )


# roleplay_simulator ----------------------------------------------------------


def default_roleplay_simulator() -> Dict[str, Any]:
    return {
        "title": "Roleplay",
        "scenario": "Set up a realistic interaction scenario.",
        "messages": [
            {"speaker": "Person A", "line": "Opening line from person A."},
            {"speaker": "Person B", "line": "Response from person B."},
        ],
        "responsePrompt": "What would you say next?",
    }


def render_roleplay_simulator(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    turns = "".join(
        '<div class="rounded-lg border border-slate-700 bg-slate-950/70 p-3">'
        f'<p class="text-[10px] uppercase tracking-widest text-slate-500">{escape_html(as_dict(msg).get("speaker") or f"Speaker {idx + 1}")}</p>'
        f'<p class="text-sm text-slate-200 mt-1">{render_simple_body(as_dict(msg).get("line") or "")}</p></div>'
        for idx, msg in enumerate(as_list(data.get("messages")))
    )
    return (
        f"{_CARD}>"
        f'<h3 class="text-lg font-bold text-white">{escape_html(data.get("title") or "Roleplay Simulator")}</h3>'
        f'<p class="text-sm text-slate-300 mt-2">{render_simple_body(data.get("scenario") or "")}</p>'
        f'<div class="mt-4 space-y-2">{turns or empty_line("No dialogue turns yet.", "text-sm text-slate-400")}</div>'
        '<div class="mt-4">'
        f'<label class="block text-xs font-bold uppercase tracking-wide text-slate-400 mb-1">{escape_html(data.get("responsePrompt") or "Your response")}</label>'
        '<textarea class="w-full min-h-28 rounded border border-slate-700 bg-slate-950/70 p-3 text-sm text-slate-200" '
        'placeholder="Draft your response..."></textarea>'
        "</div></article>"
    )


# decision_lab ----------------------------------------------------------------


def default_decision_lab() -> Dict[str, Any]:
    return {
        "title": "Decision Lab",
        "description": "Adjust the levers below to test outcomes.",
        "resultLabel": "Projected outcome score",
        "variables": [
            {"name": "Cost", "min": 0, "max": 10, "value": 5, "weight": 1},
            {"name": "Impact", "min": 0, "max": 10, "value": 7, "weight": 2},
            {"name": "Risk", "min": 0, "max": 10, "value": 3, "weight": 2},
        ],
    }


def _finite(value: Any) -> Optional[float]:
    return None if value is None else to_number(value)


def decision_lever(min_value: Any, max_value: Any, value: Any, weight: Any) -> Dict[str, float]:
    """Clamp one lever into a safe range and return its normalized position."""
    low = _finite(min_value)
    safe_min = 0.0 if low is None else low
    high = _finite(max_value)
    safe_max = high if high is not None and high >= safe_min else safe_min + 10
    current = _finite(value)
    clamped = safe_min if current is None else max(safe_min, min(safe_max, current))
    raw_weight = _finite(weight)
    safe_weight = raw_weight if raw_weight is not None and raw_weight > 0 else 1.0
    normalized = 0.0 if safe_max == safe_min else (clamped - safe_min) / (safe_max - safe_min)
    return {"min": safe_min, "max": safe_max, "value": clamped, "weight": safe_weight, "normalized": normalized}


def decision_score(levers: List[Dict[str, float]]) -> int:
    total_weight = sum(lever["weight"] for lever in levers)
    if total_weight <= 0:
        return 0
    weighted = sum(lever["normalized"] * lever["weight"] for lever in levers)
    return round_half_up(weighted / total_weight * 100)


def render_decision_lab(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    levers = []
    cards = []
    for idx, raw in enumerate(as_list(data.get("variables"))):
        variable = as_dict(raw)
        lever = decision_lever(variable.get("min"), variable.get("max"), variable.get("value"), variable.get("weight"))
        levers.append(lever)
        key = f"decision-{idx}"
        low, high, value, weight = (format_number(lever[name]) for name in ("min", "max", "value", "weight"))
        cards.append(
            '<div class="rounded-lg border border-slate-700 bg-slate-950/70 p-3">'
            f'<p class="text-xs uppercase tracking-widest text-slate-500">{escape_html(variable.get("name") or "Variable")}</p>'
            f'<p class="text-xs text-slate-400 mt-1">Weight: {weight}</p>'
            f'<input type="range" min="{low}" max="{high}" step="1" value="{value}" class="mt-2 w-full" data-decision-input '
            f'data-decision-key="{key}" data-decision-min="{low}" data-decision-max="{high}" data-decision-weight="{weight}" />'
            '<div class="mt-1 flex items-center justify-between text-[11px] text-slate-500">'
            f'<span>{low}</span><span class="font-bold text-white" data-decision-current data-decision-key="{key}">{value}</span>'
            f"<span>{high}</span></div></div>"
        )
    return (
        f"{_CARD} data-decision-block>"
        f'<h3 class="text-lg font-bold text-white">{escape_html(data.get("title") or "Decision Lab")}</h3>'
        f'<p class="text-sm text-slate-300 mt-2">{render_simple_body(data.get("description") or "")}</p>'
        f'<div class="mt-4 grid gap-2 md:grid-cols-2">{"".join(cards) or empty_line("No decision variables yet.", "text-sm text-slate-400")}</div>'
        '<div class="mt-4 rounded-lg border border-indigo-500/30 bg-indigo-950/20 p-3">'
        f'<p class="text-xs uppercase tracking-widest text-indigo-300">{escape_html(data.get("resultLabel") or "Outcome score")}</p>'
        f'<p class="text-2xl font-black text-white mt-1" data-decision-score>{decision_score(levers)}</p>'
        "</div></article>"
    )
