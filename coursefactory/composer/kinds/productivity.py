"""Report generator and save/load blocks, plus the standalone container summaries."""

from __future__ import annotations

import re
from typing import Any, Dict

from ...core.markup import escape_html, render_simple_body
from ...core.values import as_dict, as_list, text

_PRIMARY = "px-4 py-2 rounded bg-emerald-600 hover:bg-emerald-500 text-white text-xs font-bold uppercase tracking-wide"
_SECONDARY = "px-4 py-2 rounded bg-slate-800 hover:bg-slate-700 text-slate-100 text-xs font-bold uppercase tracking-wide"

CARD_OPEN_MODES = ("expand", "modal", "navigate_section", "navigate_page")


def normalize_open_mode(value: Any) -> str:
    raw = text(value or "expand").strip().lower()
    return raw if raw in CARD_OPEN_MODES else "expand"


def safe_file_name(value: Any, fallback: str = "module-progress") -> str:
    return re.sub(r"[^a-z0-9._-]", "-", text(value or fallback), flags=re.IGNORECASE).strip() or fallback


# submission_builder ----------------------------------------------------------


def default_submission_builder() -> Dict[str, Any]:
    return {"title": "Report Generator", "buttonLabel": "Generate Report"}


def render_submission_builder(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    return (
        '<article class="rounded-xl border border-emerald-500/30 bg-emerald-950/20 p-6" data-submission-block>'
        f'<h3 class="text-lg font-bold text-emerald-300 mb-3">{escape_html(data.get("title") or "Report Generator")}</h3>'
        '<div class="flex flex-wrap gap-3">'
        f'<button type="button" class="{_PRIMARY}" data-submission-generate>{escape_html(data.get("buttonLabel") or "Generate Report")}</button>'
        f'<button type="button" class="{_SECONDARY}" data-submission-copy>Copy to Clipboard</button>'
        f'<button type="button" class="{_SECONDARY}" data-submission-download>Download TXT</button>'
        f'<button type="button" class="{_SECONDARY}" data-submission-print>Print</button>'
        "</div>"
        '<pre class="mt-4 p-4 rounded bg-slate-950/70 border border-slate-700 text-xs text-slate-200 whitespace-pre-wrap" '
        "data-submission-output>Generate your report to view a summary here.</pre>"
        "</article>"
    )


# save_load_block -------------------------------------------------------------


def default_save_load_block() -> Dict[str, Any]:
    return {
        "title": "Save or Restore Progress",
        "description": "Download a JSON backup of current responses, then upload it later to restore the module state.",
        "fileName": "module-progress",
    }


def render_save_load_block(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    button = "px-3 py-2 rounded text-xs font-bold uppercase tracking-wide"
    return (
        '<article class="rounded-xl border border-cyan-500/30 bg-cyan-950/20 p-6" data-save-load-block '
        f'data-save-load-file-name="{escape_html(safe_file_name(data.get("fileName")))}">'
        f'<h3 class="text-lg font-bold text-cyan-300 mb-2">{escape_html(data.get("title") or "Save or Restore Progress")}</h3>'
        f'<p class="text-xs text-cyan-100/90 leading-relaxed">{render_simple_body(data.get("description") or "")}</p>'
        '<input type="file" accept=".json,application/json" class="hidden" data-save-load-upload-input />'
        '<div class="mt-3 flex flex-wrap gap-2">'
        f'<button type="button" class="{button} bg-cyan-600 hover:bg-cyan-500 text-white" data-save-load-download>Download JSON</button>'
        f'<button type="button" class="{button} bg-slate-800 hover:bg-slate-700 text-slate-100" data-save-load-upload-trigger>Upload JSON</button>'
        "</div>"
        '<p class="mt-3 text-xs text-cyan-100/75" data-save-load-status>No backup loaded yet.</p>'
        "</article>"
    )


# tab_group / card_list -------------------------------------------------------
#
# These summaries are only shown when a container is rendered outside a module
# (editor previews). The compiler replaces them with resolved children.


def default_tab_group() -> Dict[str, Any]:
    return {
        "title": "Tab Group",
        "tabs": [
            {"id": "activities", "label": "Activities", "activityIds": [], "activities": []},
            {"id": "additional", "label": "Additional Learning", "activityIds": [], "activities": []},
        ],
        "defaultTabId": "activities",
    }


def _summary_card(marker: str, title: str, rows: list, empty: str) -> str:
    heading = f'<h3 class="text-lg font-bold text-white mb-3">{escape_html(title)}</h3>' if title else ""
    listing = f'<ul class="space-y-2">{"".join(rows)}</ul>' if rows else f'<p class="text-sm text-slate-400">{empty}</p>'
    return f'<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-6" {marker}>{heading}{listing}</article>'


def render_tab_group(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    rows = []
    for idx, raw in enumerate(as_list(data.get("tabs"))):
        tab = as_dict(raw)
        label = escape_html(tab.get("label") or tab.get("id") or f"Tab {idx + 1}")
        refs = [ref for ref in as_list(tab.get("activityIds")) if ref]
        inline = [child for child in as_list(tab.get("activities")) if child]
        rows.append(
            '<li class="rounded border border-slate-700 bg-slate-950/70 px-3 py-2 text-xs text-slate-300">'
            f'{label} <span class="text-slate-500">({len(refs)} refs, {len(inline)} inline)</span></li>'
        )
    return _summary_card("data-tab-group", text(data.get("title")).strip(), rows, "No tabs configured.")


def default_card_list() -> Dict[str, Any]:
    return {
        "title": "Card List",
        "cards": [
            {
                "title": "New Card",
                "subtitle": "",
                "icon": "",
                "targetActivityId": "",
                "activity": None,
                "activities": [],
                "openMode": "expand",
            }
        ],
    }


def render_card_list(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    rows = []
    for idx, raw in enumerate(as_list(data.get("cards"))):
        card = as_dict(raw)
        rows.append(
            '<li class="rounded border border-slate-700 bg-slate-950/70 px-3 py-2 text-xs text-slate-300">'
            f'{escape_html(card.get("title") or f"Card {idx + 1}")} '
            f'<span class="text-slate-500">({normalize_open_mode(card.get("openMode"))})</span></li>'
        )
    return _summary_card("data-card-list", text(data.get("title")).strip(), rows, "No cards configured.")
