"""Renderers for static content and media activities."""

from __future__ import annotations

from typing import Any, Dict, List

from ...core.markup import (
    RICH_WEB_FONT_IMPORT_CSS,
    encode_data_attr_json,
    escape_html,
    render_simple_body,
    sanitize_css_color,
    sanitize_rich_html,
    to_safe_url,
)
from ...core.values import as_list, parse_int, text

_FONT_SIZES = {"1": "0.75rem", "2": "0.875rem", "3": "1rem", "4": "1.125rem", "5": "1.25rem", "6": "1.5rem", "7": "1.875rem"}

_RICH_RULES = [
    ("p", "margin: 0.6rem 0;"),
    ("ul", "list-style: disc; padding-left: 1.5rem; margin: 0.75rem 0;"),
    ("ol", "list-style: decimal; padding-left: 1.5rem; margin: 0.75rem 0;"),
    ("li", "margin: 0.35rem 0;"),
    ("h1", "font-size: 1.875rem; line-height: 2.25rem; font-weight: 700; margin: 1rem 0 0.5rem;"),
    ("h2", "font-size: 1.5rem; line-height: 2rem; font-weight: 700; margin: 0.9rem 0 0.45rem;"),
    ("h3", "font-size: 1.25rem; line-height: 1.75rem; font-weight: 700; margin: 0.8rem 0 0.4rem;"),
    ("a", "color: #7dd3fc; text-decoration: underline;"),
    ("blockquote", "border-left: 3px solid #475569; margin: 0.9rem 0; padding-left: 0.8rem; opacity: 0.95;"),
    ("div", "margin: 0.45rem 0;"),
]

_TITLE_RULES = [
    ("p", "margin: 0.45rem 0;"),
    ("h1", "font-size: 2.5rem; line-height: 1.1; font-weight: 900; margin: 0.4rem 0;"),
    ("h2", "font-size: 2rem; line-height: 1.15; font-weight: 850; margin: 0.35rem 0;"),
    ("h3", "font-size: 1.5rem; line-height: 1.2; font-weight: 800; margin: 0.3rem 0;"),
    ("h4", "font-size: 1.25rem; line-height: 1.25; font-weight: 750; margin: 0.3rem 0;"),
    ("ul", "list-style: disc; padding-left: 1.5rem; margin: 0.65rem 0;"),
    ("ol", "list-style: decimal; padding-left: 1.5rem; margin: 0.65rem 0;"),
    ("li", "margin: 0.2rem 0;"),
    ("a", "color: #93c5fd; text-decoration: underline;"),
    ("blockquote", "border-left: 3px solid #6366f1; margin: 0.75rem 0; padding-left: 0.8rem; opacity: 0.95;"),
]

_IMAGE_WIDTHS = {
    "full": "w-full",
    "wide": "w-full md:w-5/6 mx-auto",
    "medium": "w-full md:w-2/3 mx-auto",
    "small": "w-full md:w-1/2 mx-auto",
}

CALLOUT_TONES: Dict[str, Dict[str, str]] = {
    "tip": {"card": "border-emerald-500/40 bg-emerald-950/20", "label": "TIP", "title": "text-emerald-300", "body": "text-emerald-100/90"},
    "warning": {"card": "border-amber-500/40 bg-amber-950/20", "label": "WARNING", "title": "text-amber-300", "body": "text-amber-100/90"},
    "example": {"card": "border-sky-500/40 bg-sky-950/20", "label": "EXAMPLE", "title": "text-sky-300", "body": "text-sky-100/90"},
    "myth": {"card": "border-rose-500/40 bg-rose-950/20", "label": "MYTH", "title": "text-rose-300", "body": "text-rose-100/90"},
    "note": {"card": "border-violet-500/40 bg-violet-950/20", "label": "NOTE", "title": "text-violet-300", "body": "text-violet-100/90"},
}

_ACTION_BUTTON = "px-3 py-2 rounded text-[11px] font-bold uppercase tracking-wide"


def rich_style_block(scope: str, rules: List[tuple[str, str]]) -> str:
    lines = [RICH_WEB_FONT_IMPORT_CSS]
    lines.extend(f".{scope} {selector} {{ {body} }}" for selector, body in rules)
    lines.extend(f".{scope} font[size='{size}'] {{ font-size: {value}; }}" for size, value in _FONT_SIZES.items())
    return "<style>\n" + "\n".join(lines) + "\n</style>"


def _container_style(data: Dict[str, Any]) -> str:
    color = sanitize_css_color(data.get("bodyContainerBg") or data.get("blockContainerBg") or data.get("containerBg"))
    return f' style="background:{escape_html(color)};"' if color else ""


def missing_notice(label: str) -> str:
    return (
        '<article class="rounded-xl border border-amber-500/30 bg-amber-950/20 p-6">'
        f'<p class="text-amber-300 text-sm font-semibold uppercase tracking-wider">{escape_html(label)}</p>'
        "</article>"
    )


def empty_line(message: str, classes: str = "text-slate-400 text-sm") -> str:
    return f'<p class="{classes}">{escape_html(message)}</p>'


# content_block ---------------------------------------------------------------


def default_content_block() -> Dict[str, Any]:
    return {
        "title": "New Section",
        "body": "Write your lesson content here.",
        "bodyMode": "rich",
        "bodyHtml": "<p>Write your lesson content here.</p>",
        "blockContainerBg": "",
        "bodyContainerBg": "",
    }


def render_content_block(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    rich = sanitize_rich_html(data.get("bodyHtml"))
    body = render_simple_body(data.get("body")) if data.get("bodyMode") == "plain" or not rich else rich
    title = data.get("title")
    heading = f'<h3 class="text-xl font-bold text-white mb-3">{escape_html(title)}</h3>' if title else ""
    return (
        f'<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-6"{_container_style(data)}>'
        f"{rich_style_block('cf-rich-content', _RICH_RULES)}"
        f"{heading}"
        f'<div class="text-slate-200 leading-relaxed cf-rich-content">{body}</div>'
        "</article>"
    )


# title_block -----------------------------------------------------------------


def default_title_block() -> Dict[str, Any]:
    return {
        "text": "Module Title",
        "textMode": "rich",
        "textHtml": "<h2>Module Title</h2>",
        "align": "left",
        "blockContainerBg": "",
        "bodyContainerBg": "",
    }


def render_title_block(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    rich = sanitize_rich_html(data.get("textHtml"))
    body = render_simple_body(data.get("text")) if data.get("textMode") == "plain" or not rich else rich
    align = text(data.get("align") or "left").lower()
    align_class = {"center": "text-center", "right": "text-right"}.get(align, "text-left")
    return (
        f'<article class="rounded-xl border border-indigo-500/30 bg-indigo-950/20 p-5 {align_class}" '
        f"data-title-block{_container_style(data)}>"
        f"{rich_style_block('cf-title-content', _TITLE_RULES)}"
        f'<div class="cf-title-content text-white leading-tight">{body}</div>'
        "</article>"
    )


# spacer_block ----------------------------------------------------------------


def default_spacer_block() -> Dict[str, Any]:
    return {"height": 48}


def render_spacer_block(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    raw = parse_int(data.get("height"))
    height = 48 if raw is None else max(0, min(600, raw))
    return (
        '<div aria-hidden="true" data-spacer-block '
        'class="rounded-xl border border-dashed border-slate-700/60 bg-transparent" '
        f'style="min-height: {height}px;"></div>'
    )


# embed_block -----------------------------------------------------------------


def default_embed_block() -> Dict[str, Any]:
    return {"url": "", "caption": ""}


def render_embed_block(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    url = to_safe_url(data.get("url"))
    if not url:
        return missing_notice("Embed missing URL")
    caption = escape_html(data.get("caption") or "")
    caption_line = f'<p class="text-xs text-slate-400 mt-3">{caption}</p>' if caption else ""
    return (
        '<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-4">'
        '<div class="aspect-video rounded-lg overflow-hidden border border-slate-700 bg-black">'
        f'<iframe src="{escape_html(url)}" title="{caption or "Embedded content"}" class="w-full h-full" '
        'frameborder="0" allowfullscreen loading="lazy"></iframe>'
        "</div>"
        f"{caption_line}"
        f'<p class="text-xs mt-2"><a href="{escape_html(url)}" target="_blank" rel="noopener noreferrer" '
        'class="text-sky-400 hover:text-sky-300 underline">Open in new tab</a></p>'
        "</article>"
    )


# image_block -----------------------------------------------------------------


def default_image_block() -> Dict[str, Any]:
    return {"url": "", "alt": "", "caption": "", "width": "full"}


def render_image_block(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    url = to_safe_url(data.get("url"))
    if not url:
        return missing_notice("Image URL missing")
    alt = escape_html(data.get("alt") or "Image")
    caption = escape_html(data.get("caption") or "")
    width_class = _IMAGE_WIDTHS.get(text(data.get("width") or "full"), _IMAGE_WIDTHS["full"])
    caption_line = f'<figcaption class="text-xs text-slate-400 mt-3">{caption}</figcaption>' if caption else ""
    return (
        f'<figure class="rounded-xl border border-slate-700 bg-slate-900/70 p-4 {width_class}">'
        f'<img src="{escape_html(url)}" alt="{alt}" class="w-full h-auto rounded-lg border border-slate-700" loading="lazy" />'
        f"{caption_line}"
        "</figure>"
    )


# resource_list ---------------------------------------------------------------


def default_resource_list() -> Dict[str, Any]:
    return {"title": "Resources", "items": [{"label": "Resource link", "viewUrl": "", "downloadUrl": ""}]}


def _resource_row(item: Dict[str, Any]) -> str:
    view_url = to_safe_url(item.get("viewUrl") or item.get("url"))
    download_url = to_safe_url(item.get("downloadUrl") or item.get("url"))
    label = escape_html(item.get("label") or item.get("viewUrl") or item.get("downloadUrl") or item.get("url") or "Resource")
    description = escape_html(item.get("description") or "")
    digital = encode_data_attr_json(item["digitalContent"]) if item.get("digitalContent") else ""

    buttons = []
    if view_url:
        buttons.append(
            f'<button type="button" class="{_ACTION_BUTTON} bg-sky-600 hover:bg-sky-500 text-white" data-resource-view '
            f'data-resource-url="{escape_html(view_url)}" data-resource-title="{label}">View</button>'
        )
    if download_url:
        buttons.append(
            f'<button type="button" class="{_ACTION_BUTTON} bg-slate-800 hover:bg-slate-700 text-slate-100 text-center" '
            f'data-resource-download data-resource-download-url="{escape_html(download_url)}" '
            f'data-resource-download-name="{label}">Download</button>'
        )
    if digital:
        buttons.append(
            f'<button type="button" class="{_ACTION_BUTTON} bg-emerald-700 hover:bg-emerald-600 text-white text-center" '
            f'data-resource-read data-resource-read-title="{label}" '
            f'data-resource-read-content="{escape_html(digital)}">Read</button>'
        )

    parts = [
        '<li class="rounded-lg border border-slate-700 bg-slate-950/70 p-4">',
        f'<p class="text-slate-200 text-sm font-semibold">{label}</p>',
    ]
    if description:
        parts.append(f'<p class="text-xs text-slate-400 mt-1">{description}</p>')
    if buttons:
        parts.append('<div class="mt-3 flex flex-wrap gap-2">' + "".join(buttons) + "</div>")
    parts.append("</li>")
    return "".join(parts)


_RESOURCE_VIEWER = (
    '<div class="hidden mb-4 rounded-lg border border-slate-700 overflow-hidden bg-black" data-resource-viewer>'
    '<div class="flex items-center justify-between bg-slate-800 border-b border-slate-700 px-3 py-2">'
    '<p class="text-xs font-bold uppercase tracking-widest text-white" data-resource-viewer-title>Resource Viewer</p>'
    '<button type="button" class="text-xs font-bold uppercase tracking-widest text-rose-300 hover:text-white" '
    "data-resource-viewer-close>Close</button>"
    "</div>"
    '<iframe src="" title="Resource viewer" class="w-full border-0" style="height: 70vh;" data-resource-viewer-frame></iframe>'
    "</div>"
)

_RESOURCE_READER = (
    '<div class="hidden mb-4 rounded-lg border border-emerald-500/30 overflow-hidden bg-slate-950" data-resource-reader>'
    '<div class="flex items-center justify-between bg-slate-800 border-b border-slate-700 px-3 py-2">'
    '<p class="text-xs font-bold uppercase tracking-widest text-emerald-300" data-resource-reader-title>Digital Resource</p>'
    '<button type="button" class="text-xs font-bold uppercase tracking-widest text-rose-300 hover:text-white" '
    "data-resource-reader-close>Close</button>"
    "</div>"
    '<div class="flex" style="height: 70vh;">'
    '<aside class="hidden md:block w-64 border-r border-slate-800 bg-slate-900/70 p-3 overflow-y-auto custom-scroll">'
    '<p class="text-[10px] font-bold uppercase tracking-widest text-slate-400 mb-2">Contents</p>'
    '<div class="space-y-1" data-resource-reader-toc></div>'
    "</aside>"
    '<div class="flex-1 p-4 md:p-6 overflow-y-auto custom-scroll">'
    "<div data-resource-reader-body></div>"
    '<div class="mt-6 pt-4 border-t border-slate-800 flex items-center justify-between gap-3">'
    f'<button type="button" class="{_ACTION_BUTTON} bg-slate-800 hover:bg-slate-700 text-white disabled:opacity-40" '
    "data-resource-reader-prev>Previous</button>"
    '<p class="text-[11px] font-bold uppercase tracking-widest text-slate-400" data-resource-reader-progress></p>'
    f'<button type="button" class="{_ACTION_BUTTON} bg-slate-800 hover:bg-slate-700 text-white disabled:opacity-40" '
    "data-resource-reader-next>Next</button>"
    "</div></div></div></div>"
)


def resource_has_content(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    return bool(item.get("label") or item.get("url") or item.get("viewUrl") or item.get("downloadUrl") or item.get("digitalContent"))


def render_resource_list(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    rows = [_resource_row(item) for item in as_list(data.get("items")) if resource_has_content(item)]
    listing = f'<ul class="space-y-3 text-sm">{"".join(rows)}</ul>' if rows else empty_line("No resources added yet.")
    return (
        '<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-6">'
        f'<h3 class="text-lg font-bold text-white mb-3">{escape_html(data.get("title") or "Resources")}</h3>'
        f"{_RESOURCE_VIEWER}{_RESOURCE_READER}{listing}"
        "</article>"
    )


# callout_block ---------------------------------------------------------------


def default_callout_block() -> Dict[str, Any]:
    return {
        "tone": "tip",
        "title": "Helpful tip",
        "body": "Add a concise note, warning, example, or myth-buster here.",
    }


def render_callout_block(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    tone = CALLOUT_TONES.get(text(data.get("tone") or "tip").lower(), CALLOUT_TONES["tip"])
    return (
        f'<article class="rounded-xl border p-5 {tone["card"]}">'
        f'<p class="text-[10px] font-bold uppercase tracking-widest {tone["title"]}">{tone["label"]}</p>'
        f'<h3 class="mt-2 text-lg font-bold {tone["title"]}">{escape_html(data.get("title") or "Callout")}</h3>'
        f'<p class="mt-2 text-sm leading-relaxed {tone["body"]}">{render_simple_body(data.get("body") or "")}</p>'
        "</article>"
    )


# accordion_block -------------------------------------------------------------


def default_accordion_block() -> Dict[str, Any]:
    return {
        "title": "Frequently Asked Questions",
        "items": [
            {"question": "Question one?", "answer": "Answer one."},
            {"question": "Question two?", "answer": "Answer two."},
        ],
    }


def render_accordion_block(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    items = [item for item in as_list(data.get("items")) if isinstance(item, dict) and (item.get("question") or item.get("answer"))]
    entries = [
        f'<details class="rounded-lg border border-slate-700 bg-slate-950/70 p-3"{" open" if idx == 0 else ""}>'
        f'<summary class="cursor-pointer text-sm font-bold text-slate-100">{escape_html(item.get("question") or f"Item {idx + 1}")}</summary>'
        f'<div class="mt-2 text-sm text-slate-300 leading-relaxed">{render_simple_body(item.get("answer") or "")}</div>'
        "</details>"
        for idx, item in enumerate(items)
    ]
    return (
        '<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-6">'
        f'<h3 class="text-lg font-bold text-white mb-3">{escape_html(data.get("title") or "Accordion")}</h3>'
        f'<div class="space-y-2">{"".join(entries) or empty_line("No accordion items yet.", "text-sm text-slate-400")}</div>'
        "</article>"
    )


# tabs_block ------------------------------------------------------------------


def default_tabs_block() -> Dict[str, Any]:
    return {
        "title": "Compare",
        "tabs": [
            {"label": "Option A", "content": "Details for option A."},
            {"label": "Option B", "content": "Details for option B."},
            {"label": "Option C", "content": "Details for option C."},
        ],
    }


def render_tabs_block(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    tabs = [tab for tab in as_list(data.get("tabs")) if isinstance(tab, dict) and (tab.get("label") or tab.get("content"))]
    title = escape_html(data.get("title") or "Tabs")
    triggers = []
    panels = []
    for idx, tab in enumerate(tabs):
        label = escape_html(tab.get("label") or f"Tab {idx + 1}")
        active = " ring-1 ring-indigo-400 border-indigo-500 text-white" if idx == 0 else ""
        triggers.append(
            f'<button type="button" role="tab" data-tabs-trigger data-tab-index="{idx}" '
            f'aria-selected="{"true" if idx == 0 else "false"}" '
            f'class="px-3 py-1.5 rounded border border-slate-700 bg-slate-950/70 text-xs font-bold text-slate-200 hover:bg-slate-800{active}">'
            f"{label}</button>"
        )
        panels.append(
            f'<div role="tabpanel" data-tabs-panel data-tab-index="{idx}" '
            f'class="rounded-lg border border-slate-700 bg-slate-950/70 p-3{"" if idx == 0 else " hidden"}">'
            f'<h4 class="text-sm font-bold text-white">{label}</h4>'
            f'<p class="text-sm text-slate-300 mt-2 leading-relaxed">{render_simple_body(tab.get("content") or "")}</p>'
            "</div>"
        )
    panel_block = f'<div class="mt-3 space-y-2">{"".join(panels)}</div>' if panels else ""
    return (
        '<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-6" data-tabs-block>'
        f'<h3 class="text-lg font-bold text-white mb-3">{title}</h3>'
        f'<div class="flex flex-wrap gap-2" role="tablist" aria-label="{title}">'
        f'{"".join(triggers) or empty_line("No tabs configured yet.", "text-sm text-slate-400")}</div>'
        f"{panel_block}"
        "</article>"
    )


# step_sequence ---------------------------------------------------------------


def default_step_sequence() -> Dict[str, Any]:
    return {
        "title": "Step-by-Step Flow",
        "steps": [
            {"title": "Step 1", "detail": "Describe the first step."},
            {"title": "Step 2", "detail": "Describe the second step."},
            {"title": "Step 3", "detail": "Describe the third step."},
        ],
    }


def render_step_sequence(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    steps = [step for step in as_list(data.get("steps")) if isinstance(step, dict) and (step.get("title") or step.get("detail"))]
    entries = [
        '<li class="rounded-lg border border-slate-700 bg-slate-950/70 p-4"><div class="flex items-start gap-3">'
        '<div class="w-7 h-7 rounded-full bg-indigo-600/20 border border-indigo-500/50 text-indigo-300 text-xs font-bold '
        f'flex items-center justify-center">{idx + 1}</div>'
        f'<div><h4 class="text-sm font-bold text-white">{escape_html(step.get("title") or f"Step {idx + 1}")}</h4>'
        f'<p class="text-sm text-slate-300 mt-1 leading-relaxed">{render_simple_body(step.get("detail") or "")}</p></div>'
        "</div></li>"
        for idx, step in enumerate(steps)
    ]
    body = f'<ol class="space-y-3">{"".join(entries)}</ol>' if entries else empty_line("No steps added yet.", "text-sm text-slate-400")
    return (
        '<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-6">'
        f'<h3 class="text-lg font-bold text-white mb-4">{escape_html(data.get("title") or "Steps")}</h3>'
        f"{body}"
        "</article>"
    )


# timeline_story --------------------------------------------------------------


def default_timeline_story() -> Dict[str, Any]:
    return {
        "title": "Timeline",
        "events": [
            {"date": "Phase 1", "title": "Start", "description": "Describe the first milestone."},
            {"date": "Phase 2", "title": "Middle", "description": "Describe the second milestone."},
            {"date": "Phase 3", "title": "Finish", "description": "Describe the final milestone."},
        ],
    }


def render_timeline_story(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    events = [
        event
        for event in as_list(data.get("events"))
        if isinstance(event, dict) and (event.get("date") or event.get("title") or event.get("description"))
    ]
    entries = []
    for idx, event in enumerate(events):
        date = escape_html(event.get("date") or "")
        date_line = f'<p class="text-[10px] font-bold uppercase tracking-widest text-indigo-300">{date}</p>' if date else ""
        entries.append(
            '<li class="relative pl-4">'
            '<span class="absolute -left-[9px] top-1.5 w-4 h-4 rounded-full bg-indigo-500 border-2 border-slate-900"></span>'
            f"{date_line}"
            f'<h4 class="text-sm font-bold text-white mt-1">{escape_html(event.get("title") or f"Event {idx + 1}")}</h4>'
            f'<p class="text-sm text-slate-300 mt-1 leading-relaxed">{render_simple_body(event.get("description") or "")}</p>'
            "</li>"
        )
    body = (
        f'<ol class="border-l border-slate-700 ml-2 space-y-5">{"".join(entries)}</ol>'
        if entries
        else empty_line("No timeline events yet.", "text-sm text-slate-400")
    )
    return (
        '<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-6">'
        f'<h3 class="text-lg font-bold text-white mb-4">{escape_html(data.get("title") or "Timeline")}</h3>'
        f"{body}"
        "</article>"
    )
