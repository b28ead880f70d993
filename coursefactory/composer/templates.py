"""Module templates, page themes and per-block style overrides.

A module picks one template (``deck``, ``finlit``, ``coursebook`` or
``toolkit_dashboard``) and one theme. Unknown values silently fall back to the
course default and then to ``deck``/``dark_cards``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from ..core.layout import normalize_activities
from ..core.markup import (
    escape_html,
    parse_heading_entries,
    sanitize_css_color,
    slugify,
    strip_html,
    to_safe_href,
)
from ..core.values import as_dict, as_list, text
from .finlit import FinlitLink, create_finlit_settings, create_hero
from .kinds.productivity import normalize_open_mode
from .registry import ActivityKind, get_definition

if TYPE_CHECKING:
    from .compiler import ModuleCompiler

LOGGER = logging.getLogger(__name__)

TEMPLATE_OPTIONS = ("deck", "finlit", "coursebook", "toolkit_dashboard")
THEME_OPTIONS = ("dark_cards", "finlit_clean", "coursebook_light", "toolkit_clean")

BLOCK_FONT_STACKS: Dict[str, str] = {
    "Arial": "Arial, Helvetica, sans-serif",
    "Helvetica": "Helvetica, Arial, sans-serif",
    "Verdana": "Verdana, Geneva, sans-serif",
    "Tahoma": "Tahoma, Geneva, sans-serif",
    "Trebuchet MS": "Trebuchet MS, Helvetica, sans-serif",
    "Segoe UI": "Segoe UI, Tahoma, sans-serif",
    "Georgia": "Georgia, serif",
    "Garamond": "Garamond, serif",
    "Palatino Linotype": "Palatino Linotype, Book Antiqua, Palatino, serif",
    "Times New Roman": "Times New Roman, Times, serif",
    "Courier New": "Courier New, Courier, monospace",
    "Lucida Console": "Lucida Console, Monaco, monospace",
    "Impact": "Impact, Haettenschweiler, Arial Narrow Bold, sans-serif",
    "Comic Sans MS": "Comic Sans MS, Comic Sans, cursive",
    "Inter": "Inter, sans-serif",
    "Roboto": "Roboto, sans-serif",
    "Open Sans": "Open Sans, sans-serif",
    "Lato": "Lato, sans-serif",
    "Montserrat": "Montserrat, sans-serif",
    "Poppins": "Poppins, sans-serif",
    "Raleway": "Raleway, sans-serif",
    "Nunito": "Nunito, sans-serif",
    "Playfair Display": "Playfair Display, serif",
    "Merriweather": "Merriweather, serif",
    "Oswald": "Oswald, sans-serif",
    "Bebas Neue": "Bebas Neue, sans-serif",
}

BLOCK_THEME_PRESETS: Dict[str, Optional[Dict[str, str]]] = {
    "default": None,
    "slate": {
        "textColor": "#dbe3ee",
        "containerBg": "rgba(15, 23, 42, 0.82)",
        "borderColor": "rgba(71, 85, 105, 0.7)",
        "accentColor": "#7dd3fc",
    },
    "ocean": {
        "textColor": "#dbeafe",
        "containerBg": "rgba(30, 58, 138, 0.45)",
        "borderColor": "rgba(96, 165, 250, 0.7)",
        "accentColor": "#38bdf8",
    },
    "forest": {
        "textColor": "#dcfce7",
        "containerBg": "rgba(20, 83, 45, 0.5)",
        "borderColor": "rgba(74, 222, 128, 0.6)",
        "accentColor": "#4ade80",
    },
    "sunset": {
        "textColor": "#ffedd5",
        "containerBg": "rgba(154, 52, 18, 0.45)",
        "borderColor": "rgba(251, 146, 60, 0.65)",
        "accentColor": "#fb923c",
    },
    "mono": {
        "textColor": "#f8fafc",
        "containerBg": "rgba(17, 24, 39, 0.82)",
        "borderColor": "rgba(148, 163, 184, 0.6)",
        "accentColor": "#cbd5e1",
    },
}

_SURFACE_RULE = ".cf-theme-{theme} .cf-template-surface{{background:var(--cf-surface);border-color:var(--cf-border);color:var(--cf-text);}}"

THEME_CSS: Dict[str, str] = {
    "finlit_clean": (
        ".cf-theme-finlit_clean { --cf-surface:#ffffff; --cf-border:#d1d5db; --cf-text:#0f172a; } "
        + _SURFACE_RULE.format(theme="finlit_clean")
        + " .cf-theme-finlit_clean .cf-finlit-tab-active{color:#0284c7!important;border-color:#0284c7!important;}"
    ),
    "coursebook_light": (
        ".cf-theme-coursebook_light { --cf-surface:#ffffff; --cf-border:#d1d5db; --cf-text:#111827; } "
        + _SURFACE_RULE.format(theme="coursebook_light")
        + ' .cf-theme-coursebook_light .cf-prose{font-family:Georgia, "Times New Roman", serif;line-height:1.75;}'
    ),
    "toolkit_clean": (
        ".cf-theme-toolkit_clean { --cf-surface:#ffffff; --cf-border:#d1d5db; --cf-text:#111827; } "
        + _SURFACE_RULE.format(theme="toolkit_clean")
    ),
    "dark_cards": (
        ".cf-theme-dark_cards { --cf-surface:rgba(15, 23, 42, 0.72); --cf-border:rgba(71, 85, 105, 0.65); --cf-text:#e2e8f0; } "
        + _SURFACE_RULE.format(theme="dark_cards")
    ),
}

_ACTIVITY = ".cf-composer-activity"
_SIMPLE_ROOT = '[data-composer-root][data-composer-layout-mode="simple"]'
_TALLEST = f'{_SIMPLE_ROOT}[data-composer-simple-match-tallest-row="true"]'

BASE_STYLE_RULES: List[str] = [
    f"{_ACTIVITY} {{ position: relative; }}",
    f"{_ACTIVITY}.cf-block-font-override, {_ACTIVITY}.cf-block-font-override * {{ font-family: var(--cf-block-font); }}",
    f"{_ACTIVITY}.cf-block-text-override :is(h1, h2, h3, h4, h5, h6, p, span, div, li, ul, ol, label, summary, small, "
    "strong, em, blockquote, pre, a, button, input, textarea, select) { color: var(--cf-block-text); }",
    f"{_ACTIVITY}.cf-block-bg-override > :first-child {{ background: var(--cf-block-bg); }}",
    f"{_ACTIVITY}.cf-block-border-override > :first-child, {_ACTIVITY}.cf-block-border-override > :first-child "
    "[class*='border-'] { border-color: var(--cf-block-border); }",
    f"{_ACTIVITY}.cf-block-accent-override a, {_ACTIVITY}.cf-block-accent-override [class*='text-indigo'], "
    f"{_ACTIVITY}.cf-block-accent-override [class*='text-sky'], {_ACTIVITY}.cf-block-accent-override [class*='text-emerald'], "
    f"{_ACTIVITY}.cf-block-accent-override [class*='text-cyan'] {{ color: var(--cf-block-accent); }}",
    f"{_ACTIVITY}.cf-no-border > :first-child, {_ACTIVITY}.cf-no-border > :first-child [class*='border-'] "
    "{ border: 0 !important; box-shadow: none !important; }",
    f"{_ACTIVITY}.cf-variant-flat > :first-child {{ background: transparent !important; }}",
    f"{_ACTIVITY}.cf-pad-sm > :first-child {{ padding: 0.5rem !important; }}",
    f"{_ACTIVITY}.cf-pad-md > :first-child {{ padding: 1rem !important; }}",
    f"{_ACTIVITY}.cf-pad-lg > :first-child {{ padding: 1.5rem !important; }}",
    f"{_ACTIVITY}.cf-title-xs :is(h1,h2,h3,h4) {{ font-size: 0.875rem !important; }}",
    f"{_ACTIVITY}.cf-title-sm :is(h1,h2,h3,h4) {{ font-size: 1rem !important; }}",
    f"{_ACTIVITY}.cf-title-md :is(h1,h2,h3,h4) {{ font-size: 1.125rem !important; }}",
    f"{_ACTIVITY}.cf-title-lg :is(h1,h2,h3,h4) {{ font-size: 1.375rem !important; }}",
    f"{_ACTIVITY}.cf-title-xl :is(h1,h2,h3,h4) {{ font-size: 1.75rem !important; }}",
    f"{_ACTIVITY}.cf-canvas-item {{ min-height: 0; overflow: hidden; }}",
    f"{_ACTIVITY}.cf-canvas-item > :first-child {{ height: 100%; overflow: auto; box-sizing: border-box; }}",
    f"{_TALLEST} {{ align-items: stretch; }}",
    f"{_TALLEST} > {_ACTIVITY} {{ height: 100%; }}",
    f"{_TALLEST} > {_ACTIVITY} > :first-child {{ height: 100%; box-sizing: border-box; }}",
    f"{_SIMPLE_ROOT} textarea {{ resize: none !important; overflow-y: auto; }}",
]


def _resolve_option(value: Any, options: Sequence[str], fallback: str) -> str:
    raw = text(value).strip().lower()
    if not raw:
        return fallback
    if raw not in options:
        LOGGER.debug("Unknown option %r; using %r", raw, fallback)
        return fallback
    return raw


def resolve_template(value: Any, fallback: str = "deck") -> str:
    return _resolve_option(value, TEMPLATE_OPTIONS, fallback)


def resolve_theme(value: Any, fallback: str = "dark_cards") -> str:
    return _resolve_option(value, THEME_OPTIONS, fallback)


def theme_css(theme: str) -> str:
    return THEME_CSS.get(theme, THEME_CSS["dark_cards"])


def build_style_block(theme: str) -> str:
    rules = "\n".join(BASE_STYLE_RULES + [theme_css(theme)])
    return f"<style>\n{rules}\n</style>"


@dataclass(slots=True)
class BlockStyle:
    theme_key: str = "default"
    font_family: str = ""
    text_color: str = ""
    container_bg: str = ""
    border_color: str = ""
    accent_color: str = ""

    def css_overrides(self) -> List[tuple]:
        """``(class, declaration)`` pairs for every override that is set."""
        pairs = [
            ("cf-block-font-override", "--cf-block-font", self.font_family),
            ("cf-block-text-override", "--cf-block-text", self.text_color),
            ("cf-block-bg-override", "--cf-block-bg", self.container_bg),
            ("cf-block-border-override", "--cf-block-border", self.border_color),
            ("cf-block-accent-override", "--cf-block-accent", self.accent_color),
        ]
        return [(css_class, f"{prop}:{value};") for css_class, prop, value in pairs if value]


def resolve_block_style(data: Any) -> BlockStyle:
    source = as_dict(data)
    theme_key = text(source.get("blockTheme")).strip().lower()
    if theme_key not in BLOCK_THEME_PRESETS:
        theme_key = "default"
    preset = BLOCK_THEME_PRESETS[theme_key] or {}
    return BlockStyle(
        theme_key=theme_key,
        font_family=BLOCK_FONT_STACKS.get(text(source.get("blockFontFamily")).strip(), ""),
        text_color=sanitize_css_color(source.get("blockTextColor")) or preset.get("textColor", ""),
        container_bg=sanitize_css_color(source.get("blockContainerBg") or source.get("containerBg"))
        or preset.get("containerBg", ""),
        border_color=preset.get("borderColor", ""),
        accent_color=preset.get("accentColor", ""),
    )


def heading_label(activity: Dict[str, Any], index: int) -> str:
    data = as_dict(activity.get("data"))
    definition = get_definition(activity.get("type"))
    return strip_html(data.get("title") or data.get("text") or (definition.label if definition else "") or f"Activity {index + 1}")


# ---------------------------------------------------------------------------
# Card openers shared by card_list and the toolkit dashboard
# ---------------------------------------------------------------------------


def render_card_opener(open_mode: str, panel_id: str, title: str, content: str, compact: bool = True) -> str:
    """Button plus hidden panel (expand/modal) or anchor plus section (navigate)."""
    size = "px-3 py-1.5" if compact else "px-3 py-2"
    button = f"{size} rounded bg-slate-800 hover:bg-slate-700 text-white text-[11px] font-bold uppercase tracking-wide"
    if open_mode == "expand":
        return (
            f'<button type="button" data-expand-toggle="{panel_id}" class="{button}">Open</button>'
            f'<div data-expand-panel="{panel_id}" class="hidden mt-3">{content}</div>'
        )
    if open_mode == "modal":
        return (
            f'<button type="button" data-toolkit-open-modal="{panel_id}" class="{button}">Open Modal</button>'
            '<div class="hidden fixed inset-0 z-50 flex items-center justify-center bg-black/70 p-4" '
            f'data-toolkit-modal-id="{panel_id}" data-toolkit-modal-backdrop>'
            '<div class="w-full max-w-3xl rounded-xl border border-slate-700 bg-slate-950 p-4 max-h-[85vh] custom-scroll">'
            '<div class="flex items-center justify-between mb-3">'
            f'<h4 class="text-sm font-bold text-white">{escape_html(title)}</h4>'
            '<button type="button" data-toolkit-close-modal class="px-2 py-1 rounded bg-slate-800 hover:bg-slate-700 '
            'text-xs font-bold text-white">Close</button>'
            f"</div>{content}</div></div>"
        )
    label = "Open Page" if open_mode == "navigate_page" else "Go to Section"
    return (
        f'<a href="#{panel_id}" class="inline-block {button}">{label}</a>'
        f'<section id="{panel_id}" class="mt-3">{content}</section>'
    )


# ---------------------------------------------------------------------------
# finlit
# ---------------------------------------------------------------------------


def _render_finlit_links(links: List[FinlitLink]) -> str:
    parts = []
    for idx, link in enumerate(links):
        title = link.title.strip() or f"Resource {idx + 1}"
        description = link.description.strip()
        href = to_safe_href(link.url)
        if href:
            target = "" if href.startswith("#") else ' target="_blank" rel="noopener noreferrer"'
            heading = (
                f'<a href="{escape_html(href)}"{target} class="text-sm font-bold text-sky-300 hover:text-sky-200 underline">'
                f"{escape_html(title)}</a>"
            )
        else:
            heading = f'<p class="text-sm font-bold text-slate-200">{escape_html(title)}</p>'
        note = f'<p class="mt-1 text-xs text-slate-400 leading-relaxed">{escape_html(description)}</p>' if description else ""
        parts.append(f'<article class="rounded-lg border border-slate-700 bg-slate-950/60 p-3">{heading}{note}</article>')
    return "\n".join(parts)


def _legacy_tab_html(compiler: "ModuleCompiler") -> List[tuple]:
    """``(tab id, html)`` for each tab of the module's first tab_group."""
    group = next((item for item in compiler.activities if item["type"] == ActivityKind.TAB_GROUP.value), None)
    if group is None:
        return []
    group_id = text(group.get("id"))
    result = []
    for raw in as_list(group["data"].get("tabs")):
        tab = as_dict(raw)
        refs = compiler.lookup_all(tab.get("activityIds"))
        inline = compiler.inline_activities(tab.get("activities"), f"{group_id or 'tab-group'}-{tab.get('id') or 'tab'}")
        result.append((text(tab.get("id")).strip().lower(), compiler.render_children(refs + inline, (group_id,), empty="")))
    return result


def _match_legacy_tab(legacy: List[tuple], tab_id: str) -> str:
    target = tab_id.strip().lower()
    if not target:
        return ""
    rules = [lambda key: key == target]
    if target == "activities":
        rules.append(lambda key: "activit" in key)
    if target == "additional":
        rules.append(lambda key: "additional" in key)
    rules.append(lambda key: bool(key) and key in target)
    for rule in rules:
        for key, html in legacy:
            if rule(key):
                return html
    return ""


def _render_hero_media(url: str, kind: str, title: str) -> str:
    if not url:
        return ""
    safe_url = escape_html(url)
    frame = "mt-4 rounded-lg overflow-hidden border border-slate-700 bg-black"
    if kind == "video":
        return f'<div class="{frame}"><video src="{safe_url}" class="w-full h-auto" controls preload="metadata"></video></div>'
    if kind == "embed":
        return (
            f'<div class="{frame} aspect-video"><iframe src="{safe_url}" title="{escape_html(title)}" class="w-full h-full" '
            'frameborder="0" allow="accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; '
            'picture-in-picture; web-share" allowfullscreen loading="lazy"></iframe></div>'
        )
    return f'<div class="{frame}"><img src="{safe_url}" alt="{escape_html(title)}" class="w-full h-auto" loading="lazy" /></div>'


def render_finlit(compiler: "ModuleCompiler") -> str:
    module = compiler.module
    settings = create_finlit_settings(module.get("finlit"))
    requested = text(module.get("finlitActiveTabId") or module.get("__finlitActiveTabId")).strip()
    legacy = _legacy_tab_html(compiler)

    referenced = {ref for tab in settings.tabs for ref in tab.activity_ids}
    unlinked = [
        activity
        for activity in compiler.activities
        if activity["type"] != ActivityKind.TAB_GROUP.value and activity["id"] not in referenced
    ]
    unlinked_html = compiler.render_layout(unlinked) if unlinked else ""

    rendered = []
    for index, tab in enumerate(settings.tabs):
        tab_id = tab.id.strip() or f"tab-{index + 1}"
        label = tab.label.strip() or f"Tab {index + 1}"
        parts = []
        if tab.activities is not None:
            local = normalize_activities(tab.activities, compiler.layout["maxColumns"], compiler.layout["mode"])
            if local:
                parts.append(compiler.render_layout(local))
        else:
            linked = compiler.lookup_all(tab.activity_ids)
            if linked:
                parts.append(compiler.render_layout(linked))
            if tab_id == "activities" and unlinked_html:
                parts.append(unlinked_html)
        legacy_html = _match_legacy_tab(legacy, tab_id)
        if legacy_html:
            parts.append(legacy_html)
        links_html = _render_finlit_links(tab.links)
        if links_html:
            parts.append(f'<div class="space-y-2">{links_html}</div>')
        panel = "\n".join(parts) or f'<p class="text-slate-400 text-sm">No {escape_html(label.lower() or "tab")} content.</p>'
        rendered.append((tab_id, label, panel))

    if not rendered:
        rendered.append(
            ("activities", settings.activities_tab_label, unlinked_html or '<p class="text-slate-400 text-sm">No activities yet.</p>')
        )
    tab_ids = [tab_id for tab_id, _, _ in rendered]
    active = requested if requested in tab_ids else tab_ids[0]

    hero = create_hero(module.get("hero"))
    title = hero.title or text(module.get("title")) or "Module"
    subtitle = f'<p class="mt-2 text-sm text-slate-300">{escape_html(hero.subtitle)}</p>' if hero.subtitle.strip() else ""
    progress = (
        f'<p class="mt-3 text-[11px] font-bold uppercase tracking-wide text-slate-400">{escape_html(hero.progress_label)}</p>'
        if hero.progress_label.strip()
        else ""
    )
    triggers = "\n".join(
        f'<button type="button" data-finlit-tab-trigger="{escape_html(tab_id)}" class="px-2 py-1 text-sm font-bold '
        f'{"text-slate-200 cf-finlit-tab-active" if tab_id == active else "text-slate-400"}">{escape_html(label)}</button>'
        for tab_id, label, _ in rendered
    )
    panels = "\n".join(
        f'<div data-finlit-tab-panel="{escape_html(tab_id)}" class="{"" if tab_id == active else "hidden"}">{panel}</div>'
        for tab_id, _, panel in rendered
    )
    return (
        '<section class="space-y-6 rounded-xl border border-slate-700 p-5 cf-template-surface" data-finlit-root>'
        '<header class="rounded-xl border border-slate-700 bg-slate-950/40 p-5">'
        f'<h2 class="text-2xl font-black text-white">{escape_html(title)}</h2>{subtitle}{progress}'
        f"{_render_hero_media(hero.safe_media_url, hero.media_kind, title)}</header>"
        f'<div class="flex flex-wrap gap-3 border-b border-slate-700 pb-2">{triggers}</div>'
        f"{panels}</section>"
    )


# ---------------------------------------------------------------------------
# coursebook
# ---------------------------------------------------------------------------


def render_coursebook(compiler: "ModuleCompiler") -> str:
    sections = []
    seen = set()
    toc = []
    for idx, activity in enumerate(compiler.activities):
        anchor = f"cb-{slugify(activity.get('id') or f'section-{idx + 1}', f'section-{idx + 1}')}"
        html = compiler.render_activity(activity, idx, with_layout=False)
        data = activity["data"]
        if activity["type"] == ActivityKind.TITLE_BLOCK.value:
            title = strip_html(data.get("textHtml") or data.get("text") or "")
        else:
            title = strip_html(data.get("title") or "")
        entries = ([{"level": 2, "text": title, "anchor": anchor}] if title else []) + parse_heading_entries(html, anchor)
        for entry in entries:
            key = f"{entry['anchor']}:{entry['text'].lower()}"
            if key in seen:
                continue
            seen.add(key)
            toc.append(entry)
        sections.append(f'<section id="{anchor}">{html}</section>')

    if toc:
        links = "\n".join(
            f'<a href="#{entry["anchor"]}" class="block text-sm text-slate-200 hover:text-white" '
            f'style="padding-left:{_toc_indent(entry["level"])}rem;">{escape_html(entry["text"])}</a>'
            for entry in toc
        )
    else:
        links = '<p class="text-sm text-slate-400">No headings found.</p>'
    return (
        '<section class="grid gap-6 lg:grid-cols-[260px_minmax(0,1fr)]">'
        '<aside class="rounded-xl border border-slate-700 bg-slate-900/70 p-4 h-max sticky top-4 cf-template-surface">'
        '<h3 class="text-xs font-bold uppercase tracking-wide text-slate-400 mb-3">Contents</h3>'
        f'<nav class="space-y-2">{links}</nav></aside>'
        '<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-6 cf-template-surface cf-prose">'
        f'<div class="space-y-6">{"".join(sections)}</div></article></section>'
    )


def _toc_indent(level: int) -> str:
    indent = max(0, level - 2) * 0.75
    return f"{indent:g}"


# ---------------------------------------------------------------------------
# toolkit_dashboard
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ToolCard:
    id: str
    title: str
    subtitle: str
    category: str
    open_mode: str
    linked: List[Dict[str, Any]]


def collect_tool_cards(compiler: "ModuleCompiler") -> List[ToolCard]:
    card_lists = [item for item in compiler.activities if item["type"] == ActivityKind.CARD_LIST.value]
    cards: List[ToolCard] = []
    for list_idx, activity in enumerate(card_lists, start=1):
        for card_idx, raw in enumerate(as_list(activity["data"].get("cards")), start=1):
            card = as_dict(raw)
            cards.append(
                ToolCard(
                    id=f"tool-card-{list_idx}-{card_idx}",
                    title=text(card.get("title") or f"Tool {card_idx}"),
                    subtitle=text(card.get("subtitle")),
                    category=text(card.get("category") or "General"),
                    open_mode=normalize_open_mode(card.get("openMode")),
                    linked=compiler.card_children(card, f"tool-inline-{list_idx}-{card_idx}"),
                )
            )
    if card_lists:
        return cards
    for idx, activity in enumerate(compiler.activities, start=1):
        definition = get_definition(activity["type"])
        data = activity["data"]
        cards.append(
            ToolCard(
                id=f"tool-card-auto-{idx}",
                title=strip_html(data.get("title") or data.get("text") or (definition.label if definition else "") or f"Tool {idx}"),
                subtitle="",
                category=definition.label if definition else "General",
                open_mode="expand",
                linked=[activity],
            )
        )
    return cards


def render_toolkit(compiler: "ModuleCompiler") -> str:
    parts = []
    categories: Dict[str, str] = {}
    for card in collect_tool_cards(compiler):
        panel_id = f"{card.id}-panel"
        category = slugify(card.category, "general")
        categories.setdefault(category, card.category)
        content = compiler.render_children(card.linked, (card.id,), empty="No linked activity.")
        search = f"{card.title} {card.subtitle} {card.category}".strip().lower()
        subtitle = f'<p class="mt-1 text-xs text-slate-400">{escape_html(card.subtitle)}</p>' if card.subtitle else ""
        parts.append(
            '<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-4 cf-toolkit-card cf-template-surface" '
            f'data-toolkit-card data-toolkit-category="{category}" '
            f'data-toolkit-search="{escape_html(search)}">'
            f'<h4 class="text-sm font-bold text-white">{escape_html(card.title)}</h4>{subtitle}'
            f'<div class="mt-3">{render_card_opener(card.open_mode, panel_id, card.title, content, compact=False)}</div>'
            "</article>"
        )
    grid = "\n".join(parts) or '<p class="text-slate-400 text-sm">No tools configured.</p>'
    filters = "".join(
        f'<button type="button" data-toolkit-category-filter="{slug}" class="px-3 py-2 rounded text-slate-300 '
        f'text-xs font-bold">{escape_html(label)}</button>'
        for slug, label in categories.items()
    )
    return (
        '<section class="space-y-4" data-toolkit-dashboard>'
        '<div class="flex flex-wrap gap-2">'
        '<input type="search" data-toolkit-query class="flex-1 min-w-56 rounded border border-slate-700 bg-slate-950/70 '
        'px-3 py-2 text-sm text-white" placeholder="Search tools..." />'
        '<button type="button" data-toolkit-category-filter="all" class="px-3 py-2 rounded bg-slate-700 text-white '
        f'text-xs font-bold">All</button>{filters}</div>'
        f'<div class="grid gap-4 md:grid-cols-2 xl:grid-cols-3">{grid}</div></section>'
    )


def render_template(compiler: "ModuleCompiler") -> str:
    if compiler.template == "finlit":
        return render_finlit(compiler)
    if compiler.template == "coursebook":
        return render_coursebook(compiler)
    if compiler.template == "toolkit_dashboard":
        return render_toolkit(compiler)
    return compiler.render_layout(compiler.activities)


__all__ = [
    "BLOCK_FONT_STACKS",
    "BLOCK_THEME_PRESETS",
    "BlockStyle",
    "TEMPLATE_OPTIONS",
    "THEME_OPTIONS",
    "ToolCard",
    "build_style_block",
    "collect_tool_cards",
    "heading_label",
    "render_card_opener",
    "render_coursebook",
    "render_finlit",
    "render_template",
    "render_toolkit",
    "resolve_block_style",
    "resolve_template",
    "resolve_theme",
    "theme_css",
]
