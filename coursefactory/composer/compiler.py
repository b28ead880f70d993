"""
Compile a module document into one static interactive HTML artifact.

The compiler resolves the composer layout, renders every activity through the
registry, expands ``tab_group``/``card_list`` containers recursively and wraps
the result in the selected template. It never raises on malformed input:
unknown kinds, dangling references and reference cycles all render visible
fallback panels instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..core.config import CourseSettings, ModuleConfig
from ..core.layout import normalize_activities, normalize_behavior, normalize_module_layout, normalize_style
from ..core.markup import escape_html, slugify
from ..core.values import as_dict, as_list, text
from ..runtime.scripts import build_runtime_script
from .kinds.productivity import normalize_open_mode
from .registry import ActivityKind, get_definition
from .templates import (
    build_style_block,
    heading_label,
    render_card_opener,
    render_template,
    resolve_block_style,
    resolve_template,
    resolve_theme,
)

LOGGER = logging.getLogger(__name__)

Activity = Dict[str, Any]
Trail = Tuple[str, ...]


@dataclass(slots=True)
class CompiledModule:
    html: str
    css: str
    script: str

    def as_dict(self) -> Dict[str, str]:
        return {"html": self.html, "css": self.css, "script": self.script}


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


class ModuleCompiler:
    """Holds the per-compile lookup tables; one instance per ``compile_module`` call."""

    def __init__(self, module: Any, course_settings: Any = None) -> None:
        if isinstance(module, ModuleConfig):
            module = module.to_payload()
        if isinstance(course_settings, CourseSettings):
            course_settings = course_settings.to_payload()
        self.module: Dict[str, Any] = as_dict(module)
        settings = as_dict(course_settings)
        self.layout, self.activities = normalize_module_layout(self.module)
        self.activity_map: Dict[str, Activity] = {}
        for activity in self.activities:
            key = text(activity.get("id")).strip()
            if key:
                self.activity_map[key] = activity
        self.template = resolve_template(self.module.get("template"), resolve_template(settings.get("templateDefault"), "deck"))
        self.theme = resolve_theme(self.module.get("theme"), resolve_theme(settings.get("themeDefault"), "dark_cards"))

    # -- lookups -------------------------------------------------------------

    def lookup(self, ref: Any) -> Optional[Activity]:
        return self.activity_map.get(text(ref).strip())

    def lookup_all(self, refs: Any) -> List[Activity]:
        """Resolve a list of ids, dropping dangling references."""
        found = []
        for ref in as_list(refs):
            activity = self.lookup(ref)
            if activity is None:
                LOGGER.debug("Dangling activity reference %r", ref)
                continue
            found.append(activity)
        return found

    def inline_activities(self, items: Any, prefix: str = "inline") -> List[Activity]:
        """Normalize inline children; missing ids become ``{prefix}-{n}``."""
        prepared = []
        for idx, raw in enumerate(as_list(items)):
            item = as_dict(raw)
            prepared.append(
                {
                    "id": item.get("id") or f"{prefix}-{idx + 1}",
                    "type": item.get("type") or ActivityKind.CONTENT_BLOCK.value,
                    "data": item.get("data") or {},
                    "layout": item.get("layout") or {"colSpan": 1},
                    "style": item.get("style") or {},
                    "behavior": item.get("behavior") or {},
                }
            )
        return normalize_activities(prepared, self.layout["maxColumns"], self.layout["mode"])

    def card_children(self, card: Dict[str, Any], prefix: str) -> List[Activity]:
        """A card's target activity followed by its inline children."""
        inline_source = ([card["activity"]] if isinstance(card.get("activity"), dict) else []) + as_list(card.get("activities"))
        inline = self.inline_activities(inline_source, prefix)
        target = self.lookup(card.get("targetActivityId"))
        return [target] + inline if target is not None else inline

    # -- rendering -----------------------------------------------------------

    def render_children(self, items: Sequence[Activity], trail: Trail, empty: str = "No linked activities.") -> str:
        if not items:
            return f'<p class="text-sm text-slate-400">{empty}</p>' if empty else ""
        return "\n".join(self.render_activity(item, idx, with_layout=False, trail=trail) for idx, item in enumerate(items))

    def _render_tab_group(self, data: Dict[str, Any], activity_id: str, trail: Trail) -> str:
        tabs = as_list(data.get("tabs"))
        nested_trail = trail + (activity_id,)
        parts = []
        for tab_idx, raw in enumerate(tabs):
            tab = as_dict(raw)
            content = self.lookup_all(tab.get("activityIds")) + self.inline_activities(
                tab.get("activities"), f"{activity_id}-tab-{tab_idx + 1}"
            )
            label = tab.get("label") or tab.get("id") or f"Tab {tab_idx + 1}"
            parts.append(
                f'<details class="rounded-lg border border-slate-700 bg-slate-950/60 p-3"{" open" if tab_idx == 0 else ""}>'
                f'<summary class="cursor-pointer text-sm font-bold text-slate-200">{escape_html(label)}</summary>'
                f'<div class="mt-3 space-y-3">{self.render_children(content, nested_trail)}</div></details>'
            )
        title = text(data.get("title")).strip()
        heading = f'<h3 class="text-lg font-bold text-white mb-3">{escape_html(title)}</h3>' if title else ""
        body = "\n".join(parts) or '<p class="text-sm text-slate-400">No tabs configured.</p>'
        return (
            '<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-4 cf-template-surface">'
            f'{heading}<div class="space-y-2">{body}</div></article>'
        )

    def _render_card_list(self, data: Dict[str, Any], activity_id: str, trail: Trail) -> str:
        nested_trail = trail + (activity_id,)
        rows = []
        for card_idx, raw in enumerate(as_list(data.get("cards"))):
            card = as_dict(raw)
            linked = self.card_children(card, f"{activity_id}-card-{card_idx + 1}")
            panel_id = f"{slugify(activity_id, 'card-list')}-panel-{card_idx + 1}"
            content = self.render_children(linked, nested_trail, empty="No linked activity.")
            title = text(card.get("title") or f"Card {card_idx + 1}")
            subtitle = text(card.get("subtitle")).strip()
            subtitle_html = f'<p class="mt-1 text-xs text-slate-400">{escape_html(subtitle)}</p>' if subtitle else ""
            rows.append(
                '<article class="rounded-lg border border-slate-700 bg-slate-950/60 p-3">'
                f'<h4 class="text-sm font-bold text-white">{escape_html(title)}</h4>'
                f"{subtitle_html}"
                f'<div class="mt-2">{render_card_opener(normalize_open_mode(card.get("openMode")), panel_id, title, content)}</div>'
                "</article>"
            )
        heading = text(data.get("title")).strip()
        heading_html = f'<h3 class="text-lg font-bold text-white mb-3">{escape_html(heading)}</h3>' if heading else ""
        grid = "\n".join(rows) or '<p class="text-sm text-slate-400">No cards configured.</p>'
        return (
            '<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-4 cf-template-surface" data-toolkit-dashboard>'
            f'{heading_html}<div class="grid gap-3 md:grid-cols-2">{grid}</div></article>'
        )

    def _render_body(self, activity: Activity, index: int, activity_id: str, trail: Trail) -> str:
        kind = activity.get("type")
        data = as_dict(activity.get("data"))
        if kind == ActivityKind.TAB_GROUP.value:
            return self._render_tab_group(data, activity_id, trail)
        if kind == ActivityKind.CARD_LIST.value:
            return self._render_card_list(data, activity_id, trail)
        definition = get_definition(kind)
        if definition is None:
            LOGGER.warning("Unknown activity type %r for activity %r", kind, activity_id)
            return (
                '<article class="rounded-xl border border-rose-500/30 bg-rose-950/20 p-5">'
                f'<p class="text-rose-300 text-sm font-semibold">Unknown activity type: {escape_html(kind)}</p></article>'
            )
        return definition.compile(data, index, text(activity.get("id")))

    def _grid_placement(self, layout: Dict[str, Any], with_layout: bool) -> Tuple[Dict[str, Any], str]:
        col_span = layout.get("colSpan") or 1
        row = _as_int(layout.get("row"))
        col = _as_int(layout.get("col"))
        x = _as_int(layout.get("x"))
        y = _as_int(layout.get("y"))
        w = _as_int(layout.get("w"))
        h = _as_int(layout.get("h"))
        placement = {
            "colSpan": col_span,
            "row": row,
            "col": col,
            "x": x if x is not None else max(0, (col or 1) - 1),
            "y": y if y is not None else max(0, (row or 1) - 1),
            "w": w if w is not None else col_span,
            "h": h if h is not None else 4,
        }
        if not with_layout:
            return placement, ""
        if self.layout["mode"] == "canvas":
            css = (
                f"grid-column: {placement['x'] + 1} / span {placement['w']}; "
                f"grid-row: {placement['y'] + 1} / span {placement['h']};"
            )
        elif col:
            css = f"grid-column: {col} / span {col_span};"
        else:
            css = f"grid-column: span {col_span} / span {col_span};"
        if self.layout["mode"] != "canvas" and row:
            css += f" grid-row: {row};"
        return placement, css

    def render_activity(self, activity: Activity, index: int, with_layout: bool = True, trail: Iterable[str] = ()) -> str:
        """Render one activity wrapped in its ``<section>`` placement shell."""
        trail = tuple(trail)
        activity_id = text(activity.get("id") or f"activity-{index + 1}")
        if activity_id in trail:
            LOGGER.warning("Cycle detected for activity %r (trail: %s)", activity_id, " > ".join(trail))
            return (
                '<section class="rounded-xl border border-rose-500/40 bg-rose-950/20 p-4">'
                f'<p class="text-rose-300 text-sm">Cycle detected for activity "{escape_html(activity_id)}".</p></section>'
            )

        body = self._render_body(activity, index, activity_id, trail)
        placement, grid_css = self._grid_placement(as_dict(activity.get("layout")), with_layout)
        block_style = resolve_block_style(activity.get("data"))
        style = normalize_style(activity.get("style"))
        behavior = normalize_behavior(activity.get("behavior"))

        classes = ["cf-composer-activity", f"cf-pad-{style['padding']}", f"cf-title-{style['titleVariant']}"]
        if with_layout and self.layout["mode"] == "canvas":
            classes.append("cf-canvas-item")
        if not style["border"]:
            classes.append("cf-no-border")
        if style["variant"] == "flat":
            classes.append("cf-variant-flat")
        style_parts = [grid_css]
        for css_class, declaration in block_style.css_overrides():
            classes.append(css_class)
            style_parts.append(declaration)

        if behavior["collapsible"]:
            body = (
                '<details class="rounded-xl border border-slate-700/60 bg-slate-950/20"'
                f'{"" if behavior["collapsedByDefault"] else " open"}>'
                '<summary class="cursor-pointer select-none px-3 py-2 text-xs font-bold uppercase tracking-wide text-slate-300">'
                f'{escape_html(heading_label(activity, index))}</summary><div class="p-1">{body}</div></details>'
            )

        attrs = [
            f'id="cf-activity-{slugify(activity_id, f"activity-{index + 1}")}"',
            f'data-activity-type="{escape_html(activity.get("type"))}"',
            f'data-activity-id="{escape_html(activity.get("id"))}"',
            f'data-block-theme="{escape_html(block_style.theme_key)}"',
            f'data-composer-col-span="{placement["colSpan"]}"',
            f'data-composer-row="{placement["row"] or ""}"',
            f'data-composer-col="{placement["col"] or ""}"',
            f'data-composer-x="{placement["x"]}"',
            f'data-composer-y="{placement["y"]}"',
            f'data-composer-w="{placement["w"]}"',
            f'data-composer-h="{placement["h"]}"',
            f'style="{" ".join(part for part in style_parts if part)}"',
            f'class="{" ".join(classes)}"',
        ]
        return f"<section {' '.join(attrs)}>{body}</section>"

    def render_layout(self, activities: Sequence[Activity]) -> str:
        """Render ``activities`` into a composer grid root."""
        if activities:
            sections = "\n".join(self.render_activity(activity, idx) for idx, activity in enumerate(activities))
        else:
            sections = '<p class="text-slate-400" style="grid-column: 1 / -1;">No composer activities added yet.</p>'
        columns = self.layout["maxColumns"]
        if self.layout["mode"] == "canvas":
            margin = self.layout["margin"]
            padding = self.layout["containerPadding"]
            style = (
                f"grid-template-columns: repeat({columns}, minmax(0, 1fr)); grid-auto-rows: {self.layout['rowHeight']}px; "
                f"gap: {margin[1]}px {margin[0]}px; padding: {padding[1]}px {padding[0]}px;"
            )
            return (
                f'<div class="grid" data-composer-root data-composer-columns="{columns}" '
                f'data-composer-layout-mode="canvas" style="{style}">{sections}</div>'
            )
        match_tallest = "true" if self.layout["simpleMatchTallestRow"] else "false"
        return (
            f'<div class="grid gap-6" data-composer-root data-composer-columns="{columns}" data-composer-layout-mode="simple" '
            f'data-composer-simple-match-tallest-row="{match_tallest}" '
            f'style="grid-template-columns: repeat({columns}, minmax(0, 1fr)); grid-auto-flow: row;">{sections}</div>'
        )

    def compile(self) -> CompiledModule:
        LOGGER.debug(
            "Compiling module %r: %d activities, template=%s theme=%s mode=%s",
            self.module.get("id") or self.module.get("title"),
            len(self.activities),
            self.template,
            self.theme,
            self.layout["mode"],
        )
        html = (
            f"{build_style_block(self.theme)}\n"
            f'<div class="space-y-6 cf-theme-{self.theme}" data-template="{escape_html(self.template)}" '
            f'data-theme="{escape_html(self.theme)}">{render_template(self)}</div>'
        )
        return CompiledModule(html=html, css="", script=build_runtime_script())


def compile_module(module: Any, course_settings: Any = None) -> CompiledModule:
    """Compile ``module`` (a mapping or :class:`ModuleConfig`) into ``{html, css, script}``."""
    return ModuleCompiler(module, course_settings).compile()


__all__ = ["CompiledModule", "ModuleCompiler", "compile_module"]
