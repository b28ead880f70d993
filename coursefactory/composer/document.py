"""Wrap a compiled module into a standalone HTML page."""

from __future__ import annotations

from typing import Any

from ..core.markup import escape_html, escape_inline_script, sanitize_css_color
from .compiler import CompiledModule

TAILWIND_CDN = "https://cdn.tailwindcss.com"
DEFAULT_BACKGROUND = "#020617"

_PAGE_CSS = """
    * { margin: 0; padding: 0; box-sizing: border-box; }
    html, body { background: {background} !important; color: #e2e8f0; font-family: 'Inter', sans-serif; }
    body { min-height: 100vh; padding: 24px; }
    .custom-scroll::-webkit-scrollbar { width: 6px; }
    .custom-scroll::-webkit-scrollbar-track { background: #1e293b; }
    .custom-scroll::-webkit-scrollbar-thumb { background: #475569; border-radius: 3px; }
"""


def render_document(
    compiled: CompiledModule,
    title: Any = "Module",
    course_name: Any = "Course",
    background: Any = DEFAULT_BACKGROUND,
) -> str:
    page_title = f"{escape_html(title or 'Module')} | {escape_html(course_name or 'Course')}"
    bg = sanitize_css_color(background) or DEFAULT_BACKGROUND
    css = _PAGE_CSS.replace("{background}", bg).rstrip()
    if compiled.css:
        css = f"{css}\n    {compiled.css}"
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '  <meta charset="UTF-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"  <title>{page_title}</title>\n"
        f'  <script src="{TAILWIND_CDN}"></script>\n'
        f"  <style>{css}\n  </style>\n"
        "</head>\n"
        "<body>\n"
        f"{compiled.html}\n"
        f"<script>\n{escape_inline_script(compiled.script)}\n</script>\n"
        "</body>\n"
        "</html>\n"
    )


__all__ = ["DEFAULT_BACKGROUND", "TAILWIND_CDN", "render_document"]
