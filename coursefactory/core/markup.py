"""HTML string helpers shared by the activity renderers and templates."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List
from urllib.parse import quote, unquote

from .values import text

_SCRIPT_BLOCK = re.compile(r"<script[\s\S]*?>[\s\S]*?</script>", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"""\son[a-z]+\s*=\s*(['"]).*?\1""", re.IGNORECASE)
_JAVASCRIPT_HREF = re.compile(r"""\shref\s*=\s*(['"])\s*javascript:.*?\1""", re.IGNORECASE)
_HEX_COLOR = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)
_TAG = re.compile(r"<[^>]*>")
_HEADING = re.compile(r"<h([1-4])[^>]*>(.*?)</h\1>", re.IGNORECASE | re.DOTALL)
_HTTP = re.compile(r"^https?://", re.IGNORECASE)
_MATERIALS = re.compile(r"^materials/", re.IGNORECASE)
_SAFE_HREF = re.compile(r"^(https?://|mailto:|tel:)", re.IGNORECASE)

RICH_WEB_FONT_IMPORT_CSS = (
    "@import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;700;900"
    "&family=Roboto:wght@400;700;900&family=Open+Sans:wght@400;700;800"
    "&family=Lato:wght@400;700;900&family=Montserrat:wght@400;700;900"
    "&family=Poppins:wght@400;700;900&family=Raleway:wght@400;700;900"
    "&family=Nunito:wght@400;700;900&family=Playfair+Display:wght@400;700;900"
    "&family=Merriweather:wght@400;700;900&family=Oswald:wght@400;700"
    "&family=Bebas+Neue&display=swap');"
)


def escape_html(value: Any) -> str:
    return (
        text(value)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def to_safe_url(url: Any) -> str:
    """Accept absolute http(s) and root-relative URLs; prefix ``materials/`` paths."""
    raw = text(url).strip()
    if not raw:
        return ""
    if _HTTP.match(raw) or raw.startswith("/"):
        return raw
    if _MATERIALS.match(raw):
        return f"/{raw}"
    return ""


def to_safe_href(url: Any) -> str:
    """Like :func:`to_safe_url` but also allows mailto/tel, anchors and relative paths."""
    raw = text(url).strip()
    if not raw:
        return ""
    if _SAFE_HREF.match(raw):
        return raw
    if raw.startswith(("/", "./", "../", "#")):
        return raw
    if _MATERIALS.match(raw):
        return f"/{raw}"
    return ""


def render_simple_body(body: Any) -> str:
    return escape_html(body or "").replace("\n", "<br>")


def sanitize_rich_html(raw_html: Any) -> str:
    """Strip scripts, inline event handlers and ``javascript:`` links from authored HTML."""
    source = text(raw_html)
    if not source.strip():
        return ""
    cleaned = _SCRIPT_BLOCK.sub("", source)
    cleaned = _EVENT_HANDLER.sub("", cleaned)
    return _JAVASCRIPT_HREF.sub(' href="#"', cleaned)


def sanitize_css_color(value: Any) -> str:
    raw = text(value).strip()
    if not raw:
        return ""
    return raw if _HEX_COLOR.match(raw) else ""


def strip_html(value: Any) -> str:
    stripped = _TAG.sub(" ", text(value))
    for entity, char in (("&nbsp;", " "), ("&amp;", "&"), ("&lt;", "<"), ("&gt;", ">"), ("&#39;", "'"), ("&quot;", '"')):
        stripped = stripped.replace(entity, char)
    return re.sub(r"\s+", " ", stripped).strip()


def slugify(value: Any, fallback: str = "item") -> str:
    raw = _TAG.sub("", text(value).strip().lower())
    slug = re.sub(r"[^a-z0-9]+", "-", raw).strip("-")
    return slug or fallback


def parse_heading_entries(html: str, fallback_anchor: str = "") -> List[Dict[str, Any]]:
    """Collect ``h1``-``h4`` headings from rendered HTML for a table of contents."""
    entries: List[Dict[str, Any]] = []
    for index, match in enumerate(_HEADING.finditer(html or "")):
        heading = strip_html(match.group(2))
        if not heading:
            continue
        entries.append(
            {
                "level": int(match.group(1)),
                "text": heading,
                "anchor": fallback_anchor or f"section-{index + 1}",
            }
        )
    return entries


def escape_inline_script(value: Any) -> str:
    return re.sub(r"</script", r"<\\/script", text(value), flags=re.IGNORECASE)


def encode_data_attr_json(value: Any) -> str:
    """URI-encode a JSON payload so it can live inside a ``data-*`` attribute."""
    try:
        payload = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return ""
    return quote(payload, safe="-_.!~*'()")


def decode_data_attr_json(raw: str) -> Any:
    if not raw:
        return None
    try:
        return json.loads(unquote(raw))
    except ValueError:
        return None


__all__ = [
    "RICH_WEB_FONT_IMPORT_CSS",
    "decode_data_attr_json",
    "encode_data_attr_json",
    "escape_html",
    "escape_inline_script",
    "parse_heading_entries",
    "render_simple_body",
    "sanitize_css_color",
    "sanitize_rich_html",
    "slugify",
    "strip_html",
    "to_safe_href",
    "to_safe_url",
]
