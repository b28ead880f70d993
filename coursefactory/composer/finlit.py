"""Hero and tab settings for the ``finlit`` module template.

The template reads two loosely-shaped maps from the module: ``hero`` (title,
subtitle, progress label and one media URL) and ``finlit`` (tab definitions,
or the older ``activitiesTabLabel``/``additionalLinks`` keys). Both are
normalized here into small dataclasses before rendering.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.values import as_dict, as_list, text

HERO_MEDIA_TYPES = ("auto", "image", "video", "embed")
DEFAULT_ACTIVITIES_TAB_LABEL = "Activities"
DEFAULT_ADDITIONAL_TAB_LABEL = "Additional Learning"
CORE_TAB_IDS = ("activities",)

_ID_TOKEN = re.compile(r"[^a-z0-9_-]+")
_VIDEO_URL = re.compile(r"\.(mp4|webm|ogg|ogv|m4v|mov|m3u8)([?#].*)?$", re.IGNORECASE)
_EMBED_HOST = re.compile(r"(youtube\.com|youtu\.be|vimeo\.com|loom\.com|wistia\.)", re.IGNORECASE)
_EMBED_PATH = re.compile(r"/embed/|/player/", re.IGNORECASE)
_HERO_MEDIA_URL = re.compile(r"^((https?:)?//|/|\./|\.\./|data:image/|data:video/|blob:|materials/)", re.IGNORECASE)


def normalize_id_token(value: Any, fallback: str = "tab") -> str:
    raw = _ID_TOKEN.sub("-", text(value).strip().lower()).strip("-")
    return raw or fallback


@dataclass(slots=True)
class FinlitHero:
    title: str = ""
    subtitle: str = ""
    progress_label: str = ""
    media_url: str = ""
    media_type: str = "auto"

    @property
    def media_kind(self) -> str:
        """``none``, ``image``, ``video`` or ``embed``; an explicit media type wins over detection."""
        url = self.media_url.strip()
        if not url:
            return "none"
        if self.media_type in ("image", "video", "embed"):
            return self.media_type
        lower = url.lower()
        if lower.startswith("data:video/") or _VIDEO_URL.search(lower):
            return "video"
        if _EMBED_PATH.search(lower) or _EMBED_HOST.search(lower):
            return "embed"
        return "image"

    @property
    def safe_media_url(self) -> str:
        raw = self.media_url.strip()
        if not _HERO_MEDIA_URL.match(raw):
            return ""
        return f"/{raw}" if raw.lower().startswith("materials/") else raw


def normalize_media_type(value: Any) -> str:
    raw = text(value).strip().lower()
    return raw if raw in HERO_MEDIA_TYPES else "auto"


def create_hero(source: Any) -> FinlitHero:
    hero = as_dict(source)
    media_url = hero.get("mediaUrl")
    if media_url is None:
        media_url = hero.get("image")
    return FinlitHero(
        title=text(hero.get("title")),
        subtitle=text(hero.get("subtitle")),
        progress_label=text(hero.get("progressLabel")),
        media_url=text(media_url),
        media_type=normalize_media_type(hero.get("mediaType")),
    )


def hero_for_save(source: Any) -> Optional[Dict[str, str]]:
    """Trimmed hero map with empty keys dropped, or ``None`` when nothing is set."""
    hero = create_hero(source)
    payload = {
        "title": hero.title.strip(),
        "subtitle": hero.subtitle.strip(),
        "progressLabel": hero.progress_label.strip(),
        "mediaUrl": hero.media_url.strip(),
    }
    result = {key: value for key, value in payload.items() if value}
    if hero.media_type != "auto":
        result["mediaType"] = hero.media_type
    return result or None


@dataclass(slots=True)
class FinlitLink:
    title: str = ""
    url: str = ""
    description: str = ""


@dataclass(slots=True)
class FinlitTab:
    id: str
    label: str
    activity_ids: List[str] = field(default_factory=list)
    links: List[FinlitLink] = field(default_factory=list)
    # ``None`` when the tab has no ``activities`` key at all; an empty list is
    # still an explicit override of the linked activity ids.
    activities: Optional[List[Dict[str, Any]]] = None


@dataclass(slots=True)
class FinlitSettings:
    activities_tab_label: str
    additional_tab_label: str
    additional_links: List[FinlitLink]
    tabs: List[FinlitTab]


def _link(source: Any) -> FinlitLink:
    link = as_dict(source)
    return FinlitLink(
        title=text(link.get("title") or link.get("label")),
        url=text(link.get("url") or link.get("href")),
        description=text(link.get("description") or link.get("subtitle")),
    )


def _tab(source: Any, index: int = 0) -> FinlitTab:
    tab = as_dict(source)
    raw_id = text(tab.get("id") or tab.get("key") or tab.get("slug") or f"tab-{index + 1}")
    if isinstance(tab.get("links"), list):
        links = tab["links"]
    else:
        links = as_list(tab.get("additionalLinks"))
    activities = None
    if "activities" in tab:
        activities = [copy.deepcopy(item) for item in as_list(tab.get("activities")) if isinstance(item, dict)]
    return FinlitTab(
        id=normalize_id_token(raw_id, f"tab-{index + 1}"),
        label=text(tab.get("label") or tab.get("title") or raw_id or f"Tab {index + 1}"),
        activity_ids=[text(item).strip() for item in as_list(tab.get("activityIds")) if text(item).strip()],
        links=[_link(item) for item in links],
        activities=activities,
    )


def _legacy_tabs(source: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [
        {
            "id": "activities",
            "label": text(source.get("activitiesTabLabel") or source.get("activitiesLabel") or DEFAULT_ACTIVITIES_TAB_LABEL),
            "activityIds": [],
            "links": [],
        },
        {
            "id": "additional",
            "label": text(source.get("additionalTabLabel") or source.get("additionalLabel") or DEFAULT_ADDITIONAL_TAB_LABEL),
            "activityIds": [],
            "links": as_list(source.get("additionalLinks")),
        },
    ]


def _dedupe(raw_tabs: List[Any]) -> List[FinlitTab]:
    seen = set()
    tabs = []
    for index, raw in enumerate(raw_tabs):
        tab = _tab(raw, index)
        candidate = tab.id
        suffix = 2
        while candidate in seen:
            candidate = f"{tab.id}-{suffix}"
            suffix += 1
        seen.add(candidate)
        tab.id = candidate
        tabs.append(tab)
    return tabs


def normalize_tabs(source: Any) -> List[FinlitTab]:
    """Deduplicated tabs with the core ``activities`` tab always present."""
    settings = as_dict(source)
    raw_tabs = settings.get("tabs") if isinstance(settings.get("tabs"), list) and settings["tabs"] else _legacy_tabs(settings)
    tabs = _dedupe(raw_tabs)
    legacy = {item["id"]: item for item in _legacy_tabs(settings)}
    for core_id in CORE_TAB_IDS:
        if not any(tab.id == core_id for tab in tabs):
            tabs.append(_tab(legacy[core_id]))
    for tab in tabs:
        fallback = DEFAULT_ADDITIONAL_TAB_LABEL if tab.id == "additional" else DEFAULT_ACTIVITIES_TAB_LABEL
        if not tab.label and tab.id in legacy:
            fallback = legacy[tab.id]["label"]
        tab.label = tab.label or fallback
        tab.activity_ids = list(dict.fromkeys(tab.activity_ids))
    return tabs


def create_finlit_settings(source: Any) -> FinlitSettings:
    tabs = normalize_tabs(source)
    activities_tab = next((tab for tab in tabs if tab.id == "activities"), None)
    additional_tab = next((tab for tab in tabs if tab.id == "additional"), None)
    return FinlitSettings(
        activities_tab_label=activities_tab.label if activities_tab else DEFAULT_ACTIVITIES_TAB_LABEL,
        additional_tab_label=additional_tab.label if additional_tab else DEFAULT_ADDITIONAL_TAB_LABEL,
        additional_links=list(additional_tab.links) if additional_tab else [],
        tabs=tabs,
    )


__all__ = [
    "CORE_TAB_IDS",
    "FinlitHero",
    "FinlitLink",
    "FinlitSettings",
    "FinlitTab",
    "create_finlit_settings",
    "create_hero",
    "hero_for_save",
    "normalize_id_token",
    "normalize_media_type",
    "normalize_tabs",
]
