"""
Typed loaders for module and course-settings documents.

Module documents are produced by the authoring UI (JSON project backups) or
written by hand as YAML. The models below keep the camelCase wire names used
by the compiler while accepting the snake_case spellings that hand-written
files tend to use.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .layout import MAX_COLUMNS, MIN_COLUMNS

_SNAKE_ALIASES = {
    "composer_layout": "composerLayout",
    "max_columns": "maxColumns",
    "row_height": "rowHeight",
    "container_padding": "containerPadding",
    "simple_match_tallest_row": "simpleMatchTallestRow",
    "col_span": "colSpan",
    "collapsed_by_default": "collapsedByDefault",
    "title_variant": "titleVariant",
    "finlit_active_tab_id": "finlitActiveTabId",
    "template_layout_profiles": "templateLayoutProfiles",
    "course_name": "courseName",
    "template_default": "templateDefault",
    "theme_default": "themeDefault",
}


def _rename_snake_keys(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    payload = dict(data)
    for snake, camel in _SNAKE_ALIASES.items():
        if snake in payload and camel not in payload:
            payload[camel] = payload.pop(snake)
    return payload


class ComposerLayoutConfig(BaseModel):
    """Module-level grid settings; out-of-range values are clamped later by the layout engine."""

    model_config = ConfigDict(extra="allow")

    mode: str = "simple"
    maxColumns: int = Field(default=1, description=f"Column count ({MIN_COLUMNS}-{MAX_COLUMNS}).")
    rowHeight: Optional[int] = None
    margin: Optional[List[int]] = None
    containerPadding: Optional[List[int]] = None
    simpleMatchTallestRow: bool = False

    @model_validator(mode="before")
    @classmethod
    def coerce_snake_case(cls, data: Any) -> Any:
        return _rename_snake_keys(data)

    @field_validator("mode", mode="before")
    @classmethod
    def lower_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or "simple"
        return value


class ActivityConfig(BaseModel):
    """One activity entry. ``data`` stays an open mapping because its shape depends on ``type``."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    type: str = "content_block"
    data: Dict[str, Any] = Field(default_factory=dict)
    layout: Dict[str, Any] = Field(default_factory=dict)
    style: Dict[str, Any] = Field(default_factory=dict)
    behavior: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def coerce_legacy_format(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        payload = dict(data)
        if "kind" in payload and "type" not in payload:
            payload["type"] = payload.pop("kind")
        for key in ("layout", "style", "behavior"):
            if key in payload:
                payload[key] = _rename_snake_keys(payload[key]) or {}
        if payload.get("data") is None:
            payload["data"] = {}
        return payload

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        if value is None:
            return value
        return str(value).strip() or None


class ModuleConfig(BaseModel):
    """A module as consumed by the compiler."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    title: str = "Module"
    activities: List[ActivityConfig] = Field(default_factory=list)
    composerLayout: ComposerLayoutConfig = Field(default_factory=ComposerLayoutConfig)
    template: Optional[str] = None
    theme: Optional[str] = None
    hero: Optional[Dict[str, Any]] = None
    finlit: Optional[Dict[str, Any]] = None
    finlitActiveTabId: Optional[str] = None
    templateLayoutProfiles: Optional[Dict[str, Any]] = None

    @model_validator(mode="before")
    @classmethod
    def coerce_legacy_format(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        payload = _rename_snake_keys(data)
        # Project exports wrap the module under a "module" key.
        nested = payload.get("module")
        if isinstance(nested, dict) and "activities" not in payload:
            payload = _rename_snake_keys(nested)
        if payload.get("composerLayout") is None:
            payload.pop("composerLayout", None)
        return payload

    def to_payload(self) -> Dict[str, Any]:
        """Plain camelCase mapping handed to the compiler."""
        payload = {key: value for key, value in self.model_dump().items() if value is not None}
        payload["activities"] = [
            {key: value for key, value in activity.items() if not (key == "id" and value is None)}
            for activity in payload.get("activities", [])
        ]
        return payload


class CourseSettings(BaseModel):
    """Course-wide fallbacks applied when a module leaves template/theme unset."""

    model_config = ConfigDict(extra="ignore")

    courseName: str = "Course"
    templateDefault: Optional[str] = None
    themeDefault: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def coerce_snake_case(cls, data: Any) -> Any:
        return _rename_snake_keys(data)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


def read_document(path: Path) -> Dict[str, Any]:
    """Read a YAML or JSON mapping from ``path``."""
    raw = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ValueError(f"Could not parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the root of {path}")
    return data


def load_module(path: Path) -> ModuleConfig:
    data = read_document(path)
    try:
        return ModuleConfig.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid module definition in {path}") from exc


def load_course_settings(path: Path | None) -> CourseSettings:
    if path is None:
        return CourseSettings()
    data = read_document(path)
    # Full project backups carry the settings under "courseSettings".
    settings = data.get("courseSettings") or data.get("course_settings") or data
    try:
        return CourseSettings.model_validate(settings)
    except ValidationError as exc:
        raise ValueError(f"Invalid course settings in {path}") from exc


__all__ = [
    "ActivityConfig",
    "ComposerLayoutConfig",
    "CourseSettings",
    "ModuleConfig",
    "load_course_settings",
    "load_module",
    "read_document",
]
