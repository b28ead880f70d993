from __future__ import annotations

import json
from pathlib import Path

import pytest

from coursefactory.core.config import (
    CourseSettings,
    ModuleConfig,
    load_course_settings,
    load_module,
    read_document,
)


def _write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def test_load_module_accepts_snake_case_yaml(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "module.yaml",
        """
title: Budgeting
composer_layout:
  mode: Canvas
  max_columns: 3
activities:
  - id: 7
    kind: checklist_block
    layout:
      col_span: 2
    data:
      items: [Track spending]
""",
    )
    module = load_module(path)
    assert module.title == "Budgeting"
    assert module.composerLayout.mode == "canvas"
    assert module.composerLayout.maxColumns == 3
    activity = module.activities[0]
    assert activity.id == "7"
    assert activity.type == "checklist_block"
    assert activity.layout == {"colSpan": 2}


def test_load_module_unwraps_project_backup(tmp_path: Path) -> None:
    backup = {"module": {"id": "m-1", "title": "Wrapped", "activities": [{"type": "content_block"}]}, "courseSettings": {}}
    module = load_module(_write(tmp_path / "project.json", json.dumps(backup)))
    assert module.id == "m-1"
    payload = module.to_payload()
    assert payload["title"] == "Wrapped"
    assert payload["activities"][0] == {"type": "content_block", "data": {}, "layout": {}, "style": {}, "behavior": {}}
    assert "template" not in payload


def test_to_payload_keeps_extra_keys() -> None:
    module = ModuleConfig.model_validate({"title": "T", "customFlag": True, "activities": [{"id": "a", "note": "x"}]})
    payload = module.to_payload()
    assert payload["customFlag"] is True
    assert payload["activities"][0]["note"] == "x"


def test_invalid_module_raises_value_error(tmp_path: Path) -> None:
    path = _write(tmp_path / "bad.yaml", "activities: 12\n")
    with pytest.raises(ValueError, match="Invalid module definition"):
        load_module(path)


def test_unparseable_document(tmp_path: Path) -> None:
    path = _write(tmp_path / "broken.json", "{nope")
    with pytest.raises(ValueError, match="Could not parse"):
        read_document(path)


def test_document_root_must_be_mapping(tmp_path: Path) -> None:
    path = _write(tmp_path / "list.yaml", "- a\n- b\n")
    with pytest.raises(ValueError, match="Expected a mapping"):
        read_document(path)


def test_course_settings_defaults_and_nesting(tmp_path: Path) -> None:
    assert load_course_settings(None) == CourseSettings()
    path = _write(tmp_path / "course.yaml", "courseSettings:\n  course_name: Money 101\n  template_default: finlit\n")
    settings = load_course_settings(path)
    assert settings.courseName == "Money 101"
    assert settings.to_payload() == {"courseName": "Money 101", "templateDefault": "finlit"}
