"""Keep the config and snapshot models on the Pydantic v2 API."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

import pytest

TARGET_DIRS: tuple[str, ...] = ("coursefactory", "tests")
LEGACY_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("legacy decorator", re.compile(r"@(?:root_)?validator\b")),
    ("legacy import", re.compile(r"\bfrom\s+pydantic\s+import\b[^\n]*\bvalidator\b")),
    ("inner Config class", re.compile(r"^\s+class Config\b", re.MULTILINE)),
    ("legacy parse helpers", re.compile(r"\.(?:parse_obj|parse_raw)\(")),
)


def _python_files(base_dirs: Iterable[Path]) -> Iterable[Path]:
    for directory in base_dirs:
        if directory.exists():
            yield from directory.rglob("*.py")


def test_models_use_pydantic_v2_api() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    this_file = Path(__file__).resolve()
    offenders: list[str] = []

    for path in _python_files(repo_root / directory for directory in TARGET_DIRS):
        if path == this_file:
            continue
        source = path.read_text(encoding="utf-8")
        for label, pattern in LEGACY_PATTERNS:
            if pattern.search(source):
                offenders.append(f"{path.relative_to(repo_root)} -> {label}")
                break

    if offenders:
        pytest.fail("Pydantic v1 usage detected:\n" + "\n".join(offenders))
