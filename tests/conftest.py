"""Shared module documents for compiler and runtime tests."""

from __future__ import annotations

import copy
from typing import Any, Dict

import pytest

from coursefactory.composer import compile_module

INTERACTIVE_MODULE: Dict[str, Any] = {
    "id": "module-1",
    "title": "Budgeting Basics",
    "composerLayout": {"mode": "simple", "maxColumns": 2},
    "activities": [
        {
            "id": "journal",
            "type": "reflection_journal",
            "data": {"title": "Reflection", "prompt": "What surprised you?"},
        },
        {
            "id": "tasks",
            "type": "checklist_block",
            "data": {"title": "Weekly Tasks", "items": ["Track spending", "Set a goal", "Review bills"]},
        },
        {
            "id": "quiz",
            "type": "knowledge_check",
            "data": {
                "title": "Quick Check",
                "questions": [
                    {"type": "multiple_choice", "prompt": "Which is a need?", "options": ["Rent", "Concert", "Games"], "correctIndex": 0},
                    {"type": "short_answer", "prompt": "Name one saving tip."},
                ],
            },
        },
        {
            "id": "order",
            "type": "drag_sort_block",
            "data": {"title": "Order the Steps", "items": ["Earn", "Budget", "Save"]},
        },
        {
            "id": "cards",
            "type": "flashcard_deck",
            "data": {"title": "Terms", "cards": [{"front": "APR", "back": "Annual rate"}, {"front": "Net", "back": "After tax"}]},
        },
        {"id": "backup", "type": "save_load_block", "data": {"fileName": "budget progress"}},
        {"id": "report", "type": "submission_builder", "data": {}},
    ],
}


@pytest.fixture()
def interactive_module() -> Dict[str, Any]:
    return copy.deepcopy(INTERACTIVE_MODULE)


@pytest.fixture()
def compiled_html(interactive_module: Dict[str, Any]) -> str:
    return compile_module(interactive_module).html
