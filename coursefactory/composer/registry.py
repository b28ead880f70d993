"""Closed catalog of activity kinds.

Every kind maps to an :class:`ActivityDefinition` holding its editor label,
palette category, default data factory and renderer. Renderers are total: they
accept any ``data`` mapping and always return an HTML fragment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .kinds import assessment, content, interactive, productivity

Renderer = Callable[[Dict[str, Any], int, str], str]


class ActivityKind(str, Enum):
    """Activity types understood by the compiler."""

    CONTENT_BLOCK = "content_block"
    TITLE_BLOCK = "title_block"
    SPACER_BLOCK = "spacer_block"
    EMBED_BLOCK = "embed_block"
    IMAGE_BLOCK = "image_block"
    RESOURCE_LIST = "resource_list"
    ASSESSMENT_EMBED = "assessment_embed"
    RUBRIC_CREATOR = "rubric_creator"
    KNOWLEDGE_CHECK = "knowledge_check"
    SUBMISSION_BUILDER = "submission_builder"
    SAVE_LOAD_BLOCK = "save_load_block"
    CALLOUT_BLOCK = "callout_block"
    ACCORDION_BLOCK = "accordion_block"
    TABS_BLOCK = "tabs_block"
    TAB_GROUP = "tab_group"
    CARD_LIST = "card_list"
    STEP_SEQUENCE = "step_sequence"
    CHECKLIST_BLOCK = "checklist_block"
    SCENARIO_BRANCH = "scenario_branch"
    DRAG_SORT_BLOCK = "drag_sort_block"
    FLASHCARD_DECK = "flashcard_deck"
    REFLECTION_JOURNAL = "reflection_journal"
    WORKSHEET_FORM = "worksheet_form"
    FILLABLE_CHART = "fillable_chart"
    PORTFOLIO_EVIDENCE = "portfolio_evidence"
    PATH_MAP = "path_map"
    HOTSPOT_IMAGE = "hotspot_image"
    TIMELINE_STORY = "timeline_story"
    BEFORE_AFTER = "before_after"
    ROLEPLAY_SIMULATOR = "roleplay_simulator"
    DECISION_LAB = "decision_lab"

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


CONTAINER_KINDS = frozenset({ActivityKind.TAB_GROUP.value, ActivityKind.CARD_LIST.value})

CATEGORY_ORDER = ("content", "assessment", "interactive", "productivity", "layout", "general")

CATEGORY_LABELS: Dict[str, str] = {
    "content": "Content & Media",
    "assessment": "Assessment & Knowledge",
    "interactive": "Interactive Activities",
    "productivity": "Reports & Save/Load",
    "layout": "Layout & Utility",
    "general": "Other",
}


@dataclass(frozen=True, slots=True)
class ActivityDefinition:
    kind: ActivityKind
    label: str
    category: str
    create_default_data: Callable[[], Dict[str, Any]]
    compile: Renderer

    @property
    def category_label(self) -> str:
        return CATEGORY_LABELS.get(self.category, CATEGORY_LABELS["general"])


def _define(kind: ActivityKind, label: str, category: str, module: Any) -> ActivityDefinition:
    name = kind.value
    return ActivityDefinition(
        kind=kind,
        label=label,
        category=category,
        create_default_data=getattr(module, f"default_{name}"),
        compile=getattr(module, f"render_{name}"),
    )


_DEFINITIONS: List[ActivityDefinition] = [
    _define(ActivityKind.CONTENT_BLOCK, "Content Block", "content", content),
    _define(ActivityKind.TITLE_BLOCK, "Title Block", "content", content),
    _define(ActivityKind.SPACER_BLOCK, "Spacer (Empty)", "layout", content),
    _define(ActivityKind.EMBED_BLOCK, "Embed Block", "content", content),
    _define(ActivityKind.IMAGE_BLOCK, "Image", "content", content),
    _define(ActivityKind.RESOURCE_LIST, "Resource List", "content", content),
    _define(ActivityKind.ASSESSMENT_EMBED, "Assessment Block", "assessment", assessment),
    _define(ActivityKind.RUBRIC_CREATOR, "Rubric Creator", "assessment", assessment),
    _define(ActivityKind.KNOWLEDGE_CHECK, "Knowledge Check", "assessment", assessment),
    _define(ActivityKind.SUBMISSION_BUILDER, "Generate Report", "productivity", productivity),
    _define(ActivityKind.SAVE_LOAD_BLOCK, "Save / Load Progress", "productivity", productivity),
    _define(ActivityKind.CALLOUT_BLOCK, "Callout / Admonition", "content", content),
    _define(ActivityKind.ACCORDION_BLOCK, "Accordion / FAQ", "content", content),
    _define(ActivityKind.TABS_BLOCK, "Tabs", "content", content),
    _define(ActivityKind.TAB_GROUP, "Tab Group (Container)", "layout", productivity),
    _define(ActivityKind.CARD_LIST, "Card List (Container)", "layout", productivity),
    _define(ActivityKind.STEP_SEQUENCE, "Step Sequence", "content", content),
    _define(ActivityKind.CHECKLIST_BLOCK, "Checklist", "interactive", interactive),
    _define(ActivityKind.SCENARIO_BRANCH, "Scenario Branch", "interactive", interactive),
    _define(ActivityKind.DRAG_SORT_BLOCK, "Drag / Sort", "interactive", interactive),
    _define(ActivityKind.FLASHCARD_DECK, "Flashcards", "interactive", interactive),
    _define(ActivityKind.REFLECTION_JOURNAL, "Reflection Journal", "interactive", interactive),
    _define(ActivityKind.WORKSHEET_FORM, "Template / Worksheet", "assessment", assessment),
    _define(ActivityKind.FILLABLE_CHART, "Fillable Chart", "interactive", interactive),
    _define(ActivityKind.PORTFOLIO_EVIDENCE, "Portfolio / Evidence", "assessment", assessment),
    _define(ActivityKind.PATH_MAP, "Choose-Your-Path Map", "interactive", interactive),
    _define(ActivityKind.HOTSPOT_IMAGE, "Interactive Image / Hotspots", "interactive", interactive),
    _define(ActivityKind.TIMELINE_STORY, "Timeline Story", "content", content),
    _define(ActivityKind.BEFORE_AFTER, "Before / After", "interactive", interactive),
    _define(ActivityKind.ROLEPLAY_SIMULATOR, "Roleplay Simulator", "interactive", interactive),
    _define(ActivityKind.DECISION_LAB, "Decision Lab", "interactive", interactive),
]

REGISTRY: Dict[str, ActivityDefinition] = {definition.kind.value: definition for definition in _DEFINITIONS}


def get_definition(kind: Any) -> Optional[ActivityDefinition]:
    """Look up a kind by its string value; unknown kinds return ``None``."""
    if isinstance(kind, ActivityKind):
        kind = kind.value
    if not isinstance(kind, str):
        return None
    return REGISTRY.get(kind)


def get_category(kind: Any) -> str:
    definition = get_definition(kind)
    return definition.category if definition else "general"


def get_category_label(category: str) -> str:
    return CATEGORY_LABELS.get(category, CATEGORY_LABELS["general"])


def list_activity_types() -> List[str]:
    return list(REGISTRY)


def list_activity_type_groups() -> List[Dict[str, Any]]:
    """Group kinds by palette category, skipping empty categories."""
    groups: Dict[str, List[str]] = {}
    for kind in REGISTRY:
        groups.setdefault(get_category(kind), []).append(kind)
    return [
        {"category": category, "label": get_category_label(category), "types": groups[category]}
        for category in CATEGORY_ORDER
        if groups.get(category)
    ]


def create_activity(kind: Any, activity_id: str) -> Dict[str, Any]:
    """Build a fresh activity document with the kind's default data."""
    definition = get_definition(kind)
    if definition is None:
        valid = ", ".join(ActivityKind.choices())
        raise ValueError(f"Unknown activity type '{kind}'. Valid options: {valid}")
    return {"id": activity_id, "type": definition.kind.value, "data": definition.create_default_data()}


__all__ = [
    "ActivityDefinition",
    "ActivityKind",
    "CATEGORY_LABELS",
    "CATEGORY_ORDER",
    "CONTAINER_KINDS",
    "REGISTRY",
    "create_activity",
    "get_category",
    "get_category_label",
    "get_definition",
    "list_activity_type_groups",
    "list_activity_types",
]
