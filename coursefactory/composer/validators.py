"""Advisory data-quality checks for activity documents.

Validation never blocks compilation: renderers already fall back for every
malformed field. The issues surface in the editor and the ``validate`` command.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal

from ..core.values import as_dict, as_list, parse_int, text
from .normalizers import (
    RUBRIC_MAX_SIZE,
    RUBRIC_MIN_SIZE,
    WorksheetFieldBlock,
    clamp_rubric_size,
    normalize_fillable_chart,
    normalize_question_type,
    normalize_worksheet_blocks,
)
from .registry import get_definition

IssueLevel = Literal["error", "warn"]


@dataclass(slots=True)
class Issue:
    level: IssueLevel
    message: str

    @property
    def is_error(self) -> bool:
        return self.level == "error"


@dataclass(slots=True)
class ActivityReport:
    index: int
    id: str
    type: str
    issues: List[Issue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(issue.is_error for issue in self.issues)


def _blank(value: Any) -> bool:
    return not text(value).strip()


def _check_embed(data: Dict[str, Any], issues: List[Issue]) -> None:
    if _blank(data.get("url")):
        issues.append(Issue("error", "Embed URL is missing."))


def _check_image(data: Dict[str, Any], issues: List[Issue]) -> None:
    if _blank(data.get("url")):
        issues.append(Issue("error", "Image URL is missing."))
    if _blank(data.get("alt")):
        issues.append(Issue("warn", "Alt text is empty (accessibility)."))


def _check_resources(data: Dict[str, Any], issues: List[Issue]) -> None:
    items = as_list(data.get("items"))
    if _blank(data.get("title")):
        issues.append(Issue("warn", "Resource list title is empty."))
    if not items:
        issues.append(Issue("warn", "No resources added yet."))
    for idx, raw in enumerate(items, start=1):
        item = as_dict(raw)
        if _blank(item.get("label")):
            issues.append(Issue("warn", f"Resource #{idx}: label is empty."))
        has_view = not _blank(item.get("viewUrl") or item.get("url"))
        has_download = not _blank(item.get("downloadUrl") or item.get("url"))
        if not has_view and not has_download and not item.get("digitalContent"):
            issues.append(Issue("warn", f"Resource #{idx}: missing view/download/read source."))


def _check_rubric(data: Dict[str, Any], issues: List[Issue]) -> None:
    row_count = clamp_rubric_size(data.get("rowCount"), 3)
    col_count = clamp_rubric_size(data.get("colCount"), 3)
    allowed = f"allowed {RUBRIC_MIN_SIZE}-{RUBRIC_MAX_SIZE}"
    if _blank(data.get("title")):
        issues.append(Issue("warn", "Rubric title is empty."))
    if data.get("rowCount") is not None and row_count != parse_int(data.get("rowCount")):
        issues.append(Issue("warn", f"Rubric row count is clamped to {row_count} ({allowed})."))
    if data.get("colCount") is not None and col_count != parse_int(data.get("colCount")):
        issues.append(Issue("warn", f"Rubric column count is clamped to {col_count} ({allowed})."))
    rows = as_list(data.get("rows"))
    columns = as_list(data.get("columns"))
    if rows and len(rows) != row_count:
        issues.append(Issue("warn", "Rubric rows list does not match row count."))
    if columns and len(columns) != col_count:
        issues.append(Issue("warn", "Rubric columns list does not match column count."))


def _check_knowledge(data: Dict[str, Any], issues: List[Issue]) -> None:
    questions = as_list(data.get("questions"))
    if not questions:
        if _blank(data.get("prompt")):
            issues.append(Issue("warn", "Knowledge check prompt is empty."))
        if len(as_list(data.get("options"))) < 2:
            issues.append(Issue("warn", "Knowledge check should have at least 2 options."))
        return
    for idx, raw in enumerate(questions, start=1):
        question = as_dict(raw)
        if _blank(question.get("prompt")):
            issues.append(Issue("warn", f"Knowledge check question #{idx} prompt is empty."))
        if normalize_question_type(question.get("type") or question.get("kind")) == "multiple_choice":
            options = [option for option in as_list(question.get("options")) if not _blank(option)]
            if len(options) < 2:
                issues.append(Issue("warn", f"Knowledge check question #{idx} should have at least 2 options."))


def _check_worksheet(data: Dict[str, Any], issues: List[Issue]) -> None:
    blocks = normalize_worksheet_blocks(data)
    if not blocks:
        issues.append(Issue("warn", "Worksheet has no blocks yet."))
    if not any(isinstance(block, WorksheetFieldBlock) for block in blocks):
        issues.append(Issue("warn", "Worksheet should include at least one input field."))


def _check_chart(data: Dict[str, Any], issues: List[Issue]) -> None:
    chart = normalize_fillable_chart(data)
    if not chart.rows:
        issues.append(Issue("warn", "Fillable chart needs at least one row."))
    if not chart.columns:
        issues.append(Issue("warn", "Fillable chart needs at least one column."))
    raw_rows = as_list(data.get("rows"))
    raw_columns = as_list(data.get("columns"))
    if raw_rows and len(raw_rows) != chart.row_count:
        issues.append(Issue("warn", "Fillable chart rows list does not match row count."))
    if raw_columns and len(raw_columns) != chart.col_count:
        issues.append(Issue("warn", "Fillable chart columns list does not match column count."))
    raw_cells = as_list(data.get("cells"))
    row_mismatch = bool(raw_cells) and len(raw_cells) != chart.row_count
    col_mismatch = any(isinstance(row, list) and len(row) != chart.col_count for row in raw_cells)
    if row_mismatch or col_mismatch:
        issues.append(Issue("warn", "Fillable chart cells grid does not match row/column counts."))
    if not chart.editable_count:
        issues.append(Issue("warn", "Fillable chart has no editable cells for student responses."))


def _check_tab_group(data: Dict[str, Any], issues: List[Issue]) -> None:
    tabs = as_list(data.get("tabs"))
    if not tabs:
        issues.append(Issue("warn", "Tab group has no tabs configured."))
    for idx, raw in enumerate(tabs, start=1):
        tab = as_dict(raw)
        refs = [ref for ref in as_list(tab.get("activityIds")) if ref]
        inline = [child for child in as_list(tab.get("activities")) if child]
        if not refs and not inline:
            issues.append(Issue("warn", f"Tab #{idx} has no referenced or inline activities."))


def _check_card_list(data: Dict[str, Any], issues: List[Issue]) -> None:
    cards = as_list(data.get("cards"))
    if not cards:
        issues.append(Issue("warn", "Card list has no cards configured."))
    for idx, raw in enumerate(cards, start=1):
        card = as_dict(raw)
        has_ref = not _blank(card.get("targetActivityId"))
        has_single = isinstance(card.get("activity"), dict)
        has_many = any(isinstance(item, dict) for item in as_list(card.get("activities")))
        if not (has_ref or has_single or has_many):
            issues.append(Issue("warn", f"Card #{idx} has no target activity."))


def _check_hotspots(data: Dict[str, Any], issues: List[Issue]) -> None:
    if _blank(data.get("imageUrl") or data.get("url")):
        issues.append(Issue("warn", "Hotspot image URL is empty."))
    if not as_list(data.get("hotspots")):
        issues.append(Issue("warn", "No hotspots defined yet."))


_CHECKS: Dict[str, Callable[[Dict[str, Any], List[Issue]], None]] = {
    "embed_block": _check_embed,
    "image_block": _check_image,
    "resource_list": _check_resources,
    "rubric_creator": _check_rubric,
    "knowledge_check": _check_knowledge,
    "worksheet_form": _check_worksheet,
    "fillable_chart": _check_chart,
    "tab_group": _check_tab_group,
    "card_list": _check_card_list,
    "hotspot_image": _check_hotspots,
}


def validate_activity(activity: Any) -> List[Issue]:
    source = as_dict(activity)
    kind = text(source.get("type"))
    if not kind or get_definition(kind) is None:
        return [Issue("error", f"Unknown activity type: {kind or '(missing)'}")]
    issues: List[Issue] = []
    check = _CHECKS.get(kind)
    if check is not None:
        check(as_dict(source.get("data")), issues)
    return issues


def validate_activities(activities: Any) -> List[ActivityReport]:
    reports = []
    for index, raw in enumerate(as_list(activities)):
        activity = as_dict(raw)
        reports.append(
            ActivityReport(
                index=index,
                id=text(activity.get("id")),
                type=text(activity.get("type")),
                issues=validate_activity(activity),
            )
        )
    return reports


__all__ = ["ActivityReport", "Issue", "validate_activities", "validate_activity"]
