"""
Plain-text submission report for a compiled module.

Each activity section contributes a ``[Title]`` header followed by ``- line``
entries describing what the learner entered or selected. Sections with
nothing to say are skipped. The line formats match the report generator
block in the browser so both produce the same text for the same state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Union

from bs4 import Tag

from ..core.values import format_number, round2, to_number
from .dom import (
    HtmlInput,
    attr,
    closest,
    field_tag,
    field_type,
    field_value,
    int_attr,
    is_checked,
    normalize_space,
    parse_document,
    progress_scope,
    readable_text,
    select_all,
    selected_option,
)
from .state import before_after_split, rubric_total

REPORT_TITLE = "Course Factory Submission Report"
EMPTY_REPORT = "No responses found to include in this report yet. Fill in one or more activity inputs and generate again."
SKIPPED_SECTIONS = ("submission_builder", "save_load_block")


@dataclass(slots=True)
class _Section:
    tag: Tag
    title: str
    lines: List[str] = field(default_factory=list)


SectionHandler = Callable[[_Section], bool]


# -- field helpers ------------------------------------------------------------------


def _field_label(field: Tag, scope: Tag, fallback: str) -> str:
    label = None
    field_id = attr(field, "id")
    if field_id:
        label = scope.find("label", attrs={"for": field_id})
    if label is None:
        label = closest(field, "label")
    raw = readable_text(label) if label is not None else ""
    if not raw:
        raw = normalize_space(attr(field, "aria-label"))
    if not raw:
        raw = normalize_space(attr(field, "name") or field_id or attr(field, "placeholder"))
    return raw or fallback or "Response"


def _display_value(field: Tag) -> str:
    if field_type(field) == "checkbox":
        return "Yes" if is_checked(field) else ""
    if field_tag(field) == "select":
        option = selected_option(field)
        shown = normalize_space(option.get_text()) if option is not None else ""
        return shown or normalize_space(field_value(field))
    return normalize_space(field_value(field))


def _outside_report(field: Tag) -> bool:
    return closest(field, "[data-submission-block]") is None


def filled_field_lines(scope: Tag, include_checkboxes: bool = True, include_radios: bool = True) -> List[str]:
    """``label: value`` lines for every non-empty text field, plus checked boxes and radio picks."""
    lines = []
    selector = 'input:not([type="hidden"]):not([type="radio"]):not([type="checkbox"]), textarea, select'
    for idx, field in enumerate(select_all(scope, selector)):
        if not _outside_report(field):
            continue
        value = _display_value(field)
        if value:
            lines.append(f"{_field_label(field, scope, f'Response {idx + 1}')}: {value}")
    if include_checkboxes:
        for field in select_all(scope, 'input[type="checkbox"]'):
            if _outside_report(field) and is_checked(field):
                lines.append(f"{_field_label(field, scope, 'Checkbox')}: Yes")
    if include_radios:
        groups: Dict[str, List[Tag]] = {}
        for idx, field in enumerate(select_all(scope, 'input[type="radio"]')):
            if _outside_report(field):
                groups.setdefault(attr(field, "name") or f"__radio_{idx}", []).append(field)
        for key, members in groups.items():
            picked = [field for field in members if is_checked(field)]
            if not picked:
                continue
            selected = picked[-1]
            option_text = readable_text(closest(selected, "label")) or normalize_space(attr(selected, "value") or "Selected")
            name = "Selected Option" if key.startswith("__radio_") else key
            lines.append(f"{name}: {option_text}")
    return lines


def _choice(scope: Tag):
    selected = scope.select_one('input[type="radio"]:checked')
    if selected is None:
        return "[No selection]", "Not answered"
    fallback = f"Option {attr(selected, 'value') or '?'}"
    label = closest(selected, "label")
    correct = int_attr(scope, "data-kc-correct", None) if attr(scope, "data-kc-correct") else 0
    picked = int_attr(selected, "value", None) if attr(selected, "value") else -1
    if correct is None or picked is None:
        outcome = "Not answered"
    else:
        outcome = "Correct" if picked == correct else "Incorrect"
    return (readable_text(label, fallback) if label is not None else fallback), outcome


def _response(field: Optional[Tag]) -> str:
    return normalize_space(field_value(field)) if field is not None else ""


def _score_text(value: float) -> str:
    return format_number(round2(value))


# -- per-kind handlers ---------------------------------------------------------------


def _knowledge_check(section: _Section) -> bool:
    block = section.tag.select_one("[data-kc-block]")
    if block is None:
        return False
    section.title = readable_text(block.find("h3"), "Knowledge Check")
    section.lines.append(f"Set: {section.title}")
    questions = select_all(block, "[data-kc-question]")
    if not questions:
        label, outcome = _choice(block)
        section.lines.extend([f"Prompt: {section.title}", f"Selected Answer: {label}", f"Result: {outcome}"])
        reflection = block.select_one("[data-kc-short-answer]")
        if reflection is not None:
            section.lines.append(f"Reflection: {_response(reflection) or '[No response]'}")
        return True
    for idx, question in enumerate(questions, start=1):
        prompt = readable_text(question.select_one("[data-kc-prompt]"), f"Question {idx}")
        section.lines.append(f"Q{idx}: {prompt}")
        if normalize_space(attr(question, "data-kc-kind")).lower() == "short_answer":
            answer = _response(question.select_one("[data-kc-short-answer]"))
            section.lines.append(f"Response: {answer or '[No response]'}")
            continue
        label, outcome = _choice(question)
        section.lines.extend([f"Selected Answer: {label}", f"Result: {outcome}"])
    return True


def _checklist(section: _Section) -> bool:
    block = section.tag.select_one("[data-checklist-block]")
    if block is None:
        return False
    inputs = select_all(block, "[data-checklist-input]")
    done = sum(1 for field in inputs if is_checked(field))
    section.lines.append(f"Progress: {done} / {len(inputs)} complete")
    for field in inputs:
        row = closest(field, "label")
        label = readable_text(row.find("span") if row is not None else None, "Checklist item")
        section.lines.append(f"{'[x]' if is_checked(field) else '[ ]'} {label}")
    return True


def _drag_sort(section: _Section) -> bool:
    sort_list = section.tag.select_one("[data-sort-list]")
    items = select_all(sort_list, "[data-sort-item]") if sort_list is not None else []
    if not items:
        return False
    section.lines.append("Current Order:")
    for idx, item in enumerate(items, start=1):
        label = readable_text(item.select_one("div span:last-child"), readable_text(item, f"Item {idx}"))
        words = [word for word in label.split(" ") if word not in ("Up", "Down")]
        section.lines.append(f"{idx}. {normalize_space(' '.join(words))}")
    return True


def _reflection(section: _Section) -> bool:
    section.lines.append(f"Prompt: {readable_text(section.tag.find('p'), 'Reflection Prompt')}")
    section.lines.append(f"Response: {_response(section.tag.find('textarea')) or '[No response]'}")
    return True


def _worksheet(section: _Section) -> bool:
    lines = filled_field_lines(section.tag, include_checkboxes=False, include_radios=False)
    section.lines.extend(lines or ["No worksheet fields filled yet."])
    return True


def _portfolio(section: _Section) -> bool:
    artifact = _response(section.tag.select_one('input[type="text"]'))
    summary = _response(section.tag.find("textarea"))
    met = [
        _field_label(field, section.tag, "Criteria")
        for field in select_all(section.tag, 'input[type="checkbox"]')
        if is_checked(field)
    ]
    section.lines.append(f"Artifact URL: {artifact or '[Not provided]'}")
    section.lines.append(f"Evidence Summary: {summary or '[Not provided]'}")
    section.lines.append(f"Self-Check Criteria Met: {'; '.join(met) if met else '[None selected]'}")
    return True


def _roleplay(section: _Section) -> bool:
    section.lines.append(f"Prompt: {readable_text(section.tag.find('label'), 'Your response')}")
    section.lines.append(f"Response: {_response(section.tag.find('textarea')) or '[No response]'}")
    return True


def _decision(section: _Section) -> bool:
    inputs = select_all(section.tag, "[data-decision-input]")
    if not inputs:
        return False
    for field in inputs:
        card = closest(field, ".rounded-lg")
        name = readable_text(card.find("p") if card is not None else None, "Variable")
        low = normalize_space(attr(field, "data-decision-min"))
        high = normalize_space(attr(field, "data-decision-max"))
        weight = normalize_space(attr(field, "data-decision-weight")) or "1"
        section.lines.append(f"{name}: {normalize_space(field_value(field))} (range {low}-{high}, weight {weight})")
    score = readable_text(section.tag.select_one("[data-decision-score]"))
    if score:
        section.lines.append(f"Projected Outcome Score: {score}")
    return True


def _rubric(section: _Section) -> bool:
    block = section.tag.select_one("[data-rubric-block]")
    if block is None:
        return False
    for idx, row in enumerate(select_all(block, "tr[data-rubric-row]"), start=1):
        label = readable_text(row.select_one("[data-rubric-row-label]"), f"Criterion {idx}")
        choice = row.select_one("[data-rubric-choice]:checked")
        if choice is None:
            section.lines.append(f"{label}: [No selection]")
            continue
        score = to_number(attr(choice, "data-rubric-score") or attr(choice, "value"))
        col = int_attr(choice, "data-rubric-col", -1)
        cell = row.select_one(f'[data-rubric-cell][data-rubric-col="{col}"]') if col >= 0 else None
        descriptor = readable_text(cell.find("p") if cell is not None else None)
        line = f"{label}: Score {_score_text(score if score is not None else 0.0)}"
        section.lines.append(f"{line} - {descriptor}" if descriptor else line)
    maximum = readable_text(block.select_one("[data-rubric-max]"))
    total = _score_text(rubric_total(block))
    section.lines.append(f"Total: {total} / {maximum}" if maximum else f"Total: {total}")
    return True


def _before_after(section: _Section) -> bool:
    before, after = before_after_split(section.tag)
    before_label = readable_text(section.tag.select_one("[data-before-panel] p"), "Before")
    after_label = readable_text(section.tag.select_one("[data-after-panel] p"), "After")
    section.lines.append(f"Comparison Split: {before_label} {before} / {after_label} {after}")
    return True


def _visible_panel(section: _Section, selector: str, prefix: str, heading: str, fallback: str) -> bool:
    panel = section.tag.select_one(f"{selector}:not(.hidden)")
    if panel is not None:
        section.lines.append(f"{prefix}: {readable_text(panel.find(heading), fallback)}")
    return True


def _flashcards(section: _Section) -> bool:
    cards = select_all(section.tag, "[data-flashcard]")
    if cards:
        flipped = sum(1 for card in cards if attr(card, "data-flashcard-side") == "back")
        section.lines.append(f"Cards Flipped: {flipped} / {len(cards)}")
    return True


def _expanded_items(section: _Section) -> bool:
    opened = [readable_text(summary, "Open item") for summary in select_all(section.tag, "details[open] summary")]
    if opened:
        section.lines.append(f"Expanded Items: {'; '.join(opened)}")
    return True


_HANDLERS: Dict[str, SectionHandler] = {
    "knowledge_check": _knowledge_check,
    "checklist_block": _checklist,
    "drag_sort_block": _drag_sort,
    "reflection_journal": _reflection,
    "worksheet_form": _worksheet,
    "portfolio_evidence": _portfolio,
    "roleplay_simulator": _roleplay,
    "decision_lab": _decision,
    "rubric_creator": _rubric,
    "before_after": _before_after,
    "tabs_block": lambda section: _visible_panel(section, "[data-tabs-panel]", "Active Tab", "h4", "Tab"),
    "path_map": lambda section: _visible_panel(section, "[data-path-panel]", "Selected Path", "h4", "Path"),
    "hotspot_image": lambda section: _visible_panel(section, "[data-hotspot-panel]", "Selected Hotspot", "p", "Hotspot"),
    "flashcard_deck": _flashcards,
    "scenario_branch": _expanded_items,
    "accordion_block": _expanded_items,
}


def _format_generated(generated_at: Union[datetime, str, None]) -> str:
    if isinstance(generated_at, str):
        return generated_at
    moment = generated_at or datetime.now()
    return moment.strftime("%m/%d/%Y, %I:%M:%S %p")


def build_report(source: HtmlInput, generated_at: Union[datetime, str, None] = None) -> str:
    soup = parse_document(source)
    scope = progress_scope(soup)
    output: List[str] = []
    for idx, tag in enumerate(select_all(scope, "[data-activity-type]"), start=1):
        kind = normalize_space(attr(tag, "data-activity-type")).lower()
        if not kind or kind in SKIPPED_SECTIONS:
            continue
        section = _Section(tag, readable_text(tag.select_one("h3, h2, h4"), f"Activity {idx}"))
        handler = _HANDLERS.get(kind)
        if handler is not None:
            if not handler(section):
                continue
        else:
            section.lines = filled_field_lines(tag)
        if not section.lines:
            continue
        output.append(f"[{section.title}]")
        output.extend(f"- {line}" for line in section.lines)
        output.append("")
    if not output:
        return EMPTY_REPORT
    return "\n".join([REPORT_TITLE, f"Generated: {_format_generated(generated_at)}", ""] + output).strip()


__all__ = ["EMPTY_REPORT", "REPORT_TITLE", "build_report", "filled_field_lines"]
