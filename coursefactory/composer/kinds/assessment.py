"""Renderers for assessment activities: rubrics, knowledge checks, worksheets and evidence forms."""

from __future__ import annotations

from typing import Any, Dict

from ...core.markup import escape_html, escape_inline_script, render_simple_body
from ...core.values import as_dict, as_list, text
from ..normalizers import (
    MultipleChoiceQuestion,
    WorksheetTitleBlock,
    default_rubric_cells,
    default_rubric_columns,
    default_rubric_rows,
    format_rubric_score,
    normalize_questions,
    normalize_rubric,
    normalize_worksheet_blocks,
    rubric_key,
)
from .content import empty_line

_FIELD_LABEL = "block text-xs font-bold uppercase tracking-wide text-slate-400 mb-1"
_TEXT_INPUT = "w-full rounded border border-slate-700 bg-slate-950/70 p-2 text-sm text-slate-200"
_SMALL_BUTTON = "px-2 py-1 rounded bg-slate-800 hover:bg-slate-700 text-[10px] font-bold uppercase tracking-wide text-slate-100"
_TH = "p-3 border-b border-slate-700 text-left font-bold uppercase tracking-wider text-slate-300"


# assessment_embed ------------------------------------------------------------


def default_assessment_embed() -> Dict[str, Any]:
    return {"title": "Assessments", "items": []}


def render_assessment_embed(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    cards = []
    for idx, raw in enumerate(as_list(data.get("items"))):
        item = as_dict(raw)
        markup = text(item.get("html"))
        script = escape_inline_script(item.get("script") or "")
        script_tag = f"<script>(function(){{\n{script}\n}})();</script>" if script else ""
        cards.append(
            '<div class="rounded-xl border border-slate-700 bg-slate-950/70 p-4">'
            f'<h4 class="text-base font-bold text-white">{escape_html(item.get("title") or f"Assessment {idx + 1}")}</h4>'
            f'<div class="mt-4 space-y-3">{markup or empty_line("No assessment HTML found for this item.")}</div>'
            f"{script_tag}"
            "</div>"
        )
    body = f'<div class="space-y-4">{"".join(cards)}</div>' if cards else empty_line("No assessments linked yet.")
    return (
        '<article class="rounded-xl border border-purple-500/30 bg-purple-950/20 p-6">'
        f'<h3 class="text-lg font-bold text-purple-300 mb-3">{escape_html(data.get("title") or "Assessments")}</h3>'
        f"{body}"
        "</article>"
    )


# rubric_creator --------------------------------------------------------------


def default_rubric_creator() -> Dict[str, Any]:
    rows = default_rubric_rows(3)
    columns = default_rubric_columns(3)
    return {
        "title": "Performance Rubric",
        "instructions": "Review each criterion and choose one level per row.",
        "rowCount": 3,
        "colCount": 3,
        "selfScoringEnabled": True,
        "totalLabel": "Self Score Total",
        "rows": rows,
        "columns": columns,
        "cells": default_rubric_cells(rows, columns),
    }


def render_rubric_creator(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    rubric = normalize_rubric(data)
    self_scoring = data.get("selfScoringEnabled") is not False
    key = escape_html(rubric_key(activity_id))

    head = [f'<th class="{_TH}">Criteria</th>']
    for column in rubric.columns:
        head.append(
            f'<th class="{_TH}"><div>{escape_html(column.label)}</div>'
            f'<div class="text-[10px] font-semibold text-emerald-300 mt-1">Score: {escape_html(format_rubric_score(column.score))}</div></th>'
        )

    body_rows = []
    for row_idx, row_label in enumerate(rubric.rows):
        cells = []
        for col_idx, column in enumerate(rubric.columns):
            score = escape_html(format_rubric_score(column.score))
            choice = ""
            if self_scoring:
                choice = (
                    '<label class="mt-3 inline-flex items-center gap-2 rounded border border-slate-700 bg-slate-900/70 px-2 py-1 cursor-pointer">'
                    f'<input type="radio" name="rubric-{key}-row-{row_idx}" value="{score}" data-rubric-choice '
                    f'data-rubric-row="{row_idx}" data-rubric-col="{col_idx}" data-rubric-score="{score}" class="w-3.5 h-3.5" />'
                    '<span class="text-[10px] font-semibold uppercase tracking-wide text-slate-200">Select</span>'
                    "</label>"
                )
            cells.append(
                '<td class="align-top p-3 border-b border-slate-800 bg-slate-950/60 transition-colors" data-rubric-cell '
                f'data-rubric-row="{row_idx}" data-rubric-col="{col_idx}" data-rubric-score="{score}">'
                f'<p class="text-xs text-slate-300 leading-relaxed">{escape_html(rubric.cells[row_idx][col_idx])}</p>'
                f"{choice}</td>"
            )
        body_rows.append(
            f'<tr data-rubric-row="{row_idx}">'
            '<th class="align-top p-3 border-b border-slate-800 bg-slate-950/80 text-left text-slate-100 font-bold" '
            f'data-rubric-row-label>{escape_html(row_label)}</th>'
            f'{"".join(cells)}</tr>'
        )

    if self_scoring:
        footer = (
            '<div class="mt-4 flex flex-wrap items-center justify-between gap-3 rounded-lg border border-emerald-500/30 bg-emerald-950/20 p-3">'
            f'<p class="text-xs font-bold uppercase tracking-wider text-emerald-300">{escape_html(data.get("totalLabel") or "Self Score Total")}</p>'
            '<div class="flex items-center gap-2"><p class="text-lg font-black text-white"><span data-rubric-total>0</span>'
            '<span class="text-xs font-semibold text-slate-400"> / '
            f'<span data-rubric-max>{escape_html(format_rubric_score(rubric.max_score))}</span></span></p>'
            f'<button type="button" class="{_SMALL_BUTTON}" data-rubric-clear>Clear</button></div>'
            "</div>"
        )
    else:
        footer = '<p class="mt-4 text-[11px] text-slate-400">Self-scoring is disabled for this rubric.</p>'

    instructions = data.get("instructions")
    intro = f'<p class="text-sm text-slate-300 mt-2">{render_simple_body(instructions)}</p>' if instructions else ""
    return (
        f'<article class="rounded-xl border border-emerald-500/30 bg-emerald-950/10 p-6" data-rubric-block data-rubric-id="{key}">'
        f'<h3 class="text-lg font-bold text-emerald-300">{escape_html(data.get("title") or "Rubric")}</h3>'
        f"{intro}"
        '<div class="mt-4 overflow-x-auto rounded-lg border border-slate-700"><table class="min-w-full border-collapse text-xs">'
        f'<thead class="bg-slate-900/80"><tr>{"".join(head)}</tr></thead>'
        f'<tbody>{"".join(body_rows)}</tbody>'
        "</table></div>"
        f"{footer}"
        "</article>"
    )


# knowledge_check -------------------------------------------------------------


def default_knowledge_check() -> Dict[str, Any]:
    return {
        "title": "Knowledge Check",
        "questions": [
            {
                "type": "multiple_choice",
                "prompt": "Add your question prompt here.",
                "options": ["Option A", "Option B", "Option C"],
                "correctIndex": 0,
            }
        ],
    }


def _render_question(question, question_idx: int, group_name: str) -> str:
    prompt = escape_html(question.prompt)
    number = question_idx + 1
    if not isinstance(question, MultipleChoiceQuestion):
        return (
            '<section class="rounded-lg border border-emerald-500/25 bg-emerald-950/10 p-4" data-kc-question '
            f'data-kc-kind="short_answer" data-kc-question-index="{question_idx}">'
            f'<p class="text-[10px] font-bold uppercase tracking-widest text-emerald-300 mb-2">Question {number}</p>'
            f'<label class="text-xs font-semibold uppercase tracking-wide text-slate-300 block mb-2" data-kc-prompt>{prompt}</label>'
            '<textarea class="w-full min-h-28 rounded-lg border border-slate-700 bg-slate-950/70 p-3 text-slate-200" '
            f'data-kc-short-answer placeholder="{escape_html(question.placeholder)}"></textarea>'
            "</section>"
        )
    name = escape_html(f"{group_name}-{question_idx}")
    options = [
        '<label class="flex items-center gap-3 rounded-lg border border-slate-700 bg-slate-950/70 p-3 text-slate-200">'
        f'<input type="radio" name="{name}" value="{opt_idx}" class="w-4 h-4" />'
        f"<span>{escape_html(option)}</span></label>"
        for opt_idx, option in enumerate(question.options)
    ]
    return (
        '<section class="rounded-lg border border-slate-700 bg-slate-950/55 p-4" data-kc-question data-kc-kind="multiple_choice" '
        f'data-kc-question-index="{question_idx}" data-kc-correct="{question.correct_index}">'
        f'<p class="text-[10px] font-bold uppercase tracking-widest text-slate-500 mb-2">Question {number}</p>'
        f'<h4 class="text-sm font-bold text-white mb-3" data-kc-prompt>{prompt}</h4>'
        f'<div class="space-y-2">{"".join(options) or empty_line("No options added yet.", "text-xs text-slate-500")}</div>'
        '<div class="mt-4 flex items-center gap-3">'
        '<button type="button" class="px-3 py-2 rounded bg-sky-600 hover:bg-sky-500 text-white text-xs font-bold uppercase tracking-wide" '
        "data-kc-check>Check Answer</button>"
        '<p class="text-xs text-slate-400" data-kc-result></p>'
        "</div></section>"
    )


def render_knowledge_check(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    questions = normalize_questions(data)
    block_title = text(data.get("title")).strip() if "title" in data else "Knowledge Check"
    heading = f'<h3 class="text-lg font-bold text-white mb-4">{escape_html(block_title)}</h3>' if block_title else ""
    group_name = f"kc-{index}-{activity_id}"
    sections = "".join(_render_question(question, idx, group_name) for idx, question in enumerate(questions))
    return (
        f'<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-6" data-kc-block data-kc-id="{escape_html(activity_id)}">'
        f'{heading}<div class="space-y-4">{sections}</div>'
        "</article>"
    )


# worksheet_form --------------------------------------------------------------


def default_worksheet_form() -> Dict[str, Any]:
    return {
        "title": "Worksheet",
        "blocks": [
            {"kind": "title", "title": "Section 1", "showContent": True, "content": "Add instructions for this section."},
            {"kind": "field", "label": "Goal", "fieldType": "text", "placeholder": "Enter goal..."},
            {"kind": "field", "label": "Plan", "fieldType": "textarea", "placeholder": "Describe your plan..."},
        ],
    }


def _render_worksheet_block(block, idx: int) -> str:
    if isinstance(block, WorksheetTitleBlock):
        heading = (
            f'<h4 class="text-sm font-bold uppercase tracking-wide text-indigo-200">{escape_html(block.title)}</h4>' if block.title else ""
        )
        content = ""
        if block.show_content and block.content:
            content = f'<p class="mt-2 text-sm text-indigo-100/90 leading-relaxed">{render_simple_body(block.content)}</p>'
        return (
            '<section class="rounded-lg border border-indigo-500/30 bg-indigo-950/20 p-4" data-worksheet-segment data-worksheet-kind="title">'
            f"{heading}{content}</section>"
        )

    label = escape_html(block.label or f"Field {idx + 1}")
    placeholder = escape_html(block.placeholder)
    if block.helper_mode == "rich" and block.helper_html:
        helper = f'<div class="cf-rich-editor text-sm text-slate-300 leading-relaxed mb-2">{block.helper_html}</div>'
    elif block.helper_text:
        helper = f'<p class="text-xs text-slate-400 leading-relaxed mb-2">{render_simple_body(block.helper_text)}</p>'
    else:
        helper = ""
    if block.field_type == "textarea":
        control = (
            '<textarea class="w-full min-h-24 rounded border border-slate-700 bg-slate-950/70 p-3 text-sm text-slate-200" '
            f'placeholder="{placeholder}"></textarea>'
        )
    else:
        control = f'<input type="{block.field_type}" class="{_TEXT_INPUT}" placeholder="{placeholder}" />'
    return (
        '<div data-worksheet-segment data-worksheet-kind="field">'
        f'<label class="{_FIELD_LABEL}">{label}</label>{helper}{control}</div>'
    )


def render_worksheet_form(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    blocks = normalize_worksheet_blocks(data)
    header = text(data.get("title")).strip()
    heading = f'<h3 class="text-lg font-bold text-white mb-3">{escape_html(header)}</h3>' if header else ""
    segments = "".join(_render_worksheet_block(block, idx) for idx, block in enumerate(blocks))
    return (
        '<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-6" data-worksheet-block>'
        f'{heading}<div class="space-y-3">{segments or empty_line("No worksheet blocks yet.", "text-sm text-slate-400")}</div>'
        "</article>"
    )


# portfolio_evidence ----------------------------------------------------------


def default_portfolio_evidence() -> Dict[str, Any]:
    return {
        "title": "Evidence Submission",
        "instructions": "Capture proof of your work and a short reflection.",
        "criteria": ["Quality", "Completeness", "Clarity"],
    }


def render_portfolio_evidence(data: Dict[str, Any], index: int = 0, activity_id: str = "") -> str:
    criteria = [text(item).strip() for item in as_list(data.get("criteria")) if text(item).strip()]
    self_check = ""
    if criteria:
        checks = "".join(
            '<label class="flex items-center gap-2 text-sm text-slate-200">'
            f'<input type="checkbox" class="w-4 h-4" /><span>{escape_html(item)}</span></label>'
            for item in criteria
        )
        self_check = (
            '<div class="rounded-lg border border-slate-700 bg-slate-950/70 p-3">'
            '<p class="text-xs font-bold uppercase tracking-wide text-slate-400 mb-2">Self-Check</p>'
            f'<div class="space-y-2">{checks}</div></div>'
        )
    return (
        '<article class="rounded-xl border border-slate-700 bg-slate-900/70 p-6">'
        f'<h3 class="text-lg font-bold text-white">{escape_html(data.get("title") or "Portfolio")}</h3>'
        f'<p class="text-sm text-slate-300 mt-2">{render_simple_body(data.get("instructions") or "")}</p>'
        '<div class="mt-4 space-y-3">'
        f'<div><label class="{_FIELD_LABEL}">Artifact URL</label>'
        f'<input type="text" class="{_TEXT_INPUT}" placeholder="https://..." /></div>'
        f'<div><label class="{_FIELD_LABEL}">Evidence Summary</label>'
        '<textarea class="w-full min-h-28 rounded border border-slate-700 bg-slate-950/70 p-3 text-sm text-slate-200" '
        'placeholder="Explain what this artifact proves..."></textarea></div>'
        f"{self_check}"
        "</div></article>"
    )
