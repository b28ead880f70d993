"""Sub-model normalization for the structured activity kinds.

Rubrics, fillable charts, worksheets and knowledge checks carry nested data
that the editor lets authors resize freely. These helpers clamp that data into
bounded, canonical shapes once at read time so renderers and validators never
branch on legacy document layouts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Union

from ..core.markup import sanitize_rich_html
from ..core.values import as_dict, as_list, format_number, parse_float, parse_int, round2, text

RUBRIC_MIN_SIZE = 2
RUBRIC_MAX_SIZE = 5
CHART_MIN_SIZE = 1
CHART_MAX_SIZE = 8
CHART_DEFAULT_PLACEHOLDER = "Type your response..."

_RUBRIC_PRESETS: Dict[int, List[tuple[str, int]]] = {
    2: [("Strong", 2), ("Needs Work", 1)],
    3: [("Exceeds", 3), ("Meets", 2), ("Developing", 1)],
    4: [("Exemplary", 4), ("Proficient", 3), ("Developing", 2), ("Beginning", 1)],
    5: [("Mastery", 5), ("Advanced", 4), ("Proficient", 3), ("Developing", 2), ("Beginning", 1)],
}


def _bounded_size(value: Any, fallback: Any, lower: int, upper: int, default: int) -> int:
    parsed = parse_int(value)
    if parsed is None:
        parsed = parse_int(fallback, default)
    return max(lower, min(upper, parsed))


# ---------------------------------------------------------------------------
# Rubric
# ---------------------------------------------------------------------------


def clamp_rubric_size(value: Any, fallback: Any = 3) -> int:
    return _bounded_size(value, fallback, RUBRIC_MIN_SIZE, RUBRIC_MAX_SIZE, 3)


def normalize_rubric_score(value: Any, fallback: float = 0) -> float:
    parsed = parse_float(value)
    return fallback if parsed is None else round2(parsed)


def format_rubric_score(value: float) -> str:
    return format_number(round2(float(value)))


def default_rubric_columns(count: Any = 3) -> List[Dict[str, Any]]:
    return [{"label": label, "score": score} for label, score in _RUBRIC_PRESETS[clamp_rubric_size(count, 3)]]


def default_rubric_rows(count: Any = 3) -> List[Dict[str, str]]:
    return [{"label": f"Criterion {idx + 1}"} for idx in range(clamp_rubric_size(count, 3))]


def default_rubric_cell(row_label: str, column_label: str) -> str:
    return f'Describe "{column_label}" for {row_label.lower()}.'


def default_rubric_cells(rows: List[Dict[str, Any]], columns: List[Dict[str, Any]]) -> List[List[str]]:
    return [[default_rubric_cell(row["label"], column["label"]) for column in columns] for row in rows]


@dataclass(slots=True)
class RubricColumn:
    label: str
    score: float


@dataclass(slots=True)
class RubricModel:
    rows: List[str]
    columns: List[RubricColumn]
    cells: List[List[str]]
    max_score: float

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def col_count(self) -> int:
        return len(self.columns)


def normalize_rubric(data: Any) -> RubricModel:
    source = as_dict(data)
    raw_rows = as_list(source.get("rows"))
    raw_columns = as_list(source.get("columns"))
    raw_cells = as_list(source.get("cells"))
    row_count = clamp_rubric_size(source.get("rowCount"), len(raw_rows) or 3)
    col_count = clamp_rubric_size(source.get("colCount"), len(raw_columns) or 3)

    rows = []
    for row_idx in range(row_count):
        raw = as_dict(raw_rows[row_idx]) if row_idx < len(raw_rows) else {}
        rows.append(text(raw.get("label")).strip() or f"Criterion {row_idx + 1}")

    columns = []
    for col_idx in range(col_count):
        raw = as_dict(raw_columns[col_idx]) if col_idx < len(raw_columns) else {}
        columns.append(
            RubricColumn(
                label=text(raw.get("label")).strip() or f"Level {col_idx + 1}",
                score=normalize_rubric_score(raw.get("score"), col_count - col_idx),
            )
        )

    cells = []
    for row_idx, row_label in enumerate(rows):
        raw_row = as_list(raw_cells[row_idx]) if row_idx < len(raw_cells) else []
        line = []
        for col_idx, column in enumerate(columns):
            raw = text(raw_row[col_idx]).strip() if col_idx < len(raw_row) else ""
            line.append(raw or default_rubric_cell(row_label, column.label))
        cells.append(line)

    best = max((column.score for column in columns), default=0)
    return RubricModel(rows=rows, columns=columns, cells=cells, max_score=round2(best * len(rows)))


def rubric_key(activity_id: Any) -> str:
    return re.sub(r"[^a-z0-9_-]", "-", text(activity_id or "rubric"), flags=re.IGNORECASE).lower()


# ---------------------------------------------------------------------------
# Fillable chart
# ---------------------------------------------------------------------------


def clamp_chart_size(value: Any, fallback: Any = 2) -> int:
    return _bounded_size(value, fallback, CHART_MIN_SIZE, CHART_MAX_SIZE, 2)


@dataclass(slots=True)
class ChartCell:
    label: str = ""
    editable: bool = True
    placeholder: str = CHART_DEFAULT_PLACEHOLDER


@dataclass(slots=True)
class ChartAxisEntry:
    id: str
    label: str


@dataclass(slots=True)
class FillableChartModel:
    row_count: int
    col_count: int
    show_row_labels: bool
    row_label_header: str
    rows: List[ChartAxisEntry]
    columns: List[ChartAxisEntry]
    cells: List[List[ChartCell]]

    @property
    def editable_count(self) -> int:
        return sum(1 for line in self.cells for cell in line if cell.editable)


def normalize_chart_cell(cell: Any) -> ChartCell:
    if isinstance(cell, dict):
        return ChartCell(
            label=text(cell.get("label")),
            editable=cell.get("editable") is not False,
            placeholder=text(cell.get("placeholder")),
        )
    value = text(cell)
    if value.strip():
        return ChartCell(label=value, editable=False, placeholder="")
    return ChartCell()


def _axis(raw_list: List[Any], count: int, id_prefix: str, label_prefix: str) -> List[ChartAxisEntry]:
    entries = []
    for idx in range(count):
        raw = raw_list[idx] if idx < len(raw_list) else None
        source = raw if isinstance(raw, dict) else {}
        label = text(source.get("label")) if "label" in source else f"{label_prefix} {idx + 1}"
        entries.append(ChartAxisEntry(id=text(source.get("id") or f"{id_prefix}-{idx + 1}"), label=label))
    return entries


def normalize_fillable_chart(data: Any) -> FillableChartModel:
    source = as_dict(data)
    raw_rows = source.get("rows")
    raw_columns = source.get("columns")
    row_count = clamp_chart_size(source.get("rowCount"), len(raw_rows) if isinstance(raw_rows, list) else 2)
    col_count = clamp_chart_size(source.get("colCount"), len(raw_columns) if isinstance(raw_columns, list) else 2)
    rows = _axis(as_list(raw_rows), row_count, "row", "Row")
    columns = _axis(as_list(raw_columns), col_count, "col", "Column")
    raw_cells = as_list(source.get("cells"))
    cells = []
    for row_idx in range(row_count):
        raw_row = raw_cells[row_idx] if row_idx < len(raw_cells) and isinstance(raw_cells[row_idx], list) else []
        cells.append([normalize_chart_cell(raw_row[col_idx] if col_idx < len(raw_row) else None) for col_idx in range(col_count)])
    return FillableChartModel(
        row_count=row_count,
        col_count=col_count,
        show_row_labels=source.get("showRowLabels") is not False,
        row_label_header=text(source.get("rowLabelHeader")) if "rowLabelHeader" in source else "Rows",
        rows=rows,
        columns=columns,
        cells=cells,
    )


# ---------------------------------------------------------------------------
# Worksheet blocks
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class WorksheetTitleBlock:
    title: str = "Section Title"
    show_content: bool = False
    content: str = ""
    kind: Literal["title"] = "title"


@dataclass(slots=True)
class WorksheetFieldBlock:
    label: str = "Field Label"
    field_type: str = "text"
    placeholder: str = ""
    helper_mode: str = "plain"
    helper_text: str = ""
    helper_html: str = ""
    kind: Literal["field"] = "field"


WorksheetBlock = Union[WorksheetTitleBlock, WorksheetFieldBlock]


def normalize_field_type(value: Any) -> str:
    raw = text(value).strip().lower()
    return raw if raw in ("textarea", "number") else "text"


def _helper_mode(value: Any, block: Dict[str, Any]) -> str:
    raw = text(value).strip().lower()
    if raw in ("rich", "plain"):
        return raw
    if text(block.get("helperHtml") or block.get("promptHtml")).strip():
        return "rich"
    return "plain"


def create_worksheet_block(kind: str = "field") -> WorksheetBlock:
    return WorksheetTitleBlock() if text(kind).strip().lower() == "title" else WorksheetFieldBlock()


def _title_block(block: Dict[str, Any]) -> WorksheetTitleBlock:
    title = text(block["title"] if "title" in block else block.get("text"))
    content = text(block["content"] if "content" in block else block.get("instructions"))
    show = block.get("showContent") is True or bool(content and block.get("showContent") is not False)
    return WorksheetTitleBlock(title=title, show_content=show, content=content)


def _field_block(block: Dict[str, Any]) -> WorksheetFieldBlock:
    raw_type = block.get("fieldType") or block.get("inputType") or (block.get("type") if block.get("type") != "field" else "")
    helper_text = block["helperText"] if "helperText" in block else block.get("prompt")
    helper_html = block["helperHtml"] if "helperHtml" in block else block.get("promptHtml")
    return WorksheetFieldBlock(
        label=text(block.get("label")),
        field_type=normalize_field_type(raw_type),
        placeholder=text(block.get("placeholder")),
        helper_mode=_helper_mode(block.get("helperMode"), block),
        helper_text=text(helper_text),
        helper_html=sanitize_rich_html(text(helper_html)),
    )


def normalize_worksheet_blocks(data: Any) -> List[WorksheetBlock]:
    """Return the canonical block list, upgrading ``{title, fields}`` documents."""
    source = as_dict(data)
    if "blocks" in source:
        blocks: List[WorksheetBlock] = []
        for raw in as_list(source.get("blocks")):
            block = as_dict(raw)
            kind = text(block.get("kind") or block.get("blockType") or block.get("type") or "field").strip().lower()
            blocks.append(_title_block(block) if kind == "title" else _field_block(block))
        return blocks

    legacy: List[WorksheetBlock] = []
    legacy_title = text(source.get("title")).strip()
    if legacy_title:
        legacy.append(WorksheetTitleBlock(title=legacy_title))
    legacy.extend(_field_block(as_dict(raw)) for raw in as_list(source.get("fields")))
    return legacy


# ---------------------------------------------------------------------------
# Knowledge check questions
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class MultipleChoiceQuestion:
    prompt: str = "Add your question prompt here."
    options: List[str] = field(default_factory=lambda: ["Option A", "Option B", "Option C"])
    correct_index: int = 0
    kind: Literal["multiple_choice"] = "multiple_choice"


@dataclass(slots=True)
class ShortAnswerQuestion:
    prompt: str = "Add a short-answer prompt."
    placeholder: str = "Write your response..."
    kind: Literal["short_answer"] = "short_answer"


KnowledgeQuestion = Union[MultipleChoiceQuestion, ShortAnswerQuestion]


def normalize_question_type(value: Any) -> str:
    raw = text(value).strip().lower()
    return "short_answer" if raw in ("short_answer", "short-answer", "short") else "multiple_choice"


def normalize_question_options(options: Any, *, ensure_minimum: bool = False) -> List[str]:
    values = [text(option) for option in as_list(options)]
    if not ensure_minimum:
        return values
    non_empty = [option.strip() for option in values if option.strip()]
    if len(non_empty) >= 2:
        return non_empty
    if len(non_empty) == 1:
        return [non_empty[0], "Option B"]
    return ["Option A", "Option B"]


def create_question(kind: str = "multiple_choice") -> KnowledgeQuestion:
    if normalize_question_type(kind) == "short_answer":
        return ShortAnswerQuestion()
    return MultipleChoiceQuestion()


def normalize_question(question: Any) -> KnowledgeQuestion:
    source = as_dict(question)
    if normalize_question_type(source.get("type") or source.get("kind")) == "short_answer":
        return ShortAnswerQuestion(prompt=text(source.get("prompt")), placeholder=text(source.get("placeholder")))
    options = normalize_question_options(source.get("options"))
    raw_correct: Optional[int] = parse_int(source.get("correctIndex"))
    upper = max(len(options) - 1, 0)
    correct = 0 if raw_correct is None else max(0, min(raw_correct, upper))
    return MultipleChoiceQuestion(prompt=text(source.get("prompt")), options=options, correct_index=correct)


def normalize_questions(data: Any) -> List[KnowledgeQuestion]:
    """Return the canonical question list, upgrading single-prompt documents."""
    source = as_dict(data)
    if "questions" in source:
        return [normalize_question(raw) for raw in as_list(source.get("questions"))]

    legacy: List[KnowledgeQuestion] = []
    options = as_list(source.get("options"))
    has_choice = bool(text(source.get("prompt")).strip() or any(text(option).strip() for option in options))
    short_prompt = text(source.get("shortAnswerPrompt")).strip()
    if has_choice or not short_prompt:
        legacy.append(
            normalize_question(
                {
                    "type": "multiple_choice",
                    "prompt": source.get("prompt"),
                    "options": source.get("options"),
                    "correctIndex": source.get("correctIndex"),
                }
            )
        )
    if short_prompt:
        legacy.append(
            normalize_question(
                {"type": "short_answer", "prompt": short_prompt, "placeholder": source.get("shortAnswerPlaceholder")}
            )
        )
    return legacy or [create_question("multiple_choice")]


__all__ = [
    "CHART_DEFAULT_PLACEHOLDER",
    "ChartCell",
    "FillableChartModel",
    "KnowledgeQuestion",
    "MultipleChoiceQuestion",
    "RUBRIC_MAX_SIZE",
    "RUBRIC_MIN_SIZE",
    "RubricColumn",
    "RubricModel",
    "ShortAnswerQuestion",
    "WorksheetBlock",
    "WorksheetFieldBlock",
    "WorksheetTitleBlock",
    "clamp_chart_size",
    "clamp_rubric_size",
    "create_question",
    "create_worksheet_block",
    "default_rubric_cells",
    "default_rubric_columns",
    "default_rubric_rows",
    "format_rubric_score",
    "normalize_chart_cell",
    "normalize_fillable_chart",
    "normalize_question",
    "normalize_question_options",
    "normalize_question_type",
    "normalize_questions",
    "normalize_rubric",
    "normalize_rubric_score",
    "normalize_worksheet_blocks",
    "rubric_key",
]
