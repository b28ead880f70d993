from coursefactory.composer.normalizers import (
    MultipleChoiceQuestion,
    ShortAnswerQuestion,
    WorksheetFieldBlock,
    WorksheetTitleBlock,
    clamp_rubric_size,
    normalize_fillable_chart,
    normalize_question_options,
    normalize_questions,
    normalize_rubric,
    normalize_worksheet_blocks,
    rubric_key,
)


def test_rubric_size_is_bounded() -> None:
    assert clamp_rubric_size(6) == 5
    assert clamp_rubric_size(1) == 2
    assert clamp_rubric_size("abc", 4) == 4
    assert clamp_rubric_size(None, None) == 3


def test_rubric_fills_missing_labels_and_cells() -> None:
    rubric = normalize_rubric(
        {
            "rowCount": 6,
            "colCount": 2,
            "rows": [{"label": "Clarity"}],
            "columns": [{"label": "Great", "score": "4.567"}],
            "cells": [["Crisp prose"]],
        }
    )
    assert rubric.row_count == 5
    assert rubric.rows[0] == "Clarity"
    assert rubric.rows[1] == "Criterion 2"
    assert rubric.columns[0].score == 4.57
    assert rubric.columns[1].label == "Level 2"
    assert rubric.columns[1].score == 1
    assert rubric.cells[0][0] == "Crisp prose"
    assert rubric.cells[0][1] == 'Describe "Level 2" for clarity.'
    assert rubric.max_score == 22.85


def test_rubric_key_is_css_safe() -> None:
    assert rubric_key("My Rubric#1") == "my-rubric-1"
    assert rubric_key(None) == "rubric"


def test_fillable_chart_string_cells_are_prefilled() -> None:
    chart = normalize_fillable_chart({"rowCount": 1, "colCount": 2, "cells": [["Given", ""]]})
    assert chart.cells[0][0].editable is False
    assert chart.cells[0][0].label == "Given"
    assert chart.cells[0][1].editable is True
    assert chart.editable_count == 1
    assert [column.label for column in chart.columns] == ["Column 1", "Column 2"]
    assert chart.row_label_header == "Rows"


def test_fillable_chart_size_clamped() -> None:
    chart = normalize_fillable_chart({"rowCount": 20, "colCount": 0})
    assert chart.row_count == 8
    assert chart.col_count == 1


def test_worksheet_upgrades_legacy_fields() -> None:
    blocks = normalize_worksheet_blocks(
        {"title": "Budget", "fields": [{"label": "Income", "inputType": "number", "prompt": "Monthly"}]}
    )
    assert isinstance(blocks[0], WorksheetTitleBlock)
    assert blocks[0].title == "Budget"
    assert isinstance(blocks[1], WorksheetFieldBlock)
    assert blocks[1].field_type == "number"
    assert blocks[1].helper_text == "Monthly"
    assert blocks[1].helper_mode == "plain"


def test_worksheet_blocks_take_precedence_over_fields() -> None:
    blocks = normalize_worksheet_blocks(
        {
            "title": "ignored",
            "fields": [{"label": "ignored"}],
            "blocks": [{"kind": "title", "title": "Intro", "content": "Read first"}, {"label": "Notes", "fieldType": "TEXTAREA"}],
        }
    )
    assert len(blocks) == 2
    assert blocks[0].show_content is True
    assert blocks[1].field_type == "textarea"


def test_questions_upgrade_single_prompt_document() -> None:
    questions = normalize_questions(
        {"prompt": "Pick one", "options": ["A", "B"], "correctIndex": 7, "shortAnswerPrompt": "Why?"}
    )
    assert isinstance(questions[0], MultipleChoiceQuestion)
    assert questions[0].correct_index == 1
    assert isinstance(questions[1], ShortAnswerQuestion)
    assert questions[1].prompt == "Why?"


def test_questions_default_when_empty() -> None:
    questions = normalize_questions({})
    assert len(questions) == 1
    assert isinstance(questions[0], MultipleChoiceQuestion)


def test_question_options_minimum() -> None:
    assert normalize_question_options(["", " Only "], ensure_minimum=True) == ["Only", "Option B"]
    assert normalize_question_options([], ensure_minimum=True) == ["Option A", "Option B"]
    assert normalize_question_options(["x", ""]) == ["x", ""]
