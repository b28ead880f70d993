from coursefactory.composer import create_activity, validate_activities, validate_activity


def _messages(activity: dict) -> list[str]:
    return [issue.message for issue in validate_activity(activity)]


def test_rubric_row_count_is_clamped_with_warning() -> None:
    issues = validate_activity({"type": "rubric_creator", "data": {"title": "Essay", "rowCount": 6}})
    assert [issue.level for issue in issues] == ["warn"]
    assert issues[0].message == "Rubric row count is clamped to 5 (allowed 2-5)."


def test_unknown_type_is_an_error() -> None:
    issues = validate_activity({"type": "mystery_box"})
    assert len(issues) == 1
    assert issues[0].is_error
    assert "mystery_box" in issues[0].message


def test_missing_type_is_reported() -> None:
    assert _messages({}) == ["Unknown activity type: (missing)"]


def test_image_requires_url_and_warns_on_alt() -> None:
    issues = validate_activity({"type": "image_block", "data": {}})
    assert [issue.level for issue in issues] == ["error", "warn"]


def test_knowledge_check_questions_need_options() -> None:
    messages = _messages(
        {
            "type": "knowledge_check",
            "data": {"questions": [{"type": "multiple_choice", "prompt": "Pick", "options": ["only", ""]}]},
        }
    )
    assert messages == ["Knowledge check question #1 should have at least 2 options."]


def test_card_list_cards_need_targets() -> None:
    messages = _messages({"type": "card_list", "data": {"cards": [{"title": "Empty"}, {"targetActivityId": "a1"}]}})
    assert messages == ["Card #1 has no target activity."]


def test_fillable_chart_mismatched_grid() -> None:
    messages = _messages(
        {"type": "fillable_chart", "data": {"rowCount": 2, "colCount": 2, "cells": [["a", "b", "c"]]}}
    )
    assert "Fillable chart cells grid does not match row/column counts." in messages


def test_validate_activities_keeps_index_and_id() -> None:
    reports = validate_activities([{"id": "x", "type": "embed_block", "data": {"url": "https://example.com"}}, "bad"])
    assert reports[0].id == "x"
    assert reports[0].issues == []
    assert reports[1].index == 1
    assert reports[1].has_errors


def test_default_activities_have_no_errors() -> None:
    for kind in ("content_block", "knowledge_check", "rubric_creator", "worksheet_form", "fillable_chart"):
        issues = validate_activity(create_activity(kind, f"{kind}-1"))
        assert not any(issue.is_error for issue in issues), kind
