from __future__ import annotations

from datetime import datetime

from coursefactory.composer import compile_module
from coursefactory.runtime import build_report
from coursefactory.runtime.dom import parse_document, set_checked
from coursefactory.runtime.report import EMPTY_REPORT, REPORT_TITLE


def _answered(html: str):
    soup = parse_document(html)
    soup.select_one("[data-activity-id='journal'] textarea").string = "Fees   add up"
    checks = soup.select("[data-checklist-input]")
    set_checked(checks[1], True, soup)
    radios = soup.select("[data-kc-question-index='0'] input[type='radio']")
    set_checked(radios[0], True, soup)
    return soup


def test_report_header_and_sections(compiled_html: str) -> None:
    report = build_report(_answered(compiled_html), generated_at=datetime(2024, 3, 5, 14, 7, 9))
    lines = report.splitlines()

    assert lines[0] == REPORT_TITLE
    assert lines[1] == "Generated: 03/05/2024, 02:07:09 PM"
    assert "[Reflection]" in lines
    assert "- Prompt: What surprised you?" in lines
    assert "- Response: Fees add up" in lines
    assert "- Progress: 1 / 3 complete" in lines
    assert "- [ ] Track spending" in lines
    assert "- [x] Set a goal" in lines


def test_report_knowledge_check_lines(compiled_html: str) -> None:
    lines = build_report(_answered(compiled_html), generated_at="today").splitlines()
    start = lines.index("[Quick Check]")
    assert lines[start + 1 : start + 8] == [
        "- Set: Quick Check",
        "- Q1: Which is a need?",
        "- Selected Answer: Rent",
        "- Result: Correct",
        "- Q2: Name one saving tip.",
        "- Response: [No response]",
        "",
    ]


def test_report_lists_sort_order_and_flashcards(compiled_html: str) -> None:
    lines = build_report(compiled_html, generated_at="now").splitlines()
    start = lines.index("[Order the Steps]")
    assert lines[start + 1 : start + 5] == ["- Current Order:", "- 1. Earn", "- 2. Budget", "- 3. Save"]
    assert "- Cards Flipped: 0 / 2" in lines


def test_report_skips_report_and_backup_blocks(compiled_html: str) -> None:
    report = build_report(compiled_html, generated_at="now")
    assert "[Report Generator]" not in report
    assert "[Save or Restore Progress]" not in report


def test_empty_report_message() -> None:
    html = compile_module({"activities": [{"id": "c", "type": "content_block", "data": {"title": "Intro"}}]}).html
    assert build_report(html) == EMPTY_REPORT


def test_worksheet_fields_fall_back_to_placeholder() -> None:
    module = {
        "activities": [
            {
                "id": "ws",
                "type": "worksheet_form",
                "data": {"title": "Plan", "blocks": [{"kind": "field", "label": "Goal", "fieldType": "text", "placeholder": "Target amount"}]},
            }
        ]
    }
    soup = parse_document(compile_module(module).html)
    soup.select_one("[data-worksheet-block] input")["value"] = "Save 500"
    lines = build_report(soup, generated_at="now").splitlines()
    assert lines[3:5] == ["[Plan]", "- Target amount: Save 500"]
