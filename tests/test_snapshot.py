from __future__ import annotations

import json
from datetime import datetime, timezone

from coursefactory.runtime import ProgressSnapshot, apply_snapshot, collect_snapshot, restore_backup_text
from coursefactory.runtime.dom import parse_document, set_checked
from coursefactory.runtime.snapshot import SNAPSHOT_KIND, SNAPSHOT_VERSION
from coursefactory.runtime.state import ensure_sort_item_ids, reorder_sort_list, set_flashcard_face


def _fill_in(html: str):
    soup = parse_document(html)
    soup.select_one("[data-activity-id='journal'] textarea").string = "Fees add up"
    checks = soup.select("[data-checklist-input]")
    set_checked(checks[0], True, soup)
    set_checked(checks[2], True, soup)
    radios = soup.select("[data-kc-question-index='0'] input[type='radio']")
    set_checked(radios[1], True, soup)
    soup.select_one("[data-kc-short-answer]").string = "Pack lunch"
    sort_list = soup.select_one("[data-sort-list]")
    ensure_sort_item_ids(sort_list, 0)
    reorder_sort_list(sort_list, ["sort-0-item-2", "sort-0-item-0", "sort-0-item-1"])
    set_flashcard_face(soup.select("[data-flashcard]")[1], True)
    return soup


def test_collect_snapshot_records_fields_positionally(compiled_html: str) -> None:
    snapshot = collect_snapshot(_fill_in(compiled_html), now=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc))
    assert snapshot.kind == SNAPSHOT_KIND
    assert snapshot.version == SNAPSHOT_VERSION
    assert snapshot.savedAt == "2024-05-01T12:30:00.000Z"
    assert len(snapshot.fields) == 8
    assert snapshot.fields[0] == {"tag": "textarea", "type": "textarea", "value": "Fees add up"}
    assert [record.get("checked") for record in snapshot.fields[1:4]] == [True, False, True]
    assert [record.get("checked") for record in snapshot.fields[4:7]] == [False, True, False]
    assert snapshot.fields[7]["value"] == "Pack lunch"
    assert snapshot.ui.flashcards == [[1]]
    assert snapshot.ui.sortLists == [["sort-0-item-2", "sort-0-item-0", "sort-0-item-1"]]


def test_snapshot_round_trip_restores_values_and_ui(compiled_html: str) -> None:
    saved = collect_snapshot(_fill_in(compiled_html))
    fresh = parse_document(compiled_html)

    result = apply_snapshot(fresh, json.loads(saved.to_json()))

    assert result.ok
    assert result.applied == 8
    assert result.message == "Restored 8 fields from backup."
    assert collect_snapshot(fresh).fields == saved.fields
    assert collect_snapshot(fresh).ui.sortLists == saved.ui.sortLists
    assert fresh.select_one("[data-checklist-progress]").get_text() == "2 / 3 done"
    ranks = [item.select_one("[data-sort-rank]").get_text() for item in fresh.select("[data-sort-item]")]
    assert ranks == ["1.", "2.", "3."]
    assert fresh.select("[data-flashcard]")[1]["data-flashcard-side"] == "back"


def test_snapshot_accepts_model_instance(compiled_html: str) -> None:
    saved = collect_snapshot(_fill_in(compiled_html))
    fresh = parse_document(compiled_html)
    assert apply_snapshot(fresh, saved).ok


def test_restore_rejects_other_backup_kinds(compiled_html: str) -> None:
    soup = parse_document(compiled_html)
    before = str(soup)
    payload = {"kind": "something-else", "fields": [{"tag": "textarea", "type": "textarea", "value": "x"}]}

    result = restore_backup_text(soup, json.dumps(payload))

    assert not result.ok
    assert result.message == "Unsupported backup type for this module."
    assert str(soup) == before


def test_restore_rejects_invalid_json(compiled_html: str) -> None:
    result = restore_backup_text(parse_document(compiled_html), "{not json")
    assert not result.ok
    assert result.message == "Invalid JSON file. Could not parse backup."


def test_restore_requires_fields(compiled_html: str) -> None:
    result = restore_backup_text(parse_document(compiled_html), json.dumps({"kind": SNAPSHOT_KIND, "fields": []}))
    assert result.message == "No saved fields found in this file."


def test_restore_rejects_non_object_payload(compiled_html: str) -> None:
    result = restore_backup_text(parse_document(compiled_html), "[1, 2, 3]")
    assert not result.ok
    assert result.message == "Invalid progress payload."


def test_restore_unwraps_payload_and_tolerates_version(compiled_html: str) -> None:
    soup = parse_document(compiled_html)
    wrapped = {"payload": {"kind": SNAPSHOT_KIND, "version": 7, "fields": [{"tag": "textarea", "value": "Hello"}]}}

    result = restore_backup_text(soup, json.dumps(wrapped))

    assert result.ok
    assert result.applied == 1
    assert soup.select_one("[data-activity-id='journal'] textarea").get_text() == "Hello"


def test_missing_value_key_clears_field(compiled_html: str) -> None:
    soup = _fill_in(compiled_html)
    apply_snapshot(soup, {"fields": [{"tag": "textarea"}]})
    assert soup.select_one("[data-activity-id='journal'] textarea").get_text() == ""


def test_non_string_values_restore_as_js_strings(compiled_html: str) -> None:
    soup = _fill_in(compiled_html)
    journal = "[data-activity-id='journal'] textarea"
    apply_snapshot(soup, {"fields": [{"tag": "textarea", "value": True}]})
    assert soup.select_one(journal).get_text() == "true"
    apply_snapshot(soup, {"fields": [{"tag": "textarea", "value": False}]})
    assert soup.select_one(journal).get_text() == ""
    apply_snapshot(soup, {"fields": [{"tag": "textarea", "value": 0}]})
    assert soup.select_one(journal).get_text() == ""


def test_progress_snapshot_model_keeps_unknown_keys() -> None:
    snapshot = ProgressSnapshot.model_validate({"fields": [], "moduleId": "m-1"})
    assert snapshot.model_dump()["moduleId"] == "m-1"
    assert snapshot.kind == SNAPSHOT_KIND
