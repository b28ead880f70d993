"""
Progress snapshots for compiled modules.

A snapshot records every persistable form field positionally plus the
interactive UI state (active tab, path node and hotspot per block, flipped
flashcards, sort order). Derived values such as checklist progress or rubric
totals are never stored; they are recomputed after a restore. The wire format
is the JSON produced by the save/load block in the browser.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.values import parse_int, text
from .dom import (
    HtmlInput,
    field_tag,
    field_type,
    field_value,
    is_checked,
    is_toggle,
    parse_document,
    persistable_fields,
    progress_scope,
    select_all,
    set_checked,
    set_field_value,
)
from .state import (
    HOTSPOTS,
    PATH_MAP,
    TABS,
    IndexedWidget,
    active_index,
    ensure_sort_item_ids,
    open_flashcards,
    refresh_derived_state,
    reorder_sort_list,
    set_active_index,
    set_flashcard_face,
    sort_order,
)

LOGGER = logging.getLogger(__name__)

SNAPSHOT_KIND = "course-factory-module-progress"
SNAPSHOT_VERSION = 1

MSG_INVALID_JSON = "Invalid JSON file. Could not parse backup."
MSG_UNSUPPORTED_KIND = "Unsupported backup type for this module."
MSG_INVALID_PAYLOAD = "Invalid progress payload."
MSG_NO_FIELDS = "No saved fields found in this file."


class UiState(BaseModel):
    model_config = ConfigDict(extra="allow")

    tabs: List[Any] = Field(default_factory=list)
    pathMaps: List[Any] = Field(default_factory=list)
    hotspots: List[Any] = Field(default_factory=list)
    flashcards: List[Any] = Field(default_factory=list)
    sortLists: List[Any] = Field(default_factory=list)


class ProgressSnapshot(BaseModel):
    """Module progress backup. Field records stay plain mappings because restore checks key presence."""

    model_config = ConfigDict(extra="allow")

    kind: str = SNAPSHOT_KIND
    version: int = SNAPSHOT_VERSION
    savedAt: str = ""
    fields: List[Dict[str, Any]] = Field(default_factory=list)
    ui: UiState = Field(default_factory=UiState)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.model_dump(), indent=indent)


@dataclass(slots=True)
class ApplyResult:
    ok: bool
    message: str
    applied: int = 0


def _timestamp(now: Optional[datetime] = None) -> str:
    moment = now or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _field_record(field) -> Dict[str, Any]:
    record: Dict[str, Any] = {"tag": field_tag(field), "type": field_type(field)}
    if is_toggle(field):
        record["checked"] = is_checked(field)
    else:
        record["value"] = field_value(field)
    return record


def _collect_ui(scope) -> UiState:
    sort_lists = []
    for list_index, sort_list in enumerate(select_all(scope, "[data-sort-list]")):
        ensure_sort_item_ids(sort_list, list_index)
        sort_lists.append(sort_order(sort_list))
    return UiState(
        tabs=[active_index(block, TABS) for block in select_all(scope, TABS.block)],
        pathMaps=[active_index(block, PATH_MAP) for block in select_all(scope, PATH_MAP.block)],
        hotspots=[active_index(block, HOTSPOTS) for block in select_all(scope, HOTSPOTS.block)],
        flashcards=[open_flashcards(block) for block in select_all(scope, "[data-flashcards-block]")],
        sortLists=sort_lists,
    )


def collect_snapshot(source: HtmlInput, now: Optional[datetime] = None) -> ProgressSnapshot:
    """Capture the current field values and UI state of a compiled module."""
    soup = parse_document(source)
    scope = progress_scope(soup)
    return ProgressSnapshot(
        savedAt=_timestamp(now),
        fields=[_field_record(field) for field in persistable_fields(scope)],
        ui=_collect_ui(scope),
    )


def _strict_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    return parse_int(value)


def _apply_indexed(scope, widget: IndexedWidget, values: Any) -> None:
    if not isinstance(values, list):
        return
    for idx, block in enumerate(select_all(scope, widget.block)):
        if idx >= len(values):
            break
        index = _strict_int(values[idx])
        if index is not None:
            set_active_index(block, widget, index)


def _apply_ui(scope, ui: Dict[str, Any]) -> None:
    _apply_indexed(scope, TABS, ui.get("tabs"))
    _apply_indexed(scope, PATH_MAP, ui.get("pathMaps"))
    _apply_indexed(scope, HOTSPOTS, ui.get("hotspots"))

    flashcards = ui.get("flashcards")
    for idx, block in enumerate(select_all(scope, "[data-flashcards-block]")):
        opened = flashcards[idx] if isinstance(flashcards, list) and idx < len(flashcards) else []
        open_set = {_strict_int(value) for value in opened} if isinstance(opened, list) else set()
        for card_idx, card in enumerate(select_all(block, "[data-flashcard]")):
            set_flashcard_face(card, card_idx in open_set)

    sort_lists = ui.get("sortLists")
    for list_index, sort_list in enumerate(select_all(scope, "[data-sort-list]")):
        ensure_sort_item_ids(sort_list, list_index)
        if isinstance(sort_lists, list) and list_index < len(sort_lists) and isinstance(sort_lists[list_index], list):
            reorder_sort_list(sort_list, sort_lists[list_index])


def _payload_dict(payload: Any) -> Optional[Dict[str, Any]]:
    if isinstance(payload, ProgressSnapshot):
        return payload.model_dump()
    if isinstance(payload, dict):
        return payload
    return None


def apply_snapshot(source: HtmlInput, payload: Any) -> ApplyResult:
    """Write a snapshot back into ``source`` in place.

    Records are matched to fields by position; surplus records are ignored and
    fields beyond the record list keep their values. Derived values are
    recomputed afterwards.
    """
    snapshot = _payload_dict(payload)
    if snapshot is None:
        return ApplyResult(False, MSG_INVALID_PAYLOAD)
    records = snapshot.get("fields")
    if not isinstance(records, list) or not records:
        return ApplyResult(False, MSG_NO_FIELDS)

    soup = parse_document(source)
    scope = progress_scope(soup)
    fields = persistable_fields(scope)
    version = snapshot.get("version")
    if version is not None and version != SNAPSHOT_VERSION:
        LOGGER.info("Restoring snapshot version %r with reader version %s", version, SNAPSHOT_VERSION)
    if len(records) != len(fields):
        LOGGER.debug("Snapshot has %s field records for %s fields", len(records), len(fields))

    applied = 0
    for field, record in zip(fields, records):
        data = record if isinstance(record, dict) else {}
        if is_toggle(field):
            set_checked(field, bool(data.get("checked")), scope)
        else:
            value = data.get("value")
            set_field_value(field, text(value) if value else "")
        applied += 1

    ui = snapshot.get("ui")
    _apply_ui(scope, ui if isinstance(ui, dict) else {})
    refresh_derived_state(scope)
    return ApplyResult(True, f"Restored {applied} fields from backup.", applied)


def restore_backup_text(source: HtmlInput, raw: str) -> ApplyResult:
    """Parse an uploaded backup file and apply it; rejected files leave the document untouched."""
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return ApplyResult(False, MSG_INVALID_JSON)
    if isinstance(parsed, dict):
        kind = parsed.get("kind")
        if kind and kind != SNAPSHOT_KIND:
            return ApplyResult(False, MSG_UNSUPPORTED_KIND)
        if isinstance(parsed.get("payload"), dict):
            parsed = parsed["payload"]
    return apply_snapshot(source, parsed)


__all__ = [
    "SNAPSHOT_KIND",
    "SNAPSHOT_VERSION",
    "ApplyResult",
    "ProgressSnapshot",
    "UiState",
    "apply_snapshot",
    "collect_snapshot",
    "restore_backup_text",
]
