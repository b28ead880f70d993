from __future__ import annotations

import pytest

from coursefactory.composer import compile_module, create_activity, render_document
from coursefactory.composer.compiler import CompiledModule
from coursefactory.composer.registry import REGISTRY
from coursefactory.runtime.dom import parse_document


def _module(*activities, **extra):
    return {"id": "m", "title": "Module", "activities": list(activities), **extra}


def _content(activity_id: str, title: str) -> dict:
    return {"id": activity_id, "type": "content_block", "data": {"title": title, "body": f"{title} body", "bodyMode": "plain"}}


@pytest.mark.parametrize("kind", sorted(REGISTRY))
def test_every_registered_kind_compiles(kind: str) -> None:
    compiled = compile_module(_module(create_activity(kind, f"{kind}-1")))
    soup = parse_document(compiled.html)
    section = soup.select_one(f"[data-activity-id='{kind}-1']")
    assert section is not None
    assert section["data-activity-type"] == kind
    assert "Unknown activity type" not in compiled.html


def test_compiled_module_shape() -> None:
    compiled = compile_module(_module(_content("intro", "Intro")))
    assert isinstance(compiled, CompiledModule)
    assert compiled.css == ""
    assert "__CF_COMPOSER_RUNTIME_BOUND__" in compiled.script
    assert "__CF_TEMPLATE_RUNTIME_BOUND__" in compiled.script
    assert set(compiled.as_dict()) == {"html", "css", "script"}


def test_section_shell_attributes() -> None:
    soup = parse_document(compile_module(_module(_content("intro", "Intro"))).html)
    section = soup.select_one("section#cf-activity-intro")
    assert section["data-composer-col-span"] == "1"
    assert "cf-composer-activity" in section["class"]
    assert "cf-pad-md" in section["class"]
    root = soup.select_one("[data-composer-root]")
    assert root["data-composer-layout-mode"] == "simple"


def test_unknown_kind_renders_fallback_panel() -> None:
    html = compile_module(_module({"id": "x", "type": "hologram"})).html
    assert "Unknown activity type: hologram" in html


def test_non_string_ids_compile_under_finlit() -> None:
    html = compile_module(_module({"id": ["z"], "type": "content_block"}, {"id": 7}, template="finlit")).html
    assert "data-finlit-root" in html
    assert "cf-activity-7" in html


def test_tab_group_cycle_is_reported_not_recursed() -> None:
    group = {"id": "g", "type": "tab_group", "data": {"tabs": [{"label": "Loop", "activityIds": ["g"]}]}}
    html = compile_module(_module(group)).html
    assert 'Cycle detected for activity "g".' in html


def test_card_list_targeting_ancestor_reports_cycle() -> None:
    cards = {"id": "cl", "type": "card_list", "data": {"cards": [{"title": "Loop", "targetActivityId": "tg"}]}}
    group = {"id": "tg", "type": "tab_group", "data": {"tabs": [{"label": "T", "activityIds": ["cl"]}]}}
    html = compile_module(_module(cards, group)).html
    assert 'Cycle detected for activity "cl".' in html
    assert 'Cycle detected for activity "tg".' in html


def test_dangling_references_are_dropped() -> None:
    group = {"id": "g", "type": "tab_group", "data": {"tabs": [{"label": "Empty", "activityIds": ["missing"]}]}}
    html = compile_module(_module(group)).html
    assert "No linked activities." in html


def test_tab_group_renders_referenced_and_inline_children() -> None:
    group = {
        "id": "g",
        "type": "tab_group",
        "data": {
            "tabs": [
                {"label": "First", "activityIds": ["intro"]},
                {"label": "Second", "activities": [{"type": "content_block", "data": {"title": "Inline"}}]},
            ]
        },
    }
    soup = parse_document(compile_module(_module(_content("intro", "Intro"), group)).html)
    tabs = soup.select("[data-activity-id='g'] details")
    assert [tab.summary.get_text() for tab in tabs] == ["First", "Second"]
    assert tabs[0].has_attr("open")
    assert tabs[1].select_one("[data-activity-id='g-tab-2-1']") is not None


def test_collapsible_behavior_wraps_body() -> None:
    activity = _content("intro", "Intro")
    activity["behavior"] = {"collapsible": True, "collapsedByDefault": True}
    soup = parse_document(compile_module(_module(activity)).html)
    details = soup.select_one("section#cf-activity-intro > details")
    assert details is not None
    assert not details.has_attr("open")
    assert details.summary.get_text() == "Intro"


def test_canvas_mode_places_items_on_grid() -> None:
    activity = _content("intro", "Intro")
    activity["layout"] = {"x": 1, "y": 1, "w": 3, "h": 2}
    module = _module(activity, composerLayout={"mode": "canvas", "maxColumns": 4})
    soup = parse_document(compile_module(module).html)
    root = soup.select_one("[data-composer-root]")
    section = soup.select_one("section#cf-activity-intro")
    assert root["data-composer-layout-mode"] == "canvas"
    assert "cf-canvas-item" in section["class"]
    assert "grid-column: 2 / span 3;" in section["style"]
    assert "grid-row: 2 / span 2;" in section["style"]


def test_template_and_theme_fall_back_to_course_defaults() -> None:
    settings = {"templateDefault": "coursebook", "themeDefault": "coursebook_light"}
    soup = parse_document(compile_module(_module(_content("intro", "Intro")), settings).html)
    wrapper = soup.select_one("[data-template]")
    assert wrapper["data-template"] == "coursebook"
    assert wrapper["data-theme"] == "coursebook_light"


def test_module_template_overrides_course_default() -> None:
    module = _module(_content("intro", "Intro"), template="toolkit_dashboard", theme="nonsense")
    soup = parse_document(compile_module(module, {"templateDefault": "coursebook"}).html)
    wrapper = soup.select_one("[data-template]")
    assert wrapper["data-template"] == "toolkit_dashboard"
    assert wrapper["data-theme"] == "dark_cards"


def test_unknown_template_uses_deck() -> None:
    soup = parse_document(compile_module(_module(_content("intro", "Intro"), template="poster")).html)
    assert soup.select_one("[data-template]")["data-template"] == "deck"


def test_finlit_always_has_activities_tab() -> None:
    module = _module(
        _content("intro", "Intro"),
        _content("extra", "Extra"),
        template="finlit",
        finlit={"tabs": [{"id": "reading", "label": "Reading", "activityIds": ["extra"]}]},
    )
    soup = parse_document(compile_module(module).html)
    triggers = [node["data-finlit-tab-trigger"] for node in soup.select("[data-finlit-tab-trigger]")]
    assert triggers == ["reading", "activities"]
    activities_panel = soup.select_one("[data-finlit-tab-panel='activities']")
    assert activities_panel.select_one("[data-activity-id='intro']") is not None
    assert activities_panel.select_one("[data-activity-id='extra']") is None
    assert "hidden" in activities_panel["class"]


def test_finlit_legacy_settings_and_active_tab() -> None:
    module = _module(
        _content("intro", "Intro"),
        template="finlit",
        finlitActiveTabId="additional",
        finlit={"additionalLinks": [{"title": "Budget guide", "url": "https://example.com/guide"}]},
        hero={"title": "Money Moves", "subtitle": "Week 1"},
    )
    soup = parse_document(compile_module(module).html)
    assert soup.select_one("[data-finlit-root] h2").get_text() == "Money Moves"
    additional = soup.select_one("[data-finlit-tab-panel='additional']")
    assert additional.get("class") in (None, [], [""])
    link = additional.select_one("a")
    assert link["href"] == "https://example.com/guide"
    assert link["target"] == "_blank"


def test_coursebook_builds_table_of_contents() -> None:
    html = compile_module(_module(_content("intro", "Intro"), _content("budget", "Budget Plan"), template="coursebook")).html
    soup = parse_document(html)
    hrefs = [link["href"] for link in soup.select("nav a")]
    assert hrefs[0] == "#cb-intro"
    assert "#cb-budget" in hrefs
    assert soup.select_one("section#cb-budget [data-activity-id='budget']") is not None


def test_coursebook_without_headings() -> None:
    html = compile_module(_module(template="coursebook")).html
    assert "No headings found." in html


def test_toolkit_groups_cards_by_category() -> None:
    cards = {
        "id": "tools",
        "type": "card_list",
        "data": {
            "cards": [
                {"title": "Budget", "category": "Planning", "targetActivityId": "intro", "openMode": "modal"},
                {"title": "Savings", "category": "Saving Tips", "activities": [{"type": "content_block", "data": {"title": "Tip"}}]},
                {"title": "Plan more", "category": "Planning", "openMode": "navigate_section"},
            ]
        },
    }
    soup = parse_document(compile_module(_module(_content("intro", "Intro"), cards, template="toolkit_dashboard")).html)
    filters = [button["data-toolkit-category-filter"] for button in soup.select("[data-toolkit-category-filter]")]
    assert filters == ["all", "planning", "saving-tips"]
    assert len(soup.select("[data-toolkit-card]")) == 3
    assert soup.select_one("[data-toolkit-open-modal='tool-card-1-1-panel']") is not None
    assert soup.select_one("[data-expand-toggle='tool-card-1-2-panel']") is not None
    assert soup.select_one("a[href='#tool-card-1-3-panel']").get_text() == "Go to Section"
    assert soup.select_one("[data-toolkit-query]") is not None


def test_toolkit_without_card_lists_makes_automatic_cards() -> None:
    soup = parse_document(compile_module(_module(_content("intro", "Intro"), template="toolkit_dashboard")).html)
    card = soup.select_one("[data-toolkit-card]")
    assert card["data-toolkit-category"] == "content-block"
    assert soup.select_one("[data-expand-toggle='tool-card-auto-1-panel']") is not None


def test_render_document_wraps_page() -> None:
    compiled = CompiledModule(html="<p>Hi</p>", css="", script="var s = '</script>';")
    page = render_document(compiled, title="Budgeting", course_name="Money 101")
    assert page.startswith("<!DOCTYPE html>")
    assert "<title>Budgeting | Money 101</title>" in page
    assert "https://cdn.tailwindcss.com" in page
    assert "<\\/script>" in page
    assert "background: #020617 !important" in page
