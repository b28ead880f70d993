from __future__ import annotations

import pytest

from coursefactory.core.markup import (
    decode_data_attr_json,
    encode_data_attr_json,
    escape_html,
    escape_inline_script,
    parse_heading_entries,
    sanitize_css_color,
    sanitize_rich_html,
    slugify,
    strip_html,
    to_safe_href,
    to_safe_url,
)
from coursefactory.runtime import build_runtime_script, load_runtime_script
from coursefactory.runtime.scripts import RUNTIME_SCRIPTS


def test_escape_html_covers_quotes() -> None:
    assert escape_html('<a href="x">Tom\'s</a>') == "&lt;a href=&quot;x&quot;&gt;Tom&#39;s&lt;/a&gt;"
    assert escape_html(None) == ""


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://example.com/a", "https://example.com/a"),
        ("/files/a.pdf", "/files/a.pdf"),
        ("materials/week1.pdf", "/materials/week1.pdf"),
        ("javascript:alert(1)", ""),
        ("ftp://example.com", ""),
    ],
)
def test_to_safe_url(url: str, expected: str) -> None:
    assert to_safe_url(url) == expected


def test_to_safe_href_allows_anchors_and_mail() -> None:
    assert to_safe_href("#section-2") == "#section-2"
    assert to_safe_href("mailto:help@example.com") == "mailto:help@example.com"
    assert to_safe_href("javascript:void(0)") == ""


def test_sanitize_rich_html_strips_active_content() -> None:
    raw = '<p onclick="steal()">Hi</p><script>alert(1)</script><a href="javascript:go()">x</a>'
    assert sanitize_rich_html(raw) == '<p>Hi</p><a href="#">x</a>'


def test_css_colors_must_be_hex() -> None:
    assert sanitize_css_color("#0f172a") == "#0f172a"
    assert sanitize_css_color("red; background: url(x)") == ""


def test_strip_html_and_slugify() -> None:
    assert strip_html("<b>Save&nbsp;&amp; grow</b>") == "Save & grow"
    assert slugify("  Budget <em>Plan</em> #2 ") == "budget-plan-2"
    assert slugify("!!!", "fallback") == "fallback"


def test_parse_heading_entries() -> None:
    entries = parse_heading_entries("<h2>Intro</h2><p>x</p><h4><span>Detail</span></h4><h3></h3>", "cb-a")
    assert entries == [
        {"level": 2, "text": "Intro", "anchor": "cb-a"},
        {"level": 4, "text": "Detail", "anchor": "cb-a"},
    ]


def test_data_attr_json_round_trip() -> None:
    encoded = encode_data_attr_json({"label": "Needs & wants", "n": 2})
    assert '"' not in encoded
    assert decode_data_attr_json(encoded) == {"label": "Needs & wants", "n": 2}
    assert decode_data_attr_json("%7Bbroken") is None
    assert decode_data_attr_json("") is None


def test_escape_inline_script() -> None:
    assert escape_inline_script("a</SCRIPT>b") == "a<\\/script>b"


def test_runtime_scripts_are_guarded() -> None:
    script = build_runtime_script()
    assert "__CF_COMPOSER_RUNTIME_BOUND__" in script
    assert "__CF_TEMPLATE_RUNTIME_BOUND__" in script
    for name in RUNTIME_SCRIPTS:
        assert load_runtime_script(name).strip() in script


def test_unknown_runtime_script() -> None:
    with pytest.raises(ValueError, match="Unknown runtime script"):
        load_runtime_script("missing.js")
