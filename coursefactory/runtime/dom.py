"""
Static DOM helpers for compiled modules.

A compiled module has no live browser state, so form state is read from and
written to markup: ``value`` attributes, ``checked``/``selected`` attributes,
textarea text, the ``hidden`` class, ``aria-selected`` and
``data-flashcard-side``. The helpers mirror the small subset of DOM behaviour
the runtime relies on.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Union

from bs4 import BeautifulSoup, Tag

HtmlInput = Union[str, bytes, BeautifulSoup]

SKIPPED_INPUT_TYPES = ("hidden", "file", "button", "submit", "reset", "image")

_WHITESPACE = re.compile(r"\s+")


def parse_document(source: HtmlInput) -> BeautifulSoup:
    if isinstance(source, BeautifulSoup):
        return source
    return BeautifulSoup(source, "html.parser")


def normalize_space(value: Optional[str]) -> str:
    return _WHITESPACE.sub(" ", value or "").strip()


def closest(tag: Optional[Tag], selector: str) -> Optional[Tag]:
    """Nearest ancestor (or ``tag`` itself) matching the CSS ``selector``."""
    if tag is None:
        return None
    return tag.css.closest(selector)


def select_all(scope: Union[BeautifulSoup, Tag], selector: str) -> List[Tag]:
    return list(scope.select(selector))


def readable_text(tag: Optional[Tag], fallback: str = "") -> str:
    if tag is None:
        return fallback
    return normalize_space(tag.get_text(" ")) or fallback


def attr(tag: Optional[Tag], name: str, default: str = "") -> str:
    if tag is None:
        return default
    value = tag.get(name)
    if value is None:
        return default
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def int_attr(tag: Optional[Tag], name: str, fallback: Optional[int] = None) -> Optional[int]:
    match = re.match(r"^\s*([+-]?\d+)", attr(tag, name))
    return int(match.group(1)) if match else fallback


# -- classes -------------------------------------------------------------------


def classes(tag: Tag) -> List[str]:
    value = tag.get("class") or []
    if isinstance(value, str):
        value = value.split()
    return list(value)


def has_class(tag: Tag, name: str) -> bool:
    return name in classes(tag)


def toggle_classes(tag: Tag, names: Iterable[str], on: bool) -> None:
    current = classes(tag)
    for name in names:
        if on and name not in current:
            current.append(name)
        elif not on and name in current:
            current = [item for item in current if item != name]
    if current:
        tag["class"] = current
    elif "class" in tag.attrs:
        del tag["class"]


def set_hidden(tag: Tag, hidden: bool) -> None:
    toggle_classes(tag, ("hidden",), hidden)


def is_hidden(tag: Tag) -> bool:
    return has_class(tag, "hidden")


# -- form fields ---------------------------------------------------------------


def field_tag(field: Tag) -> str:
    return (field.name or "").lower()


def field_type(field: Tag) -> str:
    """The DOM ``type`` property: ``text`` by default, ``textarea`` and ``select-one`` for the other controls."""
    tag = field_tag(field)
    if tag == "textarea":
        return "textarea"
    if tag == "select":
        return "select-multiple" if field.has_attr("multiple") else "select-one"
    return attr(field, "type", "text").strip().lower() or "text"


def is_toggle(field: Tag) -> bool:
    return field_type(field) in ("checkbox", "radio")


def is_checked(field: Tag) -> bool:
    return field.has_attr("checked")


def set_checked(field: Tag, checked: bool, scope: Optional[Tag] = None) -> None:
    if not checked:
        if field.has_attr("checked"):
            del field["checked"]
        return
    name = attr(field, "name")
    if field_type(field) == "radio" and name and scope is not None:
        for other in scope.find_all("input", attrs={"type": "radio", "name": name}):
            if other is not field and other.has_attr("checked"):
                del other["checked"]
    field["checked"] = ""


def _options(select: Tag) -> List[Tag]:
    return select.find_all("option")


def _option_value(option: Tag) -> str:
    if option.has_attr("value"):
        return attr(option, "value")
    return option.get_text()


def selected_option(select: Tag) -> Optional[Tag]:
    options = _options(select)
    for option in options:
        if option.has_attr("selected"):
            return option
    return options[0] if options else None


def field_value(field: Tag) -> str:
    tag = field_tag(field)
    if tag == "textarea":
        return field.get_text()
    if tag == "select":
        option = selected_option(field)
        return _option_value(option) if option is not None else ""
    return attr(field, "value")


def set_field_value(field: Tag, value: str) -> None:
    tag = field_tag(field)
    if tag == "textarea":
        field.string = value
        return
    if tag == "select":
        matched = False
        for option in _options(field):
            if not matched and _option_value(option) == value:
                option["selected"] = ""
                matched = True
            elif option.has_attr("selected"):
                del option["selected"]
        return
    field["value"] = value


def persistable_fields(root: Union[BeautifulSoup, Tag]) -> List[Tag]:
    """Inputs, textareas and selects in document order, minus the save/load and report widgets."""
    fields = []
    for field in root.find_all(["input", "textarea", "select"]):
        if closest(field, "[data-submission-block]") or closest(field, "[data-save-load-block]"):
            continue
        if field_tag(field) == "input" and field_type(field) in SKIPPED_INPUT_TYPES:
            continue
        fields.append(field)
    return fields


def progress_scope(soup: BeautifulSoup) -> Union[BeautifulSoup, Tag]:
    """The composer root hosting the first save/load or report block, else the whole document."""
    anchor = soup.select_one("[data-save-load-block]") or soup.select_one("[data-submission-block]")
    root = closest(anchor, "[data-composer-root]") if anchor is not None else None
    return root if root is not None else soup


__all__ = [
    "HtmlInput",
    "attr",
    "classes",
    "closest",
    "field_tag",
    "field_type",
    "field_value",
    "has_class",
    "int_attr",
    "is_checked",
    "is_hidden",
    "is_toggle",
    "normalize_space",
    "parse_document",
    "persistable_fields",
    "progress_scope",
    "readable_text",
    "select_all",
    "selected_option",
    "set_checked",
    "set_field_value",
    "set_hidden",
    "toggle_classes",
]
