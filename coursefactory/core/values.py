"""Lenient coercion helpers for author-supplied activity documents.

Activity documents come from a visual editor and older project backups, so
numbers frequently arrive as strings ("3", "12px") and lists or maps may be
missing entirely. Every helper here is total: it never raises and falls back
to the supplied default instead.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_int(value: Any, fallback: Optional[int] = None) -> Optional[int]:
    """Parse the leading integer of ``value`` (``"12px"`` -> 12, ``2.7`` -> 2)."""
    if isinstance(value, bool) or value is None:
        return fallback
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return fallback
        return int(value)
    match = _LEADING_INT.match(str(value))
    if not match:
        return fallback
    return int(match.group(1))


def parse_float(value: Any, fallback: Optional[float] = None) -> Optional[float]:
    """Parse the leading decimal number of ``value``."""
    if isinstance(value, bool) or value is None:
        return fallback
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else fallback
    match = _LEADING_FLOAT.match(str(value))
    if not match:
        return fallback
    number = float(match.group(1))
    return number if math.isfinite(number) else fallback


def to_number(value: Any) -> Optional[float]:
    """Strict numeric conversion: the whole value must be numeric."""
    if isinstance(value, bool):
        return float(value)
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    raw = str(value).strip()
    if not raw:
        return 0.0
    try:
        number = float(raw)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def round2(value: float) -> float:
    """Round half up to two decimals."""
    return math.floor(value * 100 + 0.5) / 100


def format_number(value: Any) -> str:
    """Render numbers without a trailing ``.0`` (``3.0`` -> ``"3"``)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def text(value: Any) -> str:
    """String conversion where ``None`` becomes an empty string."""
    if value is None:
        return ""
    if isinstance(value, (bool, int, float)):
        return format_number(value)
    return str(value)


def as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


__all__ = [
    "as_dict",
    "as_list",
    "clamp",
    "format_number",
    "parse_float",
    "parse_int",
    "round2",
    "text",
    "to_number",
]
