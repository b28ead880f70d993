"""Per-kind default data factories and HTML renderers."""

from . import assessment, content, interactive, productivity

__all__ = ["assessment", "content", "interactive", "productivity"]
