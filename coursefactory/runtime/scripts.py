"""Load the browser runtime that ships inside every compiled module."""

from __future__ import annotations

from functools import lru_cache
from importlib import resources

RUNTIME_SCRIPTS = ("composer_runtime.js", "template_runtime.js")


@lru_cache(maxsize=None)
def load_runtime_script(name: str) -> str:
    if name not in RUNTIME_SCRIPTS:
        raise ValueError(f"Unknown runtime script '{name}'. Expected one of: {', '.join(RUNTIME_SCRIPTS)}")
    return resources.files(__package__).joinpath("assets").joinpath(name).read_text(encoding="utf-8")


def build_runtime_script() -> str:
    """Both runtimes concatenated; each guards itself with a window flag so double inclusion is inert."""
    return "\n".join(load_runtime_script(name).strip() for name in RUNTIME_SCRIPTS)


__all__ = ["RUNTIME_SCRIPTS", "build_runtime_script", "load_runtime_script"]
