"""
Course Factory composer engine.

Packs activities into grid or canvas layouts, compiles modules into
self-contained interactive HTML, and reads learner progress back out of the
compiled documents.
"""

from importlib import metadata


def get_version() -> str:
    """Return the installed project version."""
    try:
        return metadata.version("coursefactory")
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["get_version"]
