"""
Foundational helpers for the composer: layout packing, configuration loading
and HTML string utilities. Nothing here depends on the activity registry.
"""

from .config import CourseSettings, ModuleConfig, load_course_settings, load_module, read_document
from .layout import (
    GridModel,
    MoveResult,
    build_grid_model,
    move_activity_to_cell,
    move_activity_to_insertion,
    normalize_activities,
    normalize_layout,
    normalize_module_layout,
)

__all__ = [
    "CourseSettings",
    "GridModel",
    "ModuleConfig",
    "MoveResult",
    "build_grid_model",
    "load_course_settings",
    "load_module",
    "move_activity_to_cell",
    "move_activity_to_insertion",
    "normalize_activities",
    "normalize_layout",
    "normalize_module_layout",
    "read_document",
]
