"""
Activity registry, module compiler and template rendering.

``compile_module`` is the entry point: it takes a module mapping (or a
validated :class:`~coursefactory.core.config.ModuleConfig`) and returns the
static ``{html, css, script}`` artifact.
"""

from .compiler import CompiledModule, ModuleCompiler, compile_module
from .document import render_document
from .profiles import (
    apply_template_layout_profile,
    capture_template_layout_profile,
    normalize_template_layout_profiles,
    resolve_template_key,
    switch_template,
)
from .registry import ActivityKind, create_activity, get_definition, list_activity_type_groups, list_activity_types
from .validators import ActivityReport, Issue, validate_activities, validate_activity

__all__ = [
    "ActivityKind",
    "ActivityReport",
    "CompiledModule",
    "Issue",
    "ModuleCompiler",
    "apply_template_layout_profile",
    "capture_template_layout_profile",
    "compile_module",
    "create_activity",
    "get_definition",
    "list_activity_type_groups",
    "list_activity_types",
    "normalize_template_layout_profiles",
    "render_document",
    "resolve_template_key",
    "switch_template",
    "validate_activities",
    "validate_activity",
]
