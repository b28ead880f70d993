"""
Client runtime for compiled modules.

The JavaScript assets under ``assets/`` are inlined into every compiled
module. The Python modules read and write the same progress snapshots and
submission reports over the static HTML, for tooling and tests.
"""

from .report import build_report
from .scripts import build_runtime_script, load_runtime_script
from .snapshot import ApplyResult, ProgressSnapshot, apply_snapshot, collect_snapshot, restore_backup_text

__all__ = [
    "ApplyResult",
    "ProgressSnapshot",
    "apply_snapshot",
    "build_report",
    "build_runtime_script",
    "collect_snapshot",
    "load_runtime_script",
    "restore_backup_text",
]
