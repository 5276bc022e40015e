"""Solver instrumentation for kuhnmunkres.

This module provides:
    - Hooks observing each solver state transition
    - Rendering of solver snapshots to images
"""

from .hooks import ImageExportHook, LoggingHook, SnapshotHook, SolverHook
from .render import render_snapshot

__all__ = [
    # Hooks
    "SolverHook",
    "LoggingHook",
    "SnapshotHook",
    "ImageExportHook",
    # Rendering
    "render_snapshot",
]
