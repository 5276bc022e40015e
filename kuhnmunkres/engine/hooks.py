"""Solver hooks for kuhnmunkres.

This module provides optional observers of the solver state machine:
    - Logging of step progress
    - In-memory recording of snapshots
    - Step-by-step image export

Hooks only read the snapshots they receive; they never influence the
solver's control flow or result.

Example:
    >>> hooks = [
    ...     LoggingHook(log_interval=10),
    ...     ImageExportHook(output_dir="/tmp/hungarian_steps"),
    ... ]
    >>> result = HungarianSolver(hooks=hooks).solve(costs)
"""

import logging
import time
from abc import ABC
from pathlib import Path
from typing import Any, List, Union

from ..solver.state import Snapshot, SolverState
from .render import render_snapshot


class SolverHook(ABC):
    """Base class for solver hooks.

    Hooks provide a modular way to observe a solve without modifying
    the state machine itself.
    """

    def before_solve(self, solver: Any) -> None:
        """Called before the cost matrix is reduced."""
        pass

    def after_step(self, solver: Any, snapshot: Snapshot) -> None:
        """Called after each state transition."""
        pass

    def after_solve(self, solver: Any, result: Any) -> None:
        """Called once the matching is complete."""
        pass


class LoggingHook(SolverHook):
    """Hook for logging solver progress.

    Args:
        log_interval: Log every N steps.

    Example:
        >>> hook = LoggingHook(log_interval=5)
    """

    def __init__(self, log_interval: int = 1):
        self.log_interval = max(int(log_interval), 1)
        self.logger = logging.getLogger("kuhnmunkres.hooks")
        self.start_time = 0.0
        self.num_adjustments = 0

    def before_solve(self, solver: Any) -> None:
        """Reset timing and counters."""
        self.start_time = time.time()
        self.num_adjustments = 0

    def after_step(self, solver: Any, snapshot: Snapshot) -> None:
        """Log the step at intervals."""
        if snapshot.state is SolverState.ADJUST_POTENTIALS:
            self.num_adjustments += 1

        if snapshot.step % self.log_interval != 0:
            return

        message = (
            f"Step {snapshot.step} [{snapshot.state.value}] "
            f"selected: {snapshot.num_selected}/{snapshot.size} "
            f"covered rows: {sum(snapshot.covered_rows)} "
            f"covered cols: {sum(snapshot.covered_cols)}"
        )
        if snapshot.state is SolverState.ADJUST_POTENTIALS:
            message += f" adjustment: {snapshot.adjustment:g}"
        elif snapshot.state is SolverState.BUILD_PATH:
            message += f" path: {len(snapshot.prepared_path)} prepared zero(s)"
        self.logger.info(message)

    def after_solve(self, solver: Any, result: Any) -> None:
        """Log solve summary."""
        elapsed = time.time() - self.start_time
        self.logger.info(
            f"Solved {len(result)}x{len(result)} assignment "
            f"cost: {result.cost:g} "
            f"iterations: {result.iterations} "
            f"augmentations: {result.augmentations} "
            f"adjustments: {self.num_adjustments} "
            f"Time: {elapsed:.3f}s"
        )


class SnapshotHook(SolverHook):
    """Hook recording every snapshot of the last solve.

    Example:
        >>> recorder = SnapshotHook()
        >>> HungarianSolver(hooks=[recorder]).solve(costs)
        >>> [s.state for s in recorder.snapshots]
    """

    def __init__(self):
        self.snapshots: List[Snapshot] = []

    def before_solve(self, solver: Any) -> None:
        self.snapshots = []

    def after_step(self, solver: Any, snapshot: Snapshot) -> None:
        self.snapshots.append(snapshot)

    def states(self) -> List[SolverState]:
        return [snapshot.state for snapshot in self.snapshots]


class ImageExportHook(SolverHook):
    """Hook writing one PNG image per solver step.

    Each image shows the working matrix, covered rows and columns,
    selected and prepared zeros and the current alternating path.

    Args:
        output_dir: Directory receiving ``step_XXXX.png`` files.
        cell_size: Side of one matrix cell in pixels.

    Example:
        >>> hook = ImageExportHook("/tmp/hungarian_steps", cell_size=60)
    """

    def __init__(
        self,
        output_dir: Union[str, Path] = "/tmp/hungarian_steps",
        cell_size: int = 60,
    ):
        self.output_dir = Path(output_dir)
        self.cell_size = cell_size
        self.logger = logging.getLogger("kuhnmunkres.hooks")
        self.written: List[Path] = []

    def before_solve(self, solver: Any) -> None:
        """Create output directory."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.written = []

    def after_step(self, solver: Any, snapshot: Snapshot) -> None:
        """Render and save the snapshot."""
        image = render_snapshot(snapshot, cell_size=self.cell_size)
        path = self.output_dir / f"step_{snapshot.step:04d}.png"
        image.save(path)
        self.written.append(path)

    def after_solve(self, solver: Any, result: Any) -> None:
        self.logger.info(f"Saved {len(self.written)} step image(s) to {self.output_dir}")
