"""Solver states and read-only snapshots handed to hooks."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from torch import Tensor


Cell = Tuple[int, int]


class SolverState(Enum):
    """Transition points of the solver state machine.

    SEARCH, ROW_HAS_SELECTION, BUILD_PATH and ADJUST_POTENTIALS form the
    outer iteration. The remaining states mark the setup and teardown
    phases so hooks can observe the whole run.
    """

    REDUCE = "reduce"
    SELECT = "select"
    SEARCH = "search"
    ROW_HAS_SELECTION = "row_has_selection"
    BUILD_PATH = "build_path"
    AUGMENT = "augment"
    ADJUST_POTENTIALS = "adjust_potentials"
    DONE = "done"


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Copy of the solver data taken right after a state transition.

    Attributes:
        step: Zero-based transition counter within one solve.
        state: State that was just entered.
        matrix: Clone of the working (reduced/adjusted) cost matrix.
        covered_rows: Cover flag per row.
        covered_cols: Cover flag per column.
        selected: Selected zeros as (row, col) pairs sorted by row.
        prepared: Prepared zeros as (row, col) pairs sorted by row.
        prepared_path: Prepared cells of the current alternating path.
        selected_path: Selected cells of the current alternating path.
        adjustment: Value subtracted by the last potential adjustment,
            only set for ADJUST_POTENTIALS snapshots.
    """

    step: int
    state: SolverState
    matrix: Tensor
    covered_rows: Tuple[bool, ...]
    covered_cols: Tuple[bool, ...]
    selected: Tuple[Cell, ...]
    prepared: Tuple[Cell, ...]
    prepared_path: Tuple[Cell, ...] = field(default_factory=tuple)
    selected_path: Tuple[Cell, ...] = field(default_factory=tuple)
    adjustment: float = 0.0

    @property
    def size(self) -> int:
        return self.matrix.shape[0]

    @property
    def num_selected(self) -> int:
        return len(self.selected)
