"""Hungarian method (Kuhn-Munkres) driver.

This module provides the exact solver for the square assignment problem:
    - Reduction of the cost matrix
    - Greedy initial selection of independent zeros
    - Search / cover / augment / adjust cycles until the matching is perfect
    - Optional hooks notified after every state transition

Example:
    >>> from kuhnmunkres.solver import solve
    >>> result = solve([[1, 2], [2, 1]])
    >>> result.row_to_col
    (0, 1)
    >>> result.cost
    2.0
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from ..engine.hooks import ImageExportHook, LoggingHook, SolverHook
from .augmenting import AlternatingPath, apply_alternating_path, build_alternating_path
from .cost_matrix import CostLike, CostMatrix, as_cost_tensor
from .coverage import Coverage
from .errors import InternalInvariantError
from .matching import MatchingState, greedy_select
from .state import Snapshot, SolverState


logger = logging.getLogger("kuhnmunkres.solver")


@dataclass(frozen=True)
class Assignment:
    """Minimum-cost perfect matching.

    Attributes:
        row_to_col: Assigned column of each row (0-based).
        cost: Total cost measured on the original, unreduced matrix.
        offset: Sum of the row and column minima removed by reduction.
        iterations: Number of passes through the outer iteration.
        augmentations: Number of alternating paths flipped.
    """

    row_to_col: Tuple[int, ...]
    cost: float
    offset: float = 0.0
    iterations: int = 0
    augmentations: int = 0

    def __len__(self) -> int:
        return len(self.row_to_col)

    def __getitem__(self, row: int) -> int:
        return self.row_to_col[row]

    def __iter__(self) -> Iterator[int]:
        return iter(self.row_to_col)

    @property
    def col_to_row(self) -> Tuple[int, ...]:
        inverse = [0] * len(self.row_to_col)
        for row, col in enumerate(self.row_to_col):
            inverse[col] = row
        return tuple(inverse)

    def pairs(self) -> List[Tuple[int, int]]:
        return list(enumerate(self.row_to_col))

    def as_dict(self) -> Dict[int, int]:
        return dict(enumerate(self.row_to_col))


class HungarianSolver:
    """Exact solver for square assignment problems.

    Drives the state machine over a private copy of the cost matrix. The
    solver object holds no state between calls and may be reused.

    Args:
        hooks: Observers notified after each state transition. If None,
            hooks are derived from ``config``.
        config: Optional configuration object (see ``get_default_config``).
        max_iterations: Ceiling on outer iterations. Defaults to
            ``solver.max_iterations`` from config, or ``2 * n * (n + 1)``.
        check_finite: Reject NaN and infinite costs before solving.

    Attributes:
        state: State entered by the last transition.
        matrix: Working cost matrix of the current solve.
        matching: Selected and prepared zeros of the current solve.
        coverage: Row/column cover flags of the current solve.
        path: Alternating path while a flip is in progress, else None.

    Example:
        >>> solver = HungarianSolver(hooks=[LoggingHook()])
        >>> solver.solve([[4, 1, 3], [2, 0, 5], [3, 2, 2]]).row_to_col
        (1, 0, 2)
    """

    def __init__(
        self,
        hooks: Optional[List[SolverHook]] = None,
        config: Optional[Any] = None,
        max_iterations: Optional[int] = None,
        check_finite: Optional[bool] = None,
    ):
        self.config = config
        self.hooks = hooks if hooks is not None else self._default_hooks()

        if max_iterations is None:
            max_iterations = self._get_config("solver.max_iterations", None)
        self.max_iterations = max_iterations

        if check_finite is None:
            check_finite = self._get_config("solver.check_finite", True)
        self.check_finite = check_finite

        self.state: Optional[SolverState] = None
        self.matrix: Optional[CostMatrix] = None
        self.matching: Optional[MatchingState] = None
        self.coverage: Optional[Coverage] = None
        self.path: Optional[AlternatingPath] = None
        self.step = 0
        self.last_adjustment = 0.0

    def _get_config(self, key: str, default: Any = None) -> Any:
        """Get configuration value with fallback to default."""
        if self.config is None:
            return default
        return self.config.get(key, default)

    def _default_hooks(self) -> List[SolverHook]:
        """Create hooks requested by the configuration."""
        hooks: List[SolverHook] = []
        if self._get_config("logging.enabled", False):
            hooks.append(LoggingHook(log_interval=self._get_config("logging.log_interval", 1)))
        if self._get_config("export.enabled", False):
            hooks.append(
                ImageExportHook(
                    output_dir=self._get_config("export.output_dir", "/tmp/hungarian_steps"),
                    cell_size=self._get_config("export.cell_size", 60),
                )
            )
        return hooks

    def solve(self, cost_matrix: CostLike) -> Assignment:
        """Find a minimum-cost perfect matching.

        Args:
            cost_matrix: Square matrix of finite costs. Not modified.

        Returns:
            The optimal assignment with its cost on the original values.

        Raises:
            DimensionError: If the matrix is empty, ragged or not square.
            InternalInvariantError: If an algorithmic invariant fails.
                ``state`` and ``snapshot`` describe the failure point.
        """
        self.matrix = CostMatrix(cost_matrix, check_finite=self.check_finite)
        size = self.matrix.size
        self.matching = MatchingState(size)
        self.coverage = Coverage(size)
        self.path = None
        self.state = None
        self.step = 0
        self.last_adjustment = 0.0

        max_iterations = self.max_iterations
        if max_iterations is None:
            max_iterations = 2 * size * (size + 1)

        for hook in self.hooks:
            hook.before_solve(self)

        try:
            offset = self.matrix.reduce()
            self._transition(SolverState.REDUCE)

            greedy_select(self.matrix.zero_mask(), self.matching)
            self.coverage.cover_selected_columns(self.matching)
            self._transition(SolverState.SELECT)
            logger.debug(
                f"Initial selection: {self.matching.num_selected}/{size} zeros"
            )

            iterations = 0
            augmentations = 0
            while not self.coverage.is_optimal():
                iterations += 1
                if iterations > max_iterations:
                    raise InternalInvariantError(
                        f"No perfect matching after {max_iterations} iterations"
                    )

                zero = self.matrix.find_uncovered_zero(self.coverage)
                if zero is None:
                    self._adjust_potentials()
                    continue

                row, col = zero
                self.matching.prepare(row, col)
                self._transition(SolverState.SEARCH)

                if self.matching.row_has_selection(row):
                    selected_col = self.matching.selected_in_row[row]
                    self.coverage.cover_row(row)
                    self.coverage.uncover_col(selected_col)
                    self._transition(SolverState.ROW_HAS_SELECTION)
                    self._adjust_potentials()
                else:
                    self._augment(row, col)
                    augmentations += 1

            row_to_col = tuple(self.matching.selected_in_row)
            result = Assignment(
                row_to_col=row_to_col,
                cost=self.matrix.cost_of(row_to_col),
                offset=offset,
                iterations=iterations,
                augmentations=augmentations,
            )
            self._transition(SolverState.DONE)
        except InternalInvariantError as exc:
            if exc.state is None:
                exc.state = self.state
            if exc.snapshot is None:
                exc.snapshot = self.snapshot()
            logger.error(f"Solve aborted: {exc}")
            raise

        logger.info(
            f"Solved {size}x{size} assignment with cost {result.cost:g} "
            f"({iterations} iterations, {augmentations} augmentations)"
        )
        for hook in self.hooks:
            hook.after_solve(self, result)
        return result

    def _adjust_potentials(self) -> None:
        self.last_adjustment = self.matrix.adjust_potentials(self.coverage)
        self._transition(SolverState.ADJUST_POTENTIALS)

    def _augment(self, row: int, col: int) -> None:
        """Build the alternating path from (row, col), flip it, re-cover."""
        self.path = build_alternating_path(self.matching, row, col)
        self._transition(SolverState.BUILD_PATH)

        apply_alternating_path(self.matching, self.path)
        self.coverage.cover_selected_columns(self.matching)
        self.path = None
        self._transition(SolverState.AUGMENT)

    def _transition(self, state: SolverState) -> None:
        """Enter ``state`` and notify hooks."""
        self.state = state
        if self.hooks:
            snapshot = self.snapshot()
            for hook in self.hooks:
                hook.after_step(self, snapshot)
        self.step += 1

    def snapshot(self) -> Snapshot:
        """Copy the current solver data into a read-only snapshot."""
        covered_rows, covered_cols = self.coverage.as_tuples()
        prepared_path: Tuple[Tuple[int, int], ...] = ()
        selected_path: Tuple[Tuple[int, int], ...] = ()
        if self.path is not None:
            prepared_path = tuple(self.path.prepared)
            selected_path = tuple(self.path.selected)
        return Snapshot(
            step=self.step,
            state=self.state,
            matrix=self.matrix.values.clone(),
            covered_rows=covered_rows,
            covered_cols=covered_cols,
            selected=self.matching.selected_pairs(),
            prepared=self.matching.prepared_pairs(),
            prepared_path=prepared_path,
            selected_path=selected_path,
            adjustment=(
                self.last_adjustment
                if self.state is SolverState.ADJUST_POTENTIALS
                else 0.0
            ),
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"hooks={[type(hook).__name__ for hook in self.hooks]}, "
            f"max_iterations={self.max_iterations})"
        )


def solve(
    cost_matrix: CostLike,
    hooks: Optional[List[SolverHook]] = None,
    config: Optional[Any] = None,
) -> Assignment:
    """Solve a square assignment problem.

    Args:
        cost_matrix: Square matrix of finite costs. Not modified.
        hooks: Optional observers of the solver steps.
        config: Optional configuration object.

    Returns:
        Minimum-cost assignment.

    Example:
        >>> solve([[5]]).as_dict()
        {0: 0}
    """
    return HungarianSolver(hooks=hooks, config=config).solve(cost_matrix)


def total_cost(cost_matrix: CostLike, row_to_col: Sequence[int]) -> float:
    """Cost of an arbitrary assignment on ``cost_matrix``."""
    values = as_cost_tensor(cost_matrix, check_finite=False)
    return float(sum(values[row, col] for row, col in enumerate(row_to_col)))
