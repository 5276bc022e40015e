"""Error types raised by the assignment solver.

Two families of failures are distinguished:
    - DimensionError: the input matrix has the wrong shape. Raised before
      any data is touched.
    - InternalInvariantError: a condition the algorithm relies on did not
      hold at runtime. Carries the solver state and a snapshot of the
      working data so the failure can be diagnosed.
"""

from typing import Any, Optional


class AssignmentError(Exception):
    """Base class for all solver errors."""


class DimensionError(AssignmentError, ValueError):
    """Raised when a cost matrix is empty, ragged or not square."""


class InternalInvariantError(AssignmentError, RuntimeError):
    """Raised when an algorithmic invariant is violated during a solve.

    Args:
        message: Human readable description of the violated invariant.
        state: Solver state active when the violation was detected.
        snapshot: Read-only copy of the solver data at failure time.

    The driver fills in ``state`` and ``snapshot`` when a lower-level
    component raises without them.
    """

    def __init__(
        self,
        message: str,
        state: Optional[Any] = None,
        snapshot: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.state = state
        self.snapshot = snapshot

    def __str__(self) -> str:
        if self.state is None:
            return self.message
        return f"{self.message} (state: {self.state.name})"


class NonFiniteCostError(InternalInvariantError):
    """Raised when a cost matrix contains NaN or infinite entries."""
