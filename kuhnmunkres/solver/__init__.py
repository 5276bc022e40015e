"""Exact assignment solver.

This module provides the Hungarian method (Kuhn-Munkres) for square cost
matrices:
    - CostMatrix: validation, reduction and potential adjustment
    - MatchingState / greedy_select: selected and prepared zeros
    - Coverage: row and column cover flags
    - build_alternating_path / apply_alternating_path: augmentation
    - HungarianSolver / solve: the driving state machine
"""

from .errors import (
    AssignmentError,
    DimensionError,
    InternalInvariantError,
    NonFiniteCostError,
)
from .state import Snapshot, SolverState
from .cost_matrix import CostMatrix, as_cost_tensor, reduce_cost_matrix
from .coverage import Coverage
from .matching import UNASSIGNED, MatchingState, greedy_select
from .augmenting import AlternatingPath, apply_alternating_path, build_alternating_path
from .hungarian import Assignment, HungarianSolver, solve, total_cost

__all__ = [
    # Errors
    "AssignmentError",
    "DimensionError",
    "InternalInvariantError",
    "NonFiniteCostError",
    # State
    "Snapshot",
    "SolverState",
    # Components
    "CostMatrix",
    "as_cost_tensor",
    "reduce_cost_matrix",
    "Coverage",
    "UNASSIGNED",
    "MatchingState",
    "greedy_select",
    "AlternatingPath",
    "build_alternating_path",
    "apply_alternating_path",
    # Driver
    "Assignment",
    "HungarianSolver",
    "solve",
    "total_cost",
]
