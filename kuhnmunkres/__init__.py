"""kuhnmunkres: exact Hungarian-method solver for square assignment problems.

This package provides a PyTorch-backed implementation of the Kuhn-Munkres
algorithm with step-by-step instrumentation hooks, YAML configuration and
image-based cost-matrix construction.
"""

__version__ = "0.1.0"
__author__ = "kuhnmunkres developers"

from .solver import (
    Assignment,
    AssignmentError,
    DimensionError,
    HungarianSolver,
    InternalInvariantError,
    NonFiniteCostError,
    reduce_cost_matrix,
    solve,
    total_cost,
)

__all__ = [
    "Assignment",
    "AssignmentError",
    "DimensionError",
    "HungarianSolver",
    "InternalInvariantError",
    "NonFiniteCostError",
    "reduce_cost_matrix",
    "solve",
    "total_cost",
]
