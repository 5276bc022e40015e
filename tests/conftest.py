"""
Pytest fixtures and configuration for the kuhnmunkres test suite.

This module provides shared cost matrices, a brute-force reference
solver and assignment checks used across the solver, hook and cost tests.
"""

import itertools
from typing import Callable, List, Sequence

import pytest
import torch
from torch import Tensor


# ============================================================================
# Cost Matrix Fixtures
# ============================================================================

@pytest.fixture
def two_by_two() -> List[List[float]]:
    """Diagonal is optimal (cost 2), anti-diagonal costs 4."""
    return [[1.0, 2.0], [2.0, 1.0]]


@pytest.fixture
def incomplete_greedy_matrix() -> List[List[float]]:
    """
    4x4 matrix whose rows are permutations of {3, 4, 5, 6}.

    After reduction the greedy selection leaves row 2 unmatched, so the
    solver has to adjust potentials and flip an alternating path.
    Optimal cost is 13.
    """
    return [
        [5.0, 4.0, 6.0, 3.0],
        [3.0, 4.0, 6.0, 5.0],
        [3.0, 4.0, 5.0, 6.0],
        [5.0, 4.0, 3.0, 6.0],
    ]


@pytest.fixture
def rank_one_matrix() -> List[List[float]]:
    """
    Outer product of (1, 2, 3) with itself.

    Requires a strictly positive potential adjustment; optimum is the
    anti-diagonal with cost 10.
    """
    return [[1.0, 2.0, 3.0], [2.0, 4.0, 6.0], [3.0, 6.0, 9.0]]


@pytest.fixture
def repeated_rows_matrix() -> List[List[float]]:
    """Three identical rows plus one differing row; optimum is 16."""
    return [
        [6.0, 4.0, 5.0, 3.0],
        [6.0, 4.0, 3.0, 5.0],
        [6.0, 4.0, 5.0, 3.0],
        [6.0, 4.0, 5.0, 3.0],
    ]


@pytest.fixture
def random_matrix() -> Callable[[int, int], Tensor]:
    """Factory of reproducible random integer cost matrices."""
    def _make(size: int, seed: int) -> Tensor:
        generator = torch.Generator().manual_seed(seed)
        return torch.randint(0, 20, (size, size), generator=generator).to(torch.float64)
    return _make


# ============================================================================
# Reference Helpers
# ============================================================================

@pytest.fixture
def brute_force_cost() -> Callable[[Sequence[Sequence[float]]], float]:
    """Minimum assignment cost by enumerating every permutation."""
    def _brute_force(costs) -> float:
        values = torch.as_tensor(costs, dtype=torch.float64).tolist()
        size = len(values)
        return min(
            sum(values[row][col] for row, col in enumerate(perm))
            for perm in itertools.permutations(range(size))
        )
    return _brute_force


@pytest.fixture
def assert_bijection() -> Callable[[Sequence[int], int], None]:
    """Assert that an assignment maps rows onto every column exactly once."""
    def _check(row_to_col: Sequence[int], size: int) -> None:
        assert len(row_to_col) == size, f"Expected {size} rows, got {len(row_to_col)}"
        assert sorted(row_to_col) == list(range(size)), (
            f"Assignment {list(row_to_col)} is not a permutation of 0..{size - 1}"
        )
    return _check
