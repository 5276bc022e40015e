"""Owned cost matrix for the assignment solver.

This module provides the numeric side of the Hungarian method:
    - Input validation and copying into a float64 tensor
    - Row/column minimum reduction
    - Search for an uncovered zero
    - Potential (dual) adjustment over the covered/uncovered regions

All mutations happen in place on a private copy; the caller's data is
never modified.

Example:
    >>> matrix = CostMatrix([[1.0, 2.0], [2.0, 1.0]])
    >>> matrix.reduce()
    2.0
    >>> matrix.values
    tensor([[0., 1.],
            [1., 0.]], dtype=torch.float64)
"""

from typing import Optional, Sequence, Tuple, Union

import numpy as np
import torch
from torch import Tensor

from .coverage import Coverage, uncovered_mask
from .errors import DimensionError, InternalInvariantError, NonFiniteCostError


CostLike = Union[Tensor, np.ndarray, Sequence[Sequence[float]]]


def as_cost_tensor(data: CostLike, check_finite: bool = True) -> Tensor:
    """Validate a square cost matrix and return it as a new float64 tensor.

    Args:
        data: Nested sequences, numpy array or tensor of shape (n, n).
        check_finite: Reject NaN and infinite entries.

    Returns:
        CPU float64 tensor that shares no memory with ``data``.

    Raises:
        DimensionError: If the matrix is empty, ragged or not square.
        NonFiniteCostError: If ``check_finite`` and an entry is NaN/inf.
    """
    if isinstance(data, Tensor):
        values = data.detach().to(device="cpu", dtype=torch.float64).clone()
    elif isinstance(data, np.ndarray) and data.dtype != object:
        values = torch.from_numpy(np.array(data, dtype=np.float64))
    else:
        # Object arrays may hold ragged rows, check them like nested lists
        rows = list(data)
        size = len(rows)
        if size == 0:
            raise DimensionError("Cost matrix is empty")
        for idx, row in enumerate(rows):
            if not hasattr(row, "__len__"):
                raise DimensionError(f"Row {idx} is not a sequence")
            if len(row) != size:
                raise DimensionError(
                    f"Row {idx} has {len(row)} entries, expected {size}"
                )
        values = torch.tensor([list(row) for row in rows], dtype=torch.float64)

    if values.dim() != 2:
        raise DimensionError(
            f"Cost matrix must be 2-dimensional, got shape {tuple(values.shape)}"
        )
    num_rows, num_cols = values.shape
    if num_rows == 0 or num_cols == 0:
        raise DimensionError("Cost matrix is empty")
    if num_rows != num_cols:
        raise DimensionError(
            f"Cost matrix must be square, got {num_rows}x{num_cols}"
        )

    if check_finite and not bool(torch.isfinite(values).all()):
        raise NonFiniteCostError("Cost matrix contains NaN or infinite values")

    return values


class CostMatrix:
    """Mutable n x n cost grid exclusively owned by one solve.

    Args:
        data: Square cost matrix (nested sequences, ndarray or tensor).
        check_finite: Reject NaN and infinite entries.

    Attributes:
        values: Working tensor, mutated by reduction and adjustment.
        original: Untouched copy of the input costs.
    """

    def __init__(self, data: CostLike, check_finite: bool = True):
        self.original = as_cost_tensor(data, check_finite=check_finite)
        self.values = self.original.clone()

    @property
    def size(self) -> int:
        return self.values.shape[0]

    def reduce(self) -> float:
        """Subtract row minima, then column minima of the row-reduced grid.

        Returns:
            Sum of all subtracted minima. The optimal assignment cost of
            the original matrix equals the reduced optimum plus this value.
        """
        row_min = self.values.min(dim=1, keepdim=True).values
        self.values -= row_min
        col_min = self.values.min(dim=0, keepdim=True).values
        self.values -= col_min
        return float(row_min.sum() + col_min.sum())

    def zero_mask(self) -> Tensor:
        """Boolean mask of the exact zeros of the working grid."""
        return self.values == 0

    def find_uncovered_zero(self, coverage: Coverage) -> Optional[Tuple[int, int]]:
        """Find the first zero lying in an uncovered row and column.

        Cells are scanned in row-major order.

        Args:
            coverage: Current row/column cover flags.

        Returns:
            (row, col) of the zero, or None when every zero is covered.
        """
        uncovered = uncovered_mask(coverage)
        candidates = torch.nonzero(uncovered & self.zero_mask())
        if candidates.shape[0] == 0:
            return None
        row, col = candidates[0].tolist()
        return row, col

    def adjust_potentials(self, coverage: Coverage) -> float:
        """Apply the dual update for the current coverage.

        The smallest value ``m`` among cells whose row and column are both
        uncovered is subtracted from those cells and added to cells whose
        row and column are both covered. Singly covered cells are left
        unchanged.

        Args:
            coverage: Current row/column cover flags.

        Returns:
            The adjustment value ``m`` (may be zero).

        Raises:
            InternalInvariantError: If no cell is uncovered.
        """
        rows = coverage.rows
        cols = coverage.cols
        uncovered = uncovered_mask(coverage)
        if not bool(uncovered.any()):
            raise InternalInvariantError(
                "Potential adjustment found no uncovered cell"
            )
        doubly_covered = rows[:, None] & cols[None, :]

        min_val = self.values[uncovered].min()
        self.values[uncovered] -= min_val
        self.values[doubly_covered] += min_val
        return float(min_val)

    def cost_of(self, row_to_col: Sequence[int]) -> float:
        """Total original cost of an assignment."""
        rows = torch.arange(self.size)
        cols = torch.as_tensor(list(row_to_col), dtype=torch.long)
        return float(self.original[rows, cols].sum())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={self.size})"


def reduce_cost_matrix(data: CostLike) -> Tensor:
    """Return a row/column reduced copy of ``data``.

    Example:
        >>> reduce_cost_matrix([[4, 1], [2, 3]])
        tensor([[3., 0.],
                [0., 1.]], dtype=torch.float64)
    """
    matrix = CostMatrix(data)
    matrix.reduce()
    return matrix.values
