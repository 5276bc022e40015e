"""Row/column cover flags used to partition the cost grid."""

from typing import Tuple

import torch
from torch import Tensor


class Coverage:
    """Boolean cover flag per row and per column.

    Args:
        size: Number of rows (and columns) of the cost matrix.

    Attributes:
        rows: Bool tensor of shape (size,), True for covered rows.
        cols: Bool tensor of shape (size,), True for covered columns.
    """

    def __init__(self, size: int):
        self.size = size
        self.rows = torch.zeros(size, dtype=torch.bool)
        self.cols = torch.zeros(size, dtype=torch.bool)

    def cover_selected_columns(self, matching) -> None:
        """Cover exactly the columns holding a selected zero, uncover rows."""
        self.cols = torch.tensor(
            [matching.col_has_selection(j) for j in range(self.size)],
            dtype=torch.bool,
        )
        self.rows.fill_(False)

    def cover_row(self, row: int) -> None:
        self.rows[row] = True

    def uncover_col(self, col: int) -> None:
        self.cols[col] = False

    @property
    def num_covered_cols(self) -> int:
        return int(self.cols.sum())

    def is_optimal(self) -> bool:
        """True when every column is covered, i.e. the matching is perfect."""
        return self.num_covered_cols == self.size

    def as_tuples(self) -> Tuple[Tuple[bool, ...], Tuple[bool, ...]]:
        """Plain-Python copy of the (rows, cols) flags."""
        return tuple(self.rows.tolist()), tuple(self.cols.tolist())

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"rows={self.rows.nonzero().flatten().tolist()}, "
            f"cols={self.cols.nonzero().flatten().tolist()})"
        )


def uncovered_mask(coverage: Coverage) -> Tensor:
    """Mask of cells whose row and column are both uncovered."""
    return ~coverage.rows[:, None] & ~coverage.cols[None, :]
