"""Selected and prepared zeros, and the greedy initial selection.

Selected zeros form the tentative assignment (an injective row -> column
mapping). Prepared zeros are candidates recorded by the search phase and
consumed by the next augmentation.

Both mappings are stored in fixed-size lists indexed by row (and by column
for the inverse of the selection), with ``UNASSIGNED`` marking empty slots.
"""

import logging
from typing import List, Tuple

from torch import Tensor

from .errors import InternalInvariantError


logger = logging.getLogger("kuhnmunkres.solver")

UNASSIGNED = -1


class MatchingState:
    """Partial matching plus transient prepared marks.

    Args:
        size: Number of rows (and columns) of the cost matrix.

    Attributes:
        selected_in_row: Column of the selected zero of each row.
        selected_in_col: Row of the selected zero of each column.
        prepared_in_row: Column of the prepared zero of each row.
    """

    def __init__(self, size: int):
        self.size = size
        self.selected_in_row: List[int] = [UNASSIGNED] * size
        self.selected_in_col: List[int] = [UNASSIGNED] * size
        self.prepared_in_row: List[int] = [UNASSIGNED] * size

    def row_has_selection(self, row: int) -> bool:
        return self.selected_in_row[row] != UNASSIGNED

    def col_has_selection(self, col: int) -> bool:
        return self.selected_in_col[col] != UNASSIGNED

    def select(self, row: int, col: int) -> None:
        """Commit the zero at (row, col) to the matching."""
        if self.row_has_selection(row) or self.col_has_selection(col):
            raise InternalInvariantError(
                f"Cannot select ({row}, {col}): row or column already selected"
            )
        self.selected_in_row[row] = col
        self.selected_in_col[col] = row

    def unselect(self, row: int, col: int) -> None:
        """Remove the selected zero at (row, col) from the matching."""
        if self.selected_in_row[row] != col:
            raise InternalInvariantError(f"({row}, {col}) is not a selected zero")
        self.selected_in_row[row] = UNASSIGNED
        self.selected_in_col[col] = UNASSIGNED

    def prepare(self, row: int, col: int) -> None:
        self.prepared_in_row[row] = col

    def clear_prepared(self) -> None:
        self.prepared_in_row = [UNASSIGNED] * self.size

    @property
    def num_selected(self) -> int:
        return sum(1 for col in self.selected_in_row if col != UNASSIGNED)

    def selected_pairs(self) -> Tuple[Tuple[int, int], ...]:
        return tuple(
            (row, col)
            for row, col in enumerate(self.selected_in_row)
            if col != UNASSIGNED
        )

    def prepared_pairs(self) -> Tuple[Tuple[int, int], ...]:
        return tuple(
            (row, col)
            for row, col in enumerate(self.prepared_in_row)
            if col != UNASSIGNED
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"selected={list(self.selected_pairs())}, "
            f"prepared={list(self.prepared_pairs())})"
        )


def greedy_select(zero_mask: Tensor, matching: MatchingState) -> None:
    """Build an initial set of independent zeros.

    Rows are served in order of how few zeros they still have in
    unselected columns (lowest row index first on ties). Each served row
    takes its first zero in a free column; other rows lose that column from
    their count and drop out once their count reaches zero. The result is a
    fast, generally incomplete matching that the driver later repairs.

    Args:
        zero_mask: Boolean (n, n) mask of the zeros of the reduced matrix.
        matching: Matching to fill. Any previous selection is discarded.

    Raises:
        InternalInvariantError: If a row is picked with no zero left.
    """
    zeros = zero_mask.tolist()
    size = len(zeros)

    matching.selected_in_row = [UNASSIGNED] * size
    matching.selected_in_col = [UNASSIGNED] * size

    # Dict keeps ascending row order, so min() breaks ties on the lowest row
    zero_counts = {row: sum(zeros[row]) for row in range(size)}

    while zero_counts:
        row = min(zero_counts, key=zero_counts.get)
        if zero_counts[row] == 0:
            raise InternalInvariantError(
                f"Greedy selection reached row {row} with no zero left"
            )

        col = next(
            (
                j
                for j in range(size)
                if zeros[row][j] and not matching.col_has_selection(j)
            ),
            UNASSIGNED,
        )
        if col == UNASSIGNED:
            raise InternalInvariantError(
                f"Row {row} counts {zero_counts[row]} free zero(s) but has none"
            )

        logger.debug(f"Select 0 in row {row} at column {col}")
        matching.select(row, col)
        del zero_counts[row]

        for other in list(zero_counts):
            if zeros[other][col]:
                zero_counts[other] -= 1
                if zero_counts[other] == 0:
                    del zero_counts[other]
