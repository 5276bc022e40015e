"""Alternating path construction and flip.

Starting from a prepared zero in a row without a selection, the path
alternates between the selected zero in the current column and the
prepared zero in that selected zero's row, until it reaches a column with
no selected zero. Flipping the path swaps selected and prepared roles and
grows the matching by one.
"""

from typing import List, Tuple

from .errors import InternalInvariantError
from .matching import UNASSIGNED, MatchingState


class AlternatingPath:
    """Prepared and selected cells of one augmenting path.

    ``prepared`` always holds one more cell than ``selected``: the path
    starts and ends on prepared zeros.
    """

    def __init__(self):
        self.prepared: List[Tuple[int, int]] = []
        self.selected: List[Tuple[int, int]] = []

    def __len__(self) -> int:
        return len(self.prepared) + len(self.selected)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"prepared={self.prepared}, selected={self.selected})"
        )


def build_alternating_path(
    matching: MatchingState, row: int, col: int
) -> AlternatingPath:
    """Walk the alternating chain starting at the prepared zero (row, col).

    Args:
        matching: Current selected/prepared zeros.
        row: Row of the starting prepared zero (holds no selected zero).
        col: Column of the starting prepared zero.

    Returns:
        The alternating path, not yet applied.

    Raises:
        InternalInvariantError: If a row reached through a selected zero has
            no prepared zero, or if the chain does not terminate.
    """
    path = AlternatingPath()
    path.prepared.append((row, col))

    while matching.col_has_selection(col):
        row = matching.selected_in_col[col]
        path.selected.append((row, col))

        col = matching.prepared_in_row[row]
        if col == UNASSIGNED:
            raise InternalInvariantError(
                f"Alternating path reached row {row} without a prepared zero"
            )
        path.prepared.append((row, col))

        if len(path.prepared) > matching.size:
            raise InternalInvariantError(
                "Alternating path is longer than the matrix size"
            )

    return path


def apply_alternating_path(matching: MatchingState, path: AlternatingPath) -> None:
    """Flip the path and discard every prepared mark.

    Selected cells of the path leave the matching, prepared cells join it.
    """
    for row, col in path.selected:
        matching.unselect(row, col)
    for row, col in path.prepared:
        matching.select(row, col)
    matching.clear_prepared()
