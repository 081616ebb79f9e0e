from typing import Optional

from .types import (
    COLUMN,
    DIAG_DOWN,
    DIAG_UP,
    FILLED,
    ROW,
    UNASSIGNED,
    CellState,
    GridRows,
    LineCounts,
    LineFamily,
    Position,
)
from .utils import line_positions


class Grid:
    def __init__(self, size: int, cells: Optional[GridRows] = None) -> None:
        self.size = size
        if cells is None:
            self.cells: GridRows = [[UNASSIGNED for _ in range(size)] for _ in range(size)]
        else:
            self.cells = cells

    @classmethod
    def from_cells(cls, rows: GridRows) -> "Grid":
        return cls(len(rows), [list(row) for row in rows])

    def clone(self) -> "Grid":
        return Grid(self.size, [row[:] for row in self.cells])

    def get(self, row: int, col: int) -> CellState:
        return self.cells[row][col]

    def set(self, row: int, col: int, state: CellState) -> None:
        self.cells[row][col] = state

    def is_assigned(self, row: int, col: int) -> bool:
        return self.cells[row][col] is not UNASSIGNED

    def count_assigned(self) -> int:
        return sum(1 for row in self.cells for value in row if value is not UNASSIGNED)

    def row_counts(self, row: int) -> LineCounts:
        return _count_states(self.cells[row])

    def col_counts(self, col: int) -> LineCounts:
        return _count_states([row[col] for row in self.cells])

    def diag_down_counts(self, k: int) -> LineCounts:
        return self._positions_counts(line_positions(DIAG_DOWN, k, self.size))

    def diag_up_counts(self, k: int) -> LineCounts:
        return self._positions_counts(line_positions(DIAG_UP, k, self.size))

    def line_counts(self, family: LineFamily, index: int) -> LineCounts:
        if family == ROW:
            return self.row_counts(index)
        if family == COLUMN:
            return self.col_counts(index)
        if family == DIAG_DOWN:
            return self.diag_down_counts(index)
        if family == DIAG_UP:
            return self.diag_up_counts(index)
        raise ValueError(f"unknown line family: {family}")

    def to_rows(self) -> GridRows:
        return [row[:] for row in self.cells]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.size == other.size and self.cells == other.cells

    def __repr__(self) -> str:
        return f"Grid(size={self.size}, cells={self.cells!r})"

    def _positions_counts(self, positions: list[Position]) -> LineCounts:
        return _count_states([self.cells[r][c] for r, c in positions])


def _count_states(values: list[CellState]) -> LineCounts:
    filled = 0
    unassigned = 0
    for value in values:
        if value is UNASSIGNED:
            unassigned += 1
        elif value == FILLED:
            filled += 1
    return filled, unassigned
