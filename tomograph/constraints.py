from typing import Sequence

from .grid import Grid
from .types import COLUMN, DIAG_DOWN, DIAG_UP, ROW, Heatmap, LineFamily
from .utils import diag_count, diag_down_index, diag_length, diag_up_index, line_count


class Constraints:
    """Required filled-cell counts for every row, column and diagonal of a square grid.

    Down diagonals are indexed by ``row + col`` and up diagonals by
    ``col - row + (size - 1)``. Sums are not checked against line lengths;
    an unreachable sum surfaces as a propagation conflict during search.
    """

    def __init__(
        self,
        size: int,
        col_sums: Sequence[int],
        row_sums: Sequence[int],
        diag_down_sums: Sequence[int],
        diag_up_sums: Sequence[int],
    ) -> None:
        self.size = size
        self.col_sums = tuple(col_sums)
        self.row_sums = tuple(row_sums)
        self.diag_down_sums = tuple(diag_down_sums)
        self.diag_up_sums = tuple(diag_up_sums)
        self.heatmap: Heatmap = self.compute_heatmap()

    @classmethod
    def from_grid(cls, grid: Grid) -> "Constraints":
        size = grid.size
        return cls(
            size=size,
            col_sums=[grid.col_counts(c)[0] for c in range(size)],
            row_sums=[grid.row_counts(r)[0] for r in range(size)],
            diag_down_sums=[grid.diag_down_counts(k)[0] for k in range(diag_count(size))],
            diag_up_sums=[grid.diag_up_counts(k)[0] for k in range(diag_count(size))],
        )

    def compute_heatmap(self) -> Heatmap:
        """Average line density of the four lines through each cell."""
        size = self.size
        heatmap: list[tuple[float, ...]] = []
        for i in range(size):
            heat_row: list[float] = []
            for j in range(size):
                row_density = self.row_sums[i] / size
                col_density = self.col_sums[j] / size
                down_k = diag_down_index(i, j)
                down_density = self.diag_down_sums[down_k] / diag_length(down_k, size)
                up_k = diag_up_index(i, j, size)
                up_density = self.diag_up_sums[up_k] / diag_length(up_k, size)
                heat_row.append((row_density + col_density + down_density + up_density) / 4.0)
            heatmap.append(tuple(heat_row))
        return tuple(heatmap)

    def target(self, family: LineFamily, index: int) -> int:
        if family == ROW:
            return self.row_sums[index]
        if family == COLUMN:
            return self.col_sums[index]
        if family == DIAG_DOWN:
            return self.diag_down_sums[index]
        if family == DIAG_UP:
            return self.diag_up_sums[index]
        raise ValueError(f"unknown line family: {family}")

    def line_count(self, family: LineFamily) -> int:
        return line_count(family, self.size)

    def to_dict(self) -> dict[str, object]:
        return {
            "size": self.size,
            "col_sums": list(self.col_sums),
            "row_sums": list(self.row_sums),
            "diag_down_sums": list(self.diag_down_sums),
            "diag_up_sums": list(self.diag_up_sums),
        }

    def describe(self) -> str:
        lines = [
            f"Constraints for {self.size}x{self.size} grid:",
            "Column sums: " + " ".join(str(value) for value in self.col_sums),
            "Row sums: " + " ".join(str(value) for value in self.row_sums),
            "DiagDown sums: " + " ".join(str(value) for value in self.diag_down_sums),
            "DiagUp sums: " + " ".join(str(value) for value in self.diag_up_sums),
        ]
        return "\n".join(lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Constraints):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (
            f"Constraints(size={self.size}, col_sums={list(self.col_sums)}, row_sums={list(self.row_sums)}, "
            f"diag_down_sums={list(self.diag_down_sums)}, diag_up_sums={list(self.diag_up_sums)})"
        )
